from __future__ import annotations

import asyncio
import random
from typing import Any

import httpx
from loguru import logger

from lexevo.database.snapshot_storage import SnapshotStorage
from lexevo.evolution.engine import EvolutionEngine, GenerationResult
from lexevo.exceptions import StorageError
from lexevo.sentence.generator import Sentence, SentenceGenerator
from lexevo.sync.client import StateSynchronizer
from lexevo.sync.models import SyncConfig

__all__ = ["LexiconService"]


class LexiconService:
    """
    Single mutation boundary around the engine.

    Engine steps, peer merges and persistence are serialized behind one
    ``asyncio.Lock``; read routes never await, so they see a consistent state.
    """

    def __init__(
        self,
        engine: EvolutionEngine,
        storage: SnapshotStorage,
        sync_config: SyncConfig | None = None,
        *,
        sentence_generator: SentenceGenerator | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.engine = engine
        self.storage = storage
        self.lock = asyncio.Lock()
        self.synchronizer = StateSynchronizer(
            sync_config or SyncConfig(), engine, lock=self.lock, transport=transport
        )
        self.sentences = sentence_generator or SentenceGenerator(
            random.Random(engine.config.seed)
        )
        self._persist_enabled = True

    @property
    def peer_connected(self) -> bool:
        return self.synchronizer.connected

    # ------------------------------------------------------------------ lifecycle

    async def bootstrap(self) -> None:
        """Load the persisted snapshot, or seed a fresh lexicon when there is none."""
        async with self.lock:
            try:
                stored = await self.storage.load()
            except StorageError as exc:
                logger.warning("[LexiconService] Snapshot unreadable, starting fresh: {}", exc)
                stored = None
                await self._set_aside_unreadable()

            if stored is not None:
                self.engine.replace_state(stored)
                logger.info(
                    "[LexiconService] Loaded snapshot | gen {}, {} words",
                    stored.generation,
                    stored.word_count,
                )
            if not self.engine.state.words:
                self.engine.seed_lexicon()
                await self._persist()

    async def close(self) -> None:
        async with self.lock:
            await self._persist()
        await self.storage.close()

    # ------------------------------------------------------------------ mutations

    async def evolve(self) -> GenerationResult:
        async with self.lock:
            result = self.engine.advance_generation()
            await self._persist()
        return result

    async def sync(self) -> bool:
        applied = await self.synchronizer.sync()
        if applied:
            async with self.lock:
                await self._persist()
        return applied

    # ------------------------------------------------------------------ reads

    def sentence(self) -> Sentence:
        return self.sentences.generate(self.engine.state)

    def history(self) -> dict[str, Any]:
        return self.engine.state.history()

    def state_payload(self) -> dict[str, Any]:
        state = self.engine.state
        last_sync = self.synchronizer.last_sync
        return {
            **state.to_payload(),
            "wordCount": state.word_count,
            "compoundCount": state.compound_count,
            "peerConnected": self.synchronizer.connected,
            "lastPeerSync": last_sync.isoformat() if last_sync else None,
            # legacy key names still read by existing clients
            "piConnected": self.synchronizer.connected,
            "lastPiSync": last_sync.isoformat() if last_sync else None,
        }

    def health(self) -> dict[str, Any]:
        return {"status": "ok", "generation": self.engine.state.generation}

    # ------------------------------------------------------------------ internals

    async def _set_aside_unreadable(self) -> None:
        try:
            moved_to = await self.storage.quarantine()
        except StorageError as exc:
            self._persist_enabled = False
            logger.error(
                "[LexiconService] Cannot move unreadable snapshot aside, "
                "persistence disabled to keep it intact: {}",
                exc,
            )
            return
        if moved_to is not None:
            logger.warning("[LexiconService] Unreadable snapshot kept at {}", moved_to)

    async def _persist(self) -> None:
        if not self._persist_enabled:
            return
        try:
            await self.storage.save(self.engine.state)
        except StorageError as exc:
            logger.error("[LexiconService] Snapshot save failed: {}", exc)
