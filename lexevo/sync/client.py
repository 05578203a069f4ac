"""Peer synchronization: mirror a remote lexicon server into the local engine."""

from __future__ import annotations

import asyncio
import contextlib
from datetime import datetime, timezone
from typing import AsyncContextManager

import httpx
from loguru import logger

from lexevo.evolution.engine import EvolutionEngine
from lexevo.exceptions import SyncError, SyncFetchError, SyncPayloadError
from lexevo.sync.merge_strategies import resolve_merge_strategy
from lexevo.sync.models import RemoteSnapshot, SyncConfig
from lexevo.utils.json import loads as _loads

__all__ = ["StateSynchronizer"]


class StateSynchronizer:
    """
    Fetches the peer snapshot and merges it into the engine state.

    The fetch runs without holding ``lock``; the merge and the swap happen
    under it, with no await in between, so readers never see a torn state.
    Any failure leaves the local state untouched and marks the peer as
    disconnected.
    """

    def __init__(
        self,
        config: SyncConfig,
        engine: EvolutionEngine,
        *,
        lock: asyncio.Lock | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config
        self.engine = engine
        self._merge = resolve_merge_strategy(
            config.merge_strategy,
            extinct_limit=engine.config.extinct_limit,
            shift_limit=engine.config.shift_limit,
        )
        self._lock = lock
        self._transport = transport

        self.connected = False
        self.last_sync: datetime | None = None

    @property
    def enabled(self) -> bool:
        return self.config.enabled and self.config.state_url is not None

    async def fetch(self) -> RemoteSnapshot:
        url = self.config.state_url
        if url is None:
            raise SyncFetchError("no peer_url configured")

        try:
            async with httpx.AsyncClient(
                timeout=self.config.timeout, transport=self._transport
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            raise SyncFetchError(f"GET {url} failed: {exc}") from exc

        try:
            payload = _loads(response.content)
        except ValueError as exc:
            raise SyncPayloadError(f"peer sent invalid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise SyncPayloadError(
                f"peer snapshot must be an object, got {type(payload).__name__}"
            )
        try:
            return RemoteSnapshot.model_validate(payload)
        except ValueError as exc:
            raise SyncPayloadError(f"peer snapshot rejected: {exc}") from exc

    async def sync(self) -> bool:
        """Fetch and merge once. Returns True when the peer state was applied."""
        if not self.enabled:
            return False

        try:
            remote = await self.fetch()
        except SyncError as exc:
            if self.connected:
                logger.warning("[sync] Peer lost: {}", exc)
            else:
                logger.debug("[sync] Peer not reachable: {}", exc)
            self.connected = False
            return False

        guard: AsyncContextManager = self._lock or contextlib.nullcontext()
        async with guard:
            merged = self._merge(self.engine.state, remote)
            self.engine.replace_state(merged)

        self.connected = True
        self.last_sync = datetime.now(timezone.utc)
        logger.info(
            "[sync] Peer connected | gen {}, {} words",
            remote.generation,
            len(remote.words),
        )
        return True

    def get_status(self) -> dict[str, object]:
        return {
            "enabled": self.enabled,
            "connected": self.connected,
            "last_sync": self.last_sync.isoformat() if self.last_sync else None,
        }
