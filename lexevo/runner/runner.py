from __future__ import annotations

import asyncio
import contextlib

from loguru import logger
from pydantic import BaseModel, Field

from lexevo.evolution.engine import GenerationResult
from lexevo.service import LexiconService

__all__ = ["LexiconRunner", "RunnerConfig"]


class RunnerConfig(BaseModel):
    resync_interval: float = Field(
        default=300.0, gt=0, description="Seconds between peer resyncs"
    )
    evolve_interval: float = Field(
        default=1800.0, gt=0, description="Seconds between autonomous generations"
    )
    autonomous: bool = Field(
        default=True, description="Advance generations locally while no peer is mirrored"
    )

    model_config = {"extra": "forbid"}


class LexiconRunner:
    """Periodic triggers: peer resync and autonomous evolution."""

    def __init__(self, service: LexiconService, config: RunnerConfig | None = None):
        self.service = service
        self.config = config or RunnerConfig()
        self._sync_task: asyncio.Task | None = None
        self._evolve_task: asyncio.Task | None = None

    @property
    def tasks(self) -> list[asyncio.Task]:
        return [t for t in (self._sync_task, self._evolve_task) if t is not None]

    def start(self) -> None:
        if self.tasks:
            return
        if self.service.synchronizer.enabled:
            self._sync_task = asyncio.create_task(self._sync_loop(), name="lexicon-sync")
        else:
            logger.info("[LexiconRunner] Peer sync disabled; running with local state")
        if self.config.autonomous:
            self._evolve_task = asyncio.create_task(
                self._evolve_loop(), name="lexicon-evolve"
            )

    async def stop(self) -> None:
        for task in self.tasks:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._sync_task = self._evolve_task = None
        logger.info("[LexiconRunner] Stopped")

    async def autonomous_step(self) -> GenerationResult | None:
        """Advance one generation unless the lexicon currently mirrors a peer."""
        if self.service.peer_connected:
            logger.debug("[LexiconRunner] Mirroring peer; autonomous step skipped")
            return None
        return await self.service.evolve()

    async def _sync_loop(self) -> None:
        # the initial sync happens during startup, before the runner starts
        while True:
            await asyncio.sleep(self.config.resync_interval)
            try:
                await self.service.sync()
            except Exception as exc:  # pylint: disable=broad-except
                logger.error("[LexiconRunner] Sync error: {}", exc)

    async def _evolve_loop(self) -> None:
        while True:
            await asyncio.sleep(self.config.evolve_interval)
            try:
                await self.autonomous_step()
            except Exception as exc:  # pylint: disable=broad-except
                logger.error("[LexiconRunner] Evolve error: {}", exc)
