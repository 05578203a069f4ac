from __future__ import annotations

from abc import ABC, abstractmethod
import asyncio
from pathlib import Path

from loguru import logger

from lexevo.exceptions import StorageError
from lexevo.lexicon.state import LexiconState
from lexevo.utils.json import dumps as _dumps
from lexevo.utils.json import loads as _loads


class SnapshotStorage(ABC):
    """Abstract interface for persisting the single lexicon snapshot."""

    @abstractmethod
    async def load(self) -> LexiconState | None:
        """Return the stored state, or None when nothing was stored yet."""

    @abstractmethod
    async def save(self, state: LexiconState) -> None: ...

    @abstractmethod
    async def quarantine(self) -> str | None:
        """Move an unreadable snapshot out of the way; return where it went."""

    async def close(self) -> None:
        """Release connections; nothing to do by default."""


class MemorySnapshotStorage(SnapshotStorage):
    """Keeps a serialized copy in memory. Used for tests and ephemeral runs."""

    def __init__(self, initial: LexiconState | None = None) -> None:
        self._payload: dict | None = initial.to_payload() if initial else None
        self.saves = 0

    async def load(self) -> LexiconState | None:
        if self._payload is None:
            return None
        return LexiconState.from_snapshot(self._payload)

    async def save(self, state: LexiconState) -> None:
        self._payload = state.to_payload()
        self.saves += 1

    async def quarantine(self) -> str | None:
        self._payload = None
        return None


class FileSnapshotStorage(SnapshotStorage):
    """One JSON document on disk, replaced atomically on save."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    async def load(self) -> LexiconState | None:
        return await asyncio.to_thread(self._load_sync)

    async def save(self, state: LexiconState) -> None:
        await asyncio.to_thread(self._save_sync, state.to_payload())

    async def quarantine(self) -> str | None:
        return await asyncio.to_thread(self._quarantine_sync)

    def _load_sync(self) -> LexiconState | None:
        if not self.path.exists():
            logger.debug("[FileSnapshotStorage] no snapshot at {}", self.path)
            return None
        try:
            payload = _loads(self.path.read_bytes())
        except (OSError, ValueError) as exc:
            raise StorageError(f"cannot read snapshot {self.path}: {exc}") from exc
        if not isinstance(payload, dict):
            raise StorageError(f"snapshot {self.path} is not a JSON object")
        try:
            return LexiconState.from_snapshot(payload)
        except ValueError as exc:
            raise StorageError(f"snapshot {self.path} is invalid: {exc}") from exc

    def _quarantine_sync(self) -> str | None:
        if not self.path.exists():
            return None
        bad = self.path.with_suffix(self.path.suffix + ".bad")
        try:
            self.path.replace(bad)
        except OSError as exc:
            raise StorageError(f"cannot move snapshot {self.path} aside: {exc}") from exc
        return str(bad)

    def _save_sync(self, payload: dict) -> None:
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(_dumps(payload), encoding="utf-8")
            tmp.replace(self.path)
        except OSError as exc:
            raise StorageError(f"cannot write snapshot {self.path}: {exc}") from exc
