"""Redis-backed :class:`SnapshotStorage` implementation.

The whole lexicon lives under one string key as a JSON document.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, TypeVar

from loguru import logger
from pydantic import BaseModel, Field
from redis import asyncio as aioredis

from lexevo.database.snapshot_storage import SnapshotStorage
from lexevo.exceptions import StorageError
from lexevo.lexicon.state import LexiconState
from lexevo.utils.json import dumps as _dumps
from lexevo.utils.json import loads as _loads

__all__ = [
    "RedisSnapshotStorageConfig",
    "RedisSnapshotStorage",
]

T = TypeVar("T")


class RedisSnapshotStorageConfig(BaseModel):
    redis_url: str = Field(default="redis://localhost:6379/0")
    key_prefix: str = Field(default="lexevo")
    snapshot_key_tpl: str = Field(default="{prefix}:snapshot")

    # Behavior
    max_retries: int = Field(default=3, ge=1)
    retry_delay: float = Field(default=0.2, ge=0.0)
    socket_timeout: float = Field(default=5.0, gt=0)

    model_config = {"extra": "forbid"}


class RedisSnapshotStorage(SnapshotStorage):
    def __init__(
        self,
        config: RedisSnapshotStorageConfig,
        *,
        redis: aioredis.Redis | None = None,
    ):
        self.config = config
        self._redis = redis
        self._lock = asyncio.Lock()

    def _k_snapshot(self) -> str:
        return self.config.snapshot_key_tpl.format(prefix=self.config.key_prefix)

    async def _conn(self) -> aioredis.Redis:
        if self._redis is not None:
            return self._redis
        async with self._lock:
            if self._redis is None:
                r = aioredis.from_url(
                    self.config.redis_url,
                    decode_responses=True,
                    socket_connect_timeout=self.config.socket_timeout,
                    socket_timeout=self.config.socket_timeout,
                    retry_on_timeout=True,
                )
                await r.ping()
                logger.debug("[RedisSnapshotStorage] connected {}", self.config.redis_url)
                self._redis = r
        return self._redis

    async def _with_redis(self, name: str, fn: Callable[[aioredis.Redis], Awaitable[T]]) -> T:
        delay = self.config.retry_delay
        for attempt in range(1, self.config.max_retries + 1):
            try:
                return await fn(await self._conn())
            except Exception as e:
                if attempt == self.config.max_retries:
                    logger.debug("[RedisSnapshotStorage] {} failed: {}", name, e)
                    raise StorageError(f"Redis op {name} failed: {e}") from e
                await asyncio.sleep(min(delay, 1.0))
                delay *= 2
        raise StorageError(f"Redis op {name} failed")

    async def load(self) -> LexiconState | None:
        raw = await self._with_redis("load", lambda r: r.get(self._k_snapshot()))
        if not raw:
            return None
        try:
            payload = _loads(raw)
            if not isinstance(payload, dict):
                raise ValueError("snapshot is not a JSON object")
            return LexiconState.from_snapshot(payload)
        except ValueError as exc:
            raise StorageError(f"bad snapshot under {self._k_snapshot()}: {exc}") from exc

    async def save(self, state: LexiconState) -> None:
        blob = _dumps(state.to_payload())
        await self._with_redis("save", lambda r: r.set(self._k_snapshot(), blob))

    async def quarantine(self) -> str | None:
        key = self._k_snapshot()
        bad = f"{key}:bad"

        async def _move(r: aioredis.Redis) -> bool:
            if not await r.exists(key):
                return False
            await r.rename(key, bad)
            return True

        moved = await self._with_redis("quarantine", _move)
        return bad if moved else None

    async def close(self) -> None:
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None
