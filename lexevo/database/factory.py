from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from lexevo.database.redis_snapshot_storage import (
    RedisSnapshotStorage,
    RedisSnapshotStorageConfig,
)
from lexevo.database.snapshot_storage import (
    FileSnapshotStorage,
    MemorySnapshotStorage,
    SnapshotStorage,
)


class StorageConfig(BaseModel):
    """Which backend holds the lexicon snapshot between restarts."""

    backend: Literal["memory", "file", "redis"] = Field(default="file")
    path: str = Field(default="data/snapshot.json", description="Used by the file backend")
    redis: RedisSnapshotStorageConfig = Field(default_factory=RedisSnapshotStorageConfig)

    model_config = {"extra": "forbid"}


def build_snapshot_storage(config: StorageConfig) -> SnapshotStorage:
    if config.backend == "memory":
        return MemorySnapshotStorage()
    if config.backend == "file":
        return FileSnapshotStorage(config.path)
    return RedisSnapshotStorage(config.redis)
