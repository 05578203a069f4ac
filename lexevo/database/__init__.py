from lexevo.database.factory import StorageConfig, build_snapshot_storage
from lexevo.database.redis_snapshot_storage import (
    RedisSnapshotStorage,
    RedisSnapshotStorageConfig,
)
from lexevo.database.snapshot_storage import (
    FileSnapshotStorage,
    MemorySnapshotStorage,
    SnapshotStorage,
)

__all__ = [
    "StorageConfig",
    "build_snapshot_storage",
    "RedisSnapshotStorage",
    "RedisSnapshotStorageConfig",
    "FileSnapshotStorage",
    "MemorySnapshotStorage",
    "SnapshotStorage",
]
