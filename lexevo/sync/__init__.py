from lexevo.sync.client import StateSynchronizer
from lexevo.sync.merge_strategies import merge_snapshots, resolve_merge_strategy
from lexevo.sync.models import RemoteSnapshot, SyncConfig

__all__ = [
    "StateSynchronizer",
    "merge_snapshots",
    "resolve_merge_strategy",
    "RemoteSnapshot",
    "SyncConfig",
]
