"""
Snapshot caching: persistent SQLite cache and in-process latest-set store.
"""

from .snapshot_cache import CacheError, SnapshotCache
from .snapshot_store import SnapshotStore

__all__ = [
    'CacheError',
    'SnapshotCache',
    'SnapshotStore'
]
