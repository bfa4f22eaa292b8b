"""
In-process holder for the latest density snapshot set.
"""

import threading
from datetime import datetime
from typing import Optional

from ..data.models import SnapshotSet


class SnapshotStore:
    """
    Atomically swapped reference to the current SnapshotSet.

    Snapshot sets are immutable, so readers may keep using whatever set they
    obtained while a newer one is published.
    """

    def __init__(self, initial: Optional[SnapshotSet] = None):
        self._lock = threading.Lock()
        self._current = initial
        self._version = 0 if initial is None else 1

    @property
    def version(self) -> int:
        """Number of sets published so far."""
        return self._version

    def current(self) -> Optional[SnapshotSet]:
        with self._lock:
            return self._current

    def publish(self, snapshots: SnapshotSet) -> SnapshotSet:
        """Replace the current set and return it."""
        with self._lock:
            self._current = snapshots
            self._version += 1
        return snapshots

    def fresh(self, now: datetime, freshness_seconds: float) -> Optional[SnapshotSet]:
        """Current set if it is younger than the freshness window, else None."""
        snapshots = self.current()
        if snapshots is not None and snapshots.is_fresh(now, freshness_seconds):
            return snapshots
        return None

    def clear(self) -> None:
        with self._lock:
            self._current = None
