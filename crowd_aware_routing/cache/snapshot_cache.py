"""
SQLite-backed cache of density snapshot sets.

Stores the most recent SnapshotSet as JSON so that several service processes
can share one recent crowd picture. Freshness decisions belong to the caller.
"""

import json
import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from ..data.models import SnapshotSet

logger = logging.getLogger(__name__)


class CacheError(RuntimeError):
    """Snapshot cache could not be read or written."""


class SnapshotCache:
    """
    Persistent store for the latest density snapshot set.
    """

    def __init__(self, db_path: str = "crowd_aware_routing/cache/snapshots.db",
                 cache_key: str = "latest"):
        """
        Initialize the snapshot cache.

        Args:
            db_path: SQLite database file (':memory:' is not shared between connections)
            cache_key: Row key for the cached set
        """
        self.db_path = Path(db_path)
        self.cache_key = cache_key

        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_database()

        logger.info(f"SnapshotCache initialized at {self.db_path}")

    def _init_database(self):
        """Initialize the SQLite table for cached snapshot sets."""
        try:
            with self._get_db_connection() as conn:
                conn.execute('''
                    CREATE TABLE IF NOT EXISTS snapshot_cache (
                        cache_key TEXT PRIMARY KEY,
                        payload TEXT NOT NULL,
                        generated_at TEXT NOT NULL,
                        updated_at TEXT NOT NULL,
                        location_count INTEGER NOT NULL
                    )
                ''')
                conn.commit()
        except sqlite3.Error as e:
            raise CacheError(f"Failed to initialize snapshot cache: {e}") from e

    @contextmanager
    def _get_db_connection(self):
        """Get a database connection with proper cleanup."""
        conn = sqlite3.connect(self.db_path, timeout=5.0)
        conn.row_factory = sqlite3.Row  # Enable column access by name
        try:
            yield conn
        finally:
            conn.close()

    def load(self) -> Optional[SnapshotSet]:
        """
        Load the cached snapshot set.

        Returns:
            The cached SnapshotSet, or None when nothing is cached

        Raises:
            CacheError: On database or decode failure
        """
        try:
            with self._get_db_connection() as conn:
                row = conn.execute(
                    'SELECT payload FROM snapshot_cache WHERE cache_key = ?',
                    (self.cache_key,)
                ).fetchone()
        except sqlite3.Error as e:
            raise CacheError(f"Failed to read snapshot cache: {e}") from e

        if row is None:
            logger.debug("Snapshot cache is empty")
            return None

        try:
            return SnapshotSet.from_dict(json.loads(row['payload']))
        except (ValueError, KeyError, TypeError) as e:
            raise CacheError(f"Corrupt snapshot cache entry: {e}") from e

    def save(self, snapshots: SnapshotSet) -> None:
        """
        Replace the cached snapshot set.

        Raises:
            CacheError: On database failure
        """
        payload = json.dumps(snapshots.to_dict())
        now = datetime.now().isoformat()
        try:
            with self._get_db_connection() as conn:
                conn.execute('''
                    INSERT OR REPLACE INTO snapshot_cache
                    (cache_key, payload, generated_at, updated_at, location_count)
                    VALUES (?, ?, ?, ?, ?)
                ''', (
                    self.cache_key, payload, snapshots.generated_at.isoformat(),
                    now, len(snapshots)
                ))
                conn.commit()
        except sqlite3.Error as e:
            raise CacheError(f"Failed to write snapshot cache: {e}") from e

        logger.debug(f"Cached {len(snapshots)} snapshots generated at {snapshots.generated_at.isoformat()}")

    def clear(self) -> None:
        """Remove every cached entry."""
        try:
            with self._get_db_connection() as conn:
                conn.execute('DELETE FROM snapshot_cache')
                conn.commit()
        except sqlite3.Error as e:
            raise CacheError(f"Failed to clear snapshot cache: {e}") from e
        logger.info("Snapshot cache cleared")

    def get_cache_stats(self) -> Dict[str, Any]:
        """Summary of the cached entry, for health reporting."""
        try:
            with self._get_db_connection() as conn:
                row = conn.execute(
                    'SELECT generated_at, updated_at, location_count FROM snapshot_cache '
                    'WHERE cache_key = ?',
                    (self.cache_key,)
                ).fetchone()
        except sqlite3.Error as e:
            raise CacheError(f"Failed to read snapshot cache stats: {e}") from e

        if row is None:
            return {'cached': False, 'db_path': str(self.db_path)}
        return {
            'cached': True,
            'db_path': str(self.db_path),
            'generated_at': row['generated_at'],
            'updated_at': row['updated_at'],
            'location_count': row['location_count']
        }
