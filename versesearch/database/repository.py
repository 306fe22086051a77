"""
Key/value repositories backing the annotation store.

Values are opaque strings (the store writes JSON). Writes are
last-write-wins per key with no cross-process coordination.
"""

from pathlib import Path
from typing import Dict, List, Optional, Protocol, Union

from ..core import get_logger
from .connection import DatabaseManager
from .schema import init_schema

logger = get_logger(__name__)


class KeyValueStorage(Protocol):
    """Minimal string key/value storage, in the spirit of browser localStorage."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...

    def keys(self, prefix: str = "") -> List[str]:
        ...


class KeyValueRepository:
    """
    SQLite-backed key/value storage.

    Provides get/set/delete over the annotations table.
    """

    def __init__(self, db: Union[DatabaseManager, str, Path] = None):
        """
        Initialize the repository and ensure the schema exists.

        Args:
            db: DatabaseManager, or a database path. Defaults to config value.
        """
        self.db = db if isinstance(db, DatabaseManager) else DatabaseManager(db)
        init_schema(self.db)

    def get(self, key: str) -> Optional[str]:
        """
        Fetch the raw value stored under a key.

        Args:
            key: Storage key.

        Returns:
            Stored string or None.
        """
        with self.db.connection() as conn:
            row = conn.execute(
                "SELECT value FROM annotations WHERE storage_key = ?",
                (key,)
            ).fetchone()
            return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        """
        Store a value, replacing any previous one.

        Args:
            key: Storage key.
            value: String value.
        """
        with self.db.cursor() as cur:
            cur.execute("""
                INSERT INTO annotations (storage_key, value, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(storage_key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
            """, (key, value))

    def delete(self, key: str) -> None:
        """Remove a key if present."""
        with self.db.cursor() as cur:
            cur.execute("DELETE FROM annotations WHERE storage_key = ?", (key,))

    def keys(self, prefix: str = "") -> List[str]:
        """
        List stored keys starting with a prefix.

        Args:
            prefix: Key prefix to filter on.

        Returns:
            Sorted list of keys.
        """
        with self.db.connection() as conn:
            rows = conn.execute(
                "SELECT storage_key FROM annotations WHERE substr(storage_key, 1, ?) = ? "
                "ORDER BY storage_key",
                (len(prefix), prefix)
            ).fetchall()
            return [row["storage_key"] for row in rows]


class MemoryRepository:
    """In-process key/value storage, used for tests and ephemeral sessions."""

    def __init__(self, initial: Dict[str, str] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self, prefix: str = "") -> List[str]:
        return sorted(key for key in self._data if key.startswith(prefix))
