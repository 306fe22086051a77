"""
SQLite connection management for the annotation store.

Provides context managers for safe connection handling with
WAL mode for better concurrency and automatic directory creation.
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from ..core import get_config_or_default, get_logger, StorageError

logger = get_logger(__name__)


class DatabaseManager:
    """
    Manages SQLite database connections with proper lifecycle handling.

    Enables WAL mode and provides context managers for safe resource
    cleanup. One manager is owned by each storage backend; there is no
    process-wide instance.
    """

    def __init__(self, db_path: Path = None):
        """
        Initialize database manager.

        Args:
            db_path: Path to SQLite database file. Defaults to config value.
        """
        if db_path is None:
            db_path = get_config_or_default().paths.database_path

        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _create_connection(self) -> sqlite3.Connection:
        """Create a new database connection with optimal settings."""
        try:
            conn = sqlite3.connect(
                self.db_path,
                check_same_thread=False,
                timeout=30.0
            )

            conn.row_factory = sqlite3.Row

            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA synchronous=NORMAL")

            return conn

        except sqlite3.Error as e:
            raise StorageError(
                f"Failed to connect to database: {e}",
                {"path": str(self.db_path)}
            )

    @contextmanager
    def connection(self) -> Generator[sqlite3.Connection, None, None]:
        """
        Context manager for database connections.

        Yields:
            SQLite connection with Row factory enabled.
        """
        conn = self._create_connection()
        try:
            yield conn
        finally:
            conn.close()

    @contextmanager
    def cursor(self, commit: bool = True) -> Generator[sqlite3.Cursor, None, None]:
        """
        Context manager for database cursors with automatic commit/rollback.

        Args:
            commit: Whether to commit on successful exit.

        Yields:
            SQLite cursor for query execution.
        """
        conn = self._create_connection()
        cursor = conn.cursor()

        try:
            yield cursor
            if commit:
                conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()


if __name__ == "__main__":
    import tempfile

    with tempfile.TemporaryDirectory() as tmpdir:
        manager = DatabaseManager(Path(tmpdir) / "test.db")

        with manager.cursor() as cur:
            cur.execute("CREATE TABLE test (id INTEGER PRIMARY KEY, name TEXT)")
            cur.execute("INSERT INTO test (name) VALUES (?)", ("Alice",))

        with manager.connection() as conn:
            for row in conn.execute("SELECT * FROM test").fetchall():
                print(f"  id={row['id']}, name={row['name']}")
