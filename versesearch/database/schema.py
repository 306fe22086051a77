"""
Database schema definitions for the annotation store.

Defines a single key/value table holding JSON-encoded annotation
values under namespaced storage keys.
"""

from ..core import get_logger
from .connection import DatabaseManager

logger = get_logger(__name__)


ANNOTATIONS_TABLE = """
CREATE TABLE IF NOT EXISTS annotations (
    storage_key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
)
"""


def init_schema(manager: DatabaseManager) -> None:
    """
    Create the annotations table if it does not exist.

    Args:
        manager: Database to initialize.
    """
    with manager.cursor() as cur:
        cur.execute(ANNOTATIONS_TABLE)

    logger.debug(f"Annotation schema ready at {manager.db_path}")

