"""
Database module for local annotation persistence.

Provides SQLite connection management, the key/value schema and
repositories, and the per-user annotation store.
"""

from .connection import DatabaseManager
from .schema import init_schema
from .repository import KeyValueStorage, KeyValueRepository, MemoryRepository
from .annotation_store import (
    AnnotationStore,
    build_key,
    HIGHLIGHTS,
    NOTES,
    SEEN_ITEMS
)

__all__ = [
    "DatabaseManager",
    "init_schema",
    "KeyValueStorage",
    "KeyValueRepository",
    "MemoryRepository",
    "AnnotationStore",
    "build_key",
    "HIGHLIGHTS",
    "NOTES",
    "SEEN_ITEMS"
]
