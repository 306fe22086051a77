"""
Indexer module building the in-memory verse index.

Consumes a canonical corpus and the tokenizer/stemmer pipeline to
produce per-verse search entries and reference lookup maps.
"""

from .models import IndexEntry, VerseIndex, build_verse_key, build_chapter_key
from .index_builder import IndexBuilder, IndexingStats, build_index

__all__ = [
    "IndexEntry",
    "VerseIndex",
    "build_verse_key",
    "build_chapter_key",
    "IndexBuilder",
    "IndexingStats",
    "build_index"
]
