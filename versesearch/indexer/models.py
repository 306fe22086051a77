"""
Data models for the in-memory verse index.

An IndexEntry is the searchable representation of one verse; a
VerseIndex owns the entries plus the lookup maps built alongside them.
Both are treated as read-only once the builder returns.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..corpus.models import Verse
from ..utils import Stemmer, SuffixStemmer


def build_verse_key(book_id: str, chapter: int, verse: int) -> str:
    """Reference key used for O(1) lookup and as the ranking identity."""
    return f"{book_id}:{chapter}:{verse}"


def build_chapter_key(book_id: str, chapter: int) -> str:
    return f"{book_id}:{chapter}"


@dataclass(frozen=True)
class IndexEntry:
    """
    Searchable representation of one verse.

    Attributes:
        id: Verse id.
        key: "{book_id}:{chapter}:{verse}" reference key.
        verse: The canonical verse.
        tokens: Stopword-free normalized tokens.
        stems: Stem of each token, same order.
        bigrams: Adjacent token pairs.
        context_tokens: Token union of the chapter-local neighbor verses.
        normalized_text: Whole-text normalized form for substring tests.
    """
    id: str
    key: str
    verse: Verse
    tokens: Tuple[str, ...]
    stems: Tuple[str, ...]
    bigrams: Tuple[str, ...]
    context_tokens: Tuple[str, ...]
    normalized_text: str


@dataclass
class VerseIndex:
    """
    The built search index for one corpus load.

    Attributes:
        entries: Index entries in corpus order.
        verse_by_key: Reference key to entry.
        chapter_map: "{book_id}:{chapter}" to the chapter's verses in corpus order.
        stemmer: Stemmer used at build time; queries must use the same one.
    """
    entries: List[IndexEntry] = field(default_factory=list)
    verse_by_key: Dict[str, IndexEntry] = field(default_factory=dict)
    chapter_map: Dict[str, List[Verse]] = field(default_factory=dict)
    stemmer: Stemmer = field(default_factory=SuffixStemmer)

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, book_id: str, chapter: int, verse: int) -> Optional[IndexEntry]:
        """Direct reference lookup."""
        return self.verse_by_key.get(build_verse_key(book_id, chapter, verse))

    def chapter(self, book_id: str, chapter: int) -> List[Verse]:
        """Verses of one chapter in corpus order."""
        return list(self.chapter_map.get(build_chapter_key(book_id, chapter), []))
