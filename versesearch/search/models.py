"""
Data models for search functionality.

Defines dataclasses for search queries, parsed queries and ranked
results used throughout the search module.
"""

from dataclasses import dataclass, field, fields
from typing import List, Optional

from ..indexer.models import IndexEntry


@dataclass
class SearchQuery:
    """
    Represents a search query with a result limit.

    Attributes:
        text: The search query text.
        limit: Maximum number of results to return (None for the default).
    """
    text: str
    limit: Optional[int] = None


@dataclass(frozen=True)
class Reference:
    """A book + chapter:verse reference parsed out of a query."""
    book_id: str
    chapter: int
    verse: int

    @property
    def key(self) -> str:
        return f"{self.book_id}:{self.chapter}:{self.verse}"


@dataclass
class ParsedQuery:
    """
    A query broken into the signals the scorer consumes.

    Attributes:
        text: The raw query text.
        normalized: Whole-query normalized form (substring signal).
        tokens: Literal query tokens.
        stems: Stem of each literal token.
        bigrams: Adjacent literal token pairs.
        expanded_tokens: Literal tokens plus concept expansions.
        reference: Resolved direct reference, if any.
    """
    text: str
    normalized: str = ""
    tokens: List[str] = field(default_factory=list)
    stems: List[str] = field(default_factory=list)
    bigrams: List[str] = field(default_factory=list)
    expanded_tokens: List[str] = field(default_factory=list)
    reference: Optional[Reference] = None

    @property
    def is_empty(self) -> bool:
        return not self.normalized

    @property
    def reference_key(self) -> Optional[str]:
        return self.reference.key if self.reference else None


@dataclass(frozen=True)
class RankedResult(IndexEntry):
    """
    An index entry with its relevance score.

    Produced only by the search engine and never persisted.
    """
    score: float = 0.0

    @classmethod
    def from_entry(cls, entry: IndexEntry, score: float) -> "RankedResult":
        """Copy an entry's fields and attach a score."""
        values = {f.name: getattr(entry, f.name) for f in fields(IndexEntry)}
        return cls(**values, score=score)

    @property
    def reference(self) -> str:
        return self.verse.reference


@dataclass
class SearchStats:
    """
    Statistics about a search execution.

    Attributes:
        query: The original query text.
        total_results: Entries with a positive score before truncation.
        execution_time_ms: Query execution time in milliseconds.
        reference_key: Reference key resolved from the query, if any.
    """
    query: str
    total_results: int
    execution_time_ms: float
    reference_key: Optional[str] = None
