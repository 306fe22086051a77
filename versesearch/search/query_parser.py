"""
Query parser for verse search.

Breaks a free-text query into scoring signals: the normalized whole
query, literal tokens, stems, bigrams, concept-expanded tokens, and a
direct book + chapter:verse reference when one can be resolved.
"""

import re
from typing import Iterable, List, Mapping, Optional, Sequence

from ..core import get_logger
from ..indexer.models import IndexEntry
from ..utils import Stemmer, SuffixStemmer, build_bigrams, normalize_text, tokenize
from .concepts import CONCEPT_EXPANSIONS, expand_tokens
from .models import ParsedQuery, Reference

logger = get_logger(__name__)


# "<digits><sep><digits>" with sep one of ":", ".", "-"
CHAPTER_VERSE_PATTERN = re.compile(r"(\d+)\s*[:.-]\s*(\d+)")

_HAS_DIGIT = re.compile(r"\d")


def is_abbreviation(fragment: str, name: str) -> bool:
    """
    True if fragment abbreviates name: same first letter, and every
    letter of fragment appears in name in order ("gn" -> "genesis").
    """
    if not fragment or not name or fragment[0] != name[0]:
        return False

    remaining = iter(name)
    return all(char in remaining for char in fragment)


class QueryParser:
    """
    Parses search queries into scoring signals.

    Uses the same stemmer as the index so query stems line up with
    entry stems.
    """

    def __init__(
        self,
        stemmer: Stemmer = None,
        expansions: Mapping[str, Sequence[str]] = CONCEPT_EXPANSIONS
    ):
        """
        Initialize the parser.

        Args:
            stemmer: Stemmer matching the index. Defaults to SuffixStemmer.
            expansions: Concept table for query expansion.
        """
        self.stemmer = stemmer or SuffixStemmer()
        self.expansions = expansions

    def parse(self, query: str, entries: Sequence[IndexEntry] = ()) -> ParsedQuery:
        """
        Parse a query.

        Args:
            query: Raw user input.
            entries: Index entries used to resolve a book reference.

        Returns:
            ParsedQuery; empty when the query has no searchable content.
        """
        if not isinstance(query, str) or not query.strip():
            return ParsedQuery(text=query if isinstance(query, str) else "")

        trimmed = query.strip()
        tokens = tokenize(trimmed)

        parsed = ParsedQuery(
            text=trimmed,
            normalized=normalize_text(trimmed),
            tokens=tokens,
            stems=[self.stemmer.stem(token) for token in tokens],
            bigrams=build_bigrams(tokens),
            expanded_tokens=expand_tokens(tokens, self.expansions),
            reference=self.resolve_reference(trimmed, entries)
        )

        logger.debug(
            f"Parsed '{trimmed}': tokens={parsed.tokens} "
            f"expanded={len(parsed.expanded_tokens)} ref={parsed.reference_key}"
        )

        return parsed

    def resolve_reference(
        self,
        query: str,
        entries: Iterable[IndexEntry]
    ) -> Optional[Reference]:
        """
        Resolve a "book chapter:verse" reference from a query.

        The first digits-separator-digits group gives chapter and verse;
        the first whitespace part without digits is the book fragment.
        A leading number ("1 corintios") is tried together with the
        fragment first. Books are matched by containment in the
        normalized name or id, then by abbreviation, in corpus order.

        Args:
            query: Raw user input.
            entries: Index entries in corpus order.

        Returns:
            Reference, or None when no chapter:verse or no book matches.
        """
        normalized = normalize_text(query)
        match = CHAPTER_VERSE_PATTERN.search(normalized)
        if not match:
            return None

        chapter, verse = int(match.group(1)), int(match.group(2))

        parts = normalized.split(" ")
        fragments = self._book_fragments(parts)
        if not fragments:
            return None

        books = self._books_in_order(entries)

        for fragment in fragments:
            for book_id, name in books:
                if fragment in name or fragment in normalize_text(book_id):
                    return Reference(book_id=book_id, chapter=chapter, verse=verse)

        fragment = fragments[-1]
        for book_id, name in books:
            if is_abbreviation(fragment, name) or is_abbreviation(fragment, normalize_text(book_id)):
                return Reference(book_id=book_id, chapter=chapter, verse=verse)

        return None

    @staticmethod
    def _book_fragments(parts: List[str]) -> List[str]:
        """Candidate book fragments, most specific first."""
        for position, part in enumerate(parts):
            if part and not _HAS_DIGIT.search(part):
                previous = parts[position - 1] if position > 0 else ""
                if previous.isdigit():
                    return [f"{previous} {part}", part]
                return [part]
        return []

    @staticmethod
    def _books_in_order(entries: Iterable[IndexEntry]) -> List[tuple]:
        """Distinct (book_id, normalized name) pairs in corpus order."""
        seen = {}
        for entry in entries:
            book_id = entry.verse.book_id
            if book_id not in seen:
                seen[book_id] = normalize_text(entry.verse.book)
        return list(seen.items())


if __name__ == "__main__":
    from ..corpus import load_sample_corpus
    from ..indexer import build_index

    index = build_index(load_sample_corpus())
    parser = QueryParser()

    for q in ["genesis 1:1", "Gn 1.1", "1 corintios 13:4", "paz", "   "]:
        parsed = parser.parse(q, index.entries)
        print(f"  '{q}' -> tokens={parsed.tokens} ref={parsed.reference_key}")
