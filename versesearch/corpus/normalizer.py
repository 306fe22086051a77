"""
Corpus normalizer for heterogeneous verse JSON.

Reconciles the field-name variants found in raw corpus files into the
canonical Book/Verse/Corpus schema. Two raw shapes are accepted:

- flat:   {"verses": [{bookId|book_id, book|book_name, chapter|chapter_number,
                       verse|verse_number|verseIndex, text|content}, ...]}
- nested: {"books": [{id|bookId|code, name|title, order|canon_order,
                      chapters: [{number|chapter, verses: [...]}, ...]}, ...]}

Each logical field is resolved through a prioritized alias list, so
nothing past this module ever needs to know about the variants.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..core import get_logger, CorpusShapeError
from ..utils import to_slug
from .models import Book, Corpus, Verse

logger = get_logger(__name__)


# Prioritized alias lists: the first key present with a usable value wins.
VERSE_FIELD_ALIASES: Dict[str, Sequence[str]] = {
    "id": ("id",),
    "book_id": ("bookId", "book_id"),
    "book": ("book", "book_name"),
    "chapter": ("chapter", "chapter_number"),
    "verse": ("verse", "verse_number", "verseIndex"),
    "text": ("text", "content"),
    "book_order": ("book_order",),
}

BOOK_FIELD_ALIASES: Dict[str, Sequence[str]] = {
    "id": ("id", "bookId", "code"),
    "name": ("name", "title"),
    "order": ("order", "canon_order", "index"),
    "chapters": ("chapters",),
}

CHAPTER_FIELD_ALIASES: Dict[str, Sequence[str]] = {
    "number": ("number", "chapter"),
    "verses": ("verses",),
}

SAMPLE_FLAGS = ("isSample", "sample")


def resolve_field(
    record: Mapping[str, Any],
    aliases: Mapping[str, Sequence[str]],
    field_name: str,
    default: Any = None
) -> Any:
    """
    Resolve a logical field from a raw record through its alias list.

    Empty strings, None and zero are treated as absent so the next alias
    (or the default) is tried.

    Args:
        record: Raw JSON object.
        aliases: Alias table for the record type.
        field_name: Logical field to resolve.
        default: Value returned when no alias carries a value.

    Returns:
        The first usable value, or default.
    """
    for key in aliases[field_name]:
        value = record.get(key)
        if value not in (None, "", 0):
            return value
    return default


def _to_int(value: Any, default: int) -> int:
    """Coerce a raw number-ish value to int, falling back to default."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = int(float(value))
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


class CorpusNormalizer:
    """
    Builds one canonical Corpus from one raw JSON document.

    A normalizer instance is single-use: it accumulates the book registry
    while walking the raw data.
    """

    def __init__(self):
        self.books: List[Book] = []
        self.book_order: List[str] = []
        self.verses: List[Verse] = []
        self._book_map: Dict[str, Book] = {}
        self._chapters: Dict[str, set] = {}
        self._seen: set = set()
        self.duplicates = 0

    def normalize(self, raw: Any) -> Corpus:
        """
        Normalize raw data into a Corpus.

        Args:
            raw: Parsed JSON document.

        Returns:
            Canonical Corpus.

        Raises:
            CorpusShapeError: If raw has neither a verses nor a books list.
        """
        if not isinstance(raw, Mapping):
            raise CorpusShapeError(
                "Corpus data must be a JSON object",
                {"type": type(raw).__name__}
            )

        if isinstance(raw.get("verses"), list):
            self._normalize_flat(raw["verses"])
        elif isinstance(raw.get("books"), list):
            self._normalize_nested(raw["books"])
        else:
            raise CorpusShapeError(
                "Corpus data has neither 'verses' nor 'books'",
                {"keys": sorted(str(k) for k in raw.keys())[:20]}
            )

        for book in self.books:
            book.chapters = sorted(self._chapters.get(book.id, ()))

        is_sample = any(bool(raw.get(flag)) for flag in SAMPLE_FLAGS)
        version = raw.get("version") or ("sample" if is_sample else "unknown")

        logger.debug(
            f"Normalized corpus '{version}': {len(self.books)} books, "
            f"{len(self.verses)} verses"
        )

        return Corpus(
            version=str(version),
            is_sample=is_sample,
            books=sorted(self.books, key=lambda b: b.order),
            verses=self.verses,
            book_order=self.book_order
        )

    def _register_book(self, book_id: str, name: Optional[str], order: Any) -> Book:
        """Register a book once; the first occurrence fixes name and order."""
        existing = self._book_map.get(book_id)
        if existing is not None:
            return existing

        book = Book(
            id=book_id,
            name=str(name) if name else book_id.upper(),
            order=_to_int(order, len(self.books) + 1)
        )
        self._book_map[book_id] = book
        self.books.append(book)
        self.book_order.append(book_id)
        return book

    def _add_verse(self, raw_verse: Mapping[str, Any], book: Book, chapter_default: int) -> None:
        """Build a canonical Verse, inheriting missing context from its book."""
        book_id = str(resolve_field(raw_verse, VERSE_FIELD_ALIASES, "book_id", book.id))
        book_name = str(resolve_field(raw_verse, VERSE_FIELD_ALIASES, "book", book.name))
        chapter = _to_int(resolve_field(raw_verse, VERSE_FIELD_ALIASES, "chapter"), chapter_default)
        number = _to_int(resolve_field(raw_verse, VERSE_FIELD_ALIASES, "verse"), 1)
        text = resolve_field(raw_verse, VERSE_FIELD_ALIASES, "text", "")

        if book_id != book.id:
            book = self._register_book(book_id, book_name, None)

        verse_id = str(resolve_field(raw_verse, VERSE_FIELD_ALIASES, "id") or f"{book_id}-{chapter}-{number}")

        reference = (book_id, chapter, number)
        if verse_id in self._seen or reference in self._seen:
            self.duplicates += 1
            logger.warning(
                f"Skipping repeated verse {book_id} {chapter}:{number} (id {verse_id})"
            )
            return
        self._seen.update((verse_id, reference))

        self.verses.append(Verse(
            id=verse_id,
            book_id=book_id,
            book=book.name,
            chapter=chapter,
            verse=number,
            text=str(text)
        ))
        self._chapters.setdefault(book_id, set()).add(chapter)

    def _normalize_flat(self, raw_verses: List[Any]) -> None:
        for raw_verse in raw_verses:
            if not isinstance(raw_verse, Mapping):
                logger.debug(f"Skipping non-object verse entry: {raw_verse!r:.60}")
                continue

            name = resolve_field(raw_verse, VERSE_FIELD_ALIASES, "book")
            book_id = resolve_field(raw_verse, VERSE_FIELD_ALIASES, "book_id") or to_slug(name or "")
            order = resolve_field(raw_verse, VERSE_FIELD_ALIASES, "book_order")

            book = self._register_book(str(book_id), name, order)
            self._add_verse(raw_verse, book, chapter_default=1)

    def _normalize_nested(self, raw_books: List[Any]) -> None:
        for position, raw_book in enumerate(raw_books, start=1):
            if not isinstance(raw_book, Mapping):
                logger.debug(f"Skipping non-object book entry at position {position}")
                continue

            name = resolve_field(raw_book, BOOK_FIELD_ALIASES, "name") or f"Book {position}"
            book_id = resolve_field(raw_book, BOOK_FIELD_ALIASES, "id") or to_slug(name)
            order = resolve_field(raw_book, BOOK_FIELD_ALIASES, "order", position)

            book = self._register_book(str(book_id), name, order)

            chapters = resolve_field(raw_book, BOOK_FIELD_ALIASES, "chapters", [])
            if not isinstance(chapters, list):
                continue

            for chapter_position, raw_chapter in enumerate(chapters, start=1):
                if isinstance(raw_chapter, list):
                    number = chapter_position
                    raw_verses = raw_chapter
                elif isinstance(raw_chapter, Mapping):
                    number = _to_int(
                        resolve_field(raw_chapter, CHAPTER_FIELD_ALIASES, "number"),
                        chapter_position
                    )
                    raw_verses = resolve_field(raw_chapter, CHAPTER_FIELD_ALIASES, "verses", [])
                    if not isinstance(raw_verses, list):
                        raw_verses = []
                else:
                    continue

                for raw_verse in raw_verses:
                    if isinstance(raw_verse, Mapping):
                        self._add_verse(raw_verse, book, chapter_default=number)


def normalize_corpus(raw: Any) -> Corpus:
    """
    Normalize raw corpus JSON into a canonical Corpus.

    Args:
        raw: Parsed JSON in flat or nested shape.

    Returns:
        Canonical Corpus.

    Raises:
        CorpusShapeError: If the shape is not recognised.
    """
    return CorpusNormalizer().normalize(raw)
