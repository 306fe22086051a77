"""
Data models for the canonical corpus.

Defines the Verse, Book and Corpus dataclasses produced by the corpus
normalizer. Downstream components only ever see these canonical shapes.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass(frozen=True)
class Verse:
    """
    A single passage of the corpus.

    Attributes:
        id: Unique verse identifier.
        book_id: Identifier of the owning Book.
        book: Display name of the owning Book.
        chapter: Chapter number (1-indexed).
        verse: Verse number within the chapter (1-indexed).
        text: Passage text as supplied by the source.
    """
    id: str
    book_id: str
    book: str
    chapter: int
    verse: int
    text: str

    @property
    def reference(self) -> str:
        """Human-readable reference, e.g. 'Juan 3:16'."""
        return f"{self.book} {self.chapter}:{self.verse}"

    def to_dict(self) -> dict:
        """Serialize to the canonical flat-verse JSON shape."""
        return {
            "id": self.id,
            "bookId": self.book_id,
            "book": self.book,
            "chapter": self.chapter,
            "verse": self.verse,
            "text": self.text
        }


@dataclass
class Book:
    """
    A book grouping chapters of verses.

    Attributes:
        id: Unique book identifier.
        name: Display name.
        order: Canonical position used for sorting.
        chapters: Chapter numbers present in the corpus, ascending.
    """
    id: str
    name: str
    order: int
    chapters: List[int] = field(default_factory=list)


@dataclass
class Corpus:
    """
    The full normalized set of books and verses for one session.

    Attributes:
        version: Source version label.
        is_sample: True when the bundled sample stands in for live data.
        books: Books sorted by order.
        verses: Verses in source order.
        book_order: Book ids in first-seen order.
    """
    version: str
    is_sample: bool
    books: List[Book]
    verses: List[Verse]
    book_order: List[str]
    _books_by_id: Dict[str, Book] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self):
        self._books_by_id = {book.id: book for book in self.books}

    def book_by_id(self, book_id: str) -> Optional[Book]:
        """Look up a book by its identifier."""
        return self._books_by_id.get(book_id)

    def chapters_for(self, book_id: str) -> List[int]:
        """Chapter numbers of a book, ascending; empty for unknown books."""
        book = self.book_by_id(book_id)
        return list(book.chapters) if book else []

    def verses_in_chapter(self, book_id: str, chapter: int) -> List[Verse]:
        """Verses of one chapter sorted by verse number."""
        return sorted(
            (v for v in self.verses if v.book_id == book_id and v.chapter == chapter),
            key=lambda v: v.verse
        )

    def to_dict(self) -> dict:
        """
        Serialize to the canonical flat shape.

        The output is accepted by the normalizer and yields an
        equivalent corpus.
        """
        orders = {book.id: book.order for book in self.books}
        verses = []
        for verse in self.verses:
            data = verse.to_dict()
            data["book_order"] = orders.get(verse.book_id)
            verses.append(data)

        return {
            "version": self.version,
            "isSample": self.is_sample,
            "verses": verses
        }


if __name__ == "__main__":
    verse = Verse(
        id="juan-3-16",
        book_id="juan",
        book="Juan",
        chapter=3,
        verse=16,
        text="Porque de tal manera amó Dios al mundo"
    )
    corpus = Corpus(
        version="sample",
        is_sample=True,
        books=[Book(id="juan", name="Juan", order=1, chapters=[3])],
        verses=[verse],
        book_order=["juan"]
    )

    print(f"Verse: {verse.reference}")
    print(f"Chapters of juan: {corpus.chapters_for('juan')}")
    print(f"Serialized: {corpus.to_dict()}")
