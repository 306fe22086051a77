"""
Index builder for the Verse Search Engine.

Turns a canonical corpus into a VerseIndex: per-verse tokens, stems,
bigrams and normalized text, chapter-local neighbor context, and the
reference-keyed lookup map. The index is rebuilt wholesale on every
corpus load; cost is linear in the number of verses.
"""

import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence, Union

from ..core import get_logger
from ..corpus.models import Corpus, Verse
from ..utils import Stemmer, SuffixStemmer, build_bigrams, normalize_text, tokenize
from .models import IndexEntry, VerseIndex, build_chapter_key, build_verse_key

logger = get_logger(__name__)


@dataclass
class IndexingStats:
    """Statistics from an index build."""
    verses_indexed: int = 0
    chapters: int = 0
    books: int = 0
    duplicate_keys: int = 0
    elapsed_ms: float = 0.0


class IndexBuilder:
    """
    Builds the in-memory verse index.

    Holds the stemmer shared by the index and later queries, and records
    statistics about the last build.
    """

    def __init__(
        self,
        stemmer: Stemmer = None,
        progress_callback: Callable[[int, int, str], None] = None,
        log_every: int = 500
    ):
        """
        Initialize the index builder.

        Args:
            stemmer: Stemmer applied to every token. Defaults to SuffixStemmer.
            progress_callback: Optional callback(current, total, key)
                              called once per indexed verse.
            log_every: Log a progress line every N verses.
        """
        self.stemmer = stemmer or SuffixStemmer()
        self.progress_callback = progress_callback
        self.log_every = log_every
        self.stats = IndexingStats()

    def build(self, source: Union[Corpus, Sequence[Verse]]) -> VerseIndex:
        """
        Build the index for a corpus.

        Args:
            source: A Corpus, or a plain sequence of verses.

        Returns:
            The populated VerseIndex.
        """
        start_time = time.time()
        verses = source.verses if isinstance(source, Corpus) else list(source)

        self.stats = IndexingStats()
        index = VerseIndex(stemmer=self.stemmer)

        verses = self._drop_duplicates(verses)

        chapter_positions: Dict[str, int] = {}
        verse_tokens: List[List[str]] = []

        for verse in verses:
            chapter_key = build_chapter_key(verse.book_id, verse.chapter)
            chapter_verses = index.chapter_map.setdefault(chapter_key, [])
            chapter_verses.append(verse)
            verse_tokens.append(tokenize(verse.text))

        total = len(verses)

        for position, verse in enumerate(verses):
            chapter_key = build_chapter_key(verse.book_id, verse.chapter)
            slot = chapter_positions.get(chapter_key, 0)
            chapter_positions[chapter_key] = slot + 1

            tokens = verse_tokens[position]
            entry = IndexEntry(
                id=verse.id,
                key=build_verse_key(verse.book_id, verse.chapter, verse.verse),
                verse=verse,
                tokens=tuple(tokens),
                stems=tuple(self.stemmer.stem(token) for token in tokens),
                bigrams=tuple(build_bigrams(tokens)),
                context_tokens=self._context_tokens(index.chapter_map[chapter_key], slot),
                normalized_text=normalize_text(verse.text)
            )
            index.entries.append(entry)
            index.verse_by_key[entry.key] = entry

            if self.progress_callback:
                self.progress_callback(position + 1, total, entry.key)

            if (position + 1) % self.log_every == 0:
                logger.debug(f"Progress: {position + 1}/{total} verses indexed")

        self.stats.verses_indexed = len(index.entries)
        self.stats.chapters = len(index.chapter_map)
        self.stats.books = len({verse.book_id for verse in verses})
        self.stats.elapsed_ms = round((time.time() - start_time) * 1000, 2)

        logger.info(
            f"Index built: {self.stats.verses_indexed} verses, "
            f"{self.stats.chapters} chapters in {self.stats.elapsed_ms:.1f}ms"
        )

        return index

    def _drop_duplicates(self, verses: Sequence[Verse]) -> List[Verse]:
        """Keep the first verse per reference key and per id, counting the rest."""
        seen_keys = set()
        seen_ids = set()
        unique = []
        for verse in verses:
            key = build_verse_key(verse.book_id, verse.chapter, verse.verse)
            if key in seen_keys or verse.id in seen_ids:
                self.stats.duplicate_keys += 1
                logger.warning(f"Duplicate verse {key} (id {verse.id}); keeping first occurrence")
                continue
            seen_keys.add(key)
            seen_ids.add(verse.id)
            unique.append(verse)
        return unique

    @staticmethod
    def _context_tokens(chapter_verses: List[Verse], slot: int) -> tuple:
        """Token union of the immediate predecessor and successor in a chapter."""
        neighbors = []
        if slot > 0:
            neighbors.append(chapter_verses[slot - 1])
        if slot + 1 < len(chapter_verses):
            neighbors.append(chapter_verses[slot + 1])

        context: Dict[str, None] = {}
        for neighbor in neighbors:
            for token in tokenize(neighbor.text):
                context.setdefault(token, None)

        return tuple(context)


def build_index(
    source: Union[Corpus, Sequence[Verse]],
    stemmer: Stemmer = None
) -> VerseIndex:
    """
    Build a VerseIndex for a corpus.

    Args:
        source: A Corpus, or a plain sequence of verses.
        stemmer: Optional replacement stemmer.

    Returns:
        The populated VerseIndex.
    """
    return IndexBuilder(stemmer=stemmer).build(source)


if __name__ == "__main__":
    from ..corpus import load_sample_corpus

    builder = IndexBuilder()
    index = builder.build(load_sample_corpus())

    print(f"Verses indexed: {builder.stats.verses_indexed}")
    print(f"Chapters:       {builder.stats.chapters}")
    print(f"Elapsed:        {builder.stats.elapsed_ms}ms")

    entry = index.get("juan", 1, 2)
    if entry:
        print(f"\n{entry.key}: tokens={entry.tokens}")
        print(f"  stems={entry.stems}")
        print(f"  context={entry.context_tokens}")
