"""
Verse search engine with additive multi-signal scoring.

Scores every index entry against a parsed query and ranks the entries
with a positive score. Signals, per entry:

    +100  entry key equals the resolved reference key
    +40   normalized query (long enough) is a substring of the verse
    +10   per query bigram present in the entry bigrams
    +6    per expanded query token present in the entry tokens
    +2    per expanded query token present in the neighbor context
    +4    per query stem present in the entry stems

Ties keep corpus order. Queries never raise: empty input, no index or no
match all yield an empty list.
"""

import time
from typing import List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from ..core import Config, get_logger
from ..indexer.models import IndexEntry, VerseIndex
from .concepts import CONCEPT_EXPANSIONS
from .models import ParsedQuery, RankedResult, SearchQuery, SearchStats
from .query_parser import QueryParser

logger = get_logger(__name__)


REFERENCE_BONUS = 100
SUBSTRING_BONUS = 40
BIGRAM_WEIGHT = 10
TOKEN_WEIGHT = 6
CONTEXT_WEIGHT = 2
STEM_WEIGHT = 4


def describe_search_method() -> str:
    """One-line description of the ranking strategy, for display."""
    return (
        "Braided contextual resonance: blends exact phrase matches, bigrams, "
        "word stems and the context of neighboring verses."
    )


class SearchEngine:
    """
    Ranked verse search over one built VerseIndex.

    The engine is a long-lived handle owned by the hosting application;
    it holds no global state and never mutates the index.
    """

    def __init__(
        self,
        index: VerseIndex,
        default_limit: int = None,
        min_substring_length: int = None,
        expansions: Mapping[str, Sequence[str]] = CONCEPT_EXPANSIONS,
        config: Config = None
    ):
        """
        Initialize the search engine.

        Args:
            index: The built index to search.
            default_limit: Results returned when no positive limit is given.
            min_substring_length: Minimum normalized query length for the
                                  substring bonus.
            expansions: Concept table for query expansion.
            config: Settings for unspecified values. Defaults to
                    Config.default(), never the cached config file.
        """
        config = config or Config.default()

        self.index = index
        self.parser = QueryParser(stemmer=index.stemmer, expansions=expansions)

        self.default_limit = default_limit or config.search.default_limit
        self.min_substring_length = (
            min_substring_length if min_substring_length is not None
            else config.search.min_substring_length
        )

    def search(
        self,
        query: Union[SearchQuery, str]
    ) -> Tuple[List[RankedResult], SearchStats]:
        """
        Execute a ranked search.

        Args:
            query: SearchQuery or plain query text.

        Returns:
            Tuple of (ranked results, SearchStats).
        """
        start_time = time.time()

        if not isinstance(query, SearchQuery):
            query = SearchQuery(text=query)

        parsed = self.parser.parse(query.text, self.index.entries)

        if parsed.is_empty or not self.index.entries:
            return [], SearchStats(
                query=parsed.text,
                total_results=0,
                execution_time_ms=0
            )

        scores = np.fromiter(
            (self.score_entry(entry, parsed) for entry in self.index.entries),
            dtype=np.float64,
            count=len(self.index.entries)
        )

        # Stable sort on negated scores keeps corpus order among ties
        order = np.argsort(-scores, kind="stable")
        matched = order[scores[order] > 0]

        limit = self._resolve_limit(query.limit)
        results = [
            RankedResult.from_entry(self.index.entries[i], float(scores[i]))
            for i in matched[:limit]
        ]

        execution_time = (time.time() - start_time) * 1000

        stats = SearchStats(
            query=parsed.text,
            total_results=int(matched.size),
            execution_time_ms=round(execution_time, 2),
            reference_key=parsed.reference_key
        )

        logger.debug(
            f"Search '{parsed.text}': {stats.total_results} matches in {execution_time:.1f}ms"
        )

        return results, stats

    def search_simple(self, text: str, limit: int = None) -> List[RankedResult]:
        """
        Convenience method returning only the ranked results.

        Args:
            text: Search query text.
            limit: Maximum results.

        Returns:
            List of RankedResult objects.
        """
        results, _ = self.search(SearchQuery(text=text, limit=limit))
        return results

    def score_entry(self, entry: IndexEntry, parsed: ParsedQuery) -> int:
        """
        Additive relevance score of one entry for a parsed query.

        Args:
            entry: Index entry to score.
            parsed: Parsed query signals.

        Returns:
            Integer score; 0 means no match.
        """
        score = 0

        if parsed.reference_key and entry.key == parsed.reference_key:
            score += REFERENCE_BONUS

        if (len(parsed.normalized) >= self.min_substring_length
                and parsed.normalized in entry.normalized_text):
            score += SUBSTRING_BONUS

        for bigram in parsed.bigrams:
            if bigram in entry.bigrams:
                score += BIGRAM_WEIGHT

        for token in parsed.expanded_tokens:
            if token in entry.tokens:
                score += TOKEN_WEIGHT
            if token in entry.context_tokens:
                score += CONTEXT_WEIGHT

        for stem in parsed.stems:
            if stem in entry.stems:
                score += STEM_WEIGHT

        return score

    def _resolve_limit(self, limit: Optional[int]) -> int:
        """A positive limit is used as given; anything else means the default."""
        if not isinstance(limit, int) or isinstance(limit, bool) or limit <= 0:
            return self.default_limit
        return limit


def search(
    query: str,
    index: Optional[VerseIndex],
    limit: int = None,
    config: Config = None
) -> List[RankedResult]:
    """
    Rank the verses of an index against a free-text query.

    Args:
        query: Free-text query, possibly containing a reference like "Jn 3:16".
        index: Built VerseIndex (None yields no results).
        limit: Maximum results (40 unless config says otherwise).
        config: Optional settings; Config.default() when omitted.

    Returns:
        Ranked results, best first; empty for empty queries.
    """
    if index is None:
        return []

    return SearchEngine(index, config=config).search_simple(query, limit=limit)


if __name__ == "__main__":
    from ..corpus import load_sample_corpus
    from ..indexer import build_index

    engine = SearchEngine(build_index(load_sample_corpus()))

    print(describe_search_method())
    for q in ["genesis 1:1", "principio dios", "paz"]:
        results, stats = engine.search(q)
        print(f"\nQuery: '{q}' ({stats.total_results} matches, ref={stats.reference_key})")
        for r in results[:3]:
            print(f"  {r.score:6.1f}  {r.reference}  {r.verse.text[:60]}")
