"""
Tests for the verse search engine.

Tests additive scoring, ranking order, limits and the no-raise contract.
"""

import pytest

from versesearch.corpus.models import Verse
from versesearch.indexer import build_index
from versesearch.search.engine import (
    REFERENCE_BONUS,
    SearchEngine,
    describe_search_method,
    search,
)
from versesearch.search.models import SearchQuery


def _verse(book_id: str, chapter: int, number: int, text: str) -> Verse:
    return Verse(
        id=f"{book_id}-{chapter}-{number}",
        book_id=book_id,
        book=book_id.title(),
        chapter=chapter,
        verse=number,
        text=text
    )


@pytest.fixture
def juan_engine(juan_corpus):
    return SearchEngine(build_index(juan_corpus), default_limit=40)


@pytest.fixture
def sample_engine(sample_index):
    return SearchEngine(sample_index, default_limit=40)


class TestScoring:
    """Tests for individual score components."""

    def test_bigram_beats_context(self, juan_engine):
        """Test the worked example: bigram + tokens + stems outrank context."""
        results, _ = juan_engine.search("principio dios")

        assert [r.key for r in results] == ["juan:1:2", "juan:1:1", "juan:1:3"]
        assert [r.score for r in results] == [32.0, 14.0, 4.0]

    def test_score_entry_components(self, juan_engine):
        """Test score_entry directly on the middle verse."""
        parsed = juan_engine.parser.parse("principio dios", juan_engine.index.entries)
        entry = juan_engine.index.get("juan", 1, 2)

        # bigram 10 + tokens 6+6 + context 2 + stems 4+4
        assert juan_engine.score_entry(entry, parsed) == 32

    def test_substring_beats_scattered_tokens(self):
        """Test that a contiguous phrase outranks the same words scattered."""
        index = build_index([
            _verse("a", 1, 1, "abismo profundo y haz"),
            _verse("b", 1, 1, "sobre la haz del abismo"),
        ])
        engine = SearchEngine(index, default_limit=10)

        results, _ = engine.search("haz del abismo")

        assert [r.key for r in results] == ["b:1:1", "a:1:1"]
        assert results[0].score > results[1].score

    def test_short_query_gets_no_substring_bonus(self):
        """Test that queries under the minimum length skip the substring test."""
        index = build_index([_verse("a", 1, 1, "la paz sea")])
        engine = SearchEngine(index, min_substring_length=3)

        assert engine.search_simple("pa") == []

    def test_concept_expansion(self):
        """Test that expansion terms match verses lacking the literal token."""
        index = build_index([_verse("a", 1, 1, "en lugares de reposo")])
        engine = SearchEngine(index)

        results = engine.search_simple("paz")

        assert len(results) == 1
        assert results[0].score == 6.0

    def test_custom_expansions(self):
        """Test that a caller-supplied concept table is used."""
        index = build_index([_verse("a", 1, 1, "lumbrera grande")])
        engine = SearchEngine(index, expansions={"luz": ("lumbrera",)})

        assert len(engine.search_simple("luz")) == 1


class TestReferences:
    """Tests for direct reference queries on the sample index."""

    @pytest.mark.parametrize("query,key", [
        ("genesis 1:1", "gen:1:1"),
        ("Gn 1.1", "gen:1:1"),
        ("Juan 3:16", "juan:3:16"),
        ("1 corintios 13:4", "1co:13:4"),
    ])
    def test_reference_ranks_first(self, sample_engine, query, key):
        """Test that the referenced verse is first with the reference bonus."""
        results, stats = sample_engine.search(query)

        assert results[0].key == key
        assert results[0].score >= REFERENCE_BONUS
        assert stats.reference_key == key

    def test_missing_verse_reference(self, sample_engine):
        """Test that a reference to an absent verse awards no bonus."""
        results, stats = sample_engine.search("genesis 99:1")

        assert stats.reference_key == "gen:99:1"
        assert all(r.score < REFERENCE_BONUS for r in results)

    def test_repeated_reference_scored_once(self):
        """Test that a verse listed twice yields a single reference hit."""
        index = build_index([
            _verse("gen", 1, 1, "en el principio"),
            _verse("gen", 1, 1, "en el principio"),
            _verse("gen", 1, 2, "la tierra"),
        ])
        engine = SearchEngine(index)

        results = engine.search_simple("gen 1:1")
        hits = [r for r in results if r.score >= REFERENCE_BONUS]

        assert [r.key for r in hits] == ["gen:1:1"]
        assert len({r.key for r in results}) == len(results)


class TestRanking:
    """Tests for ordering, limits and result identity."""

    def test_ties_keep_corpus_order(self):
        """Test that equal scores keep their corpus order."""
        verses = [
            _verse("c", 1, 1, "la luz"),
            _verse("a", 1, 1, "la luz"),
            _verse("b", 1, 1, "la luz"),
        ]
        engine = SearchEngine(build_index(verses), default_limit=10)

        results = engine.search_simple("luz")

        assert [r.key for r in results] == ["c:1:1", "a:1:1", "b:1:1"]

    def test_scores_non_increasing(self, sample_engine):
        """Test that results are sorted by descending score."""
        results = sample_engine.search_simple("dios luz tinieblas")
        scores = [r.score for r in results]

        assert scores == sorted(scores, reverse=True)
        assert all(score > 0 for score in scores)

    def test_keys_unique(self, sample_engine):
        """Test that a verse appears at most once."""
        results = sample_engine.search_simple("dios")
        keys = [r.key for r in results]

        assert len(keys) == len(set(keys))

    def test_limit(self, sample_engine):
        """Test that limit truncates but total_results counts every match."""
        results, stats = sample_engine.search(SearchQuery(text="dios", limit=2))

        assert len(results) == 2
        assert stats.total_results > 2

    def test_invalid_limit_uses_default(self, sample_index):
        """Test that zero, negative and missing limits fall back to the default."""
        engine = SearchEngine(sample_index, default_limit=3)

        assert len(engine.search_simple("dios", limit=0)) == 3
        assert len(engine.search_simple("dios", limit=-4)) == 3
        assert len(engine.search_simple("dios")) == 3

    def test_large_limit_honoured(self):
        """Test that a positive limit above the default is never cut short."""
        verses = [_verse("b" + str(n), 1, 1, "la luz") for n in range(300)]
        engine = SearchEngine(build_index(verses))

        results, stats = engine.search(SearchQuery(text="luz", limit=250))

        assert len(results) == 250
        assert stats.total_results == 300
        assert len(engine.search_simple("luz", limit=1000)) == 300
        assert len(engine.search_simple("luz")) == 40

    def test_results_carry_verse(self, sample_engine):
        """Test that ranked results expose the verse and reference."""
        result = sample_engine.search_simple("Juan 3:16")[0]

        assert result.verse.book == "Juan"
        assert result.reference == "Juan 3:16"


class TestNoRaise:
    """Tests for inputs that must yield empty results."""

    @pytest.mark.parametrize("query", ["", "   ", None])
    def test_empty_query(self, sample_engine, query):
        """Test that blank queries return no results."""
        results, stats = sample_engine.search(query)

        assert results == []
        assert stats.total_results == 0

    def test_no_match(self, sample_engine):
        """Test that an unmatched query returns an empty list."""
        assert sample_engine.search_simple("zzzzqqq") == []

    def test_empty_index(self):
        """Test that an empty index returns no results."""
        engine = SearchEngine(build_index([]))

        assert engine.search_simple("dios") == []


class TestSearchFunction:
    """Tests for the module-level search function."""

    def test_search_without_index(self):
        """Test that a missing index yields no results."""
        assert search("dios", None) == []

    def test_search_with_index(self, juan_corpus):
        """Test the one-call form."""
        results = search("principio dios", build_index(juan_corpus), limit=1)

        assert [r.key for r in results] == ["juan:1:2"]

    def test_search_ignores_cached_config(
        self, temp_config, reset_config_singleton, reset_logger_singleton
    ):
        """Test that the one-call form uses built-in defaults unless given a config."""
        from versesearch.core.config_loader import get_config

        config = get_config(temp_config)
        assert config.search.default_limit == 20
        index = build_index([_verse("b" + str(n), 1, 1, "la luz") for n in range(50)])

        assert len(search("luz", index)) == 40
        assert len(search("luz", index, config=config)) == 20
        assert len(search("luz", index, limit=45, config=config)) == 45

    def test_describe_search_method(self):
        """Test that the method description is a single non-empty line."""
        description = describe_search_method()

        assert description
        assert "\n" not in description
