"""
Tests for corpus loading.

Network access is replaced by httpx.MockTransport so every failure path
can be exercised deterministically.
"""

import json
from pathlib import Path

import httpx
import pytest

from versesearch.core.config_loader import get_config
from versesearch.core.exceptions import CorpusFetchError
from versesearch.corpus.loader import (
    fetch_corpus_json,
    load_corpus,
    load_corpus_file,
    load_sample_corpus,
    normalize_or_sample,
)

CORPUS_URL = "https://example.test/bible/rv1909.json"


def _client(handler) -> httpx.AsyncClient:
    """Build an AsyncClient whose requests are answered by handler."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestSampleCorpus:
    """Tests for the bundled sample."""

    def test_sample_is_flagged(self, sample_corpus):
        """Test that the sample corpus always carries is_sample."""
        assert sample_corpus.is_sample is True
        assert sample_corpus.version == "rv1909-sample"

    def test_sample_contents(self, sample_corpus):
        """Test that the sample covers several books in canonical order."""
        assert [book.id for book in sample_corpus.books] == ["gen", "sal", "prov", "juan", "1co"]
        assert len(sample_corpus.verses) == 20
        assert sample_corpus.chapters_for("juan") == [1, 3, 14]

    def test_sample_flag_forced(self, temp_dir: Path, juan_raw):
        """Test that a custom sample file is flagged even without isSample."""
        path = temp_dir / "sample.json"
        path.write_text(json.dumps(juan_raw), encoding="utf-8")

        corpus = load_sample_corpus(path)

        assert corpus.is_sample is True
        assert len(corpus.verses) == 3


class TestNormalizeOrSample:
    """Tests for the shape-error fallback."""

    def test_good_data_normalized(self, juan_raw):
        """Test that usable data is not replaced."""
        corpus = normalize_or_sample(juan_raw)

        assert corpus.is_sample is False
        assert corpus.version == "juan-test"

    def test_bad_shape_falls_back(self):
        """Test that an unrecognised shape yields the sample."""
        corpus = normalize_or_sample({"chapters": []})

        assert corpus.is_sample is True


class TestFetchCorpusJson:
    """Tests for the raw HTTP fetch."""

    @pytest.mark.asyncio
    async def test_returns_decoded_json(self, juan_raw):
        """Test that a 200 response is decoded."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["cache"] = request.headers.get("cache-control")
            return httpx.Response(200, json=juan_raw)

        async with _client(handler) as client:
            data = await fetch_corpus_json(CORPUS_URL, client=client)

        assert data == juan_raw
        assert seen["cache"] == "no-store"

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        """Test that a non-2xx response raises with the status code."""
        async with _client(lambda request: httpx.Response(404)) as client:
            with pytest.raises(CorpusFetchError) as exc_info:
                await fetch_corpus_json(CORPUS_URL, client=client)

        assert exc_info.value.status_code == 404
        assert exc_info.value.url == CORPUS_URL

    @pytest.mark.asyncio
    async def test_connection_error(self):
        """Test that transport failures raise CorpusFetchError."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(CorpusFetchError) as exc_info:
                await fetch_corpus_json(CORPUS_URL, client=client)

        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        """Test that an undecodable body raises CorpusFetchError."""
        async with _client(lambda request: httpx.Response(200, text="<html>")) as client:
            with pytest.raises(CorpusFetchError):
                await fetch_corpus_json(CORPUS_URL, client=client)


class TestLoadCorpus:
    """Tests for load_corpus degradation to the sample."""

    @pytest.mark.asyncio
    async def test_live_corpus(self, juan_raw):
        """Test that a good response yields the live corpus."""
        async with _client(lambda request: httpx.Response(200, json=juan_raw)) as client:
            corpus = await load_corpus(CORPUS_URL, client=client)

        assert corpus.is_sample is False
        assert len(corpus.verses) == 3

    @pytest.mark.asyncio
    @pytest.mark.parametrize("response", [
        httpx.Response(500),
        httpx.Response(404),
        httpx.Response(200, text="not json"),
        httpx.Response(200, json={"unexpected": True}),
        httpx.Response(200, json=[1, 2, 3]),
    ])
    async def test_failures_fall_back_to_sample(self, response):
        """Test that every failure mode returns the sample instead of raising."""
        async with _client(lambda request: response) as client:
            corpus = await load_corpus(CORPUS_URL, client=client)

        assert corpus.is_sample is True
        assert len(corpus.verses) > 0

    @pytest.mark.asyncio
    async def test_connection_failure_falls_back(self):
        """Test that a network failure returns the sample."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        async with _client(handler) as client:
            corpus = await load_corpus(CORPUS_URL, client=client)

        assert corpus.is_sample is True

    @pytest.mark.asyncio
    async def test_empty_url_uses_sample(self):
        """Test that no URL means the sample without any request."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        async with _client(handler) as client:
            corpus = await load_corpus("", client=client)

        assert corpus.is_sample is True

    @pytest.mark.asyncio
    async def test_url_comes_from_given_config(
        self, temp_config: Path, reset_config_singleton, juan_raw
    ):
        """Test that the corpus URL is read from the config passed in."""
        config = get_config(temp_config)
        requested = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(str(request.url))
            return httpx.Response(200, json=juan_raw)

        async with _client(handler) as client:
            corpus = await load_corpus(client=client, config=config)

        assert requested == [config.corpus.url]
        assert corpus.is_sample is False

    @pytest.mark.asyncio
    async def test_cached_config_not_consulted(self, temp_config: Path, reset_config_singleton):
        """Test that omitting config uses built-in defaults, not the loaded file."""
        get_config(temp_config)

        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        async with _client(handler) as client:
            corpus = await load_corpus(client=client)

        assert corpus.is_sample is True


class TestLoadCorpusFile:
    """Tests for loading from a local file."""

    def test_reads_file(self, temp_dir: Path, nested_raw):
        """Test that a valid file is normalized."""
        path = temp_dir / "corpus.json"
        path.write_text(json.dumps(nested_raw), encoding="utf-8")

        corpus = load_corpus_file(path)

        assert corpus.version == "test-nested"
        assert corpus.is_sample is False

    def test_missing_file_falls_back(self, temp_dir: Path):
        """Test that an unreadable file yields the sample."""
        corpus = load_corpus_file(temp_dir / "missing.json")

        assert corpus.is_sample is True

    def test_invalid_json_falls_back(self, temp_dir: Path):
        """Test that a malformed file yields the sample."""
        path = temp_dir / "broken.json"
        path.write_text("{ not json", encoding="utf-8")

        assert load_corpus_file(path).is_sample is True
