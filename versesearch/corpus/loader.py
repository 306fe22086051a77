"""
Corpus loading from a remote JSON asset, a local file or the bundled sample.

Every failure path (network error, non-2xx response, undecodable body,
unrecognised shape) resolves to the bundled sample corpus with
``is_sample=True`` instead of raising. That flag is the only signal a
caller gets that live data failed to load.
"""

import dataclasses
import json
from pathlib import Path
from typing import Any, Optional, Union

import httpx

from ..core import Config, get_logger, CorpusError, CorpusFetchError
from ..core.config_loader import DEFAULT_SAMPLE_PATH
from .models import Corpus
from .normalizer import normalize_corpus

logger = get_logger(__name__)


def load_sample_corpus(sample_path: Union[str, Path] = None) -> Corpus:
    """
    Load the bundled sample corpus.

    Args:
        sample_path: Override for the sample JSON location.

    Returns:
        Normalized Corpus flagged as sample.
    """
    path = Path(sample_path or DEFAULT_SAMPLE_PATH)

    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)

    corpus = normalize_corpus(raw)
    return dataclasses.replace(corpus, is_sample=True)


def normalize_or_sample(raw: Any, sample_path: Union[str, Path] = None) -> Corpus:
    """
    Normalize raw data, falling back to the sample on a bad shape.

    Args:
        raw: Parsed JSON document.
        sample_path: Override for the sample JSON location.

    Returns:
        Canonical Corpus; the sample when raw is unusable.
    """
    try:
        return normalize_corpus(raw)
    except CorpusError as e:
        logger.warning(f"Corpus data rejected ({e.message}), using sample dataset")
        return load_sample_corpus(sample_path)


async def fetch_corpus_json(
    url: str,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = 30.0
) -> Any:
    """
    Fetch and decode a corpus JSON document.

    Args:
        url: Location of the corpus asset.
        client: Optional shared client; created and closed here when None.
        timeout: Request timeout in seconds (ignored for a supplied client).

    Returns:
        Decoded JSON.

    Raises:
        CorpusFetchError: On network failure, non-2xx status or invalid JSON.
    """
    if client is None:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(timeout, connect=min(timeout, 10.0)),
            follow_redirects=True
        ) as own_client:
            return await fetch_corpus_json(url, client=own_client)

    try:
        resp = await client.get(url, headers={"Cache-Control": "no-store"})
        resp.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise CorpusFetchError(
            f"Corpus request returned HTTP {e.response.status_code}",
            url=url,
            status_code=e.response.status_code
        )
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise CorpusFetchError(f"Corpus request failed: {e}", url=url)

    try:
        return resp.json()
    except ValueError as e:
        raise CorpusFetchError(
            f"Corpus response is not valid JSON: {e}",
            url=url,
            status_code=resp.status_code
        )


async def load_corpus(
    url: str = None,
    *,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = None,
    sample_path: Union[str, Path] = None,
    config: Config = None
) -> Corpus:
    """
    Load and normalize the corpus, degrading to the bundled sample.

    Args:
        url: Corpus asset URL. Defaults to config corpus.url;
             an empty URL means the sample is used directly.
        client: Optional httpx.AsyncClient (tests inject a MockTransport).
        timeout: Request timeout in seconds. Defaults to config.
        sample_path: Override for the sample JSON location.
        config: Settings for unspecified values. Defaults to
                Config.default(), never the cached config file.

    Returns:
        Canonical Corpus. Never raises for fetch or shape failures.
    """
    config = config or Config.default()
    url = url if url is not None else config.corpus.url
    timeout = timeout if timeout is not None else config.corpus.timeout_seconds
    sample_path = sample_path or config.corpus.sample_path

    if not url:
        logger.info("No corpus URL configured, using sample dataset")
        return load_sample_corpus(sample_path)

    try:
        raw = await fetch_corpus_json(url, client=client, timeout=timeout)
    except CorpusFetchError as e:
        logger.warning(f"Corpus load failed for {url}: {e.message}. Using sample dataset.")
        return load_sample_corpus(sample_path)

    corpus = normalize_or_sample(raw, sample_path)
    logger.info(
        f"Loaded corpus '{corpus.version}' from {url}: "
        f"{len(corpus.books)} books, {len(corpus.verses)} verses"
    )
    return corpus


def load_corpus_file(path: Union[str, Path], sample_path: Union[str, Path] = None) -> Corpus:
    """
    Load and normalize a corpus from a local JSON file.

    Args:
        path: JSON file to read.
        sample_path: Override for the sample JSON location.

    Returns:
        Canonical Corpus; the sample when the file is unreadable.
    """
    path = Path(path)

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Corpus file {path} unreadable ({e}). Using sample dataset.")
        return load_sample_corpus(sample_path)

    return normalize_or_sample(raw, sample_path)


if __name__ == "__main__":
    import asyncio
    import sys

    target = sys.argv[1] if len(sys.argv) > 1 else ""
    corpus = asyncio.run(load_corpus(target))

    print(f"Version:   {corpus.version}")
    print(f"Sample:    {corpus.is_sample}")
    print(f"Books:     {[book.name for book in corpus.books]}")
    print(f"Verses:    {len(corpus.verses)}")
