"""
CLI script to load a corpus, build the index and run searches.

Usage:
    python scripts/run_search.py "principio dios"        # Configured corpus
    python scripts/run_search.py "Gn 1.1" --limit 5
    python scripts/run_search.py --file corpus.json "paz"
    python scripts/run_search.py --url https://example.org/bible/rv.json "amor"
    python scripts/run_search.py                          # Interactive prompt
"""

import argparse
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from versesearch.core import Config, get_config, get_logger, ConfigurationError
from versesearch.core.logger import setup_logging_from_config
from versesearch.core.config_loader import reload_config
from versesearch.corpus import load_corpus, load_corpus_file
from versesearch.indexer import IndexBuilder
from versesearch.search import SearchEngine, SearchQuery, describe_search_method


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Search a verse corpus with ranked multi-signal matching"
    )

    parser.add_argument(
        "query",
        nargs="*",
        help="Search text; omit for an interactive prompt"
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--url",
        type=str,
        help="Corpus JSON URL (overrides config corpus.url)"
    )
    source.add_argument(
        "--file",
        type=str,
        help="Local corpus JSON file"
    )

    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Maximum number of results"
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to custom config.json file"
    )

    return parser.parse_args()


def print_results(engine: SearchEngine, text: str, limit: int) -> None:
    """Run one query and print its ranked results."""
    results, stats = engine.search(SearchQuery(text=text, limit=limit))

    print(f"\n'{stats.query}': {stats.total_results} matches in {stats.execution_time_ms}ms")
    if stats.reference_key:
        print(f"Reference: {stats.reference_key}")

    for rank, result in enumerate(results, start=1):
        print(f"{rank:3d}. [{result.score:5.0f}] {result.reference:<20} {result.verse.text[:70]}")


def main():
    """Main entry point for the search CLI."""
    args = parse_args()

    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: Config file not found: {config_path}")
            sys.exit(1)
        reload_config(config_path)

    try:
        config = get_config()
    except ConfigurationError as e:
        print(f"Configuration error: {e.message} (using defaults)")
        config = Config.default()

    setup_logging_from_config(config)
    logger = get_logger(__name__)

    if args.file:
        corpus = load_corpus_file(args.file, sample_path=config.corpus.sample_path)
    else:
        corpus = asyncio.run(load_corpus(args.url, config=config))

    builder = IndexBuilder()
    index = builder.build(corpus)
    engine = SearchEngine(index, config=config)

    print("=" * 60)
    print("Verse Search Engine")
    print("=" * 60)
    print(f"Corpus version:    {corpus.version}")
    print(f"Books:             {len(corpus.books):,}")
    print(f"Verses indexed:    {builder.stats.verses_indexed:,}")
    print(f"Index build time:  {builder.stats.elapsed_ms}ms")
    print(describe_search_method())
    print("=" * 60)

    if corpus.is_sample:
        logger.warning("Live corpus unavailable; searching the bundled sample")
        print("WARNING: live corpus failed to load, showing the sample dataset.")

    if args.query:
        print_results(engine, " ".join(args.query), args.limit)
        sys.exit(0)

    try:
        while True:
            text = input("\nsearch> ").strip()
            if text in ("", "quit", "exit"):
                break
            print_results(engine, text, args.limit)
    except (EOFError, KeyboardInterrupt):
        print()

    sys.exit(0)


if __name__ == "__main__":
    main()
