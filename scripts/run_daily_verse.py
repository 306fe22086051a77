"""
CLI script printing a user's next unseen verse.

Usage:
    python scripts/run_daily_verse.py --user alice
    python scripts/run_daily_verse.py --user alice --file corpus.json
    python scripts/run_daily_verse.py --user alice --reset
"""

import argparse
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from versesearch.core import Config, get_config, ConfigurationError
from versesearch.core.config_loader import reload_config
from versesearch.core.logger import setup_logging_from_config
from versesearch.corpus import load_corpus, load_corpus_file
from versesearch.database import AnnotationStore, KeyValueRepository, SEEN_ITEMS


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Show the next verse a user has not seen in the current cycle"
    )

    parser.add_argument("--user", required=True, help="User identifier")
    parser.add_argument("--file", type=str, help="Local corpus JSON file")
    parser.add_argument("--config", type=str, help="Path to custom config.json file")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Forget the user's seen-list before picking"
    )

    return parser.parse_args()


def main():
    """Main entry point for the daily verse CLI."""
    args = parse_args()

    if args.config:
        reload_config(Path(args.config))

    try:
        config = get_config()
    except ConfigurationError as e:
        print(f"Configuration error: {e.message} (using defaults)")
        config = Config.default()

    setup_logging_from_config(config)

    if args.file:
        corpus = load_corpus_file(args.file, sample_path=config.corpus.sample_path)
    else:
        corpus = asyncio.run(load_corpus(config=config))

    store = AnnotationStore(
        storage=KeyValueRepository(config.paths.database_path),
        prefix=config.storage.prefix
    )

    if args.reset:
        store.delete(args.user, SEEN_ITEMS)

    verse = store.pick_next_unseen(args.user, corpus.verses)
    if verse is None:
        print("No verses available.")
        sys.exit(1)

    seen = store.load_seen(args.user)
    print(f"{verse.reference}")
    print(f"  {verse.text}")
    print(f"\n({len(seen)}/{len(corpus.verses)} seen this cycle)")


if __name__ == "__main__":
    main()
