"""
Corpus module turning raw verse JSON into the canonical corpus.

Provides the data models, the alias-driven normalizer and the
loader with its sample-corpus fallback.
"""

from .models import Verse, Book, Corpus
from .normalizer import CorpusNormalizer, normalize_corpus
from .loader import (
    load_corpus,
    load_corpus_file,
    load_sample_corpus,
    normalize_or_sample,
    fetch_corpus_json
)

__all__ = [
    "Verse",
    "Book",
    "Corpus",
    "CorpusNormalizer",
    "normalize_corpus",
    "load_corpus",
    "load_corpus_file",
    "load_sample_corpus",
    "normalize_or_sample",
    "fetch_corpus_json"
]
