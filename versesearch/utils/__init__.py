"""
Utility module providing shared helper functions.

Contains the text normalization, tokenization and stemming pipeline
used across the application. Depends only on the core module.
"""

from .text_utils import (
    STOP_WORDS,
    normalize_text,
    tokenize,
    build_bigrams,
    to_slug
)
from .stemmer import Stemmer, SuffixStemmer, DEFAULT_SUFFIXES

__all__ = [
    "STOP_WORDS",
    "normalize_text",
    "tokenize",
    "build_bigrams",
    "to_slug",
    "Stemmer",
    "SuffixStemmer",
    "DEFAULT_SUFFIXES"
]
