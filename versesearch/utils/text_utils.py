"""
Text utility functions for the Verse Search Engine.

Provides accent-folding normalization, stopword-aware tokenization,
bigram construction and slug generation shared by the corpus loader,
the index builder and the query engine. Every function here is pure.
"""

import re
import unicodedata
from typing import FrozenSet, List


STOP_WORDS: FrozenSet[str] = frozenset({
    "el", "la", "los", "las", "un", "una", "unos", "unas", "de", "del", "al",
    "y", "o", "u", "que", "en", "por", "para", "con", "sin", "sobre", "entre",
    "a", "e", "es", "son", "fue", "era", "ser", "se", "su", "sus", "tu", "tus",
    "mi", "mis", "te", "ti", "lo", "le", "les", "yo", "nos", "vos", "ellos",
    "ellas", "este", "esta", "estos", "estas", "ese", "esa", "eses", "esas",
    "ahi", "alli", "aqui", "asi", "mas", "menos", "muy", "tambien",
})

_DISALLOWED_CHARS = re.compile(r"[^a-z0-9\s:.-]")
_WHITESPACE = re.compile(r"\s+")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def normalize_text(text: str) -> str:
    """
    Fold text into its canonical searchable form.

    Lowercases, decomposes to NFD, drops combining marks, replaces every
    character outside ``[a-z0-9 :.-]`` with a space and collapses whitespace.

    Args:
        text: Raw text (None is treated as empty).

    Returns:
        Normalized text string.
    """
    if not text:
        return ""

    text = unicodedata.normalize("NFD", str(text).lower())
    text = "".join(char for char in text if not unicodedata.combining(char))
    text = _DISALLOWED_CHARS.sub(" ", text)

    return _WHITESPACE.sub(" ", text).strip()


def tokenize(text: str, stop_words: FrozenSet[str] = STOP_WORDS) -> List[str]:
    """
    Split text into normalized tokens, dropping stopwords.

    Args:
        text: Raw text to tokenize.
        stop_words: Function words to discard.

    Returns:
        List of tokens in text order (duplicates kept).
    """
    normalized = normalize_text(text)

    return [
        token for token in normalized.split(" ")
        if token and token not in stop_words
    ]


def build_bigrams(tokens: List[str]) -> List[str]:
    """Join each pair of adjacent tokens with a single space."""
    return [f"{first} {second}" for first, second in zip(tokens, tokens[1:])]


def to_slug(text: str, max_length: int = 12) -> str:
    """
    Build a compact identifier from a display name.

    Args:
        text: Display name such as a book title.
        max_length: Maximum slug length.

    Returns:
        Lowercase alphanumeric slug, or "bk" when nothing remains.
    """
    slug = _NON_ALNUM.sub("", normalize_text(text))[:max_length]
    return slug or "bk"


if __name__ == "__main__":
    sample = "En el principio creó Dios los cielos y la tierra. (Génesis 1:1)"

    print("=== normalize_text ===")
    print(repr(normalize_text(sample)))

    print("\n=== tokenize ===")
    tokens = tokenize(sample)
    print(tokens)

    print("\n=== build_bigrams ===")
    print(build_bigrams(tokens))

    print("\n=== to_slug ===")
    print(to_slug("1 Reyes"), to_slug("Cantar de los Cantares"))
