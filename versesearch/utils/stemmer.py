"""
Suffix-stripping stemmer behind a substitutable interface.

The index builder and query engine depend only on the Stemmer protocol,
so a stricter linguistic stemmer can replace SuffixStemmer without
touching either of them.
"""

from typing import Iterable, Protocol, Tuple


# Longest suffixes first; SuffixStemmer rejects any other ordering.
DEFAULT_SUFFIXES: Tuple[str, ...] = (
    "amientos", "imientos",
    "imiento", "amiento", "aciones", "iciones",
    "adoras", "adores", "amente", "idades", "ancias",
    "acion", "icion", "mente", "adora", "anzas", "antes", "ancia", "iendo",
    "ador", "idad", "anza", "ante", "ando", "ados", "adas",
    "ado", "ada",
    "ar", "er", "ir", "es", "os", "as",
    "s",
)

# A suffix is only stripped when more than this many characters remain.
MIN_STEM_MARGIN = 2


class Stemmer(Protocol):
    """Anything that reduces a normalized token toward a root form."""

    def stem(self, token: str) -> str:
        ...


class SuffixStemmer:
    """
    Heuristic stemmer that strips the first matching suffix.

    Suffixes are tried in order, so the list must be sorted by descending
    length: otherwise a short suffix such as "s" would shadow "aciones".
    """

    def __init__(self, suffixes: Iterable[str] = DEFAULT_SUFFIXES):
        """
        Initialize the stemmer.

        Args:
            suffixes: Suffixes sorted by descending length.

        Raises:
            ValueError: If the suffixes are empty-stringed or not sorted
                        longest-first.
        """
        self.suffixes: Tuple[str, ...] = tuple(suffixes)

        if any(not suffix for suffix in self.suffixes):
            raise ValueError("Suffix list contains an empty suffix")

        for previous, current in zip(self.suffixes, self.suffixes[1:]):
            if len(current) > len(previous):
                raise ValueError(
                    f"Suffix list must be sorted by descending length: "
                    f"'{current}' follows shorter '{previous}'"
                )

    def stem(self, token: str) -> str:
        """
        Strip the longest matching suffix if enough of the token remains.

        Args:
            token: A normalized token.

        Returns:
            The stem, or the token unchanged.
        """
        for suffix in self.suffixes:
            if len(token) > len(suffix) + MIN_STEM_MARGIN and token.endswith(suffix):
                return token[:-len(suffix)]
        return token


if __name__ == "__main__":
    stemmer = SuffixStemmer()

    for word in ["salvaciones", "principio", "pastoreara", "mandamientos", "dios", "luz"]:
        print(f"  {word:<14} -> {stemmer.stem(word)}")
