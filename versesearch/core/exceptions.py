"""
Custom exception hierarchy for the Verse Search Engine.

Provides specific exception types for different failure modes:
configuration errors, corpus loading failures, annotation storage
problems, and search problems.
"""


class VerseSearchError(Exception):
    """Base exception for all Verse Search Engine errors."""

    def __init__(self, message: str, details: dict = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(VerseSearchError):
    """Raised when configuration is invalid or missing."""
    pass


class CorpusError(VerseSearchError):
    """Base class for corpus loading and normalization failures."""
    pass


class CorpusFetchError(CorpusError):
    """Raised when the corpus cannot be fetched from its source."""

    def __init__(
        self,
        message: str,
        url: str = None,
        status_code: int = None,
        details: dict = None
    ):
        """
        Initialize fetch error.

        Args:
            message: Error description.
            url: The corpus URL that failed.
            status_code: HTTP status code, if a response was received.
            details: Additional context.
        """
        super().__init__(message, details)
        self.url = url
        self.status_code = status_code


class CorpusShapeError(CorpusError):
    """Raised when raw corpus data has neither verses nor books."""
    pass


class StorageError(VerseSearchError):
    """Raised when annotation storage operations fail."""
    pass


class StorageParseError(StorageError):
    """Raised when a stored annotation value is not valid JSON."""

    def __init__(self, message: str, key: str = None, details: dict = None):
        """
        Initialize storage parse error.

        Args:
            message: Error description.
            key: Storage key holding the corrupt value.
            details: Additional context.
        """
        super().__init__(message, details)
        self.key = key


if __name__ == "__main__":
    try:
        raise ConfigurationError("Config file not found", {"path": "/config/config.json"})
    except VerseSearchError as e:
        print(f"Caught: {e.__class__.__name__}: {e.message}")
        print(f"Details: {e.details}")

    try:
        raise CorpusFetchError("HTTP 404", url="/bible/hebrew_es.json", status_code=404)
    except CorpusError as e:
        print(f"Fetch failed for: {e.url} ({e.status_code})")
