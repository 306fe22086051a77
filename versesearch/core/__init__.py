"""
Core module providing foundational components.

This module contains the configuration loader, centralized logging setup,
and custom exception hierarchy. It has no internal dependencies.
"""

from .config_loader import get_config, get_config_or_default, Config
from .logger import get_logger
from .exceptions import (
    VerseSearchError,
    ConfigurationError,
    CorpusError,
    CorpusFetchError,
    CorpusShapeError,
    StorageError,
    StorageParseError
)

__all__ = [
    "get_config",
    "get_config_or_default",
    "Config",
    "get_logger",
    "VerseSearchError",
    "ConfigurationError",
    "CorpusError",
    "CorpusFetchError",
    "CorpusShapeError",
    "StorageError",
    "StorageParseError"
]
