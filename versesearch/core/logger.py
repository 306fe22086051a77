"""
Centralized logging setup for the Verse Search Engine.

Log records go to stderr (and optionally a rotating file) so the search
and daily-verse scripts keep stdout for their results. Initialization is
guarded so repeated calls are no-ops.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterable


_logger_initialized = False
_installed_handlers = []

LOG_FILENAME = "verse_search.log"

# Client libraries that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore")


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    logs_directory: Path = None,
    max_file_size_mb: int = 10,
    backup_count: int = 5,
    quiet_loggers: Iterable[str] = NOISY_LOGGERS,
    force: bool = False
) -> None:
    """
    Initialize the root logger with a stderr handler and optional file handler.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Format string for log messages.
        logs_directory: Directory for verse_search.log. If None, file logging disabled.
        max_file_size_mb: Maximum size of each log file in MB.
        backup_count: Number of rotated files to keep.
        quiet_loggers: Library loggers raised to WARNING.
        force: Replace the handlers of an earlier setup instead of keeping them.
    """
    global _logger_initialized

    if _logger_initialized and not force:
        return

    root_logger = logging.getLogger()
    while _installed_handlers:
        handler = _installed_handlers.pop()
        root_logger.removeHandler(handler)
        handler.close()

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)
    _installed_handlers.append(console_handler)

    if logs_directory:
        logs_directory = Path(logs_directory)
        logs_directory.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            logs_directory / LOG_FILENAME,
            maxBytes=max_file_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
        _installed_handlers.append(file_handler)

    for name in quiet_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)

    _logger_initialized = True


def setup_logging_from_config(config) -> None:
    """
    Initialize logging from a loaded Config.

    Scripts call this right after choosing their config file so the
    logging section of that file replaces whatever setup an earlier
    get_logger call made from the first config found.

    Args:
        config: Config instance with logging and paths sections.
    """
    setup_logging(
        log_level=config.logging.level,
        log_format=config.logging.format,
        logs_directory=config.paths.logs_directory,
        max_file_size_mb=config.logging.max_file_size_mb,
        backup_count=config.logging.backup_count,
        force=True
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a named logger, initializing logging on first use.

    Falls back to stderr-only defaults when no config file can be found.
    """
    if not _logger_initialized:
        from .config_loader import get_config
        from .exceptions import ConfigurationError

        try:
            setup_logging_from_config(get_config())
        except ConfigurationError:
            setup_logging()

    return logging.getLogger(name)


if __name__ == "__main__":
    setup_logging(log_level="DEBUG")

    get_logger("versesearch.corpus").info("Loaded corpus 'rv1909-sample': 5 books, 20 verses")
    get_logger("versesearch.indexer").debug("Progress: 500/31102 verses indexed")
    get_logger("versesearch.database").warning("Ignoring corrupt annotation data at crfm:bible:notes:u1")
