"""
Pytest fixtures and configuration for the test suite.

Provides temporary directories, raw corpus documents in both accepted
shapes, built indexes and in-memory annotation stores so tests are
isolated and never touch the network or real data directories.
"""

import json
import pytest
import tempfile
import shutil
from pathlib import Path
from typing import Generator

import sys
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    Create a temporary directory for test files.

    Yields:
        Path to temporary directory, cleaned up after test.
    """
    tmp = tempfile.mkdtemp(prefix="verse_search_test_")
    yield Path(tmp)
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def temp_config(temp_dir: Path) -> Generator[Path, None, None]:
    """
    Create a temporary config.json for testing.

    Args:
        temp_dir: Temporary directory fixture.

    Yields:
        Path to temporary config file.
    """
    config_dir = temp_dir / "config"
    config_dir.mkdir()

    output_dir = temp_dir / "output"
    logs_dir = output_dir / "logs"
    logs_dir.mkdir(parents=True)

    config_data = {
        "paths": {
            "data_directory": str(temp_dir / "data"),
            "database_path": str(output_dir / "test.db"),
            "logs_directory": str(logs_dir)
        },
        "corpus": {
            "url": "https://example.test/bible/test.json",
            "timeout_seconds": 5
        },
        "search": {
            "default_limit": 20,
            "min_substring_length": 3
        },
        "storage": {
            "prefix": "test:bible"
        },
        "logging": {
            "level": "DEBUG",
            "format": "%(levelname)s - %(message)s",
            "max_file_size_mb": 1,
            "backup_count": 1
        }
    }

    config_path = config_dir / "config.json"
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(config_data, f)

    yield config_path


@pytest.fixture
def reset_config_singleton():
    """
    Reset the config singleton between tests.

    This ensures each test gets a fresh config instance.
    """
    from versesearch.core import config_loader
    config_loader._config_instance = None
    yield
    config_loader._config_instance = None


@pytest.fixture
def reset_logger_singleton():
    """
    Reset the logger initialization flag between tests.
    """
    import logging
    from versesearch.core import logger
    logger._logger_initialized = False
    yield
    root_logger = logging.getLogger()
    while logger._installed_handlers:
        handler = logger._installed_handlers.pop()
        root_logger.removeHandler(handler)
        handler.close()
    logger._logger_initialized = False


@pytest.fixture
def flat_raw() -> dict:
    """Raw corpus in the flat shape, mixing field-name variants."""
    return {
        "version": "test-flat",
        "verses": [
            {"bookId": "gen", "book": "Génesis", "chapter": 1, "verse": 1,
             "text": "En el principio creó Dios los cielos y la tierra."},
            {"book_id": "gen", "book_name": "Genesis (alt)", "chapter_number": "1",
             "verse_number": "2", "content": "Y la tierra estaba desordenada y vacía"},
            {"book": "Éxodo", "chapter": 3, "verseIndex": 14,
             "text": "Y respondió Dios á Moisés: YO SOY EL QUE SOY."},
        ]
    }


@pytest.fixture
def nested_raw() -> dict:
    """Raw corpus in the nested shape, mixing field-name variants."""
    return {
        "version": "test-nested",
        "books": [
            {
                "code": "sal",
                "title": "Salmos",
                "canon_order": 19,
                "chapters": [
                    {"chapter": 23, "verses": [
                        {"verse": 1, "text": "Jehová es mi pastor; nada me faltará."},
                        {"verse": 2, "text": "En lugares de delicados pastos me hará yacer"},
                    ]}
                ]
            },
            {
                "id": "gen",
                "name": "Génesis",
                "order": 1,
                "chapters": [
                    {"number": 1, "verses": [
                        {"verse": 1, "text": "En el principio creó Dios los cielos y la tierra."}
                    ]},
                    [
                        {"verse": 1, "text": "Fueron pues acabados los cielos y la tierra"}
                    ]
                ]
            }
        ]
    }


@pytest.fixture
def juan_raw() -> dict:
    """Three consecutive verses of one chapter."""
    return {
        "version": "juan-test",
        "verses": [
            {"bookId": "juan", "book": "Juan", "chapter": 1, "verse": 1,
             "text": "en el principio era el verbo"},
            {"bookId": "juan", "book": "Juan", "chapter": 1, "verse": 2,
             "text": "este estaba en el principio con dios"},
            {"bookId": "juan", "book": "Juan", "chapter": 1, "verse": 3,
             "text": "todas las cosas fueron hechas por el"},
        ]
    }


@pytest.fixture
def juan_corpus(juan_raw):
    """Normalized three-verse corpus."""
    from versesearch.corpus import normalize_corpus
    return normalize_corpus(juan_raw)


@pytest.fixture
def sample_corpus():
    """The bundled sample corpus."""
    from versesearch.corpus import load_sample_corpus
    return load_sample_corpus()


@pytest.fixture
def sample_index(sample_corpus):
    """Index built from the bundled sample corpus."""
    from versesearch.indexer import build_index
    return build_index(sample_corpus)


@pytest.fixture
def memory_store():
    """Annotation store over in-memory storage."""
    from versesearch.database import AnnotationStore, MemoryRepository
    return AnnotationStore(storage=MemoryRepository(), prefix="test:bible")


@pytest.fixture
def temp_database(temp_dir: Path) -> Path:
    """
    Create path for a temporary database.

    Args:
        temp_dir: Temporary directory fixture.

    Returns:
        Path where test database should be created.
    """
    return temp_dir / "test.db"
