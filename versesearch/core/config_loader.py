"""
Configuration loader for the Verse Search Engine.

Loads settings from config.json and provides typed access via dataclasses.
Supports singleton pattern for global access and runtime reload capability.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .exceptions import ConfigurationError


PACKAGE_ROOT = Path(__file__).resolve().parent.parent

DEFAULT_SAMPLE_PATH = PACKAGE_ROOT / "corpus" / "data" / "sample_corpus.json"


@dataclass
class PathsConfig:
    """Configuration for file system paths."""
    data_directory: Path
    database_path: Path
    logs_directory: Path


@dataclass
class CorpusConfig:
    """Configuration for corpus loading."""
    url: str
    timeout_seconds: float
    sample_path: Path


@dataclass
class SearchConfig:
    """Configuration for search functionality."""
    default_limit: int
    min_substring_length: int


@dataclass
class StorageConfig:
    """Configuration for the local annotation store."""
    prefix: str


@dataclass
class LoggingConfig:
    """Configuration for logging behavior."""
    level: str
    format: str
    max_file_size_mb: int
    backup_count: int


@dataclass
class Config:
    """
    Main configuration container holding all config sections.

    Provides singleton access via get_config() function.
    """
    paths: PathsConfig
    corpus: CorpusConfig
    search: SearchConfig
    storage: StorageConfig
    logging: LoggingConfig
    project_root: Path = field(default_factory=Path)

    @classmethod
    def from_file(cls, config_path: Path) -> "Config":
        """
        Load configuration from a JSON file.

        Args:
            config_path: Path to the config.json file.

        Returns:
            Populated Config instance.

        Raises:
            ConfigurationError: If file is missing or invalid.
        """
        config_path = Path(config_path)

        if not config_path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {config_path}",
                {"path": str(config_path)}
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in config file: {e}",
                {"path": str(config_path)}
            )

        project_root = config_path.resolve().parent.parent

        return cls._parse_config(data, project_root)

    @classmethod
    def default(cls, project_root: Path = None) -> "Config":
        """Build a Config with every setting at its default value."""
        return cls._parse_config({}, project_root or Path.cwd())

    @classmethod
    def _parse_config(cls, data: dict, project_root: Path) -> "Config":
        """Parse raw config dict into typed Config object."""
        paths_data = data.get("paths", {})
        paths = PathsConfig(
            data_directory=cls._resolve_path(paths_data.get("data_directory", "data"), project_root),
            database_path=cls._resolve_path(paths_data.get("database_path", "output/annotations.db"), project_root),
            logs_directory=cls._resolve_path(paths_data.get("logs_directory", "output/logs"), project_root)
        )

        corpus_data = data.get("corpus", {})
        sample_path = corpus_data.get("sample_path")
        corpus = CorpusConfig(
            url=corpus_data.get("url", ""),
            timeout_seconds=float(corpus_data.get("timeout_seconds", 30.0)),
            sample_path=cls._resolve_path(sample_path, project_root) if sample_path else DEFAULT_SAMPLE_PATH
        )

        search_data = data.get("search", {})
        search = SearchConfig(
            default_limit=search_data.get("default_limit", 40),
            min_substring_length=search_data.get("min_substring_length", 3)
        )

        storage_data = data.get("storage", {})
        storage = StorageConfig(
            prefix=storage_data.get("prefix", "crfm:bible")
        )

        log_data = data.get("logging", {})
        logging_cfg = LoggingConfig(
            level=log_data.get("level", "INFO"),
            format=log_data.get("format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
            max_file_size_mb=log_data.get("max_file_size_mb", 10),
            backup_count=log_data.get("backup_count", 5)
        )

        return cls(
            paths=paths,
            corpus=corpus,
            search=search,
            storage=storage,
            logging=logging_cfg,
            project_root=project_root
        )

    @staticmethod
    def _resolve_path(path_str: str, project_root: Path) -> Path:
        """Resolve a path string, making relative paths absolute."""
        path = Path(path_str)
        if path.is_absolute():
            return path
        return project_root / path


_config_instance: Optional[Config] = None


def get_config(config_path: Path = None) -> Config:
    """
    Get the singleton Config instance.

    Args:
        config_path: Optional path to config file. If not provided,
                    searches upward from current directory.

    Returns:
        The global Config instance.

    Raises:
        ConfigurationError: If config cannot be loaded.
    """
    global _config_instance

    if _config_instance is None or config_path is not None:
        if config_path is None:
            config_path = _find_config_file()
        _config_instance = Config.from_file(config_path)

    return _config_instance


def get_config_or_default() -> Config:
    """
    Get the singleton Config, or defaults when no config file exists.

    Library entry points use this so they work without a project layout.
    """
    try:
        return get_config()
    except ConfigurationError:
        return Config.default()


def _find_config_file() -> Path:
    """Search upward from current directory to find config/config.json."""
    current = Path.cwd()

    for _ in range(10):
        config_path = current / "config" / "config.json"
        if config_path.exists():
            return config_path

        parent = current.parent
        if parent == current:
            break
        current = parent

    raise ConfigurationError(
        "Could not find config/config.json in current directory or parents"
    )


def reload_config(config_path: Path = None) -> Config:
    """
    Force reload of configuration.

    Args:
        config_path: Optional path to config file.

    Returns:
        Fresh Config instance.
    """
    global _config_instance
    _config_instance = None
    return get_config(config_path)


if __name__ == "__main__":
    try:
        config = get_config()
        print(f"Project root: {config.project_root}")
        print(f"Database path: {config.paths.database_path}")
        print(f"Corpus URL: {config.corpus.url or '(bundled sample)'}")
        print(f"Default limit: {config.search.default_limit}")
    except ConfigurationError as e:
        print(f"Config error: {e.message}")
