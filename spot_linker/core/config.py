"""
Configuration management for spot-linker.

This module handles loading, validating, and providing access to the
application configuration stored in config.yaml.

The configuration file contains:
    - Matching limits (concurrent pipelines, batch size, candidates per query)
    - Search backend options (language, number of results requested)
    - Result cache lifetime
    - Directory for log files

Configuration File Location:
    By default config.yaml is looked up in the current working directory.
    If it is not there, built-in defaults are used. An explicit path
    (--config) must exist.

Example config.yaml:
    matching:
      concurrency: 2
      max_batch_size: 10
      max_candidates: 10

    search:
      language: "en"
      limit: 20

    cache:
      ttl_hours: 24

    output:
      log_directory: "~/.spot-linker"
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from spot_linker.core.exceptions import ConfigError


# Default configuration file name (looked up in current working directory)
CONFIG_FILENAME = "config.yaml"

# Defaults (mirror the values the matching core was tuned with)
DEFAULT_CONCURRENCY = 2
DEFAULT_MAX_BATCH_SIZE = 10
DEFAULT_MAX_CANDIDATES = 10
DEFAULT_SEARCH_LANGUAGE = "en"
DEFAULT_SEARCH_LIMIT = 20
DEFAULT_CACHE_TTL_HOURS = 24
DEFAULT_LOG_DIRECTORY = "~/.spot-linker"


@dataclass(frozen=True)
class MatchingConfig:
    """
    Matching engine limits.

    Attributes:
        concurrency: Maximum number of track pipelines running at once.
                     The search backend is unofficial and unauthenticated,
                     so this stays low. Default: 2.
        max_batch_size: Maximum tracks per evaluate_batch call.
                        Enforced by LinkService, not by the matcher. Default: 10.
        max_candidates: Raw search results considered per query. Default: 10.
    """
    concurrency: int
    max_batch_size: int
    max_candidates: int


@dataclass(frozen=True)
class SearchConfig:
    """
    YouTube search backend options.

    Attributes:
        language: Interface language passed to ytmusicapi. Default: "en".
        limit: Number of results requested per query. Default: 20.
    """
    language: str
    limit: int


@dataclass(frozen=True)
class CacheConfig:
    """
    Result cache configuration.

    Attributes:
        ttl_hours: Hours a cached MatchOutcome stays valid. Default: 24.
    """
    ttl_hours: float

    @property
    def ttl_seconds(self) -> float:
        """TTL converted to seconds for MatchCache."""
        return self.ttl_hours * 3600


@dataclass(frozen=True)
class OutputConfig:
    """
    Output configuration.

    Attributes:
        log_directory: Absolute path where log files are written.
                       ~ is expanded. Created on setup_logging().
    """
    log_directory: Path


@dataclass(frozen=True)
class Config:
    """
    Complete application configuration.

    This is the main configuration object that aggregates all configuration
    sections. It is created by load_config() and should be treated as
    immutable (frozen dataclass).

    Example:
        config = load_config()
        print(f"Concurrency: {config.matching.concurrency}")
        print(f"Logs in: {config.output.log_directory}")
    """
    matching: MatchingConfig
    search: SearchConfig
    cache: CacheConfig
    output: OutputConfig


def default_config() -> Config:
    """Return the configuration used when no config.yaml is present."""
    return _build_config({})


def load_config(config_path: Path | None = None) -> Config:
    """
    Load and validate configuration from config.yaml.

    Args:
        config_path: Optional explicit path to config file.
                     If None, looks for config.yaml in current working directory
                     and falls back to defaults when it is missing.

    Returns:
        Config: A frozen dataclass containing all configuration values.

    Raises:
        ConfigError: If an explicit config file is not found, the file has
                     invalid YAML syntax, is not a dictionary, or contains
                     invalid values.

    Example:
        try:
            config = load_config()
        except ConfigError as e:
            print(f"Configuration error: {e.message}")
            sys.exit(1)
    """
    explicit = config_path is not None
    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILENAME

    if not config_path.exists():
        if explicit:
            raise ConfigError(
                f"Configuration file not found: {config_path}",
                details={"file_path": str(config_path)}
            )
        return default_config()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            content = f.read()
    except IOError as e:
        raise ConfigError(
            f"Failed to read configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    try:
        raw_config = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML syntax in configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    # An empty file is a valid "use all defaults" config
    if raw_config is None:
        raw_config = {}

    if not isinstance(raw_config, dict):
        raise ConfigError(
            "Configuration file must contain a YAML dictionary",
            details={"file_path": str(config_path)}
        )

    return _build_config(raw_config)


def _build_config(raw_config: dict[str, Any]) -> Config:
    """Validate sections and assemble the frozen Config."""
    for section in ("matching", "search", "cache", "output"):
        value = raw_config.get(section)
        if value is not None and not isinstance(value, dict):
            raise ConfigError(
                f"Section '{section}' must be a dictionary",
                details={"section": section}
            )

    return Config(
        matching=_parse_matching_config(raw_config.get("matching") or {}),
        search=_parse_search_config(raw_config.get("search") or {}),
        cache=_parse_cache_config(raw_config.get("cache") or {}),
        output=_parse_output_config(raw_config.get("output") or {}),
    )


def _positive_int(section: dict[str, Any], key: str, field: str, default: int) -> int:
    """Read an optional positive integer, raising ConfigError on bad values."""
    raw = section.get(key)
    if raw is None:
        return default
    # bool is an int subclass; "true" is not a valid count
    if isinstance(raw, bool) or not isinstance(raw, int) or raw < 1:
        raise ConfigError(
            f"'{field}' must be a positive integer",
            details={"field": field, "value": raw}
        )
    return raw


def _parse_matching_config(matching_section: dict[str, Any]) -> MatchingConfig:
    """
    Parse and validate the matching configuration section.

    Raises:
        ConfigError: If any limit is not a positive integer.
    """
    return MatchingConfig(
        concurrency=_positive_int(
            matching_section, "concurrency", "matching.concurrency", DEFAULT_CONCURRENCY
        ),
        max_batch_size=_positive_int(
            matching_section, "max_batch_size", "matching.max_batch_size", DEFAULT_MAX_BATCH_SIZE
        ),
        max_candidates=_positive_int(
            matching_section, "max_candidates", "matching.max_candidates", DEFAULT_MAX_CANDIDATES
        ),
    )


def _parse_search_config(search_section: dict[str, Any]) -> SearchConfig:
    """
    Parse and validate the search configuration section.

    Raises:
        ConfigError: If language is empty or limit is not a positive integer.
    """
    language = search_section.get("language", DEFAULT_SEARCH_LANGUAGE)
    if not isinstance(language, str) or not language.strip():
        raise ConfigError(
            "'search.language' must be a non-empty string",
            details={"field": "search.language"}
        )

    return SearchConfig(
        language=language.strip(),
        limit=_positive_int(search_section, "limit", "search.limit", DEFAULT_SEARCH_LIMIT),
    )


def _parse_cache_config(cache_section: dict[str, Any]) -> CacheConfig:
    """
    Parse and validate the cache configuration section.

    Raises:
        ConfigError: If ttl_hours is not a positive number.
    """
    ttl_hours = cache_section.get("ttl_hours", DEFAULT_CACHE_TTL_HOURS)
    if isinstance(ttl_hours, bool) or not isinstance(ttl_hours, (int, float)) or ttl_hours <= 0:
        raise ConfigError(
            "'cache.ttl_hours' must be a positive number",
            details={"field": "cache.ttl_hours", "value": ttl_hours}
        )
    return CacheConfig(ttl_hours=float(ttl_hours))


def _parse_output_config(output_section: dict[str, Any]) -> OutputConfig:
    """
    Parse and validate the output configuration section.

    Expands ~ to home directory and converts to absolute Path.
    Does NOT create the directory (that happens in setup_logging()).

    Raises:
        ConfigError: If log_directory is empty or not a string.
    """
    directory = output_section.get("log_directory", DEFAULT_LOG_DIRECTORY)

    if not isinstance(directory, str) or not directory.strip():
        raise ConfigError(
            "'output.log_directory' must be a non-empty string",
            details={"field": "output.log_directory"}
        )

    return OutputConfig(log_directory=Path(directory.strip()).expanduser().resolve())
