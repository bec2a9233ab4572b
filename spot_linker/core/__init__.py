"""
Core module for spot-linker.

This module provides the foundational components used throughout the application:
    - exceptions: Custom exception classes for error handling
    - config: Configuration loading and validation
    - cache: Thread-safe in-memory TTL cache of match outcomes
    - logger: Logging system with multiple outputs
    - progress: Rich progress bar for batch matching

Usage:
    from spot_linker.core import (
        Config, load_config,
        MatchCache,
        setup_logging, get_logger,
        SpotLinkerError, ConfigError, SearchError
    )
"""

from spot_linker.core.cache import MatchCache
from spot_linker.core.config import (
    CacheConfig,
    Config,
    MatchingConfig,
    OutputConfig,
    SearchConfig,
    default_config,
    load_config,
)
from spot_linker.core.exceptions import (
    BatchValidationError,
    ConfigError,
    SearchError,
    SpotLinkerError,
)
from spot_linker.core.logger import (
    get_logger,
    log_match_review,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    # Config
    "Config",
    "MatchingConfig",
    "SearchConfig",
    "CacheConfig",
    "OutputConfig",
    "default_config",
    "load_config",
    # Cache
    "MatchCache",
    # Exceptions
    "SpotLinkerError",
    "ConfigError",
    "SearchError",
    "BatchValidationError",
    # Logger
    "setup_logging",
    "get_logger",
    "log_match_review",
    "shutdown_logging",
]
