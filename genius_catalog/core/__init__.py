"""
Core module for genius-catalog.

This module provides the foundational components used throughout the application:
    - exceptions: Custom exception classes for error handling
    - config: Configuration loading and validation
    - logger: Logging system with multiple outputs
    - security: Password hashing

Usage:
    from genius_catalog.core import (
        Config, load_config,
        setup_logging, get_logger,
        hash_password, verify_password,
        CatalogError, ConfigError, PersistenceError
    )
"""

from genius_catalog.core.config import (
    Config,
    GeniusConfig,
    LyricsConfig,
    StorageConfig,
    load_config,
)
from genius_catalog.core.exceptions import (
    CatalogError,
    ConfigError,
    GeniusError,
    LyricsError,
    PersistenceError,
    ValidationError,
)
from genius_catalog.core.logger import (
    get_logger,
    log_lyrics_failure,
    setup_logging,
    shutdown_logging,
)
from genius_catalog.core.security import hash_password, verify_password

__all__ = [
    # Config
    "Config",
    "GeniusConfig",
    "StorageConfig",
    "LyricsConfig",
    "load_config",
    # Exceptions
    "CatalogError",
    "ConfigError",
    "PersistenceError",
    "ValidationError",
    "GeniusError",
    "LyricsError",
    # Logger
    "setup_logging",
    "get_logger",
    "log_lyrics_failure",
    "shutdown_logging",
    # Security
    "hash_password",
    "verify_password",
]
