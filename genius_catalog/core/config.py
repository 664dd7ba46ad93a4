"""
Configuration management for genius-catalog.

This module handles loading, validating, and providing access to the
application configuration stored in config.yaml.

The configuration file contains:
    - Genius API access token (used by `catalog import`)
    - Location of the catalog snapshot file and the log directory
    - Background lyrics worker settings (threads, timeout, retries)

Configuration File Location:
    By default config.yaml is read from the current working directory.
    When that default file does not exist, built-in defaults are used so
    the catalog can be explored offline. An explicitly passed path must exist.

The GENIUS_API_TOKEN environment variable (a .env file is honoured)
overrides genius.access_token from the file.

Example config.yaml:
    genius:
      access_token: "your_genius_client_access_token"

    storage:
      data_file: "~/.genius-catalog/catalog.json"
      log_directory: "~/.genius-catalog"

    lyrics:
      threads: 3
      timeout: 15
      retries: 1
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from genius_catalog.core.exceptions import ConfigError


# Default configuration file name (looked up in current working directory)
CONFIG_FILENAME = "config.yaml"

# Environment variable overriding genius.access_token
TOKEN_ENV_VAR = "GENIUS_API_TOKEN"

DEFAULT_DATA_FILE = "~/.genius-catalog/catalog.json"
DEFAULT_LOG_DIRECTORY = "~/.genius-catalog"
DEFAULT_LYRICS_THREADS = 3
DEFAULT_LYRICS_TIMEOUT = 15
DEFAULT_LYRICS_RETRIES = 1


@dataclass(frozen=True)
class GeniusConfig:
    """
    Genius API credentials.

    The client access token is obtained from https://genius.com/api-clients.

    Attributes:
        access_token: Client access token, or None when not configured.
                      Only the import command needs it.
    """
    access_token: str | None


@dataclass(frozen=True)
class StorageConfig:
    """
    Storage locations.

    Attributes:
        data_file: Absolute path of the JSON catalog snapshot.
        log_directory: Directory in which a 'logs' subdirectory is created.
    """
    data_file: Path
    log_directory: Path


@dataclass(frozen=True)
class LyricsConfig:
    """
    Background lyrics fetching configuration.

    Attributes:
        threads: Size of the lyrics worker pool. Default: 3.
        timeout: Per-request HTTP timeout in seconds, also the bound used
                 when draining outstanding fetches. Default: 15.
        retries: Retries lyricsgenius performs on timeouts. Default: 1.
    """
    threads: int
    timeout: int
    retries: int


@dataclass(frozen=True)
class Config:
    """
    Complete application configuration.

    Created by load_config() and treated as immutable.

    Example:
        config = load_config()
        print(f"Catalog stored in: {config.storage.data_file}")
    """
    genius: GeniusConfig
    storage: StorageConfig
    lyrics: LyricsConfig


def load_config(config_path: Path | None = None) -> Config:
    """
    Load and validate configuration from config.yaml.

    Args:
        config_path: Optional explicit path to config file.
                     If None, looks for config.yaml in current working directory
                     and falls back to defaults when it is not there.

    Returns:
        Config: A frozen dataclass containing all configuration values.

    Raises:
        ConfigError: If an explicit config file is not found, the file has
                     invalid YAML syntax, or contains invalid values.
    """
    load_dotenv()

    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILENAME
        if not config_path.exists():
            return _build_config({})
    elif not config_path.exists():
        raise ConfigError(
            f"Configuration file not found: {config_path}",
            details={"file_path": str(config_path)}
        )

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            content = f.read()
    except OSError as e:
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

    # An empty file is a valid "all defaults" configuration
    if raw_config is None:
        raw_config = {}

    if not isinstance(raw_config, dict):
        raise ConfigError(
            "Configuration file must contain a YAML dictionary",
            details={"file_path": str(config_path)}
        )

    return _build_config(raw_config)


def _build_config(raw_config: dict[str, Any]) -> Config:
    for section in ("genius", "storage", "lyrics"):
        if section in raw_config and not isinstance(raw_config[section], dict):
            raise ConfigError(
                f"Section '{section}' must be a dictionary",
                details={"section": section}
            )

    return Config(
        genius=_parse_genius_config(raw_config.get("genius") or {}),
        storage=_parse_storage_config(raw_config.get("storage") or {}),
        lyrics=_parse_lyrics_config(raw_config.get("lyrics") or {}),
    )


def _parse_genius_config(genius_section: dict[str, Any]) -> GeniusConfig:
    """
    Parse the Genius section, letting the environment override the token.

    Raises:
        ConfigError: If access_token is present but not a string.
    """
    token = genius_section.get("access_token")
    if token is not None and not isinstance(token, str):
        raise ConfigError(
            "'genius.access_token' must be a string",
            details={"field": "genius.access_token"}
        )

    env_token = os.environ.get(TOKEN_ENV_VAR)
    if env_token and env_token.strip():
        token = env_token

    token = token.strip() if token else None
    return GeniusConfig(access_token=token or None)


def _parse_storage_config(storage_section: dict[str, Any]) -> StorageConfig:
    """
    Parse the storage section, expanding ~ and making paths absolute.

    Does NOT create any directory (that happens when the snapshot is written).
    """
    data_file = _parse_path(storage_section, "data_file", DEFAULT_DATA_FILE)
    log_directory = _parse_path(storage_section, "log_directory", DEFAULT_LOG_DIRECTORY)
    return StorageConfig(data_file=data_file, log_directory=log_directory)


def _parse_path(section: dict[str, Any], field: str, default: str) -> Path:
    raw = section.get(field, default)
    if not isinstance(raw, str) or not raw.strip():
        raise ConfigError(
            f"'storage.{field}' must be a non-empty string",
            details={"field": f"storage.{field}"}
        )
    return Path(raw.strip()).expanduser().resolve()


def _parse_lyrics_config(lyrics_section: dict[str, Any]) -> LyricsConfig:
    """
    Parse the lyrics section, applying defaults for missing fields.

    Raises:
        ConfigError: If threads or timeout is not a positive integer,
                     or retries is negative.
    """
    threads = _parse_int(lyrics_section, "threads", DEFAULT_LYRICS_THREADS, minimum=1)
    timeout = _parse_int(lyrics_section, "timeout", DEFAULT_LYRICS_TIMEOUT, minimum=1)
    retries = _parse_int(lyrics_section, "retries", DEFAULT_LYRICS_RETRIES, minimum=0)
    return LyricsConfig(threads=threads, timeout=timeout, retries=retries)


def _parse_int(section: dict[str, Any], field: str, default: int, minimum: int) -> int:
    raw = section.get(field)
    if raw is None:
        return default
    # bool is an int subclass; "threads: yes" is a mistake, not 1
    if isinstance(raw, bool) or not isinstance(raw, int) or raw < minimum:
        raise ConfigError(
            f"'lyrics.{field}' must be an integer >= {minimum}",
            details={"field": f"lyrics.{field}", "value": raw}
        )
    return raw
