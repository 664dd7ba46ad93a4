"""
genius-catalog: A music catalog with crowd-sourced lyric corrections.

Users follow artists, comment on songs and suggest lyric edits. Artists
publish songs and albums and review the edits proposed for their songs.
Administrators verify new artist accounts and may review any edit.
Songs can be imported from Genius, with lyrics fetched in the background.

Architecture:
    core/       - Configuration, logging, exceptions, password hashing
    models/     - Accounts, songs, albums, comments, lyric edits, enums
    storage/    - Thread-safe in-memory store and JSON snapshot persistence
    genius/     - Genius API client and background lyrics worker pool
    services/   - Accounts, catalog and lyric edit workflows
    seed.py     - Demo data for an empty catalog
    cli.py      - Command-line interface

Usage:
    Command Line:
        catalog seed
        catalog songs "blinding"
        catalog propose-edit <song-id> --lyrics-file fixed.txt -u john_doe
        catalog approve <edit-id> -u taylor_swift
        catalog import "the weeknd starboy"

    Python API:
        from genius_catalog.storage import CatalogSnapshot
        from genius_catalog.services import AccountService, CatalogService, LyricEditService

        snapshot = CatalogSnapshot(config.storage.data_file)
        store = snapshot.load()

        accounts = AccountService(store)
        edits = LyricEditService(store)

        user = accounts.login("john_doe", "doe123")
        edit = edits.propose(user, song, "corrected lyrics", "typo in verse 2")
        edits.approve(edit, accounts.login("taylor_swift", "swift123"))

        snapshot.flush(store)

Configuration:
    Reads config.yaml from the current directory when present:

        genius:
          access_token: "your_genius_client_access_token"

        storage:
          data_file: "~/.genius-catalog/catalog.json"
          log_directory: "~/.genius-catalog"

        lyrics:
          threads: 3
          timeout: 15
          retries: 1

Dependencies:
    - lyricsgenius: Genius API client and lyrics scraper
    - bcrypt: Password hashing
    - click: CLI framework
    - rich-click: CLI colors
    - tqdm: Progress bars
    - colorama: Colored console logging
    - pyyaml: Configuration file parsing
    - python-dotenv: GENIUS_API_TOKEN from a .env file
"""

__version__ = "0.1.0"
__author__ = "genius-catalog"
__license__ = "MIT"

# Convenience imports for common usage
from genius_catalog.core import (
    CatalogError,
    Config,
    ConfigError,
    GeniusError,
    LyricsError,
    PersistenceError,
    ValidationError,
    get_logger,
    load_config,
    setup_logging,
)
from genius_catalog.models import (
    Account,
    Album,
    Comment,
    EditStatus,
    Genre,
    LyricEdit,
    Role,
    Song,
)
from genius_catalog.storage import CatalogSnapshot, CatalogStore
from genius_catalog.genius import GeniusClient, LyricsWorkerPool
from genius_catalog.services import AccountService, CatalogService, LyricEditService

__all__ = [
    "__version__",
    # Core
    "Config",
    "load_config",
    "setup_logging",
    "get_logger",
    # Exceptions
    "CatalogError",
    "ConfigError",
    "PersistenceError",
    "ValidationError",
    "GeniusError",
    "LyricsError",
    # Models
    "Account",
    "Role",
    "Song",
    "Album",
    "Comment",
    "LyricEdit",
    "EditStatus",
    "Genre",
    # Storage
    "CatalogStore",
    "CatalogSnapshot",
    # Genius
    "GeniusClient",
    "LyricsWorkerPool",
    # Services
    "AccountService",
    "CatalogService",
    "LyricEditService",
]
