"""
Exception classes for genius-catalog.

This module defines the custom exceptions used throughout the application.
Domain services report expected failures (not authorized, already decided,
unknown song) as None/False results; exceptions are reserved for invalid
input at construction time and for failures of the surrounding machinery
(configuration, persistence, the Genius API).

Exception Hierarchy:
    CatalogError (base)
        ConfigError - Configuration file issues
        PersistenceError - Snapshot file issues
        ValidationError - Invalid entity data (empty title, empty comment, ...)
        GeniusError - Genius API issues
        LyricsError - Lyrics scraping issues
"""


class CatalogError(Exception):
    """
    Base exception for all genius-catalog errors.

    All custom exceptions in this project inherit from this class,
    allowing callers to catch every catalog error with a single
    except clause if desired.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (e.g., song id, field).

    Example:
        try:
            catalog.create_song(...)
        except CatalogError as e:
            logger.error(f"Operation failed: {e.message}")
            if e.details:
                logger.debug(f"Details: {e.details}")
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error description that will be shown to the user.
            details: Optional dictionary containing additional context about the error.
                     Common keys include:
                     - 'field': Name of the offending field
                     - 'song_id': Song involved in the error
                     - 'original_error': The underlying exception if wrapping another error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class ConfigError(CatalogError):
    """
    Raised when there's an issue with the configuration file.

    This is a CRITICAL error that should stop program execution.

    Common causes:
        - An explicitly given config file does not exist
        - config.yaml has invalid YAML syntax
        - Invalid field values (e.g., negative thread count)

    Example:
        raise ConfigError(
            "'lyrics.threads' must be a positive integer",
            details={'field': 'lyrics.threads', 'value': -1}
        )
    """
    pass


class PersistenceError(CatalogError):
    """
    Raised when the catalog snapshot cannot be read or written.

    This is a CRITICAL error that should stop program execution.

    Common causes:
        - Snapshot file is corrupted (invalid JSON)
        - Snapshot was written by an incompatible schema version
        - Permission denied or disk full while writing
    """
    pass


class ValidationError(CatalogError):
    """
    Raised when an entity is constructed with invalid data.

    No partial mutation ever happens before this is raised: entities
    validate in their constructors, before they reach the store.

    Example:
        raise ValidationError(
            "Song title cannot be empty",
            details={'field': 'title'}
        )
    """
    pass


class GeniusError(CatalogError):
    """
    Raised when there's an issue with the Genius API.

    Can be CRITICAL (missing or invalid token) or NON-CRITICAL
    (a single search failing).

    Attributes:
        is_auth_error: True if this is an authentication error (CRITICAL).

    Example:
        raise GeniusError(
            "Genius search failed",
            details={'query': 'blinding lights', 'original_error': '...'}
        )
    """

    def __init__(
        self,
        message: str,
        details: dict | None = None,
        is_auth_error: bool = False
    ) -> None:
        """
        Initialize Genius error with an authentication flag.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context.
            is_auth_error: Set to True if the access token is missing or rejected.
        """
        super().__init__(message, details)
        self.is_auth_error = is_auth_error


class LyricsError(CatalogError):
    """
    Raised when there's an issue fetching lyrics.

    This is a NON-CRITICAL error - lyrics are fetched in the background
    and a failure only turns the song's lyrics into the "unavailable"
    placeholder. It must never stop song creation or import.

    Common causes:
        - Genius page has no lyrics container (instrumental, removed)
        - Genius page structure changed (scraping broken)
        - Network timeout
    """
    pass
