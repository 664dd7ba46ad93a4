"""
Genius API client for genius-catalog.

Wraps lyricsgenius for the two calls the catalog needs:

    search(query)        - song search, returned as SearchHit records
    fetch_lyrics(path)   - scrape the lyrics of a song page

Authentication:
    Uses a client access token (https://genius.com/api-clients), read from
    config.yaml or the GENIUS_API_TOKEN environment variable. The
    lyricsgenius client is created lazily on first use so that commands
    which never touch Genius work without a token.

Error Handling:
    Every failure is converted to a project exception:
        - Missing or rejected token -> GeniusError(is_auth_error=True)
        - Search failures           -> GeniusError
        - Lyrics scraping failures  -> LyricsError
    Callers decide how to degrade (empty import, "Lyrics not available").

Thread Safety:
    search() and fetch_lyrics() may be called from the lyrics worker
    threads. Client creation is guarded by a lock; lyricsgenius itself
    keeps a requests.Session per client, which is safe for independent
    GET requests.

Usage:
    client = GeniusClient(config.genius.access_token, timeout=15, retries=1)
    hits = client.search("blinding lights")
    lyrics = client.fetch_lyrics(hits[0].path)
"""

import threading
from dataclasses import dataclass, field
from datetime import date
from typing import Any

import lyricsgenius
import requests

from genius_catalog.core.exceptions import GeniusError, LyricsError
from genius_catalog.core.logger import get_logger

logger = get_logger(__name__)


GENIUS_BASE_URL = "https://genius.com"
SEARCH_PAGE_SIZE = 10


@dataclass(frozen=True)
class SearchHit:
    """
    One song returned by a Genius search.

    Attributes:
        external_id: Genius song id.
        title: Song title as shown on Genius.
        primary_artist_name: Display name of the primary artist.
        path: Song page path, e.g. "/The-weeknd-blinding-lights-lyrics".
        thumbnail_url: Song art thumbnail, if any.
        release_date: Release date when Genius reports a complete one.
        tags: Lower-cased tag names, when the response carries them.
    """
    external_id: int
    title: str
    primary_artist_name: str
    path: str
    thumbnail_url: str | None = None
    release_date: date | None = None
    tags: tuple[str, ...] = field(default_factory=tuple)

    @property
    def url(self) -> str:
        return f"{GENIUS_BASE_URL}{self.path}"


class GeniusClient:
    """
    Thin wrapper around lyricsgenius.Genius.

    Attributes:
        access_token: Genius client access token, may be None.
        timeout: HTTP timeout in seconds for each request.
        retries: Retries lyricsgenius performs on timeouts.
    """

    def __init__(self, access_token: str | None, timeout: int = 15, retries: int = 1) -> None:
        self.access_token = access_token
        self.timeout = timeout
        self.retries = retries
        self._genius: lyricsgenius.Genius | None = None
        self._lock = threading.Lock()

    @property
    def genius(self) -> lyricsgenius.Genius:
        """
        The lyricsgenius client, created on first access.

        Raises:
            GeniusError: If no access token is configured (is_auth_error=True).
        """
        with self._lock:
            if self._genius is None:
                if not self.access_token:
                    raise GeniusError(
                        "Genius access token not configured. "
                        "Set genius.access_token in config.yaml or GENIUS_API_TOKEN.",
                        is_auth_error=True
                    )
                self._genius = lyricsgenius.Genius(
                    self.access_token,
                    timeout=self.timeout,
                    retries=self.retries,
                    verbose=False,
                    remove_section_headers=True,
                    skip_non_songs=True,
                )
                logger.debug("Genius API client initialized")
            return self._genius

    def search(self, query: str, per_page: int = SEARCH_PAGE_SIZE) -> list[SearchHit]:
        """
        Search Genius for songs.

        Args:
            query: Free text search ("artist title", "title", ...).
            per_page: Maximum number of hits to return.

        Returns:
            Hits in Genius ranking order. Malformed hits are skipped.

        Raises:
            GeniusError: On missing/rejected token, timeouts or HTTP errors.
        """
        if not query or not query.strip():
            return []

        logger.debug(f"Genius search: '{query}'")
        try:
            response = self.genius.search_songs(query.strip(), per_page=per_page)
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise GeniusError(
                "Genius rejected the access token" if status == 401 else f"Genius search failed: {e}",
                details={"query": query, "status": status},
                is_auth_error=status == 401
            ) from e
        except requests.exceptions.RequestException as e:
            raise GeniusError(
                f"Genius search failed: {e}",
                details={"query": query, "original_error": str(e)}
            ) from e

        hits = []
        for hit in (response or {}).get("hits", []):
            parsed = _parse_hit(hit.get("result") or {})
            if parsed is not None:
                hits.append(parsed)

        logger.debug(f"Genius returned {len(hits)} songs for '{query}'")
        return hits

    def fetch_lyrics(self, path: str) -> str | None:
        """
        Scrape the lyrics of a Genius song page.

        Args:
            path: Song page path from SearchHit.path (or a full URL).

        Returns:
            Lyrics text, or None if the page has no lyrics.

        Raises:
            GeniusError: If no access token is configured.
            LyricsError: On timeouts, HTTP errors or scraping failures.
        """
        url = path if path.startswith("http") else f"{GENIUS_BASE_URL}{path}"
        try:
            lyrics = self.genius.lyrics(song_url=url)
        except requests.exceptions.RequestException as e:
            raise LyricsError(
                f"Lyrics request failed: {e}",
                details={"path": path, "original_error": str(e)}
            ) from e
        except (AttributeError, TypeError) as e:
            # Raised from the HTML parsing when the page layout changes
            raise LyricsError(
                "Could not parse the Genius lyrics page",
                details={"path": path, "original_error": str(e)}
            ) from e

        if lyrics is None:
            return None
        lyrics = lyrics.strip()
        return lyrics or None


def _parse_hit(result: dict[str, Any]) -> SearchHit | None:
    """Convert one 'result' object of a search response, None if incomplete."""
    song_id = result.get("id")
    title = result.get("title")
    path = result.get("path")
    artist_name = (result.get("primary_artist") or {}).get("name")

    if song_id is None or not title or not path:
        logger.debug(f"Skipping incomplete Genius hit: {result.get('id')}")
        return None

    tags = tuple(
        str(tag.get("name", "")).lower()
        for tag in result.get("tags") or []
        if isinstance(tag, dict)
    )

    return SearchHit(
        external_id=int(song_id),
        title=title,
        primary_artist_name=artist_name or "Unknown Artist",
        path=path,
        thumbnail_url=result.get("song_art_image_thumbnail_url"),
        release_date=_parse_release_date(result.get("release_date_components")),
        tags=tags,
    )


def _parse_release_date(components: dict[str, Any] | None) -> date | None:
    if not components:
        return None
    try:
        return date(int(components["year"]), int(components["month"]), int(components["day"]))
    except (KeyError, TypeError, ValueError):
        return None
