"""
Content models: songs, albums, comments and lyric edit suggestions.

Entities reference accounts by username and each other by id. The
CatalogStore owns every instance; services change them only while
holding the store lock.

Lyrics sentinels:
    LYRICS_LOADING      - an imported song whose lyrics are still being fetched
    LYRICS_UNAVAILABLE  - the background fetch failed or timed out
"""

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone

from genius_catalog.core.exceptions import ValidationError
from genius_catalog.core.logger import get_logger
from genius_catalog.models.enums import EditStatus, Genre

logger = get_logger(__name__)


LYRICS_LOADING = "Loading lyrics..."
LYRICS_UNAVAILABLE = "Lyrics not available"

_URL_PREFIXES = ("http://", "https://", "ftp://")


def new_id() -> str:
    """Short random identifier used for songs, albums, comments and edits."""
    return uuid.uuid4().hex[:8]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(eq=False)
class Song:
    """
    A song in the catalog.

    Attributes:
        title: Non-empty, stored trimmed.
        lyrics: Current canonical lyrics. May be LYRICS_LOADING while an
                import is fetching the real text.
        artists: Usernames of the owning artists, at least one.
        genre: Song genre.
        release_date: Release date.
        external_id: Genius song id, used to deduplicate imports.
        thumbnail_url: Song art thumbnail, None when blank.
        api_path: Genius page path ("/Artist-title-lyrics") for lyrics fetching.
        tags: Genius tags, used to guess the genre on import.
        views: Non-negative view counter.
        comments: Comment ids, in posting order.
        album_id: Album this song is on, if any.
        song_id: Catalog identifier.
    """

    title: str
    lyrics: str | None
    artists: list[str]
    genre: Genre
    release_date: date
    external_id: int | None = None
    thumbnail_url: str | None = None
    api_path: str | None = None
    tags: list[str] = field(default_factory=list)
    views: int = 0
    comments: list[str] = field(default_factory=list)
    album_id: str | None = None
    song_id: str = field(default_factory=new_id)

    def __post_init__(self) -> None:
        if self.title is None or not self.title.strip():
            raise ValidationError("Song title cannot be empty", details={"field": "title"})
        self.title = self.title.strip()

        if not self.artists:
            raise ValidationError("A song needs at least one artist", details={"field": "artists"})
        self.artists = list(self.artists)

        if self.genre is None:
            raise ValidationError("Genre is required", details={"field": "genre"})
        if self.release_date is None:
            raise ValidationError("Release date is required", details={"field": "release_date"})

        if self.lyrics is None:
            self.lyrics = ""
        if self.views < 0:
            self.views = 0
        self.thumbnail_url = _clean_thumbnail_url(self.thumbnail_url)

    @property
    def lyrics_pending(self) -> bool:
        """True while an imported song is still waiting for its lyrics."""
        return self.lyrics == LYRICS_LOADING

    @property
    def primary_artist(self) -> str:
        return self.artists[0]

    def set_views(self, views: int) -> None:
        """Set the view counter. Negative values are ignored."""
        if views >= 0:
            self.views = views

    def __str__(self) -> str:
        return f"{self.title} - {', '.join(self.artists)} ({self.genre.display_name}) [{self.views} views]"


def _clean_thumbnail_url(url: str | None) -> str | None:
    if url is None:
        return None
    trimmed = url.strip()
    if not trimmed:
        return None
    if not trimmed.startswith(_URL_PREFIXES):
        logger.warning(f"Thumbnail URL may not be valid: {trimmed}")
    return trimmed


@dataclass(eq=False)
class Album:
    """
    An album owned by a single artist.

    Attributes:
        title: Album title.
        artist: Username of the owning artist.
        release_date: Release date.
        tracklist: Song ids, in track order.
        album_id: Catalog identifier.
    """

    title: str
    artist: str
    release_date: date
    tracklist: list[str] = field(default_factory=list)
    album_id: str = field(default_factory=new_id)

    def __post_init__(self) -> None:
        if self.title is None or not self.title.strip():
            raise ValidationError("Album title cannot be empty", details={"field": "title"})
        self.title = self.title.strip()

    def __str__(self) -> str:
        return f"{self.title} by @{self.artist} ({self.release_date.isoformat()}, {len(self.tracklist)} tracks)"


@dataclass(eq=False)
class Comment:
    """
    A comment on a song.

    The timestamp is fixed at construction. Likes and dislikes never go
    below zero.
    """

    author: str
    song_id: str
    text: str
    created_at: datetime = field(default_factory=utc_now)
    likes: int = 0
    dislikes: int = 0
    comment_id: str = field(default_factory=new_id)

    def __post_init__(self) -> None:
        if not self.author:
            raise ValidationError("Comment author is required", details={"field": "author"})
        if self.text is None or not self.text.strip():
            raise ValidationError("Comment text cannot be empty", details={"field": "text"})
        self.text = self.text.strip()
        self.likes = max(self.likes, 0)
        self.dislikes = max(self.dislikes, 0)

    @property
    def score(self) -> int:
        return self.likes - self.dislikes

    def add_like(self) -> None:
        self.likes += 1

    def add_dislike(self) -> None:
        self.dislikes += 1

    def remove_like(self) -> None:
        if self.likes > 0:
            self.likes -= 1

    def remove_dislike(self) -> None:
        if self.dislikes > 0:
            self.dislikes -= 1


@dataclass(eq=False)
class LyricEdit:
    """
    A suggested replacement for a song's lyrics.

    original_lyrics is a copy of the song's lyrics taken when the edit was
    proposed; it is what reviewers compare the proposal against and is
    never refreshed.

    State machine:
        PENDING -> APPROVED   (approve)
        PENDING -> REJECTED   (reject, reason required)

    approve() and reject() only record the disposition. Authorization and
    applying the text to the song are done by LyricEditService.
    """

    suggested_by: str
    song_id: str
    original_lyrics: str
    proposed_lyrics: str
    explanation: str = ""
    suggested_at: datetime = field(default_factory=utc_now)
    status: EditStatus = EditStatus.PENDING
    reviewed_by: str | None = None
    rejection_reason: str | None = None
    edit_id: str = field(default_factory=new_id)

    @property
    def is_pending(self) -> bool:
        return self.status is EditStatus.PENDING

    def approve(self, reviewer: str) -> bool:
        """Mark approved by `reviewer`. False if already decided."""
        if not self.is_pending:
            return False
        self.status = EditStatus.APPROVED
        self.reviewed_by = reviewer
        return True

    def reject(self, reviewer: str, reason: str) -> bool:
        """Mark rejected by `reviewer` with `reason`. False if already decided or reason is blank."""
        if not self.is_pending or not reason or not reason.strip():
            return False
        self.status = EditStatus.REJECTED
        self.reviewed_by = reviewer
        self.rejection_reason = reason.strip()
        return True
