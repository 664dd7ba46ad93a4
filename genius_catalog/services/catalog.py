"""
Catalog mutations: songs, albums, comments, views and Genius import.

Ownership is recorded once, on the content: a song lists its artists'
usernames and an album names its artist. "An artist's songs" is always
computed by the store, so creating a song is a single insert.

Failure semantics:
    create_song() raises ValidationError for missing required data.
    Every other operation returns None/False for invalid input,
    ownership violations and unknown entities.

Import:
    import_songs() searches Genius and merges the hits into the catalog:
        - a hit whose Genius id was imported before reuses that song
        - the primary artist is matched by display name (case-insensitive)
          or created as a verified artist with a synthesized username
        - new songs start with the LYRICS_LOADING placeholder and their
          lyrics are fetched by the LyricsWorkerPool
"""

import re
import secrets
from datetime import date

from genius_catalog.core.exceptions import CatalogError, GeniusError, ValidationError
from genius_catalog.core.logger import get_logger
from genius_catalog.core.security import hash_password
from genius_catalog.genius.client import GeniusClient, SearchHit
from genius_catalog.genius.worker import LyricsWorkerPool
from genius_catalog.models.accounts import Account
from genius_catalog.models.content import LYRICS_LOADING, LYRICS_UNAVAILABLE, Album, Comment, Song
from genius_catalog.models.enums import Genre
from genius_catalog.storage.store import CatalogStore

logger = get_logger(__name__)


# Checked in order against each Genius tag
TAG_GENRES = (
    ("hip-hop", Genre.HIP_HOP),
    ("rock", Genre.ROCK),
    ("pop", Genre.POP),
    ("r&b", Genre.RNB),
)
DEFAULT_IMPORT_GENRE = Genre.POP

UNKNOWN_ARTIST_NAME = "Unknown Artist"
IMPORTED_ARTIST_AGE = 30
IMPORTED_ARTIST_EMAIL_DOMAIN = "genius.com"


class CatalogService:
    """
    Song and album management.

    Attributes:
        store: The catalog store.
        genius: Genius client used by import_songs(), optional.
        lyrics_pool: Worker pool fetching imported lyrics, optional.
    """

    def __init__(
        self,
        store: CatalogStore,
        genius: GeniusClient | None = None,
        lyrics_pool: LyricsWorkerPool | None = None
    ) -> None:
        self.store = store
        self.genius = genius
        self.lyrics_pool = lyrics_pool

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_song(self, song_id: str | None) -> Song | None:
        return self.store.get_song(song_id)

    def get_album(self, album_id: str | None) -> Album | None:
        return self.store.get_album(album_id)

    def get_comment(self, comment_id: str | None) -> Comment | None:
        return self.store.get_comment(comment_id)

    def get_song_comments(self, song: Song | None) -> list[Comment]:
        return self.store.get_song_comments(song.song_id) if song is not None else []

    # ------------------------------------------------------------------
    # Songs
    # ------------------------------------------------------------------

    def create_song(
        self,
        title: str,
        lyrics: str | None,
        artist: Account | None,
        genre: Genre | None,
        release_date: date | None,
        external_id: int | None = None,
        thumbnail_url: str | None = None
    ) -> Song:
        """
        Create a song owned by `artist`.

        Args:
            title: Song title, must not be blank.
            lyrics: Lyrics text, "" when None.
            artist: Owning artist account.
            genre: Song genre.
            release_date: Release date.
            external_id: Genius song id, if known.
            thumbnail_url: Song art thumbnail, if known.

        Returns:
            The stored song.

        Raises:
            ValidationError: If title, artist, genre or release date is
                             missing, or the owner is not an artist.
        """
        if artist is None:
            raise ValidationError("Artist is required", details={"field": "artist"})
        if not artist.is_artist:
            raise ValidationError(
                "Songs can only be created for artist accounts",
                details={"field": "artist", "username": artist.username}
            )

        song = Song(
            title=title,
            lyrics=lyrics,
            artists=[artist.key],
            genre=genre,
            release_date=release_date,
            external_id=external_id,
            thumbnail_url=thumbnail_url,
        )
        self.store.add_song(song)
        logger.info(f"Created song '{song.title}' by @{artist.username}")
        return song

    def update_lyrics(self, artist: Account | None, song: Song | None, lyrics: str | None) -> bool:
        """Replace the lyrics of a song directly. Only an owning artist may do this."""
        if artist is None or song is None or lyrics is None:
            return False
        if not artist.is_artist or artist.key not in song.artists:
            return False
        return self.store.set_lyrics(song.song_id, lyrics)

    def add_view_to_song(self, song: Song | None) -> bool:
        if song is None:
            return False
        return self.store.increment_views(song.song_id) is not None

    def get_top_songs(self, limit: int) -> list[Song]:
        """Most viewed songs first. Equal view counts keep catalog order."""
        songs = sorted(self.store.get_songs(), key=lambda s: s.views, reverse=True)
        return songs[:max(limit, 0)]

    def search_songs(self, query: str | None) -> list[Song]:
        """Songs whose title or artist contains `query`, case-insensitive. All songs if empty."""
        songs = self.store.get_songs()
        if not query or not query.strip():
            return songs

        needle = query.strip().lower()
        results = []
        for song in songs:
            if needle in song.title.lower() or any(needle in name.lower() for name in self._artist_names(song)):
                results.append(song)
        return results

    def _artist_names(self, song: Song) -> list[str]:
        names = []
        for username in song.artists:
            account = self.store.get_account_by_username(username)
            names.append(username)
            if account is not None:
                names.append(account.name)
        return names

    def get_all_artist_songs(self, artist: Account | None) -> list[Song]:
        """Album tracks in album order, then the artist's songs that are on no album."""
        if artist is None:
            return []

        songs: list[Song] = []
        seen: set[str] = set()
        for album in self.store.albums_by_artist(artist.username):
            for song_id in album.tracklist:
                song = self.store.get_song(song_id)
                if song is not None and song_id not in seen:
                    seen.add(song_id)
                    songs.append(song)

        for song in self.store.songs_by_artist(artist.username):
            if song.album_id is None and song.song_id not in seen:
                seen.add(song.song_id)
                songs.append(song)
        return songs

    # ------------------------------------------------------------------
    # Albums
    # ------------------------------------------------------------------

    def create_album(self, title: str, artist: Account | None, release_date: date | None) -> Album | None:
        """Create an album. None unless the artist is verified and the title is not blank."""
        if artist is None or not artist.is_verified_artist or release_date is None:
            return None
        try:
            album = Album(title=title, artist=artist.key, release_date=release_date)
        except ValidationError as e:
            logger.debug(f"Album not created: {e.message}")
            return None

        self.store.add_album(album)
        logger.info(f"Created album '{album.title}' by @{artist.username}")
        return album

    def add_song_to_album(self, album: Album | None, song: Song | None) -> bool:
        """Append a song to an album. The album's artist must be one of the song's artists."""
        if album is None or song is None:
            return False
        if album.artist not in song.artists:
            return False
        return self.store.add_track(album.album_id, song.song_id)

    def remove_song_from_album(self, album: Album | None, song: Song | None) -> bool:
        if album is None or song is None:
            return False
        return self.store.remove_track(album.album_id, song.song_id)

    def get_albums_by_artist(self, artist: Account | None) -> list[Album]:
        if artist is None:
            return []
        return self.store.albums_by_artist(artist.username)

    def search_albums(self, query: str | None, artist: Account | None = None) -> list[Album]:
        """Albums whose title contains `query` (any title if empty), optionally of one artist."""
        needle = query.strip().lower() if query else ""
        albums = self.store.albums_by_artist(artist.username) if artist is not None else self.store.get_albums()
        return [a for a in albums if needle in a.title.lower()]

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    def add_comment(self, user: Account | None, song: Song | None, text: str | None) -> Comment | None:
        if user is None or song is None or not user.is_user:
            return None
        try:
            comment = Comment(author=user.key, song_id=song.song_id, text=text)
        except ValidationError:
            return None
        if not self.store.add_comment(comment):
            return None
        return comment

    def like_comment(self, comment: Comment | None) -> bool:
        return self._react(comment, Comment.add_like)

    def dislike_comment(self, comment: Comment | None) -> bool:
        return self._react(comment, Comment.add_dislike)

    def remove_like(self, comment: Comment | None) -> bool:
        return self._react(comment, Comment.remove_like)

    def remove_dislike(self, comment: Comment | None) -> bool:
        return self._react(comment, Comment.remove_dislike)

    def _react(self, comment: Comment | None, action) -> bool:
        if comment is None:
            return False
        with self.store.transaction():
            if self.store.get_comment(comment.comment_id) is not comment:
                return False
            action(comment)
            self.store.mark_changed()
        return True

    # ------------------------------------------------------------------
    # Genius import
    # ------------------------------------------------------------------

    def import_songs(self, query: str | None) -> list[Song]:
        """
        Import the songs a Genius search returns.

        Args:
            query: Search text.

        Returns:
            The imported songs in search order: new songs and songs that
            had already been imported. Empty if the query is blank or the
            search failed (the failure is logged).

        Raises:
            GeniusError: If Genius rejects the access token (is_auth_error).
        """
        if not query or not query.strip():
            return []
        if self.genius is None:
            logger.error("Genius import is not available: no Genius client configured")
            return []

        try:
            hits = self.genius.search(query)
        except GeniusError as e:
            if e.is_auth_error:
                raise
            logger.error(f"Genius search for '{query}' failed: {e.message}")
            return []

        if not hits:
            logger.info(f"No songs found on Genius for '{query}'")
            return []

        imported: list[Song] = []
        scheduled: list[tuple[str, str]] = []
        for hit in hits:
            try:
                song, is_new = self._merge_hit(hit)
            except CatalogError as e:
                logger.warning(f"Skipping Genius song {hit.external_id} ({hit.title}): {e.message}")
                continue
            imported.append(song)
            if is_new:
                scheduled.append((song.song_id, hit.path))

        for song_id, path in scheduled:
            if self.lyrics_pool is not None:
                self.lyrics_pool.submit(song_id, path)
            else:
                self.store.replace_placeholder_lyrics(song_id, LYRICS_UNAVAILABLE)

        logger.info(f"Imported {len(scheduled)} new songs ({len(imported)} matched) for '{query}'")
        return imported

    def _merge_hit(self, hit: SearchHit) -> tuple[Song, bool]:
        """Return the catalog song for a hit and whether it was created now."""
        name = _artist_display_name(hit.primary_artist_name)
        # Hashed outside the store lock. Accounts are never removed, so an
        # artist found now is still found inside the transaction.
        password_hash = None
        if self._find_artist(name) is None:
            password_hash = hash_password(secrets.token_urlsafe(32))

        with self.store.transaction():
            existing = self.store.get_song_by_external_id(hit.external_id)
            if existing is not None:
                return existing, False

            artist = self._find_artist(name) or self._create_artist(name, password_hash)
            song = Song(
                title=hit.title,
                lyrics=LYRICS_LOADING,
                artists=[artist.key],
                genre=genre_from_tags(hit.tags),
                release_date=hit.release_date or date.today(),
                external_id=hit.external_id,
                thumbnail_url=hit.thumbnail_url,
                api_path=hit.path,
                tags=list(hit.tags),
            )
            self.store.add_song(song)
            logger.debug(f"Imported '{song.title}' (Genius id {hit.external_id})")
            return song, True

    def _find_artist(self, name: str) -> Account | None:
        for account in self.store.get_artists():
            if account.name.lower() == name.lower():
                return account
        return None

    def _create_artist(self, name: str, password_hash: str) -> Account:
        username = self._unique_username(synthesize_username(name))
        # Random secret nobody knows: imported artists cannot log in
        artist = Account.new_artist(
            username,
            password_hash,
            name,
            IMPORTED_ARTIST_AGE,
            f"{username}@{IMPORTED_ARTIST_EMAIL_DOMAIN}",
            verified=True,
        )
        self.store.add_account(artist)
        logger.info(f"Created artist '{name}' as @{username} from Genius import")
        return artist

    def _unique_username(self, base: str) -> str:
        candidate = base
        suffix = 2
        while self.store.get_account_by_username(candidate) is not None:
            candidate = f"{base}_{suffix}"
            suffix += 1
        return candidate


def synthesize_username(display_name: str) -> str:
    """Lower-case the name and replace every non-alphanumeric character with '_'."""
    return re.sub(r"[^a-z0-9]", "_", display_name.lower())


def genre_from_tags(tags) -> Genre:
    """First genre whose keyword appears in a tag, DEFAULT_IMPORT_GENRE otherwise."""
    for tag in tags:
        tag = tag.lower()
        for keyword, genre in TAG_GENRES:
            if keyword in tag:
                return genre
    return DEFAULT_IMPORT_GENRE


def _artist_display_name(display_name: str | None) -> str:
    if display_name and display_name.strip():
        return display_name.strip()
    return UNKNOWN_ARTIST_NAME
