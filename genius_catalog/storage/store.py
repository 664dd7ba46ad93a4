"""
Thread-safe in-memory catalog store.

The store is the single source of truth for accounts, songs, albums,
comments, lyric edits, the artist approval queue and notification queues.
Every other object holds identifiers, never its own copy of a collection:
an artist's songs are the songs listing that artist, computed on read.

Locking:
    One re-entrant lock guards every collection. All public methods take
    it. Services that need a check-then-act sequence (approve an edit only
    while it is still pending, follow only if not already following) wrap
    the whole sequence in `with store.transaction():`.

Failure semantics:
    None of these operations raise for ordinary use. None arguments and
    unknown ids are no-ops or return None/False/empty lists.

Usage:
    store = CatalogStore()
    store.add_account(Account.new_user("alice", hashed, "Alice", 30, "a@example.com"))

    with store.transaction():
        song = store.get_song(song_id)
        if song is not None and song.lyrics_pending:
            store.set_lyrics(song_id, text)
"""

import threading
from contextlib import contextmanager
from typing import Callable, Generator, Iterable

from genius_catalog.core.logger import get_logger
from genius_catalog.models.accounts import Account, ArtistProfile, UserProfile
from genius_catalog.models.content import LYRICS_LOADING, Album, Comment, LyricEdit, Song

logger = get_logger(__name__)


class CatalogStore:
    """
    In-memory catalog with a single re-entrant lock.

    Attributes:
        on_change: Optional callable invoked after every mutation.
                   The CLI points it at CatalogSnapshot.mark_dirty.
    """

    def __init__(self, on_change: Callable[[], None] | None = None) -> None:
        self._lock = threading.RLock()
        self.on_change = on_change

        # Dicts keep insertion order, which is the listing order everywhere
        self._accounts: dict[str, Account] = {}
        self._songs: dict[str, Song] = {}
        self._song_ids_by_external_id: dict[int, str] = {}
        self._albums: dict[str, Album] = {}
        self._comments: dict[str, Comment] = {}
        self._lyric_edits: dict[str, LyricEdit] = {}
        self._artists_for_approval: list[str] = []
        self._user_notifications: dict[str, list[str]] = {}
        self._artist_notifications: dict[str, list[str]] = {}

    @contextmanager
    def transaction(self) -> Generator["CatalogStore", None, None]:
        """Hold the store lock across several calls."""
        with self._lock:
            yield self

    def mark_changed(self) -> None:
        """
        Report a mutation made directly on a stored entity.

        Used by services after changing an entity in place inside
        transaction() (comment reactions, lyric edit dispositions).
        """
        if self.on_change is not None:
            self.on_change()

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    def add_account(self, account: Account | None) -> None:
        """Insert an account. No-op if None or the username is taken (case-insensitive)."""
        if account is None:
            return
        with self._lock:
            if account.key in self._accounts:
                logger.debug(f"Account '{account.username}' already exists, not added")
                return
            self._accounts[account.key] = account
            self.mark_changed()

    def get_account_by_username(self, username: str | None) -> Account | None:
        if not username:
            return None
        with self._lock:
            return self._accounts.get(username.strip().lower())

    def get_accounts(self) -> list[Account]:
        with self._lock:
            return list(self._accounts.values())

    def get_artists(self) -> list[Account]:
        with self._lock:
            return [a for a in self._accounts.values() if a.is_artist]

    def set_artist_verified(self, artist: Account | None, verified: bool = True) -> bool:
        with self._lock:
            if artist is None or not isinstance(artist.profile, ArtistProfile):
                return False
            artist.profile.verified = verified
            self.mark_changed()
            return True

    def add_following(self, user: Account | None, artist: Account | None) -> bool:
        """Append artist to the user's following list. False if already there."""
        if user is None or artist is None:
            return False
        with self._lock:
            if not isinstance(user.profile, UserProfile):
                return False
            if artist.key in user.profile.following:
                return False
            user.profile.following.append(artist.key)
            self.mark_changed()
            return True

    def remove_following(self, user: Account | None, artist: Account | None) -> bool:
        if user is None or artist is None:
            return False
        with self._lock:
            if not isinstance(user.profile, UserProfile):
                return False
            if artist.key not in user.profile.following:
                return False
            user.profile.following.remove(artist.key)
            self.mark_changed()
            return True

    # ------------------------------------------------------------------
    # Songs
    # ------------------------------------------------------------------

    def add_song(self, song: Song | None) -> None:
        if song is None:
            return
        with self._lock:
            self._songs[song.song_id] = song
            if song.external_id is not None:
                self._song_ids_by_external_id[song.external_id] = song.song_id
            self.mark_changed()

    def get_song(self, song_id: str | None) -> Song | None:
        if not song_id:
            return None
        with self._lock:
            return self._songs.get(song_id)

    def get_song_by_external_id(self, external_id: int | None) -> Song | None:
        if external_id is None:
            return None
        with self._lock:
            song_id = self._song_ids_by_external_id.get(external_id)
            return self._songs.get(song_id) if song_id else None

    def get_songs(self) -> list[Song]:
        with self._lock:
            return list(self._songs.values())

    def songs_by_artist(self, username: str | None) -> list[Song]:
        """Songs listing `username` among their artists, in catalog order."""
        if not username:
            return []
        key = username.lower()
        with self._lock:
            return [s for s in self._songs.values() if key in s.artists]

    def set_lyrics(self, song_id: str, lyrics: str | None) -> bool:
        with self._lock:
            song = self._songs.get(song_id)
            if song is None:
                return False
            song.lyrics = lyrics if lyrics is not None else ""
            self.mark_changed()
            return True

    def replace_placeholder_lyrics(self, song_id: str, lyrics: str) -> bool:
        """
        Set lyrics only if the song still shows LYRICS_LOADING.

        Background fetches use this so a late result cannot overwrite
        lyrics an artist or an approved edit has set in the meantime.
        """
        with self._lock:
            song = self._songs.get(song_id)
            if song is None or song.lyrics != LYRICS_LOADING:
                return False
            song.lyrics = lyrics
            self.mark_changed()
            return True

    def increment_views(self, song_id: str | None) -> int | None:
        """Add exactly one view. Returns the new count, None for unknown songs."""
        if not song_id:
            return None
        with self._lock:
            song = self._songs.get(song_id)
            if song is None:
                return None
            song.views += 1
            self.mark_changed()
            return song.views

    # ------------------------------------------------------------------
    # Albums
    # ------------------------------------------------------------------

    def add_album(self, album: Album | None) -> None:
        if album is None:
            return
        with self._lock:
            self._albums[album.album_id] = album
            self.mark_changed()

    def get_album(self, album_id: str | None) -> Album | None:
        if not album_id:
            return None
        with self._lock:
            return self._albums.get(album_id)

    def get_albums(self) -> list[Album]:
        with self._lock:
            return list(self._albums.values())

    def albums_by_artist(self, username: str | None) -> list[Album]:
        if not username:
            return []
        key = username.lower()
        with self._lock:
            return [a for a in self._albums.values() if a.artist == key]

    def add_track(self, album_id: str, song_id: str) -> bool:
        """Append the song to the album and point the song back at the album."""
        with self._lock:
            album = self._albums.get(album_id)
            song = self._songs.get(song_id)
            if album is None or song is None or song_id in album.tracklist:
                return False
            if song.album_id is not None and song.album_id != album_id:
                previous = self._albums.get(song.album_id)
                if previous is not None and song_id in previous.tracklist:
                    previous.tracklist.remove(song_id)
            album.tracklist.append(song_id)
            song.album_id = album_id
            self.mark_changed()
            return True

    def remove_track(self, album_id: str, song_id: str) -> bool:
        with self._lock:
            album = self._albums.get(album_id)
            if album is None or song_id not in album.tracklist:
                return False
            album.tracklist.remove(song_id)
            song = self._songs.get(song_id)
            if song is not None and song.album_id == album_id:
                song.album_id = None
            self.mark_changed()
            return True

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    def add_comment(self, comment: Comment | None) -> bool:
        """Store a comment and append it to its song's comment list in one step."""
        if comment is None:
            return False
        with self._lock:
            song = self._songs.get(comment.song_id)
            if song is None:
                return False
            self._comments[comment.comment_id] = comment
            song.comments.append(comment.comment_id)
            self.mark_changed()
            return True

    def get_comment(self, comment_id: str | None) -> Comment | None:
        if not comment_id:
            return None
        with self._lock:
            return self._comments.get(comment_id)

    def get_comments(self) -> list[Comment]:
        with self._lock:
            return list(self._comments.values())

    def get_song_comments(self, song_id: str | None) -> list[Comment]:
        with self._lock:
            song = self._songs.get(song_id) if song_id else None
            if song is None:
                return []
            return [self._comments[c] for c in song.comments if c in self._comments]

    # ------------------------------------------------------------------
    # Lyric edits
    # ------------------------------------------------------------------

    def add_lyric_edit(self, edit: LyricEdit | None) -> None:
        if edit is None:
            return
        with self._lock:
            self._lyric_edits[edit.edit_id] = edit
            self.mark_changed()

    def remove_lyric_edit(self, edit: LyricEdit | None) -> None:
        if edit is None:
            return
        with self._lock:
            if self._lyric_edits.pop(edit.edit_id, None) is not None:
                self.mark_changed()

    def get_lyric_edit(self, edit_id: str | None) -> LyricEdit | None:
        if not edit_id:
            return None
        with self._lock:
            return self._lyric_edits.get(edit_id)

    def get_lyric_edits(self) -> list[LyricEdit]:
        with self._lock:
            return list(self._lyric_edits.values())

    # ------------------------------------------------------------------
    # Artist approval queue
    # ------------------------------------------------------------------

    def add_artist_for_approval(self, artist: Account | None) -> None:
        if artist is None:
            return
        with self._lock:
            if artist.key not in self._artists_for_approval:
                self._artists_for_approval.append(artist.key)
                self.mark_changed()

    def remove_artist_for_approval(self, artist: Account | None) -> None:
        if artist is None:
            return
        with self._lock:
            if artist.key in self._artists_for_approval:
                self._artists_for_approval.remove(artist.key)
                self.mark_changed()

    def get_artists_for_approval(self) -> list[Account]:
        with self._lock:
            return [
                self._accounts[key]
                for key in self._artists_for_approval
                if key in self._accounts
            ]

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def add_user_notification(self, user: Account | None, message: str | None) -> None:
        self._add_notification(self._user_notifications, user, message)

    def add_artist_notification(self, artist: Account | None, message: str | None) -> None:
        self._add_notification(self._artist_notifications, artist, message)

    def _add_notification(
        self,
        queues: dict[str, list[str]],
        recipient: Account | None,
        message: str | None
    ) -> None:
        if recipient is None or not message or not message.strip():
            return
        with self._lock:
            queues.setdefault(recipient.key, []).append(message)
            self.mark_changed()

    def get_user_notifications(self, user: Account | None) -> list[str]:
        if user is None:
            return []
        with self._lock:
            return list(self._user_notifications.get(user.key, []))

    def get_artist_notifications(self, artist: Account | None) -> list[str]:
        if artist is None:
            return []
        with self._lock:
            return list(self._artist_notifications.get(artist.key, []))

    def clear_notifications(self, username: str | None) -> None:
        """Empty both notification queues of `username`."""
        if not username:
            return
        key = username.lower()
        with self._lock:
            removed = self._user_notifications.pop(key, None)
            removed = self._artist_notifications.pop(key, None) or removed
            if removed:
                self.mark_changed()

    def get_notification_queues(self) -> tuple[dict[str, list[str]], dict[str, list[str]]]:
        """Copies of the (user, artist) notification queues keyed by username."""
        with self._lock:
            return (
                {k: list(v) for k, v in self._user_notifications.items()},
                {k: list(v) for k, v in self._artist_notifications.items()},
            )

    # ------------------------------------------------------------------
    # Bulk restore
    # ------------------------------------------------------------------

    def restore(
        self,
        accounts: Iterable[Account],
        songs: Iterable[Song],
        albums: Iterable[Album],
        comments: Iterable[Comment],
        lyric_edits: Iterable[LyricEdit],
        artists_for_approval: Iterable[str],
        user_notifications: dict[str, list[str]],
        artist_notifications: dict[str, list[str]],
    ) -> None:
        """
        Replace all contents with previously saved entities.

        Unlike the add_* methods this applies no side effects (a restored
        comment is not appended to its song again) and does not call
        on_change.
        """
        with self._lock:
            self._accounts = {a.key: a for a in accounts}
            self._songs = {s.song_id: s for s in songs}
            self._song_ids_by_external_id = {
                s.external_id: s.song_id for s in self._songs.values() if s.external_id is not None
            }
            self._albums = {a.album_id: a for a in albums}
            self._comments = {c.comment_id: c for c in comments}
            self._lyric_edits = {e.edit_id: e for e in lyric_edits}
            self._artists_for_approval = [k.lower() for k in artists_for_approval]
            self._user_notifications = {k: list(v) for k, v in user_notifications.items()}
            self._artist_notifications = {k: list(v) for k, v in artist_notifications.items()}
