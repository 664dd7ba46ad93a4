"""
Lyric edit review: propose, approve, reject.

State machine:

    propose()          approve()
    ---------> PENDING ---------> APPROVED
                  |
                  |   reject(reason)
                  +-------------> REJECTED

APPROVED and REJECTED are terminal. approve() and reject() on a decided
edit return False and change nothing.

Who may do what:
    propose          - regular users only
    approve/reject   - an artist listed on the edited song, or any admin

Approval writes proposed_lyrics to the song as-is, even when the song's
lyrics changed after the edit was proposed (original_lyrics is shown to
the reviewer but never compared).

Every check-then-transition sequence runs inside store.transaction(), so
an approval cannot interleave with a direct lyrics update, a background
lyrics fetch, or a second review of the same edit.

Notifications:
    propose  -> every owning artist
    approve  -> the suggesting user
    reject   -> the suggesting user, with the reason
"""

from genius_catalog.core.logger import get_logger
from genius_catalog.models.accounts import Account
from genius_catalog.models.content import LyricEdit, Song
from genius_catalog.storage.store import CatalogStore

logger = get_logger(__name__)


class LyricEditService:
    """
    The lyric edit review workflow.

    Attributes:
        store: The catalog store.
    """

    def __init__(self, store: CatalogStore) -> None:
        self.store = store

    def propose(
        self,
        user: Account | None,
        song: Song | None,
        proposed_lyrics: str | None,
        explanation: str | None = ""
    ) -> LyricEdit | None:
        """
        Suggest new lyrics for a song.

        The song's current lyrics are copied into the edit as
        original_lyrics.

        Returns:
            The pending edit, or None if the caller is not a regular user,
            the song is unknown or the proposed lyrics are missing.
        """
        if user is None or song is None or proposed_lyrics is None or not user.is_user:
            return None

        with self.store.transaction():
            current = self.store.get_song(song.song_id)
            if current is None:
                return None

            edit = LyricEdit(
                suggested_by=user.key,
                song_id=current.song_id,
                original_lyrics=current.lyrics or "",
                proposed_lyrics=proposed_lyrics,
                explanation=(explanation or "").strip(),
            )
            self.store.add_lyric_edit(edit)

            for username in current.artists:
                artist = self.store.get_account_by_username(username)
                self.store.add_artist_notification(
                    artist, f"@{user.username} suggested a lyrics edit for '{current.title}'"
                )

        logger.info(f"Lyrics edit {edit.edit_id} proposed by @{user.username} for '{current.title}'")
        return edit

    def approve(self, edit: LyricEdit | None, reviewer: Account | None) -> bool:
        """
        Approve a pending edit and apply its text to the song.

        Returns:
            False if the edit is already decided, its song no longer exists,
            or the reviewer is neither an owning artist nor an admin.
        """
        if edit is None or reviewer is None:
            return False

        with self.store.transaction():
            song = self._reviewable_song(edit, reviewer)
            if song is None:
                return False

            edit.approve(reviewer.key)
            self.store.set_lyrics(song.song_id, edit.proposed_lyrics)
            self.store.mark_changed()

            suggester = self.store.get_account_by_username(edit.suggested_by)
            self.store.add_user_notification(
                suggester,
                f"Your lyrics edit for '{song.title}' was approved by @{reviewer.username}"
            )

        logger.info(f"Lyrics edit {edit.edit_id} approved by @{reviewer.username}")
        return True

    def reject(self, edit: LyricEdit | None, reviewer: Account | None, reason: str | None) -> bool:
        """
        Reject a pending edit. The reason must not be blank.

        The song's lyrics are not touched.
        """
        if edit is None or reviewer is None or not reason or not reason.strip():
            return False

        with self.store.transaction():
            song = self._reviewable_song(edit, reviewer)
            if song is None:
                return False

            edit.reject(reviewer.key, reason)
            self.store.mark_changed()

            suggester = self.store.get_account_by_username(edit.suggested_by)
            self.store.add_user_notification(
                suggester,
                f"Your lyrics edit for '{song.title}' was rejected by @{reviewer.username}: "
                f"{edit.rejection_reason}"
            )

        logger.info(f"Lyrics edit {edit.edit_id} rejected by @{reviewer.username}")
        return True

    def _reviewable_song(self, edit: LyricEdit, reviewer: Account) -> Song | None:
        """The edited song if `edit` is pending and `reviewer` may decide it. Caller holds the lock."""
        if not edit.is_pending:
            logger.debug(f"Lyrics edit {edit.edit_id} already {edit.status.value}")
            return None

        song = self.store.get_song(edit.song_id)
        if song is None:
            return None

        if reviewer.is_admin:
            return song
        if reviewer.is_artist and reviewer.key in song.artists:
            return song
        return None

    def pending_edits_for_artist(self, artist: Account | None) -> list[LyricEdit]:
        return [e for e in self.edits_for_artist(artist) if e.is_pending]

    def edits_for_artist(self, artist: Account | None) -> list[LyricEdit]:
        """Every edit, in any state, targeting a song the artist owns."""
        if artist is None:
            return []
        owned = {song.song_id for song in self.store.songs_by_artist(artist.username)}
        return [e for e in self.store.get_lyric_edits() if e.song_id in owned]

    def all_edits(self) -> list[LyricEdit]:
        return self.store.get_lyric_edits()

    def get_edit(self, edit_id: str | None) -> LyricEdit | None:
        return self.store.get_lyric_edit(edit_id)
