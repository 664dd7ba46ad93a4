"""
JSON snapshot persistence for the catalog store.

The whole catalog is kept in one JSON document:

    {
        "version": 1,
        "saved_at": "2026-01-01T12:00:00+00:00",
        "accounts": [...],
        "songs": [...],
        "albums": [...],
        "comments": [...],
        "lyric_edits": [...],
        "artists_for_approval": ["new_artist"],
        "notifications": {"users": {...}, "artists": {...}}
    }

Records are mapped field by field in this module, so renaming an
attribute on a model does not silently change the file format. Dates are
ISO 8601 strings and enums are stored by member name.

Writes are atomic: the document is written to a temporary file in the
same directory and moved over the old snapshot with os.replace().

Usage:
    snapshot = CatalogSnapshot(config.storage.data_file)
    store = snapshot.load()          # store.on_change -> snapshot.mark_dirty
    ... mutate through services ...
    snapshot.flush(store)            # writes only if something changed
"""

import json
import os
import tempfile
import threading
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any

from genius_catalog.core.exceptions import PersistenceError, ValidationError
from genius_catalog.core.logger import get_logger
from genius_catalog.models.accounts import Account, AdminProfile, ArtistProfile, UserProfile
from genius_catalog.models.content import Album, Comment, LyricEdit, Song
from genius_catalog.models.enums import EditStatus, Genre
from genius_catalog.storage.store import CatalogStore

logger = get_logger(__name__)


SNAPSHOT_VERSION = 1


class CatalogSnapshot:
    """
    Loads a CatalogStore from a JSON file and writes it back when dirty.

    Attributes:
        path: Location of the snapshot file.
        dirty: True when the store changed since the last load or flush.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self.dirty = False
        self._lock = threading.Lock()

    def mark_dirty(self) -> None:
        with self._lock:
            self.dirty = True

    def load(self) -> CatalogStore:
        """
        Build a store from the snapshot file.

        A missing file yields an empty store. The returned store reports
        changes to this snapshot through on_change.

        Raises:
            PersistenceError: If the file cannot be read, is not valid JSON,
                              has another version, or holds malformed records.
        """
        store = CatalogStore()

        if self.path.exists():
            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    document = json.load(f)
            except OSError as e:
                raise PersistenceError(
                    f"Cannot read catalog file: {self.path}",
                    details={"path": str(self.path), "error": str(e)}
                ) from e
            except json.JSONDecodeError as e:
                raise PersistenceError(
                    f"Catalog file is not valid JSON: {self.path}",
                    details={"path": str(self.path), "line": e.lineno, "error": e.msg}
                ) from e

            _restore(store, document, self.path)
            logger.debug(f"Loaded catalog from {self.path}")
        else:
            logger.debug(f"No catalog file at {self.path}, starting empty")

        with self._lock:
            self.dirty = False
        store.on_change = self.mark_dirty
        return store

    def save(self, store: CatalogStore) -> None:
        """
        Write the store to disk unconditionally.

        Raises:
            PersistenceError: If the directory or file cannot be written.
        """
        with store.transaction():
            document = dump_store(store)

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(document, f, ensure_ascii=False, indent=2)
                os.replace(temp_name, self.path)
            except BaseException:
                Path(temp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceError(
                f"Cannot write catalog file: {self.path}",
                details={"path": str(self.path), "error": str(e)}
            ) from e

        with self._lock:
            self.dirty = False
        logger.debug(f"Saved catalog to {self.path}")

    def flush(self, store: CatalogStore) -> bool:
        """Save only if the store changed. Returns True if a write happened."""
        with self._lock:
            if not self.dirty:
                return False
        self.save(store)
        return True


# ----------------------------------------------------------------------
# Store -> document
# ----------------------------------------------------------------------

def dump_store(store: CatalogStore) -> dict[str, Any]:
    """Map every collection of the store to JSON-compatible data."""
    user_queues, artist_queues = store.get_notification_queues()
    return {
        "version": SNAPSHOT_VERSION,
        "saved_at": datetime.now(timezone.utc).isoformat(),
        "accounts": [_account_to_dict(a) for a in store.get_accounts()],
        "songs": [_song_to_dict(s) for s in store.get_songs()],
        "albums": [_album_to_dict(a) for a in store.get_albums()],
        "comments": [_comment_to_dict(c) for c in store.get_comments()],
        "lyric_edits": [_edit_to_dict(e) for e in store.get_lyric_edits()],
        "artists_for_approval": [a.key for a in store.get_artists_for_approval()],
        "notifications": {"users": user_queues, "artists": artist_queues},
    }


def _account_to_dict(account: Account) -> dict[str, Any]:
    data: dict[str, Any] = {
        "username": account.username,
        "password_hash": account.password_hash,
        "name": account.name,
        "age": account.age,
        "email": account.email,
        "role": account.role.name,
    }
    match account.profile:
        case UserProfile(following=following):
            data["following"] = list(following)
        case ArtistProfile(verified=verified, external_id=external_id, image_url=image_url):
            data["verified"] = verified
            data["external_id"] = external_id
            data["image_url"] = image_url
        case AdminProfile(level=level, department=department):
            data["level"] = level
            data["department"] = department
    return data


def _song_to_dict(song: Song) -> dict[str, Any]:
    return {
        "id": song.song_id,
        "title": song.title,
        "lyrics": song.lyrics,
        "artists": list(song.artists),
        "genre": song.genre.name,
        "release_date": song.release_date.isoformat(),
        "views": song.views,
        "external_id": song.external_id,
        "thumbnail_url": song.thumbnail_url,
        "api_path": song.api_path,
        "tags": list(song.tags),
        "comments": list(song.comments),
        "album_id": song.album_id,
    }


def _album_to_dict(album: Album) -> dict[str, Any]:
    return {
        "id": album.album_id,
        "title": album.title,
        "artist": album.artist,
        "release_date": album.release_date.isoformat(),
        "tracklist": list(album.tracklist),
    }


def _comment_to_dict(comment: Comment) -> dict[str, Any]:
    return {
        "id": comment.comment_id,
        "author": comment.author,
        "song_id": comment.song_id,
        "text": comment.text,
        "created_at": comment.created_at.isoformat(),
        "likes": comment.likes,
        "dislikes": comment.dislikes,
    }


def _edit_to_dict(edit: LyricEdit) -> dict[str, Any]:
    return {
        "id": edit.edit_id,
        "suggested_by": edit.suggested_by,
        "song_id": edit.song_id,
        "original_lyrics": edit.original_lyrics,
        "proposed_lyrics": edit.proposed_lyrics,
        "explanation": edit.explanation,
        "suggested_at": edit.suggested_at.isoformat(),
        "status": edit.status.name,
        "reviewed_by": edit.reviewed_by,
        "rejection_reason": edit.rejection_reason,
    }


# ----------------------------------------------------------------------
# Document -> store
# ----------------------------------------------------------------------

def _restore(store: CatalogStore, document: Any, path: Path) -> None:
    if not isinstance(document, dict):
        raise PersistenceError(
            f"Catalog file has an invalid layout: {path}",
            details={"path": str(path)}
        )

    version = document.get("version")
    if version != SNAPSHOT_VERSION:
        raise PersistenceError(
            f"Catalog file version mismatch: expected {SNAPSHOT_VERSION}, got {version}",
            details={"expected": SNAPSHOT_VERSION, "actual": version, "path": str(path)}
        )

    try:
        notifications = document.get("notifications") or {}
        store.restore(
            accounts=[_account_from_dict(d) for d in document.get("accounts", [])],
            songs=[_song_from_dict(d) for d in document.get("songs", [])],
            albums=[_album_from_dict(d) for d in document.get("albums", [])],
            comments=[_comment_from_dict(d) for d in document.get("comments", [])],
            lyric_edits=[_edit_from_dict(d) for d in document.get("lyric_edits", [])],
            artists_for_approval=document.get("artists_for_approval", []),
            user_notifications=notifications.get("users", {}),
            artist_notifications=notifications.get("artists", {}),
        )
    except (KeyError, TypeError, ValueError, ValidationError) as e:
        raise PersistenceError(
            f"Catalog file contains a malformed record: {path}",
            details={"path": str(path), "error": repr(e)}
        ) from e


def _account_from_dict(data: dict[str, Any]) -> Account:
    role = data["role"]
    if role == "USER":
        profile = UserProfile(following=list(data.get("following", [])))
    elif role == "ARTIST":
        profile = ArtistProfile(
            verified=bool(data.get("verified", False)),
            external_id=data.get("external_id"),
            image_url=data.get("image_url"),
        )
    elif role == "ADMIN":
        profile = AdminProfile(
            level=data.get("level", "Standard"),
            department=data.get("department", "Platform Management"),
        )
    else:
        raise ValueError(f"unknown role {role!r}")

    return Account(
        username=data["username"],
        password_hash=data["password_hash"],
        name=data["name"],
        age=int(data["age"]),
        email=data["email"],
        profile=profile,
    )


def _song_from_dict(data: dict[str, Any]) -> Song:
    return Song(
        title=data["title"],
        lyrics=data.get("lyrics"),
        artists=list(data["artists"]),
        genre=Genre[data["genre"]],
        release_date=date.fromisoformat(data["release_date"]),
        external_id=data.get("external_id"),
        thumbnail_url=data.get("thumbnail_url"),
        api_path=data.get("api_path"),
        tags=list(data.get("tags", [])),
        views=int(data.get("views", 0)),
        comments=list(data.get("comments", [])),
        album_id=data.get("album_id"),
        song_id=data["id"],
    )


def _album_from_dict(data: dict[str, Any]) -> Album:
    return Album(
        title=data["title"],
        artist=data["artist"],
        release_date=date.fromisoformat(data["release_date"]),
        tracklist=list(data.get("tracklist", [])),
        album_id=data["id"],
    )


def _comment_from_dict(data: dict[str, Any]) -> Comment:
    return Comment(
        author=data["author"],
        song_id=data["song_id"],
        text=data["text"],
        created_at=datetime.fromisoformat(data["created_at"]),
        likes=int(data.get("likes", 0)),
        dislikes=int(data.get("dislikes", 0)),
        comment_id=data["id"],
    )


def _edit_from_dict(data: dict[str, Any]) -> LyricEdit:
    return LyricEdit(
        suggested_by=data["suggested_by"],
        song_id=data["song_id"],
        original_lyrics=data.get("original_lyrics") or "",
        proposed_lyrics=data["proposed_lyrics"],
        explanation=data.get("explanation") or "",
        suggested_at=datetime.fromisoformat(data["suggested_at"]),
        status=EditStatus[data["status"]],
        reviewed_by=data.get("reviewed_by"),
        rejection_reason=data.get("rejection_reason"),
        edit_id=data["id"],
    )
