"""
Domain models for genius-catalog.

    - enums: Role, Genre, EditStatus
    - accounts: Account with its User/Artist/Admin profile payloads
    - content: Song, Album, Comment, LyricEdit and the lyrics sentinels
"""

from genius_catalog.models.accounts import (
    Account,
    AdminProfile,
    ArtistProfile,
    Profile,
    UserProfile,
)
from genius_catalog.models.content import (
    LYRICS_LOADING,
    LYRICS_UNAVAILABLE,
    Album,
    Comment,
    LyricEdit,
    Song,
)
from genius_catalog.models.enums import EditStatus, Genre, Role

__all__ = [
    "Account",
    "Profile",
    "UserProfile",
    "ArtistProfile",
    "AdminProfile",
    "Song",
    "Album",
    "Comment",
    "LyricEdit",
    "LYRICS_LOADING",
    "LYRICS_UNAVAILABLE",
    "Role",
    "Genre",
    "EditStatus",
]
