"""
Enumerations shared by the catalog models.

    Role        - Account role, derived from the account's profile payload
    Genre       - Musical genre of a song, with user-facing display names
    EditStatus  - Disposition of a lyric edit suggestion
"""

import re
from enum import Enum


class Role(Enum):
    """
    Account roles.

    USER:   view content, suggest lyric edits, comment, follow artists
    ARTIST: create songs and albums, review edits on own songs
    ADMIN:  verify artists, review any lyric edit
    """

    USER = "Regular User"
    ARTIST = "Content Creator"
    ADMIN = "System Administrator"

    @property
    def display_name(self) -> str:
        return self.value

    @classmethod
    def from_string(cls, role_string: str | None) -> "Role | None":
        """Parse a role name case-insensitively ("artist", "ADMIN"). None if no match."""
        if role_string is None:
            return None
        normalized = role_string.strip().upper()
        for role in cls:
            if role.name == normalized:
                return role
        return None


class Genre(Enum):
    """Musical genres. Values are the display names shown to users."""

    POP = "Pop"
    ROCK = "Rock"
    HIP_HOP = "Hip Hop"
    RNB = "R&B"
    COUNTRY = "Country"
    JAZZ = "Jazz"
    BLUES = "Blues"
    CLASSICAL = "Classical"
    ELECTRONIC = "Electronic"
    DANCE = "Dance"
    INDIE = "Indie"
    ALTERNATIVE = "Alternative"
    METAL = "Metal"
    PUNK = "Punk"
    FOLK = "Folk"
    SOUL = "Soul"
    FUNK = "Funk"
    REGGAE = "Reggae"
    LATIN = "Latin"
    K_POP = "K-Pop"
    COUNTRY_POP = "Country Pop"
    POP_ROCK = "Pop Rock"
    SYNTHPOP = "Synthpop"
    INDIE_POP = "Indie Pop"
    INDIE_ROCK = "Indie Rock"
    ALTERNATIVE_ROCK = "Alternative Rock"
    RAP = "Rap"
    TRAP = "Trap"
    DRILL = "Drill"
    LO_FI = "Lo-Fi"
    HOUSE = "House"
    TECHNO = "Techno"
    TRANCE = "Trance"
    DUBSTEP = "Dubstep"
    DRUM_AND_BASS = "Drum and Bass"
    GOSPEL = "Gospel"
    CHRISTIAN = "Christian"
    NEW_AGE = "New Age"
    WORLD = "World"
    SOUNDTRACK = "Soundtrack"
    AMBIENT = "Ambient"
    EXPERIMENTAL = "Experimental"
    OTHER = "Other"

    @property
    def display_name(self) -> str:
        return self.value

    @classmethod
    def from_string(cls, genre_string: str | None) -> "Genre | None":
        """
        Parse a genre from user input.

        Matches either the member name after upper-casing and replacing
        non-alphanumerics with '_' ("hip-hop" -> HIP_HOP, "k pop" -> K_POP)
        or the display name case-insensitively ("R&B" -> RNB).

        Returns:
            The matching Genre, or None.
        """
        if genre_string is None:
            return None

        normalized = re.sub(r"[^A-Z0-9]", "_", genre_string.strip().upper())
        for genre in cls:
            if genre.name == normalized:
                return genre
            if genre.value.lower() == genre_string.strip().lower():
                return genre
        return None

    @classmethod
    def display_names(cls) -> list[str]:
        return [genre.value for genre in cls]


class EditStatus(Enum):
    """
    Lyric edit disposition.

    PENDING is the only initial state. APPROVED and REJECTED are terminal.
    """

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not EditStatus.PENDING
