"""
Account model for genius-catalog.

An Account is one shared record (username, credentials, contact data)
plus a role-specific profile payload:

    UserProfile   - followed artists
    ArtistProfile - verification flag and Genius metadata
    AdminProfile  - privilege level and department

The role is derived from the payload type, so it cannot change after the
account is created (Account is frozen; the payload itself is mutable).
Services dispatch on the payload with `match`:

    match account.profile:
        case UserProfile(following=following): ...
        case ArtistProfile(verified=True): ...
        case AdminProfile(): ...

Songs and albums are not stored on the artist. They are derived views
computed by the store from the songs' and albums' owner usernames.

Equality and hashing use the lower-cased username, matching the
case-insensitive uniqueness the store enforces.
"""

from dataclasses import dataclass, field

from genius_catalog.core.exceptions import ValidationError
from genius_catalog.models.enums import Role


@dataclass
class UserProfile:
    """
    Regular user payload.

    Attributes:
        following: Usernames of followed artists, in follow order, no duplicates.
    """
    following: list[str] = field(default_factory=list)


@dataclass
class ArtistProfile:
    """
    Artist payload.

    Attributes:
        verified: Set only by an administrator. Gates login, follows,
                  album creation and public artist search.
        external_id: Genius artist id when the artist came from an import.
        image_url: Genius artist image, if known.
    """
    verified: bool = False
    external_id: str | None = None
    image_url: str | None = None


@dataclass
class AdminProfile:
    """Administrator payload. Both fields are informational only."""
    level: str = "Standard"
    department: str = "Platform Management"


Profile = UserProfile | ArtistProfile | AdminProfile


@dataclass(frozen=True, eq=False)
class Account:
    """
    A catalog account.

    Attributes:
        username: Unique login name (case-insensitive uniqueness).
        password_hash: bcrypt hash produced by core.security.hash_password.
        name: Display name. For artists this is the name shown on songs.
        age: Age in years.
        email: Contact address.
        profile: Role-specific payload; decides the role.
    """

    username: str
    password_hash: str
    name: str
    age: int
    email: str
    profile: Profile

    def __post_init__(self) -> None:
        if not self.username or not self.username.strip():
            raise ValidationError("Username cannot be empty", details={"field": "username"})
        if not isinstance(self.profile, (UserProfile, ArtistProfile, AdminProfile)):
            raise ValidationError(
                "Unknown account profile",
                details={"field": "profile", "type": type(self.profile).__name__}
            )

    @classmethod
    def new_user(cls, username: str, password_hash: str, name: str, age: int, email: str) -> "Account":
        return cls(username, password_hash, name, age, email, UserProfile())

    @classmethod
    def new_artist(
        cls,
        username: str,
        password_hash: str,
        name: str,
        age: int,
        email: str,
        verified: bool = False
    ) -> "Account":
        return cls(username, password_hash, name, age, email, ArtistProfile(verified=verified))

    @classmethod
    def new_admin(cls, username: str, password_hash: str, name: str, age: int, email: str) -> "Account":
        return cls(username, password_hash, name, age, email, AdminProfile())

    @property
    def key(self) -> str:
        """Case-folded username used for lookups and equality."""
        return self.username.lower()

    @property
    def role(self) -> Role:
        match self.profile:
            case UserProfile():
                return Role.USER
            case ArtistProfile():
                return Role.ARTIST
            case AdminProfile():
                return Role.ADMIN

    @property
    def is_user(self) -> bool:
        return isinstance(self.profile, UserProfile)

    @property
    def is_artist(self) -> bool:
        return isinstance(self.profile, ArtistProfile)

    @property
    def is_admin(self) -> bool:
        return isinstance(self.profile, AdminProfile)

    @property
    def is_verified_artist(self) -> bool:
        return isinstance(self.profile, ArtistProfile) and self.profile.verified

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Account):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        return f"{self.name} (@{self.username}, {self.role.display_name})"
