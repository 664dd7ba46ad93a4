"""
Account lifecycle: registration, login, artist verification, follows.

All operations report expected failures (unknown account, wrong role,
already following, ...) as None/False and never raise. Authorization
failures are indistinguishable from validation failures to the caller.

Artist registration:
    A new artist is inserted into the account directory right away with
    verified=False and placed on the approval queue. Until an
    administrator verifies it, the artist cannot log in, be followed,
    get albums, or appear in search_artists().

Notifications:
    follow_artist   -> the user:   "You are now following <artist name>"
    verify_artist   -> the artist: "Your account has been verified by admin <admin name>"
    reject_artist   -> the artist: "Your artist application was rejected by admin <admin name>"
"""

from genius_catalog.core.logger import get_logger
from genius_catalog.core.security import hash_password, verify_password
from genius_catalog.models.accounts import Account, ArtistProfile, UserProfile
from genius_catalog.models.content import Song
from genius_catalog.models.enums import Role
from genius_catalog.storage.store import CatalogStore

logger = get_logger(__name__)


class AccountService:
    """
    Registration, authentication and the follow graph.

    Attributes:
        store: The catalog store.
    """

    def __init__(self, store: CatalogStore) -> None:
        self.store = store

    def register(
        self,
        username: str,
        password: str,
        name: str,
        age: int,
        email: str,
        role: Role | str = Role.USER
    ) -> Account | None:
        """
        Create an account.

        Args:
            username: Login name, unique case-insensitively.
            password: Plain password, hashed before storage.
            name: Display name.
            age: Age in years.
            email: Contact address.
            role: Role or role name ("user", "artist", "admin").

        Returns:
            The new account, or None if the username is blank or taken,
            the password is empty, or the role is unknown.
        """
        if isinstance(role, str):
            role = Role.from_string(role)
        if role is None:
            logger.debug(f"Registration of '{username}' refused: unknown role")
            return None
        if not username or not username.strip() or not password:
            return None

        username = username.strip()
        # bcrypt is slow, so hash before taking the store lock
        hashed = hash_password(password)
        with self.store.transaction():
            if self.store.get_account_by_username(username) is not None:
                logger.debug(f"Registration refused: username '{username}' is taken")
                return None

            match role:
                case Role.ARTIST:
                    account = Account.new_artist(username, hashed, name, age, email)
                    self.store.add_account(account)
                    self.store.add_artist_for_approval(account)
                case Role.ADMIN:
                    account = Account.new_admin(username, hashed, name, age, email)
                    self.store.add_account(account)
                case _:
                    account = Account.new_user(username, hashed, name, age, email)
                    self.store.add_account(account)

        logger.info(f"Registered {account.role.display_name} '{account.username}'")
        return account

    def login(self, username: str, password: str) -> Account | None:
        """
        Authenticate.

        Returns:
            The account, or None if unknown, the password is wrong, or the
            account is an artist not yet verified.
        """
        account = self.store.get_account_by_username(username)
        if account is None or password is None:
            return None
        if not verify_password(password, account.password_hash):
            return None
        if account.is_artist and not account.is_verified_artist:
            logger.debug(f"Login refused for unverified artist '{account.username}'")
            return None
        return account

    def follow_artist(self, user: Account | None, artist: Account | None) -> bool:
        if user is None or artist is None:
            return False
        if not user.is_user or not artist.is_verified_artist:
            return False

        with self.store.transaction():
            if not self.store.add_following(user, artist):
                return False
            self.store.add_user_notification(user, f"You are now following {artist.name}")
        return True

    def unfollow_artist(self, user: Account | None, artist: Account | None) -> bool:
        return self.store.remove_following(user, artist)

    def verify_artist(self, admin: Account | None, artist: Account | None) -> bool:
        """
        Verify an artist on behalf of an administrator.

        Verifying an artist that is already verified succeeds without
        sending a second notification.
        """
        if admin is None or artist is None or not admin.is_admin or not artist.is_artist:
            return False

        with self.store.transaction():
            already_verified = artist.is_verified_artist
            self.store.set_artist_verified(artist, True)
            self.store.remove_artist_for_approval(artist)
            if not already_verified:
                self.store.add_artist_notification(
                    artist, f"Your account has been verified by admin {admin.name}"
                )

        if not already_verified:
            logger.info(f"Artist '{artist.username}' verified by '{admin.username}'")
        return True

    def reject_artist(self, admin: Account | None, artist: Account | None) -> bool:
        """Remove a pending artist from the approval queue without verifying it."""
        if admin is None or artist is None or not admin.is_admin or not artist.is_artist:
            return False

        with self.store.transaction():
            if artist not in self.store.get_artists_for_approval():
                return False
            self.store.remove_artist_for_approval(artist)
            self.store.add_artist_notification(
                artist, f"Your artist application was rejected by admin {admin.name}"
            )

        logger.info(f"Artist application of '{artist.username}' rejected by '{admin.username}'")
        return True

    def get_artists_for_approval(self) -> list[Account]:
        return self.store.get_artists_for_approval()

    def get_followed_artists(self, user: Account | None) -> list[Account]:
        if user is None:
            return []
        match user.profile:
            case UserProfile(following=following):
                artists = (self.store.get_account_by_username(key) for key in list(following))
                return [a for a in artists if a is not None]
            case _:
                return []

    def get_user_notifications(self, user: Account | None) -> list[str]:
        return self.store.get_user_notifications(user)

    def get_artist_notifications(self, artist: Account | None) -> list[str]:
        return self.store.get_artist_notifications(artist)

    def clear_notifications(self, account: Account | None) -> None:
        if account is not None:
            self.store.clear_notifications(account.username)

    def get_new_releases_from_followed_artists(self, user: Account | None, limit: int = 10) -> list[Song]:
        """Songs of followed artists, newest release first."""
        songs: dict[str, Song] = {}
        for artist in self.get_followed_artists(user):
            for song in self.store.songs_by_artist(artist.username):
                songs.setdefault(song.song_id, song)

        newest_first = sorted(songs.values(), key=lambda s: s.release_date, reverse=True)
        return newest_first[:max(limit, 0)]

    def search_users(self, query: str | None) -> list[Account]:
        """Regular users whose username or name contains `query` (case-insensitive)."""
        return [a for a in self.store.get_accounts() if a.is_user and _matches(a, query)]

    def search_artists(self, query: str | None) -> list[Account]:
        """Verified artists whose username or name contains `query` (case-insensitive)."""
        return [
            a for a in self.store.get_accounts()
            if isinstance(a.profile, ArtistProfile) and a.profile.verified and _matches(a, query)
        ]


def _matches(account: Account, query: str | None) -> bool:
    if not query:
        return True
    needle = query.strip().lower()
    return needle in account.username.lower() or needle in account.name.lower()
