"""
Demo data for an empty catalog.

`catalog seed` fills a fresh catalog with a handful of accounts, songs,
albums, comments, lyric edits and follows so every command can be tried
without a Genius token.

Accounts created (username / password):
    admin / admin123                 - administrator
    taylor_swift / swift123          - verified artist
    the_weeknd / weeknd123           - verified artist
    ed_sheeran / sheeran123          - verified artist
    billie_eilish / eilish123        - verified artist
    new_artist / artist123           - artist waiting for approval
    john_doe / doe123                - user
    jane_smith / smith123            - user
    music_fan / fan123               - user
"""

from dataclasses import dataclass
from datetime import date

from genius_catalog.core.logger import get_logger
from genius_catalog.core.security import hash_password
from genius_catalog.models.accounts import Account
from genius_catalog.models.content import LyricEdit
from genius_catalog.models.enums import Genre
from genius_catalog.services.accounts import AccountService
from genius_catalog.services.catalog import CatalogService
from genius_catalog.storage.store import CatalogStore

logger = get_logger(__name__)


# (username, password, name, age, email)
ADMINS = [
    ("admin", "admin123", "System Admin", 35, "admin@genius.com"),
]

# (username, password, name, age, email, verified)
ARTISTS = [
    ("taylor_swift", "swift123", "Taylor Swift", 33, "taylor@example.com", True),
    ("the_weeknd", "weeknd123", "The Weeknd", 33, "weeknd@example.com", True),
    ("ed_sheeran", "sheeran123", "Ed Sheeran", 32, "ed@example.com", True),
    ("billie_eilish", "eilish123", "Billie Eilish", 21, "billie@example.com", True),
    ("new_artist", "artist123", "New Artist", 25, "new@example.com", False),
]

USERS = [
    ("john_doe", "doe123", "John Doe", 25, "john@example.com"),
    ("jane_smith", "smith123", "Jane Smith", 28, "jane@example.com"),
    ("music_fan", "fan123", "Music Fan", 22, "fan@example.com"),
]

# (title, lyrics, artist, genre, release date, thumbnail, views)
# Demo songs have no Genius id
SONGS = [
    ("Blank Space", "Nice to meet you, where you been?...", "taylor_swift",
     Genre.POP, date(2014, 11, 10), "https://example.com/blank_space.jpg", 1_500_000),
    ("Love Story", "We were both young when I first saw you...", "taylor_swift",
     Genre.COUNTRY_POP, date(2008, 9, 12), "https://example.com/love_story.jpg", 2_500_000),
    ("Blinding Lights", "I've been tryna call...", "the_weeknd",
     Genre.POP, date(2019, 11, 29),
     "https://upload.wikimedia.org/wikipedia/en/e/e6/The_Weeknd_-_Blinding_Lights.png", 3_000_000),
    ("Starboy", "I'm tryna put you in the worst mood, ah...", "the_weeknd",
     Genre.RNB, date(2016, 9, 22), None, 1_800_000),
    ("Shape of You", "The club isn't the best place to find a lover...", "ed_sheeran",
     Genre.POP, date(2017, 1, 6), None, 3_500_000),
    ("Perfect", "I found a love for me...", "ed_sheeran",
     Genre.POP, date(2017, 3, 3), None, 2_200_000),
    ("bad guy", "White shirt now red, my bloody nose...", "billie_eilish",
     Genre.ALTERNATIVE, date(2019, 3, 29), None, 2_800_000),
    ("Ocean Eyes", "I've been watching you for some time...", "billie_eilish",
     Genre.INDIE_POP, date(2016, 11, 18), None, 1_200_000),
]

# (title, artist, release date, track titles)
ALBUMS = [
    ("1989", "taylor_swift", date(2014, 10, 27), ["Blank Space"]),
    ("After Hours", "the_weeknd", date(2020, 3, 20), ["Blinding Lights"]),
    ("÷ (Divide)", "ed_sheeran", date(2017, 3, 3), ["Shape of You", "Perfect"]),
    ("When We All Fall Asleep, Where Do We Go?", "billie_eilish", date(2019, 3, 29), ["bad guy"]),
]

# (song title, author, text)
COMMENTS = [
    ("Blank Space", "john_doe", "This song is amazing! The lyrics are so clever."),
    ("Blinding Lights", "jane_smith", "Can't stop listening to this track!"),
    ("Shape of You", "music_fan", "The beat is so catchy!"),
    ("bad guy", "john_doe", "Billie's voice is hauntingly beautiful."),
]

# (song title, suggested by, original, proposed, explanation)
LYRIC_EDITS = [
    ("Blank Space", "music_fan", "Magic, madness, heaven, sin", "Magic, madness, heaven sent",
     "I think it's 'heaven sent' based on live performances"),
    ("Blinding Lights", "jane_smith", "I've been tryna call", "I've been trying to call",
     "Correcting grammar"),
]

# (user, artist)
FOLLOWS = [
    ("john_doe", "taylor_swift"),
    ("john_doe", "the_weeknd"),
    ("jane_smith", "billie_eilish"),
    ("music_fan", "ed_sheeran"),
    ("music_fan", "taylor_swift"),
]


@dataclass
class SeedSummary:
    """Counts of what seed_catalog() created."""
    accounts: int = 0
    songs: int = 0
    albums: int = 0
    comments: int = 0
    lyric_edits: int = 0
    follows: int = 0


def seed_catalog(store: CatalogStore) -> SeedSummary | None:
    """
    Fill an empty store with demo data.

    Returns:
        What was created, or None if the store already holds accounts
        (seeding never mixes demo data into a real catalog).
    """
    if store.get_accounts():
        logger.warning("Catalog is not empty, demo data not added")
        return None

    accounts = AccountService(store)
    catalog = CatalogService(store)
    summary = SeedSummary()

    with store.transaction():
        for username, password, name, age, email in ADMINS:
            store.add_account(Account.new_admin(username, hash_password(password), name, age, email))
            summary.accounts += 1

        for username, password, name, age, email, verified in ARTISTS:
            artist = Account.new_artist(username, hash_password(password), name, age, email, verified=verified)
            store.add_account(artist)
            if not verified:
                store.add_artist_for_approval(artist)
            summary.accounts += 1

        for username, password, name, age, email in USERS:
            store.add_account(Account.new_user(username, hash_password(password), name, age, email))
            summary.accounts += 1

        songs = {}
        for title, lyrics, artist, genre, released, thumbnail, views in SONGS:
            song = catalog.create_song(
                title, lyrics, store.get_account_by_username(artist), genre, released,
                thumbnail_url=thumbnail
            )
            song.set_views(views)
            songs[title] = song
            summary.songs += 1

        for title, artist, released, tracks in ALBUMS:
            album = catalog.create_album(title, store.get_account_by_username(artist), released)
            for track in tracks:
                catalog.add_song_to_album(album, songs[track])
            summary.albums += 1

        for song_title, author, text in COMMENTS:
            if catalog.add_comment(store.get_account_by_username(author), songs[song_title], text):
                summary.comments += 1

        for song_title, suggested_by, original, proposed, explanation in LYRIC_EDITS:
            store.add_lyric_edit(LyricEdit(
                suggested_by=suggested_by,
                song_id=songs[song_title].song_id,
                original_lyrics=original,
                proposed_lyrics=proposed,
                explanation=explanation,
            ))
            summary.lyric_edits += 1

        for user, artist in FOLLOWS:
            if accounts.follow_artist(store.get_account_by_username(user), store.get_account_by_username(artist)):
                summary.follows += 1

    logger.info(
        f"Demo data added: {summary.accounts} accounts, {summary.songs} songs, "
        f"{summary.albums} albums"
    )
    return summary
