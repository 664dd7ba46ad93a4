"""Test configuration and fixtures"""

from datetime import date

import bcrypt
import pytest

from genius_catalog.core.security import hash_password
from genius_catalog.models import Account, Genre
from genius_catalog.services import AccountService, CatalogService, LyricEditService
from genius_catalog.storage import CatalogStore

PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    """Use the cheapest bcrypt cost so account-heavy tests stay fast"""
    real_gensalt = bcrypt.gensalt
    monkeypatch.setattr(bcrypt, "gensalt", lambda rounds=4, prefix=b"2b": real_gensalt(4, prefix))


@pytest.fixture(autouse=True)
def no_genius_token(monkeypatch):
    """Keep a developer's token (environment or .env) out of the tests"""
    monkeypatch.delenv("GENIUS_API_TOKEN", raising=False)
    monkeypatch.setattr("genius_catalog.core.config.load_dotenv", lambda *args, **kwargs: False)


@pytest.fixture
def store():
    return CatalogStore()


@pytest.fixture
def accounts(store):
    return AccountService(store)


@pytest.fixture
def catalog(store):
    return CatalogService(store)


@pytest.fixture
def edits(store):
    return LyricEditService(store)


@pytest.fixture
def password():
    return PASSWORD


@pytest.fixture
def password_hash(password):
    return hash_password(password)


@pytest.fixture
def admin(store, password_hash):
    account = Account.new_admin("admin", password_hash, "System Admin", 35, "admin@example.com")
    store.add_account(account)
    return account


@pytest.fixture
def artist(store, password_hash):
    account = Account.new_artist(
        "taylor_swift", password_hash, "Taylor Swift", 33, "taylor@example.com", verified=True
    )
    store.add_account(account)
    return account


@pytest.fixture
def other_artist(store, password_hash):
    account = Account.new_artist(
        "the_weeknd", password_hash, "The Weeknd", 33, "weeknd@example.com", verified=True
    )
    store.add_account(account)
    return account


@pytest.fixture
def user(store, password_hash):
    account = Account.new_user("john_doe", password_hash, "John Doe", 25, "john@example.com")
    store.add_account(account)
    return account


@pytest.fixture
def other_user(store, password_hash):
    account = Account.new_user("jane_smith", password_hash, "Jane Smith", 28, "jane@example.com")
    store.add_account(account)
    return account


@pytest.fixture
def song(catalog, artist):
    return catalog.create_song(
        "Blank Space", "Magic, madness, heaven, sin", artist, Genre.POP, date(2014, 11, 10)
    )
