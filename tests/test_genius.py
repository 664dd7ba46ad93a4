# tests/test_genius.py
"""Test the Genius client and song import"""

import threading
from datetime import date
from unittest.mock import Mock, patch

import pytest
import requests

from genius_catalog.core.exceptions import GeniusError, LyricsError
from genius_catalog.genius import GeniusClient, SearchHit
from genius_catalog.models import LYRICS_LOADING, LYRICS_UNAVAILABLE, Account, Genre
from genius_catalog.services import CatalogService, genre_from_tags, synthesize_username


def _result(song_id=378195, title="Blinding Lights", artist="The Weeknd", **extra):
    result = {
        "id": song_id,
        "title": title,
        "path": f"/The-weeknd-{title.lower().replace(' ', '-')}-lyrics",
        "primary_artist": {"name": artist},
        "song_art_image_thumbnail_url": "https://images.genius.com/thumb.jpg",
    }
    result.update(extra)
    return {"result": result}


def _hit(external_id=1, title="Blinding Lights", artist="The Weeknd", **kwargs):
    return SearchHit(
        external_id=external_id,
        title=title,
        primary_artist_name=artist,
        path=f"/song-{external_id}-lyrics",
        **kwargs
    )


class TestGeniusClient:
    """Test GeniusClient against a mocked lyricsgenius"""

    def test_missing_token_is_auth_error(self):
        """Test searching without a token fails as an auth error"""
        client = GeniusClient(None)
        with pytest.raises(GeniusError) as exc_info:
            client.search("blinding lights")
        assert exc_info.value.is_auth_error

    @patch("genius_catalog.genius.client.lyricsgenius.Genius")
    def test_client_created_once(self, mock_genius):
        """Test the lyricsgenius client is created lazily and reused"""
        client = GeniusClient("token", timeout=7, retries=2)
        assert client.genius is client.genius
        mock_genius.assert_called_once()
        args, kwargs = mock_genius.call_args
        assert args == ("token",)
        assert kwargs["timeout"] == 7
        assert kwargs["retries"] == 2
        assert kwargs["verbose"] is False

    @patch("genius_catalog.genius.client.lyricsgenius.Genius")
    def test_search_parses_hits(self, mock_genius):
        """Test hits are converted and incomplete ones skipped"""
        mock_genius.return_value.search_songs.return_value = {
            "hits": [
                _result(
                    release_date_components={"year": 2019, "month": 11, "day": 29},
                    tags=[{"name": "R&B"}, {"name": "Pop"}],
                ),
                {"result": {"id": 5, "title": "No path"}},
                _result(song_id=2, title="Starboy", release_date_components={"year": 2016, "month": None}),
            ]
        }

        hits = GeniusClient("token").search("the weeknd")

        assert [h.external_id for h in hits] == [378195, 2]
        first = hits[0]
        assert first.title == "Blinding Lights"
        assert first.primary_artist_name == "The Weeknd"
        assert first.release_date == date(2019, 11, 29)
        assert first.tags == ("r&b", "pop")
        assert first.url == "https://genius.com/The-weeknd-blinding-lights-lyrics"
        assert hits[1].release_date is None

    @patch("genius_catalog.genius.client.lyricsgenius.Genius")
    def test_search_blank_query(self, mock_genius):
        """Test a blank query returns nothing without calling Genius"""
        assert GeniusClient("token").search("  ") == []
        mock_genius.return_value.search_songs.assert_not_called()

    @patch("genius_catalog.genius.client.lyricsgenius.Genius")
    def test_search_unauthorized(self, mock_genius):
        """Test a 401 response is reported as an auth error"""
        mock_genius.return_value.search_songs.side_effect = requests.exceptions.HTTPError(
            response=Mock(status_code=401)
        )
        with pytest.raises(GeniusError) as exc_info:
            GeniusClient("bad-token").search("song")
        assert exc_info.value.is_auth_error

    @patch("genius_catalog.genius.client.lyricsgenius.Genius")
    def test_search_timeout(self, mock_genius):
        """Test network failures become GeniusError"""
        mock_genius.return_value.search_songs.side_effect = requests.exceptions.Timeout("slow")
        with pytest.raises(GeniusError) as exc_info:
            GeniusClient("token").search("song")
        assert not exc_info.value.is_auth_error

    @patch("genius_catalog.genius.client.lyricsgenius.Genius")
    def test_fetch_lyrics(self, mock_genius):
        """Test lyrics are fetched by page URL and stripped"""
        mock_genius.return_value.lyrics.return_value = "\n  I've been tryna call  \n"

        lyrics = GeniusClient("token").fetch_lyrics("/The-weeknd-blinding-lights-lyrics")

        assert lyrics == "I've been tryna call"
        mock_genius.return_value.lyrics.assert_called_once_with(
            song_url="https://genius.com/The-weeknd-blinding-lights-lyrics"
        )

    @patch("genius_catalog.genius.client.lyricsgenius.Genius")
    def test_fetch_lyrics_empty_page(self, mock_genius):
        """Test a page without lyrics yields None"""
        mock_genius.return_value.lyrics.return_value = None
        assert GeniusClient("token").fetch_lyrics("https://genius.com/x-lyrics") is None

    @patch("genius_catalog.genius.client.lyricsgenius.Genius")
    def test_fetch_lyrics_failure(self, mock_genius):
        """Test request failures become LyricsError"""
        mock_genius.return_value.lyrics.side_effect = requests.exceptions.ConnectionError("down")
        with pytest.raises(LyricsError):
            GeniusClient("token").fetch_lyrics("/x-lyrics")


class TestImportHelpers:
    """Test username synthesis and genre guessing"""

    def test_synthesize_username(self):
        """Test names are lower-cased with non-alphanumerics replaced"""
        assert synthesize_username("The Weeknd") == "the_weeknd"
        assert synthesize_username("AC/DC") == "ac_dc"
        assert synthesize_username("Beyoncé") == "beyonc_"

    def test_genre_from_tags(self):
        """Test the first matching tag decides the genre"""
        assert genre_from_tags(["hip-hop"]) == Genre.HIP_HOP
        assert genre_from_tags(["Pop Rock"]) == Genre.ROCK
        assert genre_from_tags(["r&b", "pop"]) == Genre.RNB
        assert genre_from_tags(["country"]) == Genre.POP
        assert genre_from_tags([]) == Genre.POP


class TestImportSongs:
    """Test CatalogService.import_songs"""

    def _service(self, store, hits, pool=None):
        genius = Mock()
        genius.search.return_value = hits
        return CatalogService(store, genius=genius, lyrics_pool=pool)

    def test_import_creates_verified_artist(self, store):
        """Test an unknown artist is created from the hit"""
        hit = _hit(tags=("r&b",), release_date=date(2019, 11, 29))
        catalog = self._service(store, [hit])

        [song] = catalog.import_songs("blinding lights")

        artist = store.get_account_by_username("the_weeknd")
        assert artist is not None
        assert artist.is_verified_artist
        assert artist.name == "The Weeknd"
        assert artist.email == "the_weeknd@genius.com"
        assert artist.age == 30
        assert song.artists == ["the_weeknd"]
        assert song.genre == Genre.RNB
        assert song.release_date == date(2019, 11, 29)
        assert song.external_id == 1
        assert song.api_path == "/song-1-lyrics"

    def test_import_without_pool_marks_lyrics_unavailable(self, store):
        """Test songs are not left loading when nobody fetches lyrics"""
        catalog = self._service(store, [_hit()])
        [song] = catalog.import_songs("blinding lights")
        assert song.lyrics == LYRICS_UNAVAILABLE

    def test_import_schedules_lyrics(self, store):
        """Test new songs start loading and are handed to the pool"""
        pool = Mock()
        catalog = self._service(store, [_hit(1), _hit(2, title="Starboy")], pool)

        songs = catalog.import_songs("the weeknd")

        assert [s.lyrics for s in songs] == [LYRICS_LOADING, LYRICS_LOADING]
        assert pool.submit.call_count == 2
        pool.submit.assert_any_call(songs[0].song_id, "/song-1-lyrics")

    def test_import_defaults(self, store):
        """Test missing date and tags fall back to today and Pop"""
        catalog = self._service(store, [_hit()])
        [song] = catalog.import_songs("x")
        assert song.release_date == date.today()
        assert song.genre == Genre.POP

    def test_reimport_reuses_song(self, store):
        """Test a Genius id is imported only once"""
        pool = Mock()
        catalog = self._service(store, [_hit()], pool)

        first = catalog.import_songs("blinding lights")
        second = catalog.import_songs("blinding lights")

        assert first == second
        assert len(store.get_songs()) == 1
        assert len(store.get_artists()) == 1
        assert pool.submit.call_count == 1

    def test_existing_artist_matched_by_name(self, store, other_artist):
        """Test the primary artist is matched case-insensitively by display name"""
        catalog = self._service(store, [_hit(artist="the weeknd")])
        [song] = catalog.import_songs("x")
        assert song.artists == [other_artist.key]
        assert len(store.get_artists()) == 1

    def test_username_collision_gets_suffix(self, store, password_hash):
        """Test a taken synthesized username is suffixed"""
        store.add_account(Account.new_user("the_weeknd", password_hash, "Fan", 20, "fan@example.com"))
        catalog = self._service(store, [_hit()])

        [song] = catalog.import_songs("x")

        assert song.artists == ["the_weeknd_2"]
        assert store.get_account_by_username("the_weeknd_2").name == "The Weeknd"

    def test_search_failure_returns_empty(self, store):
        """Test a failed search imports nothing"""
        genius = Mock()
        genius.search.side_effect = GeniusError("Genius search failed")
        catalog = CatalogService(store, genius=genius)

        assert catalog.import_songs("x") == []
        assert store.get_songs() == []

    def test_rejected_token_is_raised(self, store):
        """Test an authentication failure is not mistaken for an empty search"""
        genius = Mock()
        genius.search.side_effect = GeniusError("Genius rejected the access token", is_auth_error=True)
        catalog = CatalogService(store, genius=genius)

        with pytest.raises(GeniusError) as exc_info:
            catalog.import_songs("x")
        assert exc_info.value.is_auth_error
        assert store.get_songs() == []

    def test_artist_password_hashed_outside_store_lock(self, store):
        """Test other threads can use the store while a new artist's secret is hashed"""
        unblocked = []

        def hash_while_reading_store(password):
            reader = threading.Thread(target=store.get_accounts)
            reader.start()
            reader.join(timeout=2)
            unblocked.append(not reader.is_alive())
            return "hashed"

        catalog = self._service(store, [_hit()])
        with patch("genius_catalog.services.catalog.hash_password", side_effect=hash_while_reading_store):
            assert len(catalog.import_songs("x")) == 1

        assert unblocked == [True]
        assert store.get_account_by_username("the_weeknd").password_hash == "hashed"

    def test_blank_query_or_no_client(self, store):
        """Test nothing happens without a query or a client"""
        assert CatalogService(store).import_songs("blinding lights") == []
        assert self._service(store, [_hit()]).import_songs("  ") == []
        assert store.get_songs() == []
