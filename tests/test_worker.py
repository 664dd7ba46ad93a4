# tests/test_worker.py
"""Test the background lyrics worker pool"""

import logging
import threading
import time
from datetime import date
from unittest.mock import Mock

import pytest

from genius_catalog.core.exceptions import LyricsError
from genius_catalog.genius import LyricsWorkerPool
from genius_catalog.models import LYRICS_LOADING, LYRICS_UNAVAILABLE, Genre, Song


@pytest.fixture
def loading_song(store, other_artist):
    song = Song(
        "Blinding Lights", LYRICS_LOADING, [other_artist.key], Genre.POP, date(2019, 11, 29),
        external_id=378195, api_path="/The-weeknd-blinding-lights-lyrics",
    )
    store.add_song(song)
    return song


class TestLyricsWorkerPool:
    """Test fetching, failures and draining"""

    def test_fetch_fills_in_lyrics(self, store, loading_song):
        """Test a successful fetch replaces the placeholder"""
        client = Mock()
        client.fetch_lyrics.return_value = "I've been tryna call"

        with LyricsWorkerPool(store, client, threads=2) as pool:
            future = pool.submit(loading_song.song_id, loading_song.api_path)
            assert future.result(timeout=5) is True
            assert pool.drain(timeout=5) == 0

        assert loading_song.lyrics == "I've been tryna call"
        client.fetch_lyrics.assert_called_once_with("/The-weeknd-blinding-lights-lyrics")

    @pytest.mark.parametrize("side_effect,return_value", [
        (LyricsError("Lyrics request failed"), None),
        (None, None),
        (None, ""),
    ])
    def test_failures_mark_unavailable(self, store, loading_song, caplog, side_effect, return_value):
        """Test errors and empty pages downgrade the song and log it"""
        client = Mock()
        client.fetch_lyrics.side_effect = side_effect
        client.fetch_lyrics.return_value = return_value

        with caplog.at_level(logging.WARNING):
            with LyricsWorkerPool(store, client) as pool:
                assert pool.submit(loading_song.song_id, loading_song.api_path).result(timeout=5) is False

        assert loading_song.lyrics == LYRICS_UNAVAILABLE
        assert "No lyrics for: The Weeknd - Blinding Lights" in caplog.text

    def test_missing_path_marks_unavailable(self, store, loading_song):
        """Test a song without a Genius page is not fetched"""
        client = Mock()
        with LyricsWorkerPool(store, client) as pool:
            pool.submit(loading_song.song_id, None).result(timeout=5)

        assert loading_song.lyrics == LYRICS_UNAVAILABLE
        client.fetch_lyrics.assert_not_called()

    def test_late_fetch_does_not_overwrite_edit(self, store, loading_song):
        """Test lyrics set while the fetch runs are kept"""
        started = threading.Event()
        release = threading.Event()

        def slow_fetch(path):
            started.set()
            release.wait(timeout=5)
            return "scraped lyrics"

        client = Mock()
        client.fetch_lyrics.side_effect = slow_fetch

        with LyricsWorkerPool(store, client) as pool:
            future = pool.submit(loading_song.song_id, loading_song.api_path)
            assert started.wait(timeout=5)
            store.set_lyrics(loading_song.song_id, "approved lyrics")
            release.set()
            assert future.result(timeout=5) is False

        assert loading_song.lyrics == "approved lyrics"

    def test_drain_timeout_downgrades_unfinished(self, store, loading_song):
        """Test songs still loading after the timeout become unavailable"""
        release = threading.Event()

        def stuck_fetch(path):
            release.wait(timeout=5)
            return "too late"

        client = Mock()
        client.fetch_lyrics.side_effect = stuck_fetch

        pool = LyricsWorkerPool(store, client)
        try:
            pool.submit(loading_song.song_id, loading_song.api_path)
            assert pool.drain(timeout=0.1) == 1
            assert loading_song.lyrics == LYRICS_UNAVAILABLE
        finally:
            release.set()
            pool.shutdown()

        assert loading_song.lyrics == LYRICS_UNAVAILABLE
        assert pool.pending == 0

    def test_exit_after_drain_does_not_wait(self, store, loading_song):
        """Test leaving the pool after a timed-out drain returns without the slow fetch"""
        release = threading.Event()

        def slow_fetch(path):
            release.wait(timeout=3)
            return "too late"

        client = Mock()
        client.fetch_lyrics.side_effect = slow_fetch

        started = time.monotonic()
        try:
            with LyricsWorkerPool(store, client) as pool:
                pool.submit(loading_song.song_id, loading_song.api_path)
                assert pool.drain(timeout=0.2) == 1
            elapsed = time.monotonic() - started
        finally:
            release.set()

        assert elapsed < 1.0
        assert loading_song.lyrics == LYRICS_UNAVAILABLE

    def test_drain_without_work(self, store):
        """Test draining an idle pool returns immediately"""
        with LyricsWorkerPool(store, Mock()) as pool:
            assert pool.drain(timeout=1, show_progress=True) == 0

    def test_worker_crash_downgrades_song(self, store, loading_song):
        """Test an unexpected exception in a worker does not leave the song loading"""
        client = Mock()
        client.fetch_lyrics.side_effect = RuntimeError("parser exploded")

        with LyricsWorkerPool(store, client) as pool:
            pool.submit(loading_song.song_id, loading_song.api_path)
            assert pool.drain(timeout=5) == 1

        assert loading_song.lyrics == LYRICS_UNAVAILABLE
