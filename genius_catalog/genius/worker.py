"""
Background lyrics fetching for imported songs.

An import creates songs with the LYRICS_LOADING placeholder and hands
each one to the LyricsWorkerPool. Worker threads scrape Genius and
replace the placeholder with the lyrics text, or with LYRICS_UNAVAILABLE
when the fetch fails.

Lyrics are a "nice to have": a failure never removes or blocks the song.
Every failure is logged with log_lyrics_failure() so it shows up in
lyrics_failures.log.

Writes go through CatalogStore.replace_placeholder_lyrics(), which only
touches songs still showing the placeholder. A fetch that finishes after
an artist edited the lyrics (or an edit was approved) is discarded.

The CLI process is short-lived, so the import command calls drain()
before saving: it waits for outstanding fetches up to a timeout and
downgrades whatever is still loading.

Usage:
    with LyricsWorkerPool(store, client, threads=3) as pool:
        pool.submit(song.song_id, hit.path)
        ...
        pool.drain(timeout=60, show_progress=True)
"""

import threading
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from concurrent.futures import TimeoutError as FuturesTimeoutError

from tqdm import tqdm

from genius_catalog.core.exceptions import CatalogError
from genius_catalog.core.logger import get_logger, log_lyrics_failure
from genius_catalog.genius.client import GeniusClient
from genius_catalog.models.content import LYRICS_UNAVAILABLE
from genius_catalog.storage.store import CatalogStore

logger = get_logger(__name__)


class LyricsWorkerPool:
    """
    Fixed-size thread pool that fills in lyrics of imported songs.

    Attributes:
        store: Store holding the songs.
        client: Genius client used for scraping.
        threads: Number of worker threads.
    """

    def __init__(self, store: CatalogStore, client: GeniusClient, threads: int = 3) -> None:
        self.store = store
        self.client = client
        self.threads = threads
        self._executor = ThreadPoolExecutor(max_workers=threads, thread_name_prefix="lyrics")
        self._futures: dict[Future, str] = {}
        self._lock = threading.Lock()
        self._drained = False

    def __enter__(self) -> "LyricsWorkerPool":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        # After a drain, fetches still running are abandoned; a late result
        # only lands if the song still shows the loading placeholder.
        self.shutdown(wait=exc_type is None and not self._drained)

    def submit(self, song_id: str, path: str | None) -> Future:
        """Schedule a lyrics fetch for a song showing the loading placeholder."""
        future = self._executor.submit(self._fetch, song_id, path)
        with self._lock:
            self._futures[future] = song_id
            self._drained = False
        return future

    @property
    def pending(self) -> int:
        with self._lock:
            return sum(1 for f in self._futures if not f.done())

    def _fetch(self, song_id: str, path: str | None) -> bool:
        """
        Fetch and store the lyrics of one song.

        Returns:
            True if real lyrics were stored, False otherwise.
        """
        song = self.store.get_song(song_id)
        if song is None:
            return False

        title = song.title
        artist = self._artist_name(song.primary_artist)

        if not path:
            self._mark_unavailable(song_id, title, artist, path, "no Genius page")
            return False

        try:
            lyrics = self.client.fetch_lyrics(path)
        except CatalogError as e:
            self._mark_unavailable(song_id, title, artist, path, e.message)
            return False

        if not lyrics:
            self._mark_unavailable(song_id, title, artist, path, "page has no lyrics")
            return False

        if self.store.replace_placeholder_lyrics(song_id, lyrics):
            logger.debug(f"Lyrics loaded for {artist} - {title}")
            return True

        logger.debug(f"Lyrics of {artist} - {title} changed meanwhile, fetched text discarded")
        return False

    def _mark_unavailable(
        self,
        song_id: str,
        title: str,
        artist: str,
        path: str | None,
        reason: str
    ) -> None:
        if self.store.replace_placeholder_lyrics(song_id, LYRICS_UNAVAILABLE):
            log_lyrics_failure(logger, title, artist, path, reason)

    def _artist_name(self, username: str) -> str:
        account = self.store.get_account_by_username(username)
        return account.name if account is not None else username

    def drain(self, timeout: float | None = None, show_progress: bool = False) -> int:
        """
        Wait for outstanding fetches, then give up on the rest.

        Args:
            timeout: Seconds to wait in total. None waits indefinitely.
            show_progress: Show a tqdm bar while waiting.

        Returns:
            Number of songs downgraded to LYRICS_UNAVAILABLE because their
            fetch did not finish (timed out or crashed).
        """
        with self._lock:
            futures = dict(self._futures)

        if futures:
            iterator = as_completed(futures, timeout=timeout)
            if show_progress:
                iterator = tqdm(iterator, total=len(futures), desc="Lyrics", unit="song")

            try:
                for future in iterator:
                    if future.cancelled():
                        continue
                    error = future.exception()
                    if error is not None:
                        logger.error(f"Lyrics worker crashed for song {futures[future]}: {error}")
            except FuturesTimeoutError:
                logger.warning(f"Lyrics fetch timed out after {timeout}s")
            finally:
                if show_progress:
                    iterator.close()

        downgraded = 0
        for future, song_id in futures.items():
            if future.done() and not future.cancelled() and future.exception() is None:
                continue
            future.cancel()
            song = self.store.get_song(song_id)
            if song is None:
                continue
            if self.store.replace_placeholder_lyrics(song_id, LYRICS_UNAVAILABLE):
                log_lyrics_failure(
                    logger, song.title, self._artist_name(song.primary_artist),
                    song.api_path, "fetch did not finish"
                )
                downgraded += 1

        with self._lock:
            for future in futures:
                self._futures.pop(future, None)
            self._drained = True
        return downgraded

    def shutdown(self, wait: bool = True) -> None:
        """Stop the pool. Queued fetches that have not started are cancelled."""
        self._executor.shutdown(wait=wait, cancel_futures=True)
