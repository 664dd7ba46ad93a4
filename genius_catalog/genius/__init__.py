"""
Genius integration for genius-catalog.

Components:
    - GeniusClient: song search and lyrics scraping via lyricsgenius
    - SearchHit: one song of a search response
    - LyricsWorkerPool: background threads filling in imported lyrics

Usage:
    from genius_catalog.genius import GeniusClient, LyricsWorkerPool
"""

from genius_catalog.genius.client import GeniusClient, SearchHit
from genius_catalog.genius.worker import LyricsWorkerPool

__all__ = [
    "GeniusClient",
    "SearchHit",
    "LyricsWorkerPool",
]
