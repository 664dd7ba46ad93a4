"""
Domain services for genius-catalog.

Components:
    - AccountService: registration, login, verification, follows, notifications
    - CatalogService: songs, albums, comments, views, Genius import
    - LyricEditService: the lyric edit review workflow

Usage:
    from genius_catalog.services import AccountService, CatalogService, LyricEditService

    accounts = AccountService(store)
    catalog = CatalogService(store, genius=client, lyrics_pool=pool)
    edits = LyricEditService(store)
"""

from genius_catalog.services.accounts import AccountService
from genius_catalog.services.catalog import CatalogService, genre_from_tags, synthesize_username
from genius_catalog.services.lyric_edits import LyricEditService

__all__ = [
    "AccountService",
    "CatalogService",
    "LyricEditService",
    "genre_from_tags",
    "synthesize_username",
]
