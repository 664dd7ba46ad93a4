"""
Storage module for genius-catalog.

    - store: CatalogStore, the locked in-memory source of truth
    - snapshot: CatalogSnapshot, JSON file persistence for the store

Usage:
    from genius_catalog.storage import CatalogSnapshot

    snapshot = CatalogSnapshot(config.storage.data_file)
    store = snapshot.load()
    ...
    snapshot.flush(store)
"""

from genius_catalog.storage.snapshot import SNAPSHOT_VERSION, CatalogSnapshot
from genius_catalog.storage.store import CatalogStore

__all__ = [
    "CatalogStore",
    "CatalogSnapshot",
    "SNAPSHOT_VERSION",
]
