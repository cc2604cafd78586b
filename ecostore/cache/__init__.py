"""In-memory mirror of the remote document database."""

from .items import CacheCollection, CacheCollections, CacheEntry, EntityKind
from .manager import CacheManager
from .store import FIELD_KINDS, SCOPE_KINDS, CachedDocumentStore, route

__all__ = [
    "CacheCollection",
    "CacheCollections",
    "CacheEntry",
    "CacheManager",
    "CachedDocumentStore",
    "EntityKind",
    "FIELD_KINDS",
    "SCOPE_KINDS",
    "route",
]
