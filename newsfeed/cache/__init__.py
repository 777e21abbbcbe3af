"""Feed cache and key-value store module."""

from newsfeed.cache.cache import FeedCache, normalize_query
from newsfeed.cache.store import FileStore, KeyValueStore, MemoryStore, build_store

__all__ = [
    "FeedCache",
    "FileStore",
    "KeyValueStore",
    "MemoryStore",
    "build_store",
    "normalize_query",
]
