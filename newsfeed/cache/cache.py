"""TTL feed cache over an injected key-value store.

Entries are stored as {"timestamp": <epoch ms>, "data": <feed>} under
"<prefix>_<category>_<query or 'default'>". Expired entries stay readable
through ignore_expiry so the orchestrator can serve stale data when the
generation endpoint fails. Writes are best-effort.
"""

import json
import logging
import re
import time
from typing import Callable, Optional

from pydantic import ValidationError

from newsfeed.cache.store import KeyValueStore
from newsfeed.errors import StorageError
from newsfeed.models.schemas import CacheEntry, Feed, category_label

logger = logging.getLogger(__name__)

DEFAULT_TTL_MS = 2 * 60 * 1000
DEFAULT_PREFIX = "puntope_cache"


def normalize_query(query: Optional[str]) -> str:
    """Collapse whitespace and case so equivalent queries share a key."""
    if not query:
        return "default"
    normalized = re.sub(r"\s+", " ", query).strip().lower()
    return normalized or "default"


class FeedCache:
    """Feed cache keyed by (category, query) with a fixed TTL."""

    def __init__(
        self,
        store: KeyValueStore,
        ttl_ms: int = DEFAULT_TTL_MS,
        prefix: str = DEFAULT_PREFIX,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize the cache.

        Args:
            store: Shared key-value store.
            ttl_ms: Milliseconds an entry is served on normal reads.
            prefix: Key namespace for feed entries.
            clock: Returns the current time in seconds since the epoch.
        """
        self.store = store
        self.ttl_ms = ttl_ms
        self.prefix = prefix
        self._clock = clock

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def cache_key(self, category, query: Optional[str] = None) -> str:
        return f"{self.prefix}_{category_label(category)}_{normalize_query(query)}"

    def _discard(self, key: str) -> None:
        try:
            self.store.delete(key)
        except StorageError as e:
            logger.warning(f"Could not delete cache entry {key}: {e}")

    def _read(self, key: str) -> Optional[CacheEntry]:
        raw = self.store.get(key)
        if raw is None:
            return None

        try:
            return CacheEntry.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.error(f"Error parsing cache entry {key}: {e}")
            self._discard(key)
            return None

    def _expired(self, entry: CacheEntry) -> bool:
        return self._now_ms() - entry.timestamp > self.ttl_ms

    def get(
        self,
        category,
        query: Optional[str] = None,
        ignore_expiry: bool = False,
    ) -> Optional[Feed]:
        """Read a cached feed.

        Args:
            category: Feed category label.
            query: Optional free-text query.
            ignore_expiry: Return the entry even when older than the TTL.

        Returns:
            The stored feed, or None when absent, expired, or corrupt.
            Expired entries are deleted unless ignore_expiry is set.
        """
        key = self.cache_key(category, query)
        entry = self._read(key)
        if entry is None:
            return None

        if not ignore_expiry and self._expired(entry):
            self._discard(key)
            return None

        return entry.data

    def peek(self, category, query: Optional[str] = None) -> Optional[Feed]:
        """Fresh feed or None, leaving expired entries in place for stale fallback."""
        entry = self._read(self.cache_key(category, query))
        if entry is None or self._expired(entry):
            return None
        return entry.data

    def put(self, category, feed: Feed, query: Optional[str] = None) -> bool:
        """Store a feed under its key, overwriting any previous entry.

        Returns:
            True if the write succeeded. Failures (e.g. storage quota) are
            logged and reported as False, never raised.
        """
        key = self.cache_key(category, query)
        entry = CacheEntry(timestamp=self._now_ms(), data=feed)
        try:
            self.store.put(key, entry.model_dump_json(by_alias=True))
            return True
        except StorageError as e:
            logger.warning(f"Storage full or error saving to cache: {e}")
            return False
