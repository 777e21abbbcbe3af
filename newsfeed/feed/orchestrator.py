"""Feed orchestrator: cache, generation, parsing, and the fallback chain."""

import logging
from typing import Optional

from newsfeed.cache.cache import FeedCache
from newsfeed.cache.store import KeyValueStore, build_store
from newsfeed.config import Settings, get_settings
from newsfeed.errors import ParseError, QuotaExceededError, TransportError
from newsfeed.feed.mock import MockSynthesizer
from newsfeed.generation.client import GeminiClient
from newsfeed.generation.parser import ResponseParser
from newsfeed.generation.prompts import build_feed_prompt, local_now
from newsfeed.models.schemas import Feed, category_label

logger = logging.getLogger(__name__)


class FeedOrchestrator:
    """
    Resolves a feed for (category, query). Never raises.

    Per call, in order:
    1. Cache check (skipped when forced)
    2. Credential check (mock feed when no key)
    3. Prompt construction
    4. Generation call with search grounding
    5. Parse and enrich
    6. Persist (best-effort)
    7. On failure: stale cache, then mock feed
    """

    def __init__(
        self,
        cache: FeedCache,
        client,
        parser: Optional[ResponseParser] = None,
        mock: Optional[MockSynthesizer] = None,
        timezone: str = "America/Lima",
    ):
        self.cache = cache
        self.client = client
        self.parser = parser or ResponseParser()
        self.mock = mock or MockSynthesizer()
        self.timezone = timezone

    async def fetch_feed(
        self,
        category,
        query: Optional[str] = None,
        force_refresh: bool = False,
    ) -> Feed:
        """
        Get the feed for a category or free-text query.

        Args:
            category: Category label (NewsCategory or free string).
            query: Optional free-text search.
            force_refresh: Skip the fresh-cache read.

        Returns:
            A live, stale-cached, or mock Feed.
        """
        label = category_label(category)

        if not force_refresh:
            cached = self.cache.peek(label, query)
            if cached is not None:
                logger.info(f"[Cache Hit] Returning cached data for {label}")
                return cached

        if not self.client.is_configured:
            logger.warning("API Key missing, using mock data.")
            return self.mock.synthesize(label)

        logger.info(f"[API Fetch] Fetching fresh data for {label}")
        prompt = build_feed_prompt(label, query, now=local_now(self.timezone))

        try:
            raw_text = await self.client.generate(prompt, use_search=True)
            feed = self.parser.parse(raw_text, label).unwrap()
        except QuotaExceededError as e:
            logger.warning(f"[API Warning] Quota limit reached, switching to offline mode: {e}")
            return self._fallback(label, query)
        except (TransportError, ParseError) as e:
            logger.error(f"Error fetching news for {label}: {e}")
            return self._fallback(label, query)
        except Exception:
            logger.exception(f"Unexpected error fetching news for {label}")
            return self._fallback(label, query)

        # Result ignored: a failed write only means the next call refetches.
        self.cache.put(label, feed, query)
        return feed

    def _fallback(self, label: str, query: Optional[str]) -> Feed:
        stale = self.cache.get(label, query, ignore_expiry=True)
        if stale is not None:
            logger.info("[Fallback] Returning stale cache due to API error.")
            return stale

        logger.info("[Fallback] No cache available. Generating mock data.")
        return self.mock.synthesize(label)


def merge_category(previous: Optional[Feed], refreshed: Feed, category) -> Feed:
    """
    Replace one category block of an aggregate feed with a refreshed batch.

    Refreshed articles are relabelled with the category and prepended. Prior
    articles whose label equals or contains the category are dropped; all
    others are kept untouched, as are the previous hashtags.
    """
    if previous is None:
        return refreshed

    label = category_label(category)
    new_articles = [a.model_copy(update={"category": label}) for a in refreshed.articles]
    others = [
        a for a in previous.articles
        if a.category != label and label not in a.category
    ]
    return previous.model_copy(update={"articles": new_articles + others})


def build_orchestrator(
    settings: Optional[Settings] = None,
    store: Optional[KeyValueStore] = None,
    client: Optional[GeminiClient] = None,
) -> FeedOrchestrator:
    """Wire an orchestrator from settings."""
    settings = settings or get_settings()
    store = store or build_store(settings)
    cache = FeedCache(store, ttl_ms=settings.cache_ttl_ms, prefix=settings.cache_prefix)
    client = client or GeminiClient.from_settings(settings)
    return FeedOrchestrator(cache, client, timezone=settings.timezone)
