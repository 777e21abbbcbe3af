"""Reader session: current view, category refresh, and periodic auto-refresh."""

import asyncio
import logging
from typing import List, Optional, Set

from newsfeed.feed.orchestrator import FeedOrchestrator, merge_category
from newsfeed.generation.article import ArticleBodyGenerator
from newsfeed.models.schemas import Article, Feed, NewsCategory, category_label

logger = logging.getLogger(__name__)

AUTO_REFRESH_INTERVAL = 60.0
CONNECTION_ERROR = "No pudimos conectar con el servicio de noticias."
DEFAULT_TRENDING_TAGS = ["#PoliticaPeru", "#Congreso", "#Actualidad", "#UltimoMinuto", "#Peru"]


class FeedSession:
    """
    State of one reader session on top of the orchestrator.

    Owns the auto-refresh task: start() schedules it, stop() cancels it.
    Ticks are skipped while an article is open or a search is active.
    """

    def __init__(
        self,
        orchestrator: FeedOrchestrator,
        article_generator: Optional[ArticleBodyGenerator] = None,
        category=NewsCategory.PORTADA,
        auto_refresh_interval: float = AUTO_REFRESH_INTERVAL,
    ):
        self.orchestrator = orchestrator
        self.article_generator = article_generator or ArticleBodyGenerator(orchestrator.client)
        self.current_category: str = category_label(category)
        self.auto_refresh_interval = auto_refresh_interval

        self.feed: Optional[Feed] = None
        self.loading = False
        self.loading_message = ""
        self.error: Optional[str] = None
        self.search_mode = False
        self.search_query = ""
        self.selected_article: Optional[Article] = None
        self.trending_tags: List[str] = list(DEFAULT_TRENDING_TAGS)
        self.refreshing: Set[str] = set()

        self._timer: Optional[asyncio.Task] = None

    async def __aenter__(self) -> "FeedSession":
        self.start()
        return self

    async def __aexit__(self, *exc) -> None:
        await self.stop()

    # ----- Loading -----

    async def load(self, category, query: Optional[str] = None, auto_refresh: bool = False) -> None:
        """Load a feed into the session. Auto-refreshes force a fresh fetch."""
        label = category_label(category)
        if not auto_refresh:
            self.loading = True
            self.loading_message = (
                f'Investigando: "{query}"...' if query
                else "Sincronizando noticias en tiempo real..."
            )
            self.feed = None
            self.selected_article = None

        self.error = None
        try:
            feed = await self.orchestrator.fetch_feed(label, query, force_refresh=auto_refresh)

            if auto_refresh and not feed.articles:
                return

            self.feed = feed
            if feed.hashtags:
                self.trending_tags = list(feed.hashtags)
        except Exception:
            logger.exception(f"Could not load feed for {label}")
            if not auto_refresh:
                self.error = CONNECTION_ERROR
        finally:
            self.loading = False
            self.loading_message = ""

    async def change_category(self, category) -> None:
        self.search_mode = False
        self.search_query = ""
        self.selected_article = None
        self.current_category = category_label(category)
        await self.load(self.current_category)

    async def search(self, query: str) -> None:
        """Free-text search across the front page context."""
        self.search_mode = True
        self.search_query = query
        self.selected_article = None
        await self.load(NewsCategory.PORTADA, query)

    async def search_tag(self, tag: str) -> None:
        await self.search(f"Noticias recientes sobre {tag.replace('#', '', 1)}")

    # ----- Article view -----

    def select_article(self, article: Article) -> None:
        self.selected_article = article

    def back_to_grid(self) -> None:
        self.selected_article = None

    async def read_article(self, article: Article) -> Article:
        """Open an article and fill in its generated body."""
        self.select_article(article)
        body = await self.article_generator.generate_body(article)
        article.full_content = body
        return article

    # ----- Category refresh -----

    async def refresh_category(self, category) -> Optional[Feed]:
        """
        Re-fetch one category and merge it into the current feed.

        Returns:
            The merged feed, or None if a refresh of this category is
            already in flight.
        """
        label = category_label(category)
        if label in self.refreshing:
            logger.info(f"Refresh already running for {label}, ignoring request")
            return None

        self.refreshing.add(label)
        logger.info(f"Refreshing category: {label}")
        try:
            updated = await self.orchestrator.fetch_feed(label, None, force_refresh=True)
            self.feed = merge_category(self.feed, updated, label)
            return self.feed
        except Exception:
            logger.exception(f"Failed to refresh category {label}")
            return None
        finally:
            self.refreshing.discard(label)

    # ----- Auto-refresh -----

    @property
    def auto_refresh_running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def start(self) -> None:
        """Schedule the periodic auto-refresh on the running loop."""
        if self.auto_refresh_running:
            return
        self._timer = asyncio.create_task(self._run_timer())

    async def stop(self) -> None:
        """Cancel the auto-refresh task; no further ticks fire."""
        timer, self._timer = self._timer, None
        if timer is None:
            return
        timer.cancel()
        try:
            await timer
        except asyncio.CancelledError:
            pass

    async def _run_timer(self) -> None:
        while True:
            await asyncio.sleep(self.auto_refresh_interval)
            await self.tick()

    async def tick(self) -> bool:
        """Run one auto-refresh step. Returns False when the tick was suppressed."""
        if self.selected_article is not None or self.search_mode:
            logger.debug("Auto-refresh skipped: article open or search active")
            return False
        logger.info("Auto-refreshing news...")
        await self.load(self.current_category, auto_refresh=True)
        return True
