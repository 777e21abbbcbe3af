"""Tests for the reader session: loading, category refresh, auto-refresh."""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from newsfeed.feed.session import CONNECTION_ERROR, DEFAULT_TRENDING_TAGS, FeedSession
from newsfeed.models.schemas import NewsCategory

EMPTY_PAYLOAD = json.dumps({"news_items": [], "hashtags": ["#Vacio"]})


class TestLoading:
    """Tests for explicit and automatic loads."""

    @pytest.mark.asyncio
    async def test_load_sets_feed_and_trending_tags(self, make_client, make_orchestrator):
        session = FeedSession(make_orchestrator(make_client()))
        await session.load(NewsCategory.PORTADA)

        assert len(session.feed.articles) == 3
        assert session.trending_tags == ["#Congreso", "#BCR", "#Elecciones2026"]
        assert session.loading is False
        assert session.error is None

    @pytest.mark.asyncio
    async def test_empty_hashtags_keep_previous_tags(self, make_client, make_orchestrator):
        client = make_client([json.dumps({"news_items": [{"headline": "x"}], "hashtags": []})])
        session = FeedSession(make_orchestrator(client))
        await session.load("Política")

        assert session.trending_tags == DEFAULT_TRENDING_TAGS

    @pytest.mark.asyncio
    async def test_auto_refresh_forces_fetch(self, make_client, make_orchestrator):
        client = make_client()
        session = FeedSession(make_orchestrator(client))

        await session.load("Política")
        await session.load("Política", auto_refresh=True)

        assert len(client.calls) == 2

    @pytest.mark.asyncio
    async def test_empty_auto_refresh_keeps_previous_feed(self, make_client, make_orchestrator):
        client = make_client([json.dumps({"news_items": [{"headline": "Primera"}]}), EMPTY_PAYLOAD])
        session = FeedSession(make_orchestrator(client))

        await session.load("Política")
        previous = session.feed
        await session.load("Política", auto_refresh=True)

        assert session.feed is previous

    @pytest.mark.asyncio
    async def test_orchestrator_failure_sets_error_on_first_load(self):
        orchestrator = MagicMock()
        orchestrator.fetch_feed = AsyncMock(side_effect=RuntimeError("unreachable"))
        session = FeedSession(orchestrator)

        await session.load(NewsCategory.PORTADA)

        assert session.error == CONNECTION_ERROR
        assert session.feed is None

    @pytest.mark.asyncio
    async def test_orchestrator_failure_is_silent_on_auto_refresh(self):
        orchestrator = MagicMock()
        orchestrator.fetch_feed = AsyncMock(side_effect=RuntimeError("unreachable"))
        session = FeedSession(orchestrator)

        await session.load(NewsCategory.PORTADA, auto_refresh=True)

        assert session.error is None


class TestNavigation:
    """Tests for category changes, search, and article view."""

    @pytest.mark.asyncio
    async def test_search_tag(self, make_client, make_orchestrator):
        client = make_client()
        session = FeedSession(make_orchestrator(client))

        await session.search_tag("#Congreso")

        assert session.search_mode is True
        assert session.search_query == "Noticias recientes sobre Congreso"
        assert 'sobre: "Noticias recientes sobre Congreso"' in client.calls[0][0]

    @pytest.mark.asyncio
    async def test_change_category_leaves_search_mode(self, make_client, make_orchestrator):
        session = FeedSession(make_orchestrator(make_client()))
        await session.search("pensiones")
        await session.change_category(NewsCategory.ECONOMIA)

        assert session.search_mode is False
        assert session.search_query == ""
        assert session.current_category == "Economía"

    @pytest.mark.asyncio
    async def test_read_article_fills_body(self, make_client, make_orchestrator):
        client = make_client([json.dumps({"news_items": [{"headline": "x"}]}), "## Cuerpo"])
        session = FeedSession(make_orchestrator(client))
        await session.load("Política")

        article = await session.read_article(session.feed.articles[0])

        assert article.full_content == "## Cuerpo"
        assert session.selected_article is article
        session.back_to_grid()
        assert session.selected_article is None


class TestCategoryRefresh:
    """Tests for merge refreshes and the in-flight guard."""

    @pytest.mark.asyncio
    async def test_refresh_merges_into_front_page(self, make_client, make_orchestrator):
        refreshed = json.dumps({"news_items": [{"headline": "Nueva", "relevant_category": "Economía"}]})
        client = make_client([json.dumps({"news_items": [
            {"headline": "P", "relevant_category": "Política"},
            {"headline": "E", "relevant_category": "Economía"},
        ]}), refreshed])
        session = FeedSession(make_orchestrator(client))
        await session.load(NewsCategory.PORTADA)

        merged = await session.refresh_category(NewsCategory.ECONOMIA)

        assert [a.title for a in merged.articles] == ["Nueva", "P"]
        assert session.feed is merged
        assert session.refreshing == set()

    @pytest.mark.asyncio
    async def test_concurrent_refresh_of_same_category_is_rejected(
        self, make_client, make_orchestrator
    ):
        gate = asyncio.Event()
        client = make_client(gate=gate)
        session = FeedSession(make_orchestrator(client))

        first = asyncio.create_task(session.refresh_category("Sociales"))
        await asyncio.sleep(0)
        assert "Sociales" in session.refreshing

        assert await session.refresh_category("Sociales") is None

        gate.set()
        assert await first is not None
        assert len(client.calls) == 1
        assert session.refreshing == set()

    @pytest.mark.asyncio
    async def test_different_categories_refresh_independently(
        self, make_client, make_orchestrator
    ):
        gate = asyncio.Event()
        client = make_client(gate=gate)
        session = FeedSession(make_orchestrator(client))

        tasks = [
            asyncio.create_task(session.refresh_category("Sociales")),
            asyncio.create_task(session.refresh_category("Economía")),
        ]
        await asyncio.sleep(0)
        assert session.refreshing == {"Sociales", "Economía"}

        gate.set()
        await asyncio.gather(*tasks)
        assert len(client.calls) == 2


class TestAutoRefresh:
    """Tests for the periodic timer."""

    @pytest.mark.asyncio
    async def test_tick_suppressed_while_reading(self, make_client, make_orchestrator):
        client = make_client()
        session = FeedSession(make_orchestrator(client))
        await session.load("Política")
        session.select_article(session.feed.articles[0])

        assert await session.tick() is False
        assert len(client.calls) == 1

    @pytest.mark.asyncio
    async def test_tick_suppressed_in_search_mode(self, make_client, make_orchestrator):
        client = make_client()
        session = FeedSession(make_orchestrator(client))
        await session.search("pensiones")

        assert await session.tick() is False
        assert len(client.calls) == 1

    @pytest.mark.asyncio
    async def test_tick_refreshes_current_category(self, make_client, make_orchestrator):
        client = make_client()
        session = FeedSession(make_orchestrator(client), category="Política")
        await session.load("Política")

        assert await session.tick() is True
        assert len(client.calls) == 2

    @pytest.mark.asyncio
    async def test_timer_fires_until_stopped(self, make_client, make_orchestrator):
        client = make_client()
        session = FeedSession(make_orchestrator(client), auto_refresh_interval=0.01)

        async with session:
            assert session.auto_refresh_running
            await asyncio.sleep(0.05)

        fired = len(client.calls)
        assert fired >= 1
        assert not session.auto_refresh_running

        await asyncio.sleep(0.05)
        assert len(client.calls) == fired
