"""Tests for the HTTP API."""

import json

import pytest
from fastapi.testclient import TestClient

from newsfeed.api import main
from newsfeed.comments import CommentStore
from newsfeed.generation.article import ArticleBodyGenerator


@pytest.fixture
def api(monkeypatch, make_client, make_orchestrator, store, clock):
    """TestClient with services wired to a scripted generation client."""

    def _make(responses=None, configured=True):
        client = make_client(responses, configured=configured)
        orchestrator = make_orchestrator(client)
        monkeypatch.setattr(main, "orchestrator", orchestrator)
        monkeypatch.setattr(main, "article_generator", ArticleBodyGenerator(client))
        monkeypatch.setattr(main, "comments", CommentStore(store, clock=clock))
        monkeypatch.setattr(main, "refreshing", set())
        return TestClient(main.app), client

    return _make


class TestFeedEndpoints:
    def test_health(self, api):
        http, _ = api()
        response = http.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_feed_camel_case(self, api):
        http, client = api()
        response = http.get("/api/feed", params={"category": "Política"})

        assert response.status_code == 200
        body = response.json()
        assert len(body["articles"]) == 3
        assert "imageUrl" in body["articles"][0]
        assert "publishedTime" in body["articles"][0]
        assert body["hashtags"] == ["#Congreso", "#BCR", "#Elecciones2026"]
        assert client.calls[0][1] is True

    def test_feed_without_key_is_mock(self, api):
        http, client = api(configured=False)
        body = http.get("/api/feed").json()

        assert client.calls == []
        assert all(a["source"] == "Punto Pe Alerta" for a in body["articles"])

    def test_sections(self, api):
        http, _ = api()
        body = http.get("/api/sections").json()

        assert body["featured"]["title"].startswith("Congreso")
        categories = [s["category"] for s in body["sections"]]
        assert categories[0] == "Política"
        featured_id = body["featured"]["id"]
        for section in body["sections"]:
            assert featured_id not in [a["id"] for a in section["articles"]]


class TestRefreshEndpoint:
    def test_refresh_merges_into_supplied_feed(self, api):
        refreshed = json.dumps(
            {"news_items": [{"headline": "Nueva", "relevant_category": "Economía"}]}
        )
        http, _ = api([refreshed])
        previous = {
            "articles": [
                {
                    "id": "a", "title": "P", "summary": "s", "source": "f", "url": "#",
                    "imageUrl": "x", "category": "Política", "publishedTime": "t",
                },
                {
                    "id": "b", "title": "E", "summary": "s", "source": "f", "url": "#",
                    "imageUrl": "x", "category": "Economía", "publishedTime": "t",
                },
            ],
            "hashtags": ["#Antes"],
        }

        response = http.post("/api/feed/refresh", json={"category": "Economía", "feed": previous})

        assert response.status_code == 200
        body = response.json()
        assert [a["title"] for a in body["articles"]] == ["Nueva", "P"]
        assert body["hashtags"] == ["#Antes"]
        assert main.refreshing == set()

    def test_refresh_in_flight_conflicts(self, api, monkeypatch):
        http, client = api()
        monkeypatch.setattr(main, "refreshing", {"Economía"})

        response = http.post("/api/feed/refresh", json={"category": "Economía"})

        assert response.status_code == 409
        assert client.calls == []


class TestArticleAndComments:
    def test_article_body(self, api):
        http, client = api(["## Cuerpo completo"])
        article = {
            "id": "a", "title": "Titular", "summary": "Resumen", "source": "RPP", "url": "#",
            "imageUrl": "x", "category": "Política", "publishedTime": "t",
        }

        response = http.post("/api/article/body", json=article)

        assert response.status_code == 200
        assert response.json()["content"] == "## Cuerpo completo"
        assert client.calls[0][1] is False

    def test_comments_round_trip(self, api):
        http, _ = api()
        created = http.post("/api/comments/a", json={"user_name": "Ana", "text": "Bien"})
        assert created.status_code == 201
        assert created.json()["userName"] == "Ana"

        listed = http.get("/api/comments/a").json()
        assert [c["text"] for c in listed] == ["Bien"]

    def test_blank_comment_rejected(self, api):
        http, _ = api()
        response = http.post("/api/comments/a", json={"user_name": "Ana", "text": "  "})
        assert response.status_code == 422
