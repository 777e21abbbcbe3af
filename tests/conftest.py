"""Shared fixtures for the news feed tests."""

import asyncio
import json

import pytest

from newsfeed.cache.cache import FeedCache
from newsfeed.cache.store import MemoryStore
from newsfeed.feed.mock import MockSynthesizer
from newsfeed.feed.orchestrator import FeedOrchestrator
from newsfeed.generation.parser import ResponseParser


SAMPLE_PAYLOAD = {
    "news_items": [
        {
            "headline": "Congreso aprueba reforma del sistema de pensiones",
            "summary": "El pleno aprobó en segunda votación la reforma previsional.",
            "source_name": "El Comercio",
            "source_url": "https://elcomercio.pe/politica/reforma",
            "relevant_category": "Política",
        },
        {
            "headline": "BCR mantiene la tasa de referencia",
            "summary": "El directorio del BCR decidió mantener la tasa en 4.75%.",
            "source_name": "Gestión",
            "source_url": "https://gestion.pe/economia/bcr",
            "relevant_category": "Economía",
        },
        {
            "headline": "JNE publica cronograma electoral",
            "summary": "El JNE fijó las fechas clave del proceso electoral.",
            "source_name": "RPP",
            "source_url": "https://rpp.pe/elecciones/jne",
            "relevant_category": "Elecciones 2026",
        },
    ],
    "hashtags": ["#Congreso", "#BCR", "#Elecciones2026"],
}


class FakeClock:
    """Controllable epoch-seconds clock."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeClient:
    """Scripted stand-in for GeminiClient.

    Responses are consumed in order; the last one repeats. Exceptions in the
    script are raised instead of returned. An optional gate blocks calls
    until it is set.
    """

    def __init__(self, responses=None, configured: bool = True, gate: asyncio.Event = None):
        self.responses = list(responses or [json.dumps(SAMPLE_PAYLOAD)])
        self.is_configured = configured
        self.gate = gate
        self.calls = []

    async def generate(self, prompt: str, use_search: bool = False) -> str:
        self.calls.append((prompt, use_search))
        if self.gate is not None:
            await self.gate.wait()
        result = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def sample_text():
    """Generated response with conversational wrapping."""
    return f"Claro, aquí tienes las noticias:\n{json.dumps(SAMPLE_PAYLOAD)}\n¡Saludos!"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def cache(store, clock):
    return FeedCache(store, clock=clock)


@pytest.fixture
def make_client():
    """Factory for scripted clients."""
    return FakeClient


@pytest.fixture
def make_orchestrator(cache, clock):
    """Factory wiring an orchestrator around a client and the shared cache."""

    def _make(client):
        return FeedOrchestrator(
            cache,
            client,
            parser=ResponseParser(clock=clock),
            mock=MockSynthesizer(clock=clock),
        )

    return _make
