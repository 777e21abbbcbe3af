"""Extract and validate the feed payload from raw generated text."""

import json
import logging
import time
from typing import Any, Callable, List, Optional

from newsfeed.enrichment.images import image_for
from newsfeed.models.schemas import Article, Feed, ParseResult, category_label

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Sin titular"
DEFAULT_SUMMARY = "Sin resumen disponible"
DEFAULT_SOURCE = "Fuente desconocida"
DEFAULT_URL = "#"
JUST_NOW = "Hace instantes"
DEFAULT_HASHTAGS = ["#Peru", "#Noticias", "#Actualidad"]


def extract_json_text(raw_text: str) -> str:
    """Slice from the first '{' to the last '}', or strip code fences if absent."""
    first = raw_text.find("{")
    last = raw_text.rfind("}")
    if first != -1 and last != -1 and last > first:
        return raw_text[first:last + 1]
    return raw_text.replace("```json", "").replace("```", "").strip()


def _text(item: dict, key: str, default: Optional[str]) -> Optional[str]:
    value = item.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        value = str(value)
    if not value.strip():
        return default
    return value


def _hashtags(value: Any) -> List[str]:
    if not isinstance(value, list):
        return list(DEFAULT_HASHTAGS)
    return [str(tag).strip() for tag in value if tag is not None and str(tag).strip()]


class ResponseParser:
    """Turns noisy generated text into a validated, enriched Feed."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock

    def parse(self, raw_text: Optional[str], requested_category) -> ParseResult:
        """
        Parse a generated response.

        Args:
            raw_text: Response text, possibly wrapped in prose or code fences.
            requested_category: Category used when an item carries none.

        Returns:
            ParseResult holding the Feed, or a ParseError when no valid
            structure is found.
        """
        if not raw_text:
            return ParseResult.failure("Empty response text")

        try:
            payload = json.loads(extract_json_text(raw_text))
        except json.JSONDecodeError as e:
            return ParseResult.failure(f"Response is not valid JSON: {e}")

        if not isinstance(payload, dict):
            return ParseResult.failure("Invalid JSON structure: root is not an object")

        items = payload.get("news_items")
        if not isinstance(items, list):
            return ParseResult.failure("Invalid JSON structure: missing news_items array")

        fallback_category = category_label(requested_category)
        batch_ms = int(self._clock() * 1000)
        articles = []
        for index, item in enumerate(items):
            if not isinstance(item, dict):
                logger.warning(f"Skipping non-object news item at index {index}")
                continue

            headline = _text(item, "headline", None)
            raw_category = _text(item, "relevant_category", None)
            articles.append(
                Article(
                    id=f"news-{index}-{batch_ms}",
                    title=headline or DEFAULT_TITLE,
                    summary=_text(item, "summary", DEFAULT_SUMMARY),
                    source=_text(item, "source_name", DEFAULT_SOURCE),
                    url=_text(item, "source_url", DEFAULT_URL),
                    image_url=image_for(headline, raw_category),
                    category=raw_category or fallback_category,
                    published_time=JUST_NOW,
                )
            )

        return ParseResult.success(
            Feed(articles=articles, hashtags=_hashtags(payload.get("hashtags")))
        )


def parse_response(raw_text: Optional[str], requested_category) -> ParseResult:
    """Parse with a default parser."""
    return ResponseParser().parse(raw_text, requested_category)
