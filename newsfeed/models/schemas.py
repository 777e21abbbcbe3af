"""Pydantic schemas for feeds, articles, cache entries, and comments."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from newsfeed.errors import ParseError


class NewsCategory(str, Enum):
    """Known feed categories. PORTADA is the front-page aggregate."""

    PORTADA = "Portada"
    POLITICA = "Política"
    ECONOMIA = "Economía"
    SEGURIDAD = "Seguridad Nacional"
    SOCIALES = "Sociales"
    ELECCIONES = "Elecciones 2026"


# The real sub-categories spanned by the front page, in display order.
SUBCATEGORIES = (
    NewsCategory.POLITICA,
    NewsCategory.ECONOMIA,
    NewsCategory.SEGURIDAD,
    NewsCategory.SOCIALES,
    NewsCategory.ELECCIONES,
)


def category_label(category) -> str:
    """Return the plain string label for a category or enum member."""
    if isinstance(category, NewsCategory):
        return category.value
    return str(category)


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Article(CamelModel):
    """A single news item as shown in the feed."""

    id: str = Field(description="Unique within one fetch batch")
    title: str
    summary: str
    source: str
    url: str
    image_url: str
    category: str = Field(description="Free-form label, may loosely match the request")
    published_time: str
    full_content: Optional[str] = Field(
        default=None, description="Generated article body, filled on demand"
    )


class Feed(CamelModel):
    """Ordered articles plus trending hashtags for one category or query."""

    articles: List[Article] = Field(default_factory=list)
    hashtags: List[str] = Field(default_factory=list)


class CacheEntry(CamelModel):
    """A persisted feed with the time it was stored."""

    timestamp: int = Field(description="Epoch milliseconds when the feed was cached")
    data: Feed


class Comment(CamelModel):
    """A reader comment attached to an article."""

    id: str
    user_name: str
    text: str
    timestamp: str


class ParseResult(BaseModel):
    """Outcome of parsing a generated response: a feed or a parse error."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    feed: Optional[Feed] = None
    error: Optional[ParseError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.feed is not None

    def unwrap(self) -> Feed:
        """Return the parsed feed or raise the parse error."""
        if self.error is not None:
            raise self.error
        if self.feed is None:
            raise ParseError("Empty parse result")
        return self.feed

    @classmethod
    def success(cls, feed: Feed) -> "ParseResult":
        return cls(feed=feed)

    @classmethod
    def failure(cls, message: str) -> "ParseResult":
        return cls(error=ParseError(message))
