"""Pydantic models for structured data."""

from .schemas import (
    SUBCATEGORIES,
    Article,
    CacheEntry,
    Comment,
    Feed,
    NewsCategory,
    ParseResult,
    category_label,
)

__all__ = [
    "SUBCATEGORIES",
    "Article",
    "CacheEntry",
    "Comment",
    "Feed",
    "NewsCategory",
    "ParseResult",
    "category_label",
]
