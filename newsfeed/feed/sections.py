"""Front-page grouping and pagination over a feed."""

from typing import List, Optional, Tuple

from newsfeed.models.schemas import Article, Feed, NewsCategory

PER_SECTION = 4
PER_PAGE = 10

# (section category, label matched loosely against article categories)
SECTION_MATCHERS: Tuple[Tuple[NewsCategory, str], ...] = (
    (NewsCategory.POLITICA, "Política"),
    (NewsCategory.ECONOMIA, "Economía"),
    (NewsCategory.SEGURIDAD, "Seguridad"),
    (NewsCategory.SOCIALES, "Sociales"),
    (NewsCategory.ELECCIONES, "Elecciones"),
)


def matches_category(article: Article, label: str) -> bool:
    """Loose category match: exact label or case-insensitive substring."""
    return article.category == label or label.lower() in article.category.lower()


def featured_article(feed: Feed) -> Optional[Article]:
    """Lead story: first politics or elections item, else the first item."""
    for article in feed.articles:
        if "Política" in article.category or "Elecciones" in article.category:
            return article
    return feed.articles[0] if feed.articles else None


def front_page_sections(
    feed: Feed,
    per_section: int = PER_SECTION,
) -> List[Tuple[NewsCategory, List[Article]]]:
    """Group a front-page feed into sub-category sections.

    The featured article is left out of every section. An article whose
    label matches several sections shows up in each of them.
    """
    featured = featured_article(feed)
    featured_id = featured.id if featured else None
    sections = []
    for category, label in SECTION_MATCHERS:
        items = [
            a for a in feed.articles
            if a.id != featured_id and matches_category(a, label)
        ]
        sections.append((category, items[:per_section]))
    return sections


def paginate(articles: List[Article], page: int = 1, per_page: int = PER_PAGE) -> List[Article]:
    """1-based page slice; out-of-range pages are empty."""
    if page < 1:
        return []
    start = (page - 1) * per_page
    return articles[start:start + per_page]


def page_count(articles: List[Article], per_page: int = PER_PAGE) -> int:
    return -(-len(articles) // per_page)
