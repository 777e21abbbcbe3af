"""FastAPI application for the Punto Pe news feed."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import List, Optional, Set

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from newsfeed.cache.store import build_store
from newsfeed.comments import CommentStore
from newsfeed.config import get_settings
from newsfeed.errors import StorageError
from newsfeed.feed.orchestrator import FeedOrchestrator, build_orchestrator, merge_category
from newsfeed.feed.sections import featured_article, front_page_sections
from newsfeed.generation.article import ArticleBodyGenerator
from newsfeed.models.schemas import Article, Comment, Feed, NewsCategory, category_label

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Global service instances
orchestrator: Optional[FeedOrchestrator] = None
article_generator: Optional[ArticleBodyGenerator] = None
comments: Optional[CommentStore] = None

# Categories with a merge refresh in flight
refreshing: Set[str] = set()


class RefreshRequest(BaseModel):
    category: str
    feed: Optional[Feed] = None


class ArticleBodyResponse(BaseModel):
    content: str


class CommentRequest(BaseModel):
    user_name: str
    text: str


class Section(BaseModel):
    category: str
    articles: List[Article]


class FrontPage(BaseModel):
    featured: Optional[Article] = None
    sections: List[Section]


def init_services() -> None:
    """Build the process-wide store, orchestrator, and collaborators."""
    global orchestrator, article_generator, comments
    settings = get_settings()
    store = build_store(settings)
    orchestrator = build_orchestrator(settings, store=store)
    article_generator = ArticleBodyGenerator(orchestrator.client)
    comments = CommentStore(store, prefix=settings.comments_prefix)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management."""
    logger.info("Starting Punto Pe news feed API...")
    if orchestrator is None:
        init_services()
    yield
    logger.info("Shutting down Punto Pe news feed API...")


app = FastAPI(
    title="Punto Pe News Feed API",
    description=(
        "Cached, fault-tolerant news feeds generated with Gemini search "
        "grounding, with full-article generation on demand."
    ),
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for frontend access
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.get("/api/feed", response_model=Feed, response_model_by_alias=True)
async def get_feed(
    category: str = NewsCategory.PORTADA.value,
    query: Optional[str] = None,
    force: bool = False,
):
    """Feed for a category or search query. Always answers with a feed."""
    return await orchestrator.fetch_feed(category, query, force_refresh=force)


@app.get("/api/sections", response_model=FrontPage, response_model_by_alias=True)
async def get_sections(force: bool = False):
    """Front page grouped into a featured story and sub-category sections."""
    feed = await orchestrator.fetch_feed(NewsCategory.PORTADA, None, force_refresh=force)
    return FrontPage(
        featured=featured_article(feed),
        sections=[
            Section(category=category.value, articles=items)
            for category, items in front_page_sections(feed)
        ],
    )


@app.post("/api/feed/refresh", response_model=Feed, response_model_by_alias=True)
async def refresh_category(request: RefreshRequest):
    """Re-fetch one category and merge it into the supplied feed."""
    label = category_label(request.category)
    if label in refreshing:
        raise HTTPException(status_code=409, detail=f"Refresh already running for {label}")

    refreshing.add(label)
    try:
        updated = await orchestrator.fetch_feed(label, None, force_refresh=True)
        return merge_category(request.feed, updated, label)
    finally:
        refreshing.discard(label)


@app.post("/api/article/body", response_model=ArticleBodyResponse)
async def article_body(article: Article):
    """Generate the full body of an article."""
    return ArticleBodyResponse(content=await article_generator.generate_body(article))


@app.get("/api/comments/{article_id}", response_model=List[Comment], response_model_by_alias=True)
async def list_comments(article_id: str):
    return comments.list(article_id)


@app.post(
    "/api/comments/{article_id}",
    response_model=Comment,
    response_model_by_alias=True,
    status_code=201,
)
async def add_comment(article_id: str, request: CommentRequest):
    try:
        return comments.add(article_id, request.user_name, request.text)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except StorageError as e:
        logger.warning(f"Could not save comment for {article_id}: {e}")
        raise HTTPException(status_code=507, detail="Comment storage is full")
