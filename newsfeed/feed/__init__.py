"""Feed acquisition, fallback, and session handling."""

from newsfeed.feed.mock import MockSynthesizer
from newsfeed.feed.orchestrator import FeedOrchestrator, build_orchestrator, merge_category
from newsfeed.feed.session import FeedSession

__all__ = [
    "FeedOrchestrator",
    "FeedSession",
    "MockSynthesizer",
    "build_orchestrator",
    "merge_category",
]
