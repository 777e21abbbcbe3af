"""Content enrichment for generated news items."""

from newsfeed.enrichment.images import IMAGE_POOLS, image_for, pool_for, title_hash

__all__ = ["IMAGE_POOLS", "image_for", "pool_for", "title_hash"]
