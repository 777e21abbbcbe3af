"""Utility modules for the news feed."""

from newsfeed.utils.circuit_breaker import CircuitBreaker

__all__ = ["CircuitBreaker"]
