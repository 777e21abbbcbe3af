"""Punto Pe news feed: cached, fault-tolerant news summaries generated with Gemini."""

__version__ = "0.1.0"
