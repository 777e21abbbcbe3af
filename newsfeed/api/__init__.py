"""HTTP API for the news feed."""
