"""Generation endpoint client, prompts, response parsing, and article bodies."""

from newsfeed.generation.article import ArticleBodyGenerator
from newsfeed.generation.client import GeminiClient
from newsfeed.generation.parser import ResponseParser, parse_response

__all__ = ["ArticleBodyGenerator", "GeminiClient", "ResponseParser", "parse_response"]
