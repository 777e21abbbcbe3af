"""Gemini generation client with search grounding."""

import asyncio
import logging
from typing import Optional

from google import genai
from google.genai import types

from newsfeed.config import get_settings
from newsfeed.errors import (
    MissingCredentialError,
    QuotaExceededError,
    TransportError,
    is_quota_error,
)
from newsfeed.utils.circuit_breaker import CircuitBreaker

logger = logging.getLogger(__name__)

# Search grounding tools by configured name
SEARCH_TOOLS = {
    "google_search": lambda: types.Tool(google_search=types.GoogleSearch()),
    "google_search_retrieval": lambda: types.Tool(
        google_search_retrieval=types.GoogleSearchRetrieval()
    ),
}
DEFAULT_SEARCH_TOOL = "google_search"


class GeminiClient:
    """
    Thin async wrapper around the google-genai SDK.

    The SDK call is synchronous, so it runs in a worker thread via
    asyncio.to_thread. SDK exceptions are translated into TransportError
    or QuotaExceededError; a missing key raises MissingCredentialError.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        search_tool: Optional[str] = None,
        breaker: Optional[CircuitBreaker] = None,
    ):
        """Initialize the client. A missing key is allowed and checked per call.

        Settings are only read for arguments left as None.
        """
        settings = None
        if api_key is None or model is None or search_tool is None or breaker is None:
            settings = get_settings()

        self.api_key = api_key if api_key is not None else settings.gemini_api_key
        self.model_name = model or settings.gemini_model
        self.search_tool = search_tool or settings.search_tool
        self.breaker = breaker or CircuitBreaker(
            service="gemini",
            failure_threshold=settings.circuit_failure_threshold,
            reset_timeout=settings.circuit_reset_timeout,
        )

        if self.search_tool not in SEARCH_TOOLS:
            logger.warning(
                f"Unknown search tool {self.search_tool!r}, using {DEFAULT_SEARCH_TOOL}"
            )
            self.search_tool = DEFAULT_SEARCH_TOOL

        self._sdk: Optional[genai.Client] = None
        if self.is_configured:
            self._sdk = genai.Client(api_key=self.api_key)
        else:
            logger.error("API Key is missing. Ensure GEMINI_API_KEY is set.")

    @classmethod
    def from_settings(cls, settings) -> "GeminiClient":
        return cls(
            api_key=settings.gemini_api_key or "",
            model=settings.gemini_model,
            search_tool=settings.search_tool,
            breaker=CircuitBreaker(
                service="gemini",
                failure_threshold=settings.circuit_failure_threshold,
                reset_timeout=settings.circuit_reset_timeout,
            ),
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    def _config(self, use_search: bool) -> Optional[types.GenerateContentConfig]:
        if not use_search:
            return None
        return types.GenerateContentConfig(tools=[SEARCH_TOOLS[self.search_tool]()])

    def _generate_sync(self, prompt: str, use_search: bool) -> str:
        response = self._sdk.models.generate_content(
            model=self.model_name,
            contents=prompt,
            config=self._config(use_search),
        )
        return response.text

    async def generate(self, prompt: str, use_search: bool = False) -> str:
        """
        Run a single generation call.

        Args:
            prompt: Free-text instruction.
            use_search: Enable web-search grounding.

        Returns:
            The raw response text.

        Raises:
            MissingCredentialError: If no API key is configured.
            QuotaExceededError: If the endpoint reports quota exhaustion.
            TransportError: On any other failure, including an empty response.
        """
        if not self.is_configured:
            raise MissingCredentialError("Gemini API key is not configured")

        self.breaker.before_call()

        try:
            text = await asyncio.to_thread(self._generate_sync, prompt, use_search)
        except Exception as e:
            self.breaker.record_failure()
            message = str(e) or repr(e)
            if is_quota_error(message):
                raise QuotaExceededError(message) from e
            raise TransportError(f"Generation call failed: {message}") from e

        self.breaker.record_success()

        if not text:
            raise TransportError("No data received")
        return text
