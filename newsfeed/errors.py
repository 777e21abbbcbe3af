"""Error taxonomy for the news feed core."""

QUOTA_PATTERNS = ("429", "quota", "RESOURCE_EXHAUSTED")


class NewsFeedError(Exception):
    """Base class for news feed errors."""

    pass


class MissingCredentialError(NewsFeedError):
    """Raised when no Gemini API key is configured."""

    pass


class TransportError(NewsFeedError):
    """Raised when the generation endpoint call fails."""

    pass


class QuotaExceededError(TransportError):
    """Raised when the generation endpoint reports quota exhaustion."""

    pass


class CircuitOpenError(TransportError):
    """Raised when the generation endpoint is short-circuited after repeated failures."""

    def __init__(self, service: str, message: str = "Circuit breaker is open"):
        self.service = service
        super().__init__(f"{message} for service: {service}")


class ParseError(NewsFeedError):
    """Raised when a generated payload has no usable structure."""

    pass


class StorageError(NewsFeedError):
    """Raised when the key-value store cannot persist a value."""

    pass


def is_quota_error(message: str) -> bool:
    """Check whether an error message signals rate limiting or quota exhaustion."""
    if not message:
        return False
    return any(pattern in message for pattern in QUOTA_PATTERNS)
