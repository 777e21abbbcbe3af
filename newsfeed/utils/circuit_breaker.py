"""Circuit breaker guarding the generation endpoint."""

import logging
import time
from typing import Callable, Optional

from newsfeed.errors import CircuitOpenError

logger = logging.getLogger(__name__)

CLOSED = "closed"
OPEN = "open"
HALF_OPEN = "half-open"


class CircuitBreaker:
    """
    Stops calling a failing endpoint for a while after repeated failures.

    States:
    - closed: calls go through
    - open: calls are rejected with CircuitOpenError until reset_timeout passes
    - half-open: one trial call is let through; success closes, failure reopens

    All access happens on one event loop, so no locking is needed.
    """

    def __init__(
        self,
        service: str = "gemini",
        failure_threshold: int = 3,
        reset_timeout: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.service = service
        self.failure_threshold = failure_threshold
        self.reset_timeout = reset_timeout
        self._clock = clock
        self._failures = 0
        self._opened_at: Optional[float] = None
        self._state = CLOSED

    @property
    def failures(self) -> int:
        return self._failures

    @property
    def state(self) -> str:
        if self._state == OPEN and self._opened_at is not None:
            if self._clock() - self._opened_at >= self.reset_timeout:
                return HALF_OPEN
        return self._state

    def before_call(self) -> None:
        """Raise CircuitOpenError if the call must be rejected."""
        state = self.state
        if state == OPEN:
            raise CircuitOpenError(self.service)
        if state == HALF_OPEN:
            if self._state == HALF_OPEN:
                # A trial call is already in flight.
                raise CircuitOpenError(self.service, "Circuit breaker trial in progress")
            self._state = HALF_OPEN
            self._opened_at = None

    def record_success(self) -> None:
        if self._state == HALF_OPEN:
            logger.info(f"Circuit breaker: {self.service} closed after successful trial")
        self._failures = 0
        self._state = CLOSED
        self._opened_at = None

    def record_failure(self) -> None:
        self._failures += 1
        if self._state == HALF_OPEN:
            self._open()
            logger.warning(f"Circuit breaker: {self.service} failed in half-open, reopening")
        elif self._failures >= self.failure_threshold and self._state == CLOSED:
            self._open()
            logger.warning(
                f"Circuit breaker: {self.service} opened after {self._failures} failures"
            )

    def reset(self) -> None:
        self._failures = 0
        self._state = CLOSED
        self._opened_at = None

    def _open(self) -> None:
        self._state = OPEN
        self._opened_at = self._clock()
