"""
Circuit breaker for the Gemini partner-matching call.

After a run of consecutive upstream failures the breaker opens and callers
skip the AI call entirely (the recommendation service then serves the
deterministic fallback list). Once the cooldown has elapsed a single trial
call is let through; its outcome closes or re-opens the breaker.
"""

import logging
import threading
import time
from typing import Callable

from gymbuddy.config import Settings

logger = logging.getLogger(__name__)

CLOSED = "closed"
OPEN = "open"
HALF_OPEN = "half_open"


class AICircuitBreaker:
    """Consecutive-failure circuit breaker shared by all requests."""

    def __init__(
        self,
        failure_threshold: int = 5,
        reset_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if failure_threshold < 1:
            raise ValueError("failure_threshold must be at least 1")

        self.failure_threshold = failure_threshold
        self.reset_seconds = reset_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._state = CLOSED
        self._failures = 0
        self._opened_at = 0.0
        self._trial_in_flight = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "AICircuitBreaker":
        return cls(
            failure_threshold=settings.AI_CIRCUIT_FAILURE_THRESHOLD,
            reset_seconds=settings.AI_CIRCUIT_RESET_SECONDS,
        )

    @property
    def state(self) -> str:
        with self._lock:
            return self._state

    def allow_request(self) -> bool:
        """
        Return True if the AI may be called now.

        Moves an expired open breaker to half-open and admits exactly one
        trial call until that call reports back.
        """
        with self._lock:
            if self._state == CLOSED:
                return True

            if self._state == OPEN:
                if self._clock() - self._opened_at < self.reset_seconds:
                    return False
                logger.info("AI circuit half-open: allowing a trial call")
                self._state = HALF_OPEN
                self._trial_in_flight = False

            # HALF_OPEN
            if self._trial_in_flight:
                return False
            self._trial_in_flight = True
            return True

    def record_success(self) -> None:
        with self._lock:
            if self._state != CLOSED:
                logger.info("AI circuit closed after successful call")
            self._state = CLOSED
            self._failures = 0
            self._opened_at = 0.0
            self._trial_in_flight = False

    def release_trial(self) -> None:
        """
        Give back an admitted call that ended without an upstream outcome
        (cancelled or failed locally). Counts and state are left unchanged.
        """
        with self._lock:
            self._trial_in_flight = False

    def record_failure(self) -> None:
        with self._lock:
            self._failures += 1
            self._trial_in_flight = False

            if self._state == HALF_OPEN or self._failures >= self.failure_threshold:
                if self._state != OPEN:
                    logger.warning(
                        f"AI circuit opened after {self._failures} consecutive failures; "
                        f"skipping AI calls for {self.reset_seconds}s"
                    )
                self._state = OPEN
                self._opened_at = self._clock()
