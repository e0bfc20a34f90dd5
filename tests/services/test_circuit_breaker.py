"""
Tests for the AI circuit breaker.

A fake clock drives the cooldown so no test sleeps.
"""

import pytest

from gymbuddy.services.circuit_breaker import CLOSED, HALF_OPEN, OPEN, AICircuitBreaker


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def breaker(clock):
    return AICircuitBreaker(failure_threshold=3, reset_seconds=60, clock=clock)


class TestAICircuitBreaker:

    def test_starts_closed(self, breaker):
        assert breaker.state == CLOSED
        assert breaker.allow_request() is True

    def test_opens_after_threshold_failures(self, breaker):
        breaker.record_failure()
        breaker.record_failure()
        assert breaker.state == CLOSED

        breaker.record_failure()
        assert breaker.state == OPEN
        assert breaker.allow_request() is False

    def test_success_resets_failure_count(self, breaker):
        breaker.record_failure()
        breaker.record_failure()
        breaker.record_success()
        breaker.record_failure()
        breaker.record_failure()

        assert breaker.state == CLOSED

    def test_half_open_after_cooldown_allows_one_trial(self, breaker, clock):
        for _ in range(3):
            breaker.record_failure()

        clock.advance(59)
        assert breaker.allow_request() is False

        clock.advance(1)
        assert breaker.allow_request() is True
        assert breaker.state == HALF_OPEN
        assert breaker.allow_request() is False

    def test_successful_trial_closes(self, breaker, clock):
        for _ in range(3):
            breaker.record_failure()
        clock.advance(60)
        breaker.allow_request()

        breaker.record_success()

        assert breaker.state == CLOSED
        assert breaker.allow_request() is True

    def test_failed_trial_reopens(self, breaker, clock):
        for _ in range(3):
            breaker.record_failure()
        clock.advance(60)
        breaker.allow_request()

        breaker.record_failure()

        assert breaker.state == OPEN
        assert breaker.allow_request() is False
        clock.advance(60)
        assert breaker.allow_request() is True

    def test_released_trial_lets_next_call_through(self, breaker, clock):
        for _ in range(3):
            breaker.record_failure()
        clock.advance(60)
        assert breaker.allow_request() is True

        breaker.release_trial()

        assert breaker.state == HALF_OPEN
        assert breaker.allow_request() is True
        assert breaker.allow_request() is False

    def test_cooldown_measured_from_opening(self, clock):
        breaker = AICircuitBreaker(failure_threshold=1, reset_seconds=60, clock=clock)
        breaker.record_failure()

        assert breaker.allow_request() is False
        clock.advance(60)
        assert breaker.allow_request() is True

    def test_from_settings(self, test_settings):
        breaker = AICircuitBreaker.from_settings(test_settings)

        assert breaker.failure_threshold == 3
        assert breaker.reset_seconds == 60.0

    def test_rejects_invalid_threshold(self):
        with pytest.raises(ValueError):
            AICircuitBreaker(failure_threshold=0)
