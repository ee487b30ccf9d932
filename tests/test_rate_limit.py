"""Tests for the in-memory rate limiter."""

from datetime import UTC, datetime, timedelta

from food_relay.services.rate_limit import InMemoryRateLimiter


class _Clock:
    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now


def test_rejects_requests_over_the_limit() -> None:
    limiter = InMemoryRateLimiter(max_requests=3, clock=_Clock())

    results = [limiter.allow("1.2.3.4") for _ in range(4)]

    assert results == [True, True, True, False]


def test_limits_are_tracked_per_key() -> None:
    limiter = InMemoryRateLimiter(max_requests=1, clock=_Clock())

    assert limiter.allow("a") is True
    assert limiter.allow("b") is True
    assert limiter.allow("a") is False


def test_window_slides() -> None:
    clock = _Clock()
    limiter = InMemoryRateLimiter(max_requests=2, window_seconds=60, clock=clock)

    assert limiter.allow("a")
    clock.now += timedelta(seconds=30)
    assert limiter.allow("a")
    assert not limiter.allow("a")

    clock.now += timedelta(seconds=31)
    assert limiter.allow("a")
    assert not limiter.allow("a")


def test_idle_clients_are_evicted() -> None:
    clock = _Clock()
    limiter = InMemoryRateLimiter(max_requests=2, window_seconds=60, clock=clock)

    limiter.allow("a")
    limiter.allow("b")
    clock.now += timedelta(seconds=61)
    limiter.allow("c")

    assert set(limiter._hits) == {"c"}
