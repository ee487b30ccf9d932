"""Per-client request throttling."""

from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol


class RateLimiter(Protocol):
    """Interface for request admission checks."""

    def allow(self, key: str) -> bool:
        """Record a request for key and report whether it is admitted."""


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class InMemoryRateLimiter(RateLimiter):
    """Sliding-window limiter keyed by client address."""

    max_requests: int
    window_seconds: int = 60
    clock: Callable[[], datetime] = _utc_now
    _hits: dict[str, deque[datetime]] = field(default_factory=dict, init=False)

    def allow(self, key: str) -> bool:
        """Admit at most `max_requests` per window; rejected calls are not counted."""
        now = self.clock()
        cutoff = now - timedelta(seconds=self.window_seconds)
        self._evict_idle(cutoff)
        hits = self._hits.setdefault(key, deque())
        while hits and hits[0] <= cutoff:
            hits.popleft()
        if len(hits) >= self.max_requests:
            return False
        hits.append(now)
        return True

    def _evict_idle(self, cutoff: datetime) -> None:
        """Drop clients whose most recent request fell out of the window."""
        idle = [key for key, hits in self._hits.items() if not hits or hits[-1] <= cutoff]
        for key in idle:
            self._hits.pop(key, None)
