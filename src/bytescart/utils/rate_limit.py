"""
In-memory fixed-window rate limiter.

Windows live in process memory, so limits are per worker. That is enough to
blunt abusive clients on endpoints that fan out to the payment processor.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from threading import Lock
from typing import Protocol


class TimePort(Protocol):
    """Protocol for time operations (enables testing with deterministic time)."""

    def now(self) -> datetime:
        """Return current UTC time."""
        ...


class SystemTimeAdapter:
    """Production time adapter using system clock."""

    def now(self) -> datetime:
        return datetime.now(UTC)


@dataclass(frozen=True)
class RateLimitResult:
    """Decision for one request."""

    allowed: bool
    remaining: int
    reset_in: float  # seconds until the window resets


@dataclass
class _Window:
    count: int
    reset_at: datetime


class RateLimiter:
    def __init__(self, time_port: TimePort | None = None):
        self._time = time_port if time_port is not None else SystemTimeAdapter()
        self._windows: dict[str, _Window] = {}
        self._lock = Lock()

    def check(self, key: str, max_requests: int, window_seconds: int) -> RateLimitResult:
        """
        Count a request against ``key`` and decide whether it may proceed.

        The first request opens a window of ``window_seconds``; at most
        ``max_requests`` are allowed until the window expires.
        """
        now = self._time.now()
        window = timedelta(seconds=window_seconds)

        with self._lock:
            self._purge_expired(now)
            entry = self._windows.get(key)

            if entry is None:
                if max_requests <= 0:
                    return RateLimitResult(False, 0, float(window_seconds))
                self._windows[key] = _Window(count=1, reset_at=now + window)
                return RateLimitResult(True, max_requests - 1, float(window_seconds))

            reset_in = (entry.reset_at - now).total_seconds()
            if entry.count >= max_requests:
                return RateLimitResult(False, 0, reset_in)

            entry.count += 1
            return RateLimitResult(True, max_requests - entry.count, reset_in)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()

    def _purge_expired(self, now: datetime) -> None:
        expired = [key for key, entry in self._windows.items() if entry.reset_at <= now]
        for key in expired:
            del self._windows[key]
