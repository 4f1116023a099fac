"""Fixed-window request counter keyed by client."""

import math
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

import structlog

from widget_proxy.ratelimit.constants import (
    DEFAULT_LIMIT,
    DEFAULT_WINDOW_SECONDS,
)


logger = structlog.get_logger()


@dataclass
class RateLimitEntry:
    """Request count for one client within its current window.

    Attributes:
        count: Requests seen in the current window.
        window_reset_at: Clock value after which the window restarts.
    """

    count: int
    window_reset_at: float


@dataclass(frozen=True)
class RateLimitDecision:
    """Admission outcome for a single request.

    Attributes:
        allowed: Whether the request may proceed.
        retry_after_seconds: Seconds until the window resets (0 when allowed).
        count: Requests counted in the current window, this one included.
        limit: Configured requests per window.
    """

    allowed: bool
    retry_after_seconds: int
    count: int
    limit: int


class RateLimiterProtocol(Protocol):
    """Protocol for rate limiters.

    Allows dependency injection of rate limiter for testing.
    """

    def admit(self, client_id: str) -> RateLimitDecision:
        """Count a request and decide whether it is admitted."""
        ...


@dataclass
class FixedWindowRateLimiter:
    """Fixed-window counter for coarse abuse prevention.

    Each client gets a counter that resets once the clock passes the end of
    its window. A burst of up to twice the limit can pass across a window
    boundary; this limiter does not aim for precise fairness.

    Thread-safe: the read-modify-write of an entry happens under one lock,
    so concurrent bursts from the same client cannot be undercounted.

    Attributes:
        limit: Maximum admitted requests per window.
        window_seconds: Window duration.
        clock: Monotonic time source in seconds.
        eviction_grace_seconds: How long past its reset an idle entry is kept.
            Defaults to one window.
    """

    limit: int = DEFAULT_LIMIT
    window_seconds: float = DEFAULT_WINDOW_SECONDS
    clock: Callable[[], float] = time.monotonic
    eviction_grace_seconds: float = 0.0  # Will be set to window_seconds if 0

    _entries: dict[str, RateLimitEntry] = field(init=False, default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    _next_sweep_at: float = field(init=False, default=0.0)
    _rejected_count: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        """Validate limits and schedule the first eviction sweep."""
        if self.limit < 1:
            msg = f"limit must be positive, got {self.limit}"
            raise ValueError(msg)
        if self.window_seconds <= 0:
            msg = f"window_seconds must be positive, got {self.window_seconds}"
            raise ValueError(msg)
        if self.eviction_grace_seconds <= 0:
            self.eviction_grace_seconds = self.window_seconds
        self._next_sweep_at = self.clock() + self.window_seconds
        self._log = logger.bind(component="ratelimit")

    def admit(self, client_id: str) -> RateLimitDecision:
        """Count a request from a client and decide whether it is admitted.

        Args:
            client_id: Client identifier (forwarded-for value or peer address).

        Returns:
            RateLimitDecision for this request.
        """
        with self._lock:
            now = self.clock()
            self._maybe_sweep(now)

            entry = self._entries.get(client_id)
            if entry is None:
                entry = RateLimitEntry(
                    count=0, window_reset_at=now + self.window_seconds
                )
                self._entries[client_id] = entry

            if now > entry.window_reset_at:
                entry.count = 0
                entry.window_reset_at = now + self.window_seconds

            entry.count += 1

            if entry.count > self.limit:
                self._rejected_count += 1
                retry_after = math.ceil(entry.window_reset_at - now)
                return RateLimitDecision(
                    allowed=False,
                    retry_after_seconds=retry_after,
                    count=entry.count,
                    limit=self.limit,
                )

            return RateLimitDecision(
                allowed=True,
                retry_after_seconds=0,
                count=entry.count,
                limit=self.limit,
            )

    def entry(self, client_id: str) -> RateLimitEntry | None:
        """Get a copy of a client's current entry."""
        with self._lock:
            entry = self._entries.get(client_id)
            if entry is None:
                return None
            return RateLimitEntry(
                count=entry.count, window_reset_at=entry.window_reset_at
            )

    @property
    def size(self) -> int:
        """Number of tracked clients."""
        with self._lock:
            return len(self._entries)

    @property
    def rejected_count(self) -> int:
        """Get the number of rejected requests."""
        with self._lock:
            return self._rejected_count

    def evict_stale(self) -> int:
        """Drop entries whose window ended more than the grace period ago.

        Returns:
            Number of entries removed.
        """
        with self._lock:
            return self._evict(self.clock())

    def reset(self) -> None:
        """Forget all clients (for testing)."""
        with self._lock:
            self._entries = {}
            self._rejected_count = 0

    def _maybe_sweep(self, now: float) -> None:
        """Run an eviction pass at most once per window.

        Must be called while holding the lock.
        """
        if now < self._next_sweep_at:
            return
        self._next_sweep_at = now + self.window_seconds
        removed = self._evict(now)
        if removed:
            self._log.debug(
                "rate_limit_entries_evicted",
                removed=removed,
                remaining=len(self._entries),
            )

    def _evict(self, now: float) -> int:
        """Remove stale entries.

        Must be called while holding the lock.
        """
        cutoff = now - self.eviction_grace_seconds
        stale = [
            client_id
            for client_id, entry in self._entries.items()
            if entry.window_reset_at < cutoff
        ]
        for client_id in stale:
            del self._entries[client_id]
        return len(stale)
