"""
Fixed-window per-client rate limiter.

Each client gets a window {count, window_start}. A window older than
window_seconds is reset lazily on the next hit; a periodic sweeper drops
lapsed windows so the table stays bounded by the number of active clients.
"""

import asyncio
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

import logfire

from pipeline.core.exceptions import RateLimitExceeded


@dataclass
class RateWindow:
    """Request count for one client in the current window."""

    count: int
    """Requests seen in this window, including rejected ones"""

    window_start: float
    """Clock reading when the window opened"""


class FixedWindowRateLimiter:
    """
    Per-client fixed-window limiter.

    A client may make max_requests calls per window_seconds. The
    (max_requests + 1)-th call within a window is rejected with
    RateLimitExceeded carrying retry_after = ceil(remaining window), at
    least 1 second.

    All reads and writes of the window table happen under one lock.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        name: str = "default",
    ):
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")

        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.name = name
        self._clock = clock
        self._windows: Dict[str, RateWindow] = {}
        self._lock = threading.Lock()

    def hit(self, client_id: str) -> int:
        """
        Count one request for client_id.

        Returns:
            Requests remaining in the current window

        Raises:
            RateLimitExceeded: When the client is over budget
        """
        with self._lock:
            now = self._clock()
            window = self._windows.get(client_id)

            if window is None or now - window.window_start > self.window_seconds:
                window = RateWindow(count=0, window_start=now)
                self._windows[client_id] = window

            window.count += 1

            if window.count > self.max_requests:
                elapsed = now - window.window_start
                retry_after = max(1, math.ceil(self.window_seconds - elapsed))
                exceeded = RateLimitExceeded(retry_after, limiter_name=self.name, client_id=client_id)
            else:
                return self.max_requests - window.count

        logfire.warning(
            "Rate limit exceeded",
            limiter=self.name,
            client_id=client_id,
            retry_after=exceeded.retry_after
        )
        raise exceeded

    def get_window(self, client_id: str) -> Optional[RateWindow]:
        """Snapshot of a client's window, or None if untracked."""
        with self._lock:
            window = self._windows.get(client_id)
            if window is None:
                return None
            return RateWindow(count=window.count, window_start=window.window_start)

    def sweep(self) -> int:
        """
        Drop windows that have lapsed.

        Returns:
            Number of windows removed
        """
        with self._lock:
            now = self._clock()
            expired = [
                client_id for client_id, window in self._windows.items()
                if now - window.window_start > self.window_seconds
            ]
            for client_id in expired:
                del self._windows[client_id]
            remaining = len(self._windows)

        if expired:
            logfire.debug(
                "Rate limit windows swept",
                limiter=self.name,
                removed=len(expired),
                remaining=remaining
            )
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)

    async def run_sweeper(self, interval: Optional[float] = None) -> None:
        """Sweep forever at the given cadence (defaults to the window length)."""
        interval = self.window_seconds if interval is None else interval
        while True:
            await asyncio.sleep(interval)
            self.sweep()
