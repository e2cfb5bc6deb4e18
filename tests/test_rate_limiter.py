"""
Test suite for the fixed-window rate limiter

Uses an injected fake clock so window boundaries are exact.
"""

import asyncio
import threading

import pytest

from pipeline.core.exceptions import RateLimitExceeded
from services.rate_limiter import FixedWindowRateLimiter


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
def limiter(clock):
    return FixedWindowRateLimiter(max_requests=10, window_seconds=600, clock=clock, name="generate")


@pytest.mark.unit
def test_eleventh_request_is_rejected(limiter, clock):
    for i in range(10):
        assert limiter.hit("1.2.3.4") == 9 - i
        clock.advance(1)

    with pytest.raises(RateLimitExceeded) as exc_info:
        limiter.hit("1.2.3.4")

    assert 0 < exc_info.value.retry_after <= 600
    assert exc_info.value.retry_after == 590
    assert exc_info.value.limiter_name == "generate"
    assert exc_info.value.client_id == "1.2.3.4"


@pytest.mark.unit
def test_retry_after_is_at_least_one_second(limiter, clock):
    for _ in range(10):
        limiter.hit("client")
    clock.advance(599.9)

    with pytest.raises(RateLimitExceeded) as exc_info:
        limiter.hit("client")

    assert exc_info.value.retry_after == 1


@pytest.mark.unit
def test_clients_are_independent(limiter):
    for _ in range(10):
        limiter.hit("a")

    assert limiter.hit("b") == 9
    with pytest.raises(RateLimitExceeded):
        limiter.hit("a")


@pytest.mark.unit
def test_window_resets_after_it_lapses(limiter, clock):
    for _ in range(10):
        limiter.hit("client")

    # Exactly W elapsed is still the same window
    clock.advance(600)
    with pytest.raises(RateLimitExceeded):
        limiter.hit("client")

    clock.advance(0.001)
    assert limiter.hit("client") == 9
    assert limiter.get_window("client").count == 1


@pytest.mark.unit
def test_rejected_requests_still_count(limiter, clock):
    for _ in range(10):
        limiter.hit("client")
    for _ in range(3):
        with pytest.raises(RateLimitExceeded):
            limiter.hit("client")

    assert limiter.get_window("client").count == 13


@pytest.mark.unit
def test_sweep_removes_only_lapsed_windows(limiter, clock):
    limiter.hit("old")
    clock.advance(300)
    limiter.hit("recent")
    clock.advance(301)

    removed = limiter.sweep()

    assert removed == 1
    assert limiter.get_window("old") is None
    assert limiter.get_window("recent") is not None
    assert len(limiter) == 1


@pytest.mark.unit
def test_resend_limits_are_stricter(clock):
    resend = FixedWindowRateLimiter(max_requests=3, window_seconds=600, clock=clock, name="resend")
    for _ in range(3):
        resend.hit("client")

    with pytest.raises(RateLimitExceeded) as exc_info:
        resend.hit("client")

    assert exc_info.value.limiter_name == "resend"


@pytest.mark.unit
@pytest.mark.parametrize("kwargs", [
    {"max_requests": 0, "window_seconds": 600},
    {"max_requests": 10, "window_seconds": 0},
])
def test_invalid_configuration(kwargs):
    with pytest.raises(ValueError):
        FixedWindowRateLimiter(**kwargs)


@pytest.mark.unit
def test_concurrent_hits_never_exceed_budget():
    limiter = FixedWindowRateLimiter(max_requests=50, window_seconds=600)
    accepted = []
    rejected = []

    def worker():
        for _ in range(20):
            try:
                limiter.hit("shared")
                accepted.append(1)
            except RateLimitExceeded:
                rejected.append(1)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(accepted) == 50
    assert len(rejected) == 8 * 20 - 50


@pytest.mark.asyncio
async def test_sweeper_runs_periodically(clock):
    limiter = FixedWindowRateLimiter(max_requests=10, window_seconds=600, clock=clock)
    limiter.hit("client")
    clock.advance(601)

    task = asyncio.create_task(limiter.run_sweeper(interval=0.01))
    await asyncio.sleep(0.05)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert len(limiter) == 0
