"""Tests for the token-bucket rate limiter."""

import threading

import pytest

from feelscrawl.errors import ConfigurationError, ErrorKind
from feelscrawl.fetcher import WINDOW_SECONDS, RateLimiter


class FakeClock:
    def __init__(self):
        self.now = 1000.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.mark.parametrize("quota", [0, -5, 2.5, True, "450"])
def test_invalid_quota_is_configuration_error(quota):
    with pytest.raises(ConfigurationError) as exc_info:
        RateLimiter(quota)
    assert exc_info.value.kind is ErrorKind.CONFIGURATION


def test_burst_up_to_quota_without_sleeping(clock):
    limiter = RateLimiter(3, clock=clock, sleep=clock.sleep)

    for _ in range(3):
        limiter.acquire()

    assert clock.sleeps == []
    assert limiter.available == pytest.approx(0.0)


def test_acquire_waits_for_refill_when_empty(clock):
    limiter = RateLimiter(450, clock=clock, sleep=clock.sleep)
    for _ in range(450):
        limiter.acquire()

    limiter.acquire()

    # 450 per 900s -> one token every 2 seconds
    assert sum(clock.sleeps) == pytest.approx(2.0)


def test_try_acquire_reports_wait_without_consuming(clock):
    limiter = RateLimiter(1, window=10, clock=clock, sleep=clock.sleep)
    assert limiter.try_acquire() == 0.0

    wait = limiter.try_acquire()
    assert wait == pytest.approx(10.0)

    clock.now += 5
    assert limiter.try_acquire() == pytest.approx(5.0)

    clock.now += 5
    assert limiter.try_acquire() == 0.0


def test_refill_never_exceeds_quota(clock):
    limiter = RateLimiter(5, clock=clock, sleep=clock.sleep)
    limiter.acquire()

    clock.now += WINDOW_SECONDS * 10

    assert limiter.available == pytest.approx(5.0)


def test_concurrent_acquire_never_overdraws():
    limiter = RateLimiter(20, window=3600)
    results: list[float] = []
    lock = threading.Lock()

    def worker():
        for _ in range(10):
            wait = limiter.try_acquire()
            with lock:
                results.append(wait)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    granted = [w for w in results if w == 0.0]
    assert len(granted) == 20
