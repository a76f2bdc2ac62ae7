"""
Tests for the minimum-interval rate limiter.
"""

import pytest

from utils import RateLimiter


class ManualClock:
    """Monotonic clock moved by the test."""

    def __init__(self):
        self.value = 0.0

    def __call__(self):
        return self.value


class TestRateLimiter:

    async def test_first_acquire_is_immediate(self, fake_sleep):
        limiter = RateLimiter(10, sleep=fake_sleep, clock=lambda: 0.0)

        assert await limiter.acquire() == 0
        assert fake_sleep.calls == []

    async def test_waits_for_remaining_interval(self, fake_sleep):
        clock = ManualClock()
        limiter = RateLimiter(10, sleep=fake_sleep, clock=clock)

        await limiter.acquire()
        clock.value = 4.0
        waited = await limiter.acquire()

        assert waited == pytest.approx(6.0)
        assert fake_sleep.calls == [pytest.approx(6.0)]

    async def test_no_wait_when_interval_already_passed(self, fake_sleep):
        clock = ManualClock()
        limiter = RateLimiter(10, sleep=fake_sleep, clock=clock)

        await limiter.acquire()
        clock.value = 25.0
        await limiter.acquire()

        assert fake_sleep.calls == []

    async def test_total_waited(self, fake_sleep):
        limiter = RateLimiter(10, sleep=fake_sleep, clock=lambda: 0.0)

        for _ in range(4):
            await limiter.acquire()

        assert limiter.total_waited == 30

    async def test_zero_interval_never_sleeps(self, fake_sleep):
        limiter = RateLimiter(0, sleep=fake_sleep, clock=lambda: 0.0)

        await limiter.acquire()
        await limiter.acquire()

        assert fake_sleep.calls == []

    async def test_reset(self, fake_sleep):
        limiter = RateLimiter(10, sleep=fake_sleep, clock=lambda: 0.0)

        await limiter.acquire()
        limiter.reset()
        await limiter.acquire()

        assert fake_sleep.calls == []

    def test_negative_interval_rejected(self):
        with pytest.raises(ValueError):
            RateLimiter(-1)
