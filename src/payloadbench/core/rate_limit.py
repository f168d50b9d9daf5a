"""Cooldown-based limiter for outbound model API calls."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import TypeVar

from loguru import logger

T = TypeVar("T")


class RateLimiter:
    """Serialize outbound calls with a minimum cooldown between them.

    At most one call runs at a time. After a call finishes (successfully or
    not) the next one may start no earlier than ``cooldown_ms`` later.

    The clock and sleep functions are injectable so tests can drive time.
    """

    def __init__(
        self,
        cooldown_ms: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ):
        if cooldown_ms < 0:
            raise ValueError(f"cooldown_ms must be >= 0, got {cooldown_ms}")
        self._cooldown_s = cooldown_ms / 1000
        self._clock = clock
        self._sleep = sleep
        self._next_allowed = 0.0
        self._lock = asyncio.Lock()

    @property
    def cooldown_ms(self) -> float:
        return self._cooldown_s * 1000

    async def run(self, call: Callable[[], Awaitable[T]]) -> T:
        """Wait for the cooldown window, then run ``call`` exclusively."""
        async with self._lock:
            wait_s = self._next_allowed - self._clock()
            if wait_s > 0:
                logger.debug(f"Rate limiter waiting {wait_s * 1000:.0f}ms")
                await self._sleep(wait_s)
            try:
                return await call()
            finally:
                self._next_allowed = self._clock() + self._cooldown_s


__all__ = ["RateLimiter"]
