"""Token bucket rate limiter for API calls."""

import asyncio
import logging
import math
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class RateLimiter:
    """Token bucket rate limiter.

    The bucket starts full and refills continuously at
    ``requests_per_minute / 60`` tokens per second, computed on demand at
    each call. No background task is involved.

    ``acquire`` holds a lock while it waits, so concurrent callers on the
    same limiter are served one at a time in arrival order. After a wait the
    token is spent without re-checking the bucket; a fractional shortfall
    left by timer granularity is clamped at zero.

    Attributes:
        requests_per_minute: Request budget for the source
        capacity: Maximum tokens in bucket (defaults to requests_per_minute)
        clock: Monotonic time source in seconds
        sleep: Coroutine used to suspend the caller
        tokens: Current token count
        last_update: Last token update timestamp
    """

    requests_per_minute: float
    capacity: float | None = None
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)
    sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep, repr=False)
    rate: float = field(init=False)  # tokens per second
    tokens: float = field(init=False)
    last_update: float = field(init=False)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    def __post_init__(self) -> None:
        if self.requests_per_minute <= 0:
            raise ValueError("requests_per_minute must be positive")
        if self.capacity is None:
            self.capacity = float(self.requests_per_minute)
        if self.capacity <= 0:
            raise ValueError("capacity must be positive")
        self.rate = self.requests_per_minute / 60.0
        self.tokens = self.capacity
        self.last_update = self.clock()

    def _refill(self) -> None:
        """Refill tokens based on elapsed time."""
        now = self.clock()
        elapsed = max(0.0, now - self.last_update)
        self.tokens = min(self.capacity, self.tokens + elapsed * self.rate)
        self.last_update = now

    async def acquire(self) -> float:
        """Acquire one token, waiting if necessary.

        Returns:
            Wait time in seconds (0 if no wait needed)
        """
        async with self._lock:
            self._refill()

            if self.tokens >= 1:
                self.tokens -= 1
                return 0.0

            # Whole milliseconds until the next token
            wait_time = math.ceil((1 - self.tokens) / self.rate * 1000) / 1000
            logger.debug(f"Rate limited, waiting {wait_time:.3f}s")

            await self.sleep(wait_time)
            self._refill()
            self.tokens = max(0.0, self.tokens - 1)

            return wait_time

    def reset(self) -> None:
        """Refill the bucket to capacity."""
        self.tokens = self.capacity
        self.last_update = self.clock()

    @property
    def available_tokens(self) -> float:
        """Get current available tokens."""
        self._refill()
        return self.tokens
