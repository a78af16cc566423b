"""
Time-boxed value cache owned by a single resolver (e.g. an auth token).
"""
from __future__ import annotations
import asyncio
import time
from typing import Awaitable, Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class TokenCache(Generic[T]):
    """Holds one value for ``ttl`` seconds.

    Concurrent callers that find the value stale wait on one refresh instead
    of each fetching their own.
    """

    def __init__(self, ttl: float, *, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._value: Optional[T] = None
        self._refreshed_at: float = 0.0
        self._lock: Optional[asyncio.Lock] = None
        self._lock_loop: Optional[asyncio.AbstractEventLoop] = None

    def _get_lock(self) -> asyncio.Lock:
        # One lock per event loop; resolvers outlive any single asyncio.run()
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    @property
    def fresh(self) -> bool:
        return self._value is not None and self._clock() - self._refreshed_at < self.ttl

    def peek(self) -> Optional[T]:
        return self._value if self.fresh else None

    async def get(self, refresh: Callable[[], Awaitable[T]]) -> T:
        if self.fresh:
            return self._value
        async with self._get_lock():
            # Another caller may have refreshed while we waited
            if self.fresh:
                return self._value
            value = await refresh()
            self._value = value
            self._refreshed_at = self._clock()
            return value

    def invalidate(self):
        self._value = None
        self._refreshed_at = 0.0
