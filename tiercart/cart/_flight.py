"""
Per-key single-flight queue.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class KeyedSingleFlight:
    """
    At most one holder per key; later callers queue FIFO behind it.

    Example:
        flight = KeyedSingleFlight()
        async with flight.hold("42"):
            ...  # read, await, commit without interleaving on "42"

    Note: Different keys never block each other. Locks are dropped as
    soon as nobody holds or waits on a key.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]


__all__ = ("KeyedSingleFlight",)
