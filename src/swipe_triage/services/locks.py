"""Per-key async locking."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field


@dataclass
class KeyedLock:
    """Serializes coroutines that share a key.

    Locks are created on first use and dropped once no coroutine holds or
    waits on them.
    """

    _locks: dict[str, asyncio.Lock] = field(default_factory=dict, repr=False)
    _holders: dict[str, int] = field(default_factory=dict, repr=False)

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        """Hold the lock for ``key`` for the duration of the block."""
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._holders[key] = self._holders.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._holders[key] -= 1
            if self._holders[key] == 0:
                del self._holders[key]
                self._locks.pop(key, None)

    def is_tracked(self, key: str) -> bool:
        """Return True while any coroutine holds or waits for ``key``."""
        return key in self._locks
