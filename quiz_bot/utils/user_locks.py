"""Per-user asyncio locks."""
import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict


class UserLocks:
    """
    Registry of one asyncio.Lock per user id.

    A lock exists only while someone holds or waits for it; the entry is
    dropped when the last holder leaves, so idle users cost nothing.
    """

    def __init__(self) -> None:
        self._locks: Dict[str, asyncio.Lock] = {}
        self._holders: Dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, user_id: str) -> AsyncIterator[None]:
        # No await between lookup and insert, so two tasks can't create two locks
        lock = self._locks.get(user_id)
        if lock is None:
            lock = self._locks[user_id] = asyncio.Lock()
        self._holders[user_id] = self._holders.get(user_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._holders[user_id] -= 1
            if not self._holders[user_id]:
                del self._holders[user_id]
                del self._locks[user_id]

    def __len__(self) -> int:
        return len(self._locks)
