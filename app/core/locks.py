"""
Per-event asyncio locks shared by purchases and organizer edits
"""

from contextlib import asynccontextmanager
from typing import Dict
import asyncio


class EventLocks:
    """
    Registry of one asyncio.Lock per event id

    An entry exists only while some task holds or waits on it, so the
    registry stays as small as the number of events being worked on.
    """

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}
        self._users: Dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, event_id):
        key = str(event_id)
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if not self._users[key]:
                del self._users[key]
                del self._locks[key]
