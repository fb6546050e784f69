"""
Per-league pick locks

In-process mutual exclusion around the final compare-and-mutate step of a pick.
Cross-process exclusion comes from the persistence API's conditional update.

Locks belong to the event loop that created them. Worker jobs each run in a
fresh loop, so the registry starts over whenever it is used from a new one.
"""
import asyncio
from contextlib import asynccontextmanager
from datetime import datetime, UTC
from typing import AsyncIterator, Dict, Optional

from utils.logging import get_contextual_logger

logger = get_contextual_logger(f'{__name__}.LeagueLockRegistry')

# Holding a pick lock longer than this means a write is stuck
SLOW_LOCK_SECONDS = 30


class LeagueLockRegistry:
    """Hands out one asyncio.Lock per league and tracks who holds it."""

    def __init__(self):
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._locks: Dict[int, asyncio.Lock] = {}
        self._acquired_at: Dict[int, datetime] = {}
        self._holders: Dict[int, Optional[str]] = {}

    def _bind_to_running_loop(self) -> None:
        loop = asyncio.get_running_loop()
        if loop is self._loop:
            return
        if self._loop is not None:
            logger.debug("Event loop changed, discarding league pick locks", leagues=len(self._locks))
        self._locks.clear()
        self._acquired_at.clear()
        self._holders.clear()
        self._loop = loop

    def get_lock(self, league_id: int) -> asyncio.Lock:
        """Get (creating on first use) the lock for a league in the running loop."""
        self._bind_to_running_loop()
        lock = self._locks.get(league_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[league_id] = lock
        return lock

    def is_locked(self, league_id: int) -> bool:
        """Check if a pick is currently being applied in a league."""
        lock = self._locks.get(league_id)
        return lock is not None and lock.locked()

    def held_for(self, league_id: int, now: Optional[datetime] = None) -> Optional[float]:
        """Seconds the league's lock has been held, or None if free."""
        acquired_at = self._acquired_at.get(league_id)
        if acquired_at is None:
            return None
        return ((now or datetime.now(UTC)) - acquired_at).total_seconds()

    @asynccontextmanager
    async def hold(self, league_id: int, holder: Optional[str] = None) -> AsyncIterator[None]:
        """
        Hold the league's lock for the duration of the block.

        Args:
            league_id: League to lock
            holder: Label for logs (e.g. 'user:42' or 'auto-pick')
        """
        lock = self.get_lock(league_id)

        if self.is_locked(league_id):
            held = self.held_for(league_id)
            log = logger.warning if held is not None and held > SLOW_LOCK_SECONDS else logger.info
            log(
                "Waiting for league pick lock",
                league_id=league_id,
                holder=holder,
                held_by=self._holders.get(league_id),
                held_for=round(held, 1) if held is not None else None
            )

        async with lock:
            self._acquired_at[league_id] = datetime.now(UTC)
            self._holders[league_id] = holder
            logger.debug("League pick lock acquired", league_id=league_id, holder=holder)
            try:
                yield
            finally:
                self._acquired_at.pop(league_id, None)
                self._holders.pop(league_id, None)
                logger.debug("League pick lock released", league_id=league_id, holder=holder)


# Global registry shared by every draft service in the process
league_locks = LeagueLockRegistry()
