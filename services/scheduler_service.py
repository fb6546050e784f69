"""
Auto-pick scheduler for the draft clock service

Enqueues the scheduled auto-pick job on an RQ queue so it fires when the
current pick's clock runs out.
"""
import logging
from datetime import datetime, timedelta, UTC
from typing import Optional

import redis
from rq import Queue
from rq.job import Job

from config import get_config
from models.fantasy_league import FantasyLeague
from utils.draft_timer import seconds_until_deadline

logger = logging.getLogger(f'{__name__}.AutoPickScheduler')

# Import path of the job function, resolved by the worker
AUTO_PICK_JOB = 'tasks.auto_pick.run_auto_pick_job'


def auto_pick_job_id(league_id: int, pick: int) -> str:
    """Queue job id for a league's pick; one outstanding job per pick."""
    return f"autopick:{league_id}:{pick}"


class AutoPickScheduler:
    """
    Schedules one delayed auto-pick job per pick.

    The job carries (league_id, expected_pick) and re-validates everything when
    it fires, so a stale job is harmless. Jobs are never retried by the queue.
    """

    def __init__(self, queue: Optional[Queue] = None):
        """
        Args:
            queue: RQ queue override (built from configuration by default)
        """
        self._queue = queue

    @property
    def queue(self) -> Queue:
        """RQ queue, connected lazily on first use."""
        if self._queue is None:
            config = get_config()
            connection = redis.from_url(config.redis_url)
            self._queue = Queue(config.queue_name, connection=connection)
            logger.debug(f"Connected auto-pick queue '{config.queue_name}'")
        return self._queue

    def schedule(self, league: FantasyLeague, now: Optional[datetime] = None) -> Optional[Job]:
        """
        Enqueue the auto-pick for the league's current pick at its deadline.

        Args:
            league: League whose clock just (re)started
            now: Current time (defaults to the system clock)

        Returns:
            The scheduled Job, or None when no clock is running
        """
        state = league.draft
        if not state.is_in_progress or state.pick_started_at is None:
            logger.debug(f"League {league.id}: no running clock, nothing to schedule")
            return None

        now = now or datetime.now(UTC)
        delay = seconds_until_deadline(state, now)
        job_id = auto_pick_job_id(league.id, state.current_pick)

        job = self.queue.enqueue_in(
            timedelta(seconds=delay),
            AUTO_PICK_JOB,
            league.id,
            state.current_pick,
            job_id=job_id,
            retry=None,
            result_ttl=300
        )

        logger.info(
            f"Scheduled auto-pick {job_id} in {delay:.1f}s "
            f"(deadline {state.pick_deadline.isoformat()})"
        )
        return job


# Global scheduler instance
auto_pick_scheduler = AutoPickScheduler()
