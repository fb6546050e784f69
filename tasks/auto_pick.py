"""
Scheduled auto-pick task

Runs when a pick's clock is due to expire. The job only carries the league
and the pick number it was scheduled for; everything else is re-read and
re-validated when it fires, so late, duplicate or stale deliveries do nothing.
"""
import asyncio
from datetime import datetime
from enum import Enum
from typing import Callable, Optional

from rq import get_current_job

from api.client import cleanup_global_client
from exceptions import PreconditionMismatch
from services.broadcast_service import draft_broadcaster
from services.draft_service import DraftService, draft_service
from utils.draft_timer import is_expired
from utils.logging import ContextualLogger, get_contextual_logger, set_draft_context, clear_context


class AutoPickOutcome(str, Enum):
    """What a scheduled auto-pick run did."""
    LEAGUE_NOT_FOUND = "league_not_found"
    STALE_PICK = "stale_pick"
    NOT_IN_PROGRESS = "not_in_progress"
    NOT_EXPIRED = "not_expired"
    NO_CURRENT_TEAM = "no_current_team"
    PICKED = "picked"
    STALLED = "stalled"
    FAILED = "failed"


class AutoPickTask:
    """
    One scheduled auto-pick for (league_id, expected_pick).

    Features:
    - Re-validates league, pick number, status and expiry on fire
    - Delegates selection and the pick-advance to DraftService
    - Never raises; the outcome says what happened
    """

    def __init__(
        self,
        league_id: int,
        expected_pick: int,
        service: Optional[DraftService] = None,
        logger: Optional[ContextualLogger] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.league_id = league_id
        self.expected_pick = expected_pick
        self.service = service or draft_service
        self.logger = logger or get_contextual_logger(f'{__name__}.AutoPickTask')
        self.clock = clock or self.service.clock

    async def run(self) -> AutoPickOutcome:
        """Execute the auto-pick if it is still due."""
        set_draft_context(league_id=self.league_id, pick=self.expected_pick)
        trace_id = self.logger.start_operation('auto_pick')

        try:
            outcome = await self._run()
        except Exception as e:
            self.logger.error("Auto-pick failed", error=e)
            outcome = AutoPickOutcome.FAILED

        self.logger.end_operation(trace_id, outcome.value)
        return outcome

    async def _run(self) -> AutoPickOutcome:
        league = await self.service.leagues.get_league(self.league_id)
        if league is None:
            self.logger.warning("League not found, skipping auto-pick")
            return AutoPickOutcome.LEAGUE_NOT_FOUND

        state = league.draft
        if state.current_pick != self.expected_pick:
            self.logger.info("Pick already made, skipping auto-pick", current_pick=state.current_pick)
            return AutoPickOutcome.STALE_PICK

        if not state.is_in_progress:
            self.logger.info("Draft not in progress, skipping auto-pick", draft_status=state.draft_status.value)
            return AutoPickOutcome.NOT_IN_PROGRESS

        now = self.clock()
        if not is_expired(state, now):
            self.logger.info(
                "Pick has not expired yet, skipping auto-pick",
                deadline=state.pick_deadline.isoformat() if state.pick_deadline else None
            )
            return AutoPickOutcome.NOT_EXPIRED

        teams = await self.service.teams.get_league_teams(self.league_id)
        team = self.service.teams.find_team_on_clock(league, teams)
        if team is None:
            self.logger.warning("No team on the clock, skipping auto-pick", team_count=len(teams))
            return AutoPickOutcome.NO_CURRENT_TEAM

        set_draft_context(team_id=team.id)

        try:
            pick = await self.service.perform_auto_pick(league, team, self.expected_pick, teams=teams)
        except PreconditionMismatch:
            self.logger.info("Pick was made while auto-picking, nothing to do")
            return AutoPickOutcome.STALE_PICK

        if pick is None:
            return AutoPickOutcome.STALLED

        self.logger.info("Auto-pick applied", player_id=pick.player_id, round=pick.round)
        return AutoPickOutcome.PICKED


async def _run_job(league_id: int, expected_pick: int) -> AutoPickOutcome:
    job = get_current_job()
    clear_context()
    set_draft_context(job_id=job.id if job else None)

    try:
        return await AutoPickTask(league_id, expected_pick).run()
    finally:
        await cleanup_global_client()
        await draft_broadcaster.close()
        clear_context()


def run_auto_pick_job(league_id: int, expected_pick: int) -> str:
    """
    Queue entry point for a scheduled auto-pick.

    Runs the task on a fresh event loop and releases HTTP and Redis
    connections before returning.

    Returns:
        The outcome value (stored as the job result)
    """
    outcome = asyncio.run(_run_job(league_id, expected_pick))
    return outcome.value
