"""
Draft service for the draft clock service

Core draft business logic: starting a draft, applying manual and automatic
picks, pausing, and reporting the clock. NO CACHING - draft state changes
constantly.
"""
import logging
import random
from datetime import datetime, timedelta, UTC
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from config import get_config
from exceptions import (
    PersistenceConflict,
    PreconditionMismatch,
    NoEligiblePlayersError,
    PlayerNotFoundError,
    TeamNotFoundError,
    ValidationException,
)
from models.draft_action import DraftAction, DraftActionType
from models.draft_event import DraftEvent, DraftEventType
from models.draft_pick import DraftPick
from models.draft_state import DraftStatus
from models.fantasy_league import FantasyLeague
from models.fantasy_team import FantasyTeam
from models.player import Player
from services.broadcast_service import DraftBroadcaster, draft_broadcaster
from services.draft_action_service import DraftActionService, draft_action_service
from services.draft_pick_service import DraftPickService, draft_pick_service
from services.league_service import LeagueService, league_service
from services.player_service import PlayerService, player_service
from services.scheduler_service import AutoPickScheduler, auto_pick_scheduler
from services.team_service import TeamService, team_service
from utils.auto_pick import AutoPickSelector, PriceRankedSelector
from utils.draft_helpers import (
    calculate_pick_details,
    format_pick_display,
    is_draft_complete,
    validate_player_for_team,
)
from utils.draft_timer import time_remaining, pick_deadline
from utils.locks import LeagueLockRegistry, league_locks

logger = logging.getLogger(f'{__name__}.DraftService')

PICK_UNAVAILABLE = "Pick is no longer available"


class DraftStatusView(BaseModel):
    """Read-only snapshot of a league's draft clock for clients."""

    league_id: int
    current_pick: int
    draft_status: DraftStatus
    time_remaining: timedelta = Field(default_factory=timedelta)
    deadline: Optional[datetime] = None
    pick_time_limit: int
    current_team_id: Optional[int] = None
    round: Optional[int] = None
    total_picks: Optional[int] = None

    @property
    def seconds_remaining(self) -> int:
        return int(self.time_remaining.total_seconds())


def _utc_now() -> datetime:
    return datetime.now(UTC)


class DraftService:
    """
    Service for draft state transitions.

    Every transition is a conditional write keyed on the pick number read
    before validation, so a manual pick and the scheduled auto-pick for the
    same pick can never both succeed. The in-process league lock only covers
    the final write; lookups and selection happen before it.

    Features:
    - Start a draft (random order, first clock, first auto-pick)
    - Manual picks with turn and roster validation
    - Auto-picks with a pluggable selection policy and stall handling
    - Pause / resume with the remaining time preserved
    - Clock status and history for clients
    """

    def __init__(
        self,
        leagues: Optional[LeagueService] = None,
        teams: Optional[TeamService] = None,
        players: Optional[PlayerService] = None,
        picks: Optional[DraftPickService] = None,
        actions: Optional[DraftActionService] = None,
        scheduler: Optional[AutoPickScheduler] = None,
        broadcaster: Optional[DraftBroadcaster] = None,
        locks: Optional[LeagueLockRegistry] = None,
        selector: Optional[AutoPickSelector] = None,
        clock: Optional[Callable[[], datetime]] = None,
        rng: Optional[random.Random] = None
    ):
        """Initialize draft service with its collaborators (module singletons by default)."""
        self.leagues = leagues or league_service
        self.teams = teams or team_service
        self.players = players or player_service
        self.picks = picks or draft_pick_service
        self.actions = actions or draft_action_service
        self.scheduler = scheduler or auto_pick_scheduler
        self.broadcaster = broadcaster or draft_broadcaster
        self.locks = locks or league_locks
        self.selector = selector or PriceRankedSelector()
        self.clock = clock or _utc_now
        self.rng = rng or random.Random()
        logger.debug("DraftService initialized")

    async def start_draft(self, league_id: int, user_id: int) -> FantasyLeague:
        """
        Start a league's draft.

        Shuffles the teams into a draft order, puts pick 1 on the clock and
        schedules its auto-pick.

        Args:
            league_id: Fantasy league ID
            user_id: User starting the draft (must own the league)

        Returns:
            League with the draft in progress

        Raises:
            LeagueNotFoundError: If the league does not exist
            ValidationException: If the league cannot be started by this user
            PreconditionMismatch: If the draft was started concurrently
            TeamNotFoundError: If a team vanished while the order was written (start is reverted)
        """
        league = await self.leagues.require_league(league_id)

        if not league.is_draft_mode:
            raise ValidationException("This league does not use a draft.")
        if league.owner_id != user_id:
            raise ValidationException("Only the league owner can start the draft.")
        if league.draft.draft_status != DraftStatus.NOT_STARTED:
            raise ValidationException(f"Draft cannot be started while {league.draft.draft_status.value}.")

        teams = await self.teams.get_league_teams(league_id)
        min_teams = get_config().min_draft_teams
        if len(teams) < min_teams:
            raise ValidationException(f"A draft needs at least {min_teams} teams (league has {len(teams)}).")

        order = list(teams)
        self.rng.shuffle(order)

        now = self.clock()
        updates = {
            'draft_status': DraftStatus.IN_PROGRESS.value,
            'current_pick': 1,
            'pick_started_at': now.isoformat(),
            'paused_at': None,
            'paused_by_user_id': None,
            'pause_time_remaining': None,
        }

        try:
            started = await self.leagues.update_draft_state(
                league_id,
                league.draft.current_pick,
                updates,
                expected_status=DraftStatus.NOT_STARTED
            )
        except PersistenceConflict:
            logger.info(f"League {league_id}: draft was started concurrently")
            raise PreconditionMismatch("Draft has already been started.")

        # Only the start that won the status transition writes the order
        for slot, team in enumerate(order, start=1):
            if await self.teams.set_draft_order(team.id, slot) is None:
                await self._revert_start(started)
                raise TeamNotFoundError(f"Team {team.id} disappeared while assigning the draft order")
            team.draft_order = slot

        draft_order = [team.id for team in order]
        logger.info(
            f"League {league_id}: draft started by user {user_id} with {len(order)} teams, "
            f"order {draft_order}"
        )

        await self.actions.log_action(
            league_id,
            DraftActionType.START,
            user_id=user_id,
            pick_number=1,
            round_number=1,
            details={'draft_order': draft_order},
            action_at=now
        )
        await self.broadcaster.publish(self._event(
            DraftEventType.STARTED,
            started,
            next_team_id=order[0].id,
            details={'draft_order': draft_order}
        ))
        self._schedule_auto_pick(started)

        return started

    async def _revert_start(self, league: FantasyLeague) -> None:
        """Put a half-started draft back to not started."""
        updates = {
            'draft_status': DraftStatus.NOT_STARTED.value,
            'pick_started_at': None,
        }
        try:
            await self.leagues.update_draft_state(
                league.id,
                league.draft.current_pick,
                updates,
                expected_status=DraftStatus.IN_PROGRESS
            )
        except PersistenceConflict:
            logger.error(f"League {league.id}: draft changed before the failed start could be reverted")
            return

        logger.warning(f"League {league.id}: draft start reverted")

    async def make_manual_pick(self, league_id: int, user_id: int, player_id: int) -> DraftPick:
        """
        Draft a player for the user's team, which must be on the clock.

        Args:
            league_id: Fantasy league ID
            user_id: User making the pick
            player_id: Player to draft

        Returns:
            The recorded DraftPick

        Raises:
            LeagueNotFoundError / PlayerNotFoundError / TeamNotFoundError: Missing entities
            ValidationException: Not the user's turn, or the player cannot be drafted
            PreconditionMismatch: If the pick was made by someone else first
        """
        league = await self.leagues.require_league(league_id)
        expected_pick = league.draft.current_pick

        if not league.draft.is_in_progress:
            raise ValidationException("The draft is not in progress.")

        teams = await self.teams.get_league_teams(league_id)
        team = self.teams.find_team_on_clock(league, teams)
        if team is None:
            raise TeamNotFoundError(f"No team is on the clock for pick {expected_pick}")
        if team.user_id != user_id:
            raise ValidationException("It's not your turn.")

        player = await self.players.get_player(player_id)
        if player is None:
            raise PlayerNotFoundError(f"Player {player_id} not found")

        drafted = await self.picks.get_drafted_player_ids(league_id)
        if player.id in drafted:
            raise ValidationException(f"{player.name} has already been drafted.")

        error = validate_player_for_team(team, player, league.team_size, self.selector.minimums)
        if error:
            raise ValidationException(error)

        _, pick = await self._apply_pick(league, teams, team, player, expected_pick, user_id=user_id)
        return pick

    async def perform_auto_pick(
        self,
        league: FantasyLeague,
        team: FantasyTeam,
        expected_pick: int,
        teams: Optional[List[FantasyTeam]] = None
    ) -> Optional[DraftPick]:
        """
        Draft for the team on the clock after its time ran out.

        Args:
            league: League as loaded by the caller
            team: Team on the clock
            expected_pick: Pick number the caller validated
            teams: League teams (loaded when omitted)

        Returns:
            The recorded DraftPick, or None if the draft stalled for lack of
            eligible players

        Raises:
            PreconditionMismatch: If the pick was made by someone else first
        """
        if teams is None:
            teams = await self.teams.get_league_teams(league.id)

        drafted = await self.picks.get_drafted_player_ids(league.id)
        pool = await self.players.get_available_players(league, drafted)

        try:
            player = self.selector.select(league, team, pool, drafted)
        except NoEligiblePlayersError as e:
            await self._stall_draft(league, team, expected_pick, str(e))
            return None

        logger.info(
            f"League {league.id}: auto-picking {player.name} ({player.id}) for {team.team_name}, "
            f"{format_pick_display(expected_pick, len(teams))}"
        )
        _, pick = await self._apply_pick(league, teams, team, player, expected_pick, auto_pick=True)
        return pick

    async def _apply_pick(
        self,
        league: FantasyLeague,
        teams: List[FantasyTeam],
        team: FantasyTeam,
        player: Player,
        expected_pick: int,
        auto_pick: bool = False,
        user_id: Optional[int] = None
    ) -> Tuple[FantasyLeague, DraftPick]:
        """Pick-advance transition shared by manual and automatic picks."""
        round_num, _ = calculate_pick_details(expected_pick, len(teams))
        payload = {
            'expected_pick': expected_pick,
            'fantasy_team_id': team.id,
            'player_id': player.id,
            'round': round_num,
            'auto_pick': auto_pick,
        }

        holder = 'auto-pick' if auto_pick else f'user:{user_id}'
        async with self.locks.hold(league.id, holder):
            payload['pick_started_at'] = self.clock().isoformat()
            updated, pick = await self._record_pick(league.id, expected_pick, payload)

        await self._after_pick(updated, teams, pick, auto_pick, user_id)
        return updated, pick

    async def _record_pick(
        self,
        league_id: int,
        expected_pick: int,
        payload: Dict[str, Any]
    ) -> Tuple[FantasyLeague, DraftPick]:
        """Conditional pick write with one reload-and-retry on conflict."""
        try:
            return await self.leagues.record_pick(league_id, payload)
        except PersistenceConflict:
            logger.info(f"League {league_id}: conflict recording pick {expected_pick}, reloading")

        current = await self.leagues.get_league(league_id)
        if (current is None
                or current.draft.current_pick != expected_pick
                or not current.draft.is_in_progress):
            raise PreconditionMismatch(PICK_UNAVAILABLE)

        try:
            return await self.leagues.record_pick(league_id, payload)
        except PersistenceConflict:
            logger.warning(f"League {league_id}: second conflict recording pick {expected_pick}")
            raise PreconditionMismatch(PICK_UNAVAILABLE)

    async def _after_pick(
        self,
        league: FantasyLeague,
        teams: List[FantasyTeam],
        pick: DraftPick,
        auto_pick: bool,
        user_id: Optional[int]
    ) -> None:
        """History, broadcast and the next clock for a committed pick."""
        await self.actions.log_action(
            league.id,
            DraftActionType.AUTO_PICK if auto_pick else DraftActionType.PICK,
            user_id=user_id,
            team_id=pick.fantasy_team_id,
            player_id=pick.player_id,
            pick_number=pick.pick_number,
            round_number=pick.round,
            action_at=self.clock()
        )

        complete = is_draft_complete(league.draft.current_pick, len(teams), league.team_size)
        next_team = None if complete else self.teams.find_team_on_clock(league, teams)

        await self.broadcaster.publish(self._event(
            DraftEventType.PLAYER_DRAFTED,
            league,
            picked_player_id=pick.player_id,
            picked_team_id=pick.fantasy_team_id,
            next_team_id=next_team.id if next_team else None,
            auto_pick=auto_pick
        ))

        if complete:
            await self._complete_draft(league)
        else:
            self._schedule_auto_pick(league)

    async def _complete_draft(self, league: FantasyLeague) -> FantasyLeague:
        updates = {
            'draft_status': DraftStatus.COMPLETED.value,
            'pick_started_at': None,
        }
        try:
            completed = await self.leagues.update_draft_state(league.id, league.draft.current_pick, updates)
        except PersistenceConflict:
            logger.warning(f"League {league.id}: draft was already completed")
            return league

        logger.info(f"League {league.id}: draft completed after {league.draft.current_pick - 1} picks")

        await self.actions.log_action(
            league.id,
            DraftActionType.COMPLETE,
            pick_number=league.draft.current_pick - 1,
            action_at=self.clock()
        )
        await self.broadcaster.publish(self._event(DraftEventType.COMPLETED, completed))
        return completed

    async def _stall_draft(
        self,
        league: FantasyLeague,
        team: FantasyTeam,
        expected_pick: int,
        reason: str
    ) -> FantasyLeague:
        """Stop the clock when nobody can be auto-picked. Nothing is rescheduled."""
        status = DraftStatus(get_config().stall_status)

        updates: Dict[str, Any] = {
            'draft_status': status.value,
            'pick_started_at': None,
        }
        if status == DraftStatus.PAUSED:
            updates.update({
                'paused_at': self.clock().isoformat(),
                'paused_by_user_id': None,
                'pause_time_remaining': 0,
            })

        async with self.locks.hold(league.id, 'auto-pick'):
            try:
                stalled = await self.leagues.update_draft_state(
                    league.id,
                    expected_pick,
                    updates,
                    expected_status=DraftStatus.IN_PROGRESS
                )
            except PersistenceConflict:
                raise PreconditionMismatch(PICK_UNAVAILABLE)

        logger.warning(
            f"League {league.id}: draft {status.value} at pick {expected_pick}, "
            f"no eligible players for team {team.id}: {reason}"
        )

        await self.actions.log_action(
            league.id,
            DraftActionType.STALL,
            team_id=team.id,
            pick_number=expected_pick,
            details={'reason': reason, 'status': status.value},
            action_at=self.clock()
        )
        await self.broadcaster.publish(self._event(
            DraftEventType.STALLED,
            stalled,
            next_team_id=team.id,
            details={'reason': reason}
        ))
        return stalled

    async def pause_draft(self, league_id: int, user_id: int) -> FantasyLeague:
        """
        Pause a running draft, freezing the clock.

        Raises:
            ValidationException: If the user is not the owner or the draft is not running
            PreconditionMismatch: If a pick landed while pausing
        """
        league = await self.leagues.require_league(league_id)

        if league.owner_id != user_id:
            raise ValidationException("Only the league owner can pause the draft.")
        if not league.draft.is_in_progress:
            raise ValidationException("Only a draft in progress can be paused.")

        now = self.clock()
        remaining = int(time_remaining(league.draft, now).total_seconds())

        updates = {
            'draft_status': DraftStatus.PAUSED.value,
            'pick_started_at': None,
            'paused_at': now.isoformat(),
            'paused_by_user_id': user_id,
            'pause_time_remaining': remaining,
        }
        try:
            paused = await self.leagues.update_draft_state(
                league_id,
                league.draft.current_pick,
                updates,
                expected_status=DraftStatus.IN_PROGRESS
            )
        except PersistenceConflict:
            raise PreconditionMismatch("The draft changed before it could be paused.")

        logger.info(f"League {league_id}: draft paused by user {user_id} with {remaining}s left")

        await self.actions.log_action(
            league_id,
            DraftActionType.PAUSE,
            user_id=user_id,
            pick_number=league.draft.current_pick,
            details={'time_remaining': remaining},
            action_at=now
        )
        await self.broadcaster.publish(self._event(
            DraftEventType.PAUSED,
            paused,
            details={'time_remaining': remaining}
        ))
        return paused

    async def resume_draft(self, league_id: int, user_id: int) -> FantasyLeague:
        """
        Resume a paused draft with the time that was left on the clock.

        Raises:
            ValidationException: If the user is not the owner or the draft is not paused
            PreconditionMismatch: If the draft changed while resuming
        """
        league = await self.leagues.require_league(league_id)

        if league.owner_id != user_id:
            raise ValidationException("Only the league owner can resume the draft.")
        if not league.draft.is_paused:
            raise ValidationException("Only a paused draft can be resumed.")

        limit = league.draft.pick_time_limit
        remaining = league.draft.pause_time_remaining
        if remaining is None:
            remaining = limit
        remaining = min(remaining, limit)

        started_at = self.clock() - timedelta(seconds=limit - remaining)
        updates = {
            'draft_status': DraftStatus.IN_PROGRESS.value,
            'pick_started_at': started_at.isoformat(),
            'paused_at': None,
            'paused_by_user_id': None,
            'pause_time_remaining': None,
        }
        try:
            resumed = await self.leagues.update_draft_state(
                league_id,
                league.draft.current_pick,
                updates,
                expected_status=DraftStatus.PAUSED
            )
        except PersistenceConflict:
            raise PreconditionMismatch("The draft changed before it could be resumed.")

        logger.info(f"League {league_id}: draft resumed by user {user_id} with {remaining}s left")

        teams = await self.teams.get_league_teams(league_id)
        team = self.teams.find_team_on_clock(resumed, teams)

        await self.actions.log_action(
            league_id,
            DraftActionType.RESUME,
            user_id=user_id,
            pick_number=resumed.draft.current_pick,
            details={'time_remaining': remaining},
            action_at=self.clock()
        )
        await self.broadcaster.publish(self._event(
            DraftEventType.RESUMED,
            resumed,
            next_team_id=team.id if team else None
        ))
        self._schedule_auto_pick(resumed)
        return resumed

    async def get_draft_status(self, league_id: int, now: Optional[datetime] = None) -> DraftStatusView:
        """
        Report the league's clock.

        Args:
            league_id: Fantasy league ID
            now: Evaluation time (defaults to the service clock)

        Returns:
            DraftStatusView snapshot

        Raises:
            LeagueNotFoundError: If the league does not exist
        """
        league = await self.leagues.require_league(league_id)
        now = now or self.clock()
        state = league.draft

        view = DraftStatusView(
            league_id=league.id,
            current_pick=state.current_pick,
            draft_status=state.draft_status,
            time_remaining=time_remaining(state, now),
            deadline=pick_deadline(state),
            pick_time_limit=state.pick_time_limit
        )

        if state.draft_status == DraftStatus.NOT_STARTED:
            return view

        teams = await self.teams.get_league_teams(league_id)
        if not teams:
            return view

        view.total_picks = league.total_picks(len(teams))
        if state.current_pick <= view.total_picks:
            view.round, _ = calculate_pick_details(state.current_pick, len(teams))
            if not state.is_completed:
                team = self.teams.find_team_on_clock(league, teams)
                view.current_team_id = team.id if team else None

        return view

    async def get_draft_history(self, league_id: int, limit: Optional[int] = None) -> List[DraftAction]:
        """Draft actions of a league, newest first."""
        return await self.actions.get_league_history(league_id, limit=limit)

    def _event(self, event: DraftEventType, league: FantasyLeague, **fields) -> DraftEvent:
        """Broadcast payload stamped with the service clock."""
        server_time = int(self.clock().timestamp() * 1000)
        return DraftEvent.for_league(event, league, server_time=server_time, **fields)

    def _schedule_auto_pick(self, league: FantasyLeague) -> None:
        """Schedule the next auto-pick. A failure is logged; the committed state stands."""
        try:
            self.scheduler.schedule(league, now=self.clock())
        except Exception as e:
            logger.error(
                f"League {league.id}: failed to schedule auto-pick for pick "
                f"{league.draft.current_pick}: {e}"
            )


# Global service instance
draft_service = DraftService()
