"""
League service for the draft clock service

Loads leagues and applies conditional writes to their draft state.
NO CACHING - draft state changes on every pick.
"""
import logging
from typing import Any, Dict, Optional, Tuple

from services.base_service import BaseService
from models.fantasy_league import FantasyLeague
from models.draft_pick import DraftPick
from models.draft_state import DraftStatus
from exceptions import APIException, LeagueNotFoundError

logger = logging.getLogger(f'{__name__}.LeagueService')


class LeagueService(BaseService[FantasyLeague]):
    """
    Service for fantasy league operations.

    Every write that touches the draft clock is conditional on the pick number
    the caller last saw (`expected_pick`); the API answers 409 when another
    writer advanced the draft first, surfacing here as PersistenceConflict.

    Features:
    - Load league with draft state
    - Conditional draft state updates (start, pause, resume, complete)
    - Atomic pick recording (player to team, pick advance, clock reset)
    """

    def __init__(self):
        """Initialize league service."""
        super().__init__(FantasyLeague, 'fantasyleagues')
        logger.debug("LeagueService initialized")

    async def get_league(self, league_id: int) -> Optional[FantasyLeague]:
        """
        Get a league with its current draft state.

        NOT cached - always reads the row the API considers current.

        Args:
            league_id: Fantasy league ID

        Returns:
            FantasyLeague instance or None if not found

        Raises:
            APIException: For API errors (a failed read is not a missing league)
        """
        league = await self.get_by_id(league_id)

        if league:
            logger.debug(
                f"Retrieved league {league_id}: pick={league.draft.current_pick}, "
                f"status={league.draft.draft_status.value}, "
                f"started={league.draft.pick_started_at}"
            )
        else:
            logger.warning(f"League {league_id} not found")

        return league

    async def require_league(self, league_id: int) -> FantasyLeague:
        """
        Get a league or raise.

        Raises:
            LeagueNotFoundError: If the league does not exist
        """
        league = await self.get_league(league_id)
        if not league:
            raise LeagueNotFoundError(f"League {league_id} not found")
        return league

    async def is_member(self, league_id: int, user_id: int) -> bool:
        """
        Check if a user owns a team in a league.

        Args:
            league_id: Fantasy league ID
            user_id: User to check

        Returns:
            True if the user has a team in the league
        """
        client = await self.get_client()
        params = [('fantasy_league_id', league_id), ('user_id', user_id)]
        data = await client.get('fantasyteams', params=params)

        if not data:
            return False

        return bool(data.get('count') or data.get('fantasyteams'))

    async def update_draft_state(
        self,
        league_id: int,
        expected_pick: int,
        updates: Dict[str, Any],
        expected_status: Optional[DraftStatus] = None
    ) -> FantasyLeague:
        """
        Update draft fields if the league is still on `expected_pick`.

        Args:
            league_id: Fantasy league ID
            expected_pick: Pick number the caller based the update on
            updates: Draft fields to write
            expected_status: Status the draft must still have (optional)

        Returns:
            Updated FantasyLeague

        Raises:
            PersistenceConflict: If current_pick moved on
            LeagueNotFoundError: If the league disappeared
        """
        params = [('expected_pick', expected_pick)]
        if expected_status is not None:
            params.append(('expected_status', expected_status.value))
        updated = await self.patch(league_id, updates, params=params)

        if not updated:
            raise LeagueNotFoundError(f"League {league_id} not found for draft update")

        logger.info(
            f"Updated draft state for league {league_id} "
            f"(expected pick {expected_pick}): {updates}"
        )
        return updated

    async def record_pick(
        self,
        league_id: int,
        payload: Dict[str, Any]
    ) -> Tuple[FantasyLeague, DraftPick]:
        """
        Apply a pick atomically on the persistence side.

        The API assigns the player to the team, creates the pick record,
        increments current_pick and resets pick_started_at in one transaction,
        rejecting the request with 409 unless current_pick == payload['expected_pick'].

        Args:
            league_id: Fantasy league ID
            payload: expected_pick, fantasy_team_id, player_id, round,
                     pick_started_at, auto_pick

        Returns:
            (updated league, created pick)

        Raises:
            PersistenceConflict: If the pick was already made
            LeagueNotFoundError: If the league disappeared
            APIException: For other API errors
        """
        client = await self.get_client()
        response = await client.post(f'{self.endpoint}/{league_id}/draft/picks', payload)

        if not response:
            raise LeagueNotFoundError(f"League {league_id} not found while recording pick")

        try:
            league = FantasyLeague.from_api_data(response['league'])
            pick = DraftPick.from_api_data(response['pick'])
        except (KeyError, TypeError, ValueError) as e:
            raise APIException(f"Malformed pick response for league {league_id}: {e}")

        logger.info(
            f"Recorded pick #{pick.pick_number} in league {league_id}: "
            f"player {pick.player_id} to team {pick.fantasy_team_id}"
        )
        return league, pick


# Global service instance
league_service = LeagueService()
