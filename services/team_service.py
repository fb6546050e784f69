"""
Fantasy team service for the draft clock service

Handles team lookups and draft order assignment.
"""
import logging
from typing import List, Optional

from services.base_service import BaseService
from models.fantasy_league import FantasyLeague
from models.fantasy_team import FantasyTeam
from utils.draft_helpers import calculate_pick_details

logger = logging.getLogger(f'{__name__}.TeamService')


class TeamService(BaseService[FantasyTeam]):
    """
    Service for fantasy team operations.

    Features:
    - List a league's teams in draft order (rosters included)
    - Resolve the team on the clock for a pick
    - Find a user's team in a league
    - Assign draft order
    """

    def __init__(self):
        """Initialize team service."""
        super().__init__(FantasyTeam, 'fantasyteams')
        logger.debug("TeamService initialized")

    async def get_team(self, team_id: int) -> Optional[FantasyTeam]:
        """Get a team with its roster."""
        return await self.get_by_id(team_id)

    async def get_league_teams(self, league_id: int) -> List[FantasyTeam]:
        """
        Get all teams in a league, ordered by draft slot.

        Teams without a slot (draft not started) sort last, by id.

        Args:
            league_id: Fantasy league ID

        Returns:
            List of FantasyTeam instances with rosters
        """
        params = [
            ('fantasy_league_id', league_id),
            ('include_players', 'true')
        ]
        teams = await self.get_all_items(params=params)
        teams.sort(key=lambda t: (t.draft_order is None, t.draft_order or 0, t.id))

        logger.debug(f"Retrieved {len(teams)} teams for league {league_id}")
        return teams

    async def get_team_for_user(self, league_id: int, user_id: int) -> Optional[FantasyTeam]:
        """
        Get the team a user owns in a league.

        Returns:
            FantasyTeam or None if the user is not a member
        """
        params = [
            ('fantasy_league_id', league_id),
            ('user_id', user_id),
            ('include_players', 'true')
        ]
        teams = await self.get_all_items(params=params)

        if not teams:
            logger.debug(f"User {user_id} has no team in league {league_id}")
            return None

        return teams[0]

    def find_team_on_clock(
        self,
        league: FantasyLeague,
        teams: List[FantasyTeam],
        pick: Optional[int] = None
    ) -> Optional[FantasyTeam]:
        """
        Resolve which team owns a pick under snake ordering.

        Args:
            league: League (its current_pick is used when `pick` is omitted)
            teams: The league's teams with draft_order assigned
            pick: Overall pick number to resolve

        Returns:
            FantasyTeam on the clock, or None if unresolvable
        """
        if not teams:
            return None

        overall = pick if pick is not None else league.draft.current_pick
        if overall > league.total_picks(len(teams)):
            return None

        _, slot = calculate_pick_details(overall, len(teams))

        for team in teams:
            if team.draft_order == slot:
                return team

        logger.warning(f"No team holds draft slot {slot} in league {league.id}")
        return None

    async def set_draft_order(self, team_id: int, draft_order: int) -> Optional[FantasyTeam]:
        """
        Assign a team's draft slot.

        Returns:
            Updated FantasyTeam or None if not found
        """
        updated = await self.patch(team_id, {'draft_order': draft_order})

        if updated:
            logger.info(f"Team {team_id} assigned draft slot {draft_order}")
        else:
            logger.error(f"Failed to assign draft slot {draft_order} to team {team_id}")

        return updated


# Global service instance
team_service = TeamService()
