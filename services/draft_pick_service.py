"""
Draft pick service for the draft clock service

Read access to the picks made in a league.
NO CACHING - picks change constantly during a draft.
"""
import logging
from typing import List, Set

from services.base_service import BaseService
from models.draft_pick import DraftPick

logger = logging.getLogger(f'{__name__}.DraftPickService')


class DraftPickService(BaseService[DraftPick]):
    """
    Service for draft pick lookups.

    Picks are created by LeagueService.record_pick as part of the atomic
    pick-advance; this service only reads them.
    """

    def __init__(self):
        """Initialize draft pick service."""
        super().__init__(DraftPick, 'draftpicks')
        logger.debug("DraftPickService initialized")

    async def get_league_picks(self, league_id: int) -> List[DraftPick]:
        """
        Get all picks of a league in pick order.

        Args:
            league_id: Fantasy league ID

        Returns:
            List of DraftPick instances ordered by pick_number
        """
        params = [
            ('fantasy_league_id', league_id),
            ('sort', 'pick-asc')
        ]
        picks = await self.get_all_items(params=params)
        picks.sort(key=lambda p: p.pick_number)

        logger.debug(f"Retrieved {len(picks)} picks for league {league_id}")
        return picks

    async def get_drafted_player_ids(self, league_id: int) -> Set[int]:
        """IDs of every player already drafted in a league."""
        picks = await self.get_league_picks(league_id)
        return {pick.player_id for pick in picks}


# Global service instance
draft_pick_service = DraftPickService()
