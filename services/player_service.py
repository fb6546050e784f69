"""
Player service for the draft clock service

Handles player lookups and the draftable pool for a league.
"""
import logging
from typing import Iterable, List, Optional

from services.base_service import BaseService
from models.player import Player, PlayerPosition
from models.fantasy_league import FantasyLeague

logger = logging.getLogger(f'{__name__}.PlayerService')


class PlayerService(BaseService[Player]):
    """
    Service for player-related operations.

    Features:
    - Player retrieval by ID
    - Available pool for a league's championship (active, undrafted)
    - Position and name filtering
    """

    def __init__(self):
        """Initialize player service."""
        super().__init__(Player, 'players')
        logger.debug("PlayerService initialized")

    async def get_player(self, player_id: int) -> Optional[Player]:
        """
        Get player by ID.

        Args:
            player_id: Unique player identifier

        Returns:
            Player instance or None if not found
        """
        return await self.get_by_id(player_id)

    async def get_available_players(
        self,
        league: FantasyLeague,
        drafted_player_ids: Optional[Iterable[int]] = None,
        position: Optional[PlayerPosition] = None,
        search: Optional[str] = None
    ) -> List[Player]:
        """
        Get active players of the league's championship that nobody drafted yet.

        Args:
            league: League whose championship supplies the pool
            drafted_player_ids: Players already taken in this league
            position: Optional position filter
            search: Optional case-insensitive name filter

        Returns:
            Players ordered by price descending (ties by id)
        """
        params = [('is_active', 'true'), ('sort', 'price-desc')]
        if league.championship_id is not None:
            params.append(('championship_id', league.championship_id))
        if position is not None:
            params.append(('position', position.value))
        if search:
            params.append(('name', search))

        players = await self.get_all_items(params=params)

        drafted = set(drafted_player_ids or ())
        needle = search.lower() if search else None
        available = [
            p for p in players
            if p.is_active
            and p.id not in drafted
            and (position is None or p.position == position)
            and (needle is None or needle in p.name.lower())
        ]
        available.sort(key=lambda p: (-p.price, p.id))

        logger.debug(
            f"League {league.id}: {len(available)} available of {len(players)} players "
            f"(position={position.value if position else None}, search={search})"
        )
        return available


# Global service instance
player_service = PlayerService()
