"""
Draft action service for the draft clock service

Writes and reads the draft history log.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from services.base_service import BaseService
from models.draft_action import DraftAction, DraftActionType
from exceptions import APIException

logger = logging.getLogger(f'{__name__}.DraftActionService')


class DraftActionService(BaseService[DraftAction]):
    """
    Service for the draft history log.

    History writes follow committed transitions; a failed write is logged and
    does not undo the transition.
    """

    def __init__(self):
        """Initialize draft action service."""
        super().__init__(DraftAction, 'draftactions')
        logger.debug("DraftActionService initialized")

    async def log_action(
        self,
        league_id: int,
        action_type: DraftActionType,
        user_id: Optional[int] = None,
        team_id: Optional[int] = None,
        player_id: Optional[int] = None,
        pick_number: Optional[int] = None,
        round_number: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        action_at: Optional[datetime] = None
    ) -> Optional[DraftAction]:
        """
        Record a draft transition.

        Args:
            league_id: Fantasy league ID
            action_type: Kind of transition
            user_id: Acting user (None when the draft clock acted)
            team_id: Team involved
            player_id: Player involved
            pick_number: Overall pick number
            round_number: Draft round
            details: Extra data for the history view
            action_at: When the transition happened (defaults to now)

        Returns:
            Created DraftAction or None if the write failed
        """
        action = DraftAction(
            fantasy_league_id=league_id,
            action_type=action_type,
            user_id=user_id,
            fantasy_team_id=team_id,
            player_id=player_id,
            pick_number=pick_number,
            round_number=round_number,
            details=details
        )
        if action_at is not None:
            action.action_at = action_at

        try:
            created = await self.create(action.to_dict())
        except APIException as e:
            logger.error(f"Failed to log {action_type.value} action for league {league_id}: {e}")
            return None

        logger.debug(f"Logged draft action for league {league_id}: {action}")
        return created or action

    async def get_league_history(self, league_id: int, limit: Optional[int] = None) -> List[DraftAction]:
        """
        Get a league's draft history, newest first.

        Args:
            league_id: Fantasy league ID
            limit: Maximum number of actions to return

        Returns:
            List of DraftAction instances
        """
        params = [('fantasy_league_id', league_id), ('sort', 'action_at-desc')]
        if limit:
            params.append(('limit', limit))

        actions = await self.get_all_items(params=params)
        actions.sort(key=lambda a: (a.action_at, a.id or 0), reverse=True)

        return actions[:limit] if limit else actions


# Global service instance
draft_action_service = DraftActionService()
