"""
Business logic services for the draft clock service

Service layer providing clean interfaces to draft data and transitions.
"""

from .league_service import LeagueService, league_service
from .team_service import TeamService, team_service
from .player_service import PlayerService, player_service
from .draft_pick_service import DraftPickService, draft_pick_service
from .draft_action_service import DraftActionService, draft_action_service
from .scheduler_service import AutoPickScheduler, auto_pick_scheduler
from .broadcast_service import DraftBroadcaster, draft_broadcaster, authorize_draft_channel
from .draft_service import DraftService, DraftStatusView, draft_service

__all__ = [
    'LeagueService', 'league_service',
    'TeamService', 'team_service',
    'PlayerService', 'player_service',
    'DraftPickService', 'draft_pick_service',
    'DraftActionService', 'draft_action_service',
    'AutoPickScheduler', 'auto_pick_scheduler',
    'DraftBroadcaster', 'draft_broadcaster', 'authorize_draft_channel',
    'DraftService', 'DraftStatusView', 'draft_service',
]
