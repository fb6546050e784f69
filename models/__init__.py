"""
Data models for the draft clock service

Pydantic models for leagues, teams, players and the draft clock.
"""

from models.base import FantasyBaseModel
from models.player import Player, PlayerPosition
from models.fantasy_team import FantasyTeam
from models.draft_state import DraftState, DraftStatus
from models.fantasy_league import FantasyLeague
from models.draft_pick import DraftPick
from models.draft_action import DraftAction, DraftActionType
from models.draft_event import DraftEvent, DraftEventType, draft_channel

__all__ = [
    'FantasyBaseModel',
    'Player',
    'PlayerPosition',
    'FantasyTeam',
    'DraftState',
    'DraftStatus',
    'FantasyLeague',
    'DraftPick',
    'DraftAction',
    'DraftActionType',
    'DraftEvent',
    'DraftEventType',
    'draft_channel',
]
