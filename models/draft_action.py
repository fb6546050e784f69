"""
Draft action model

Audit trail entry for every draft transition (start, picks, pauses, completion).
"""
from enum import Enum
from typing import Any, Dict, Optional
from datetime import datetime, UTC
from pydantic import Field

from models.base import FantasyBaseModel


class DraftActionType(str, Enum):
    """Kinds of draft transitions recorded in the history."""
    START = "start"
    PICK = "pick"
    AUTO_PICK = "auto_pick"
    PAUSE = "pause"
    RESUME = "resume"
    COMPLETE = "complete"
    STALL = "stall"


class DraftAction(FantasyBaseModel):
    """Draft history entry."""

    fantasy_league_id: int = Field(..., description="League the action happened in")
    action_type: DraftActionType = Field(..., description="Kind of transition")
    fantasy_team_id: Optional[int] = Field(None, description="Team involved, if any")
    player_id: Optional[int] = Field(None, description="Player involved, if any")
    user_id: Optional[int] = Field(None, description="Acting user (None for the draft clock)")
    pick_number: Optional[int] = Field(None, description="Overall pick number")
    round_number: Optional[int] = Field(None, description="Draft round")
    details: Optional[Dict[str, Any]] = Field(None, description="Free-form action details")
    action_at: datetime = Field(default_factory=lambda: datetime.now(UTC), description="When it happened")

    @property
    def is_system_action(self) -> bool:
        """Check if the draft clock (not a user) performed the action."""
        return self.user_id is None

    def __str__(self):
        parts = [self.action_type.value]
        if self.pick_number is not None:
            parts.append(f"pick {self.pick_number}")
        if self.player_id is not None:
            parts.append(f"player {self.player_id}")
        return f"DraftAction({', '.join(parts)})"
