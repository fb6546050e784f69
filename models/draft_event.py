"""
Draft event model

Real-time payloads published to league subscribers on `draft.{league_id}`.
"""
from enum import Enum
from typing import Any, Dict, Optional
from datetime import datetime, UTC
from pydantic import BaseModel, Field

from models.draft_state import DraftStatus
from models.fantasy_league import FantasyLeague


class DraftEventType(str, Enum):
    """Event names clients subscribe to."""
    STARTED = "draft.started"
    PLAYER_DRAFTED = "player.drafted"
    PAUSED = "draft.paused"
    RESUMED = "draft.resumed"
    COMPLETED = "draft.completed"
    STALLED = "draft.stalled"


def draft_channel(league_id: int) -> str:
    """Channel name for a league's draft room."""
    return f"draft.{league_id}"


class DraftEvent(BaseModel):
    """Broadcast payload describing a draft transition."""

    event: DraftEventType
    league_id: int
    current_pick: int
    draft_status: DraftStatus

    picked_player_id: Optional[int] = None
    picked_team_id: Optional[int] = None
    next_team_id: Optional[int] = None
    auto_pick: bool = False

    pick_started_at: Optional[datetime] = None
    end_time: Optional[int] = Field(None, description="Pick deadline in epoch milliseconds")
    server_time: int = Field(
        default_factory=lambda: int(datetime.now(UTC).timestamp() * 1000),
        description="Publisher clock in epoch milliseconds, for client clock-skew correction"
    )

    details: Dict[str, Any] = Field(default_factory=dict)

    @property
    def channel(self) -> str:
        """Channel this event is published on."""
        return draft_channel(self.league_id)

    @classmethod
    def for_league(
        cls,
        event: DraftEventType,
        league: FantasyLeague,
        **fields
    ) -> 'DraftEvent':
        """Build an event snapshotting the league's current clock."""
        deadline = league.draft.pick_deadline
        return cls(
            event=event,
            league_id=league.id,
            current_pick=league.draft.current_pick,
            draft_status=league.draft.draft_status,
            pick_started_at=league.draft.pick_started_at,
            end_time=int(deadline.timestamp() * 1000) if deadline else None,
            **fields
        )
