"""
Draft state model

The pick clock of a league draft: which pick is on the clock, whether the draft
is running, and when the current pick started.
"""
from enum import Enum
from typing import Any, Optional
from datetime import datetime, timedelta, UTC
from pydantic import Field, field_validator, model_validator

from models.base import FantasyBaseModel


class DraftStatus(str, Enum):
    """Lifecycle of a league draft."""
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    PAUSED = "paused"
    COMPLETED = "completed"


# Field names the persistence API uses for draft state on the league row
DRAFT_STATE_FIELDS = (
    'current_pick',
    'draft_status',
    'pick_started_at',
    'pick_time_limit',
    'paused_at',
    'paused_by_user_id',
    'pause_time_remaining',
)


class DraftState(FantasyBaseModel):
    """Draft clock state owned by a fantasy league."""

    current_pick: int = Field(1, ge=1, description="Overall pick number on the clock")
    draft_status: DraftStatus = Field(DraftStatus.NOT_STARTED, description="Draft lifecycle status")
    pick_started_at: Optional[datetime] = Field(None, description="When the current pick's clock started")
    pick_time_limit: int = Field(60, gt=0, description="Seconds allowed per pick")

    # Pause bookkeeping
    paused_at: Optional[datetime] = Field(None, description="When the draft was paused")
    paused_by_user_id: Optional[int] = Field(None, description="User that paused the draft")
    pause_time_remaining: Optional[int] = Field(None, ge=0, description="Seconds left on the clock at pause")

    @model_validator(mode="before")
    @classmethod
    def normalize_status(cls, data: Any) -> Any:
        """
        Map the legacy 'pending' status and drop a stale clock.

        pick_started_at is only meaningful while the draft is in progress.
        """
        if not isinstance(data, dict):
            return data

        status = data.get('draft_status')
        if isinstance(status, DraftStatus):
            status = status.value
        if status == 'pending':
            status = DraftStatus.NOT_STARTED.value
            data = {**data, 'draft_status': status}

        if status is not None and status != DraftStatus.IN_PROGRESS.value and data.get('pick_started_at'):
            data = {**data, 'pick_started_at': None}

        return data

    @field_validator('pick_started_at', 'paused_at', mode='after')
    @classmethod
    def assume_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Treat naive timestamps from the API as UTC."""
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v

    @property
    def is_in_progress(self) -> bool:
        """Check if picks are currently being made."""
        return self.draft_status == DraftStatus.IN_PROGRESS

    @property
    def is_paused(self) -> bool:
        """Check if the draft is paused."""
        return self.draft_status == DraftStatus.PAUSED

    @property
    def is_completed(self) -> bool:
        """Check if the draft is over."""
        return self.draft_status == DraftStatus.COMPLETED

    @property
    def pick_deadline(self) -> Optional[datetime]:
        """When the current pick expires, or None if no clock is running."""
        if not self.is_in_progress or self.pick_started_at is None:
            return None
        return self.pick_started_at + timedelta(seconds=self.pick_time_limit)

    def __str__(self):
        return f"Draft {self.draft_status.value}: Pick {self.current_pick} ({self.pick_time_limit}s clock)"
