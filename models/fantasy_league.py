"""
Fantasy league model

The league aggregate. The persistence API returns draft fields flat on the
league row; they are folded into a nested DraftState here.
"""
from typing import Any, Dict, Optional
from pydantic import Field

from models.base import FantasyBaseModel
from models.draft_state import DraftState, DRAFT_STATE_FIELDS


class FantasyLeague(FantasyBaseModel):
    """Fantasy league model with its draft state."""

    id: int = Field(..., description="Fantasy league ID")
    name: str = Field(..., description="League name")
    owner_id: int = Field(..., description="User ID of the league owner")
    championship_id: Optional[int] = Field(None, description="Real-world championship players come from")
    mode: str = Field("draft", description="League mode: 'draft' or 'budget'")
    team_size: int = Field(10, gt=0, description="Players per fantasy team")
    max_members: Optional[int] = Field(None, description="Maximum number of teams")

    draft: DraftState = Field(default_factory=DraftState, description="Draft clock state")

    @classmethod
    def from_api_data(cls, data: Dict[str, Any]) -> 'FantasyLeague':
        """
        Create FantasyLeague from API response data.

        Accepts either a nested 'draft' object or the flat draft columns of
        the league row.
        """
        if not data:
            raise ValueError("Cannot create FantasyLeague from empty data")

        parsed = dict(data)

        draft = parsed.pop('draft', None)
        flat = {key: parsed.pop(key) for key in DRAFT_STATE_FIELDS if key in parsed}

        if isinstance(draft, DraftState):
            parsed['draft'] = draft
        else:
            draft_data = dict(draft or {})
            draft_data.update(flat)
            parsed['draft'] = DraftState(**draft_data)

        return cls(**parsed)

    @property
    def is_draft_mode(self) -> bool:
        """Check if the league selects players by draft (not budget)."""
        return self.mode == 'draft'

    @property
    def current_pick(self) -> int:
        """Overall pick number on the clock."""
        return self.draft.current_pick

    def total_picks(self, team_count: int) -> int:
        """Picks needed to fill every roster."""
        return team_count * self.team_size

    def __str__(self):
        return f"{self.name} (League {self.id}) - {self.draft}"
