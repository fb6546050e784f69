"""
Fantasy team model

A user-owned roster inside a fantasy league, with its slot in the draft order.
"""
from typing import Dict, List, Optional
from pydantic import Field

from models.base import FantasyBaseModel
from models.player import Player, PlayerPosition


class FantasyTeam(FantasyBaseModel):
    """Fantasy team model representing one participant in a league draft."""

    id: int = Field(..., description="Fantasy team ID")
    fantasy_league_id: int = Field(..., description="League this team plays in")
    user_id: int = Field(..., description="Owning user ID")
    team_name: str = Field(..., description="Team display name")
    draft_order: Optional[int] = Field(None, description="1-based draft slot (assigned at draft start)")
    players: List[Player] = Field(default_factory=list, description="Players currently on the roster")

    @classmethod
    def from_api_data(cls, data: dict) -> 'FantasyTeam':
        """Create FantasyTeam from API data, parsing the nested roster."""
        if not data:
            raise ValueError("Cannot create FantasyTeam from empty data")

        parsed = dict(data)
        players = parsed.pop('players', None) or []
        parsed['players'] = [
            p if isinstance(p, Player) else Player.from_api_data(p)
            for p in players
        ]
        return cls(**parsed)

    @property
    def roster_size(self) -> int:
        """Number of players on the roster."""
        return len(self.players)

    @property
    def player_ids(self) -> List[int]:
        """IDs of rostered players."""
        return [p.id for p in self.players]

    def position_counts(self) -> Dict[PlayerPosition, int]:
        """Count rostered players per position (every position present, zero if empty)."""
        counts = {position: 0 for position in PlayerPosition}
        for player in self.players:
            counts[player.position] += 1
        return counts

    def remaining_capacity(self, team_size: int) -> int:
        """Open roster slots given the league's team size."""
        return max(0, team_size - self.roster_size)

    def is_full(self, team_size: int) -> bool:
        """Check if the roster has no open slots."""
        return self.remaining_capacity(team_size) == 0

    def has_player(self, player_id: int) -> bool:
        """Check if the team already holds a player."""
        return player_id in self.player_ids

    def __str__(self):
        slot = f"#{self.draft_order}" if self.draft_order else "unordered"
        return f"{self.team_name} ({slot})"
