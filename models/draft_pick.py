"""
Draft pick model

A completed selection: which team took which player with which overall pick.

API FIELD MAPPING:
The API may return 'team' and 'player' as nested objects or as bare IDs.
Both shapes are accepted and the *_id fields are always populated.
"""
from typing import Optional, Any, Dict
from pydantic import Field

from models.base import FantasyBaseModel
from models.fantasy_team import FantasyTeam
from models.player import Player


class DraftPick(FantasyBaseModel):
    """Draft pick model representing a single draft selection."""

    fantasy_league_id: int = Field(..., description="League the pick belongs to")
    fantasy_team_id: int = Field(..., description="Team that made the pick")
    player_id: int = Field(..., description="Selected player ID")
    pick_number: int = Field(..., ge=1, description="Overall pick number")
    round: int = Field(..., ge=1, description="Draft round")
    auto_pick: bool = Field(False, description="Whether the clock made this pick")

    team: Optional[FantasyTeam] = Field(None, description="Picking team (populated when needed)")
    player: Optional[Player] = Field(None, description="Selected player (populated when needed)")

    @classmethod
    def from_api_data(cls, data: Dict[str, Any]) -> 'DraftPick':
        """
        Create DraftPick from API response data.

        Handles 'team' and 'player' as either nested objects or integer IDs.
        """
        if not data:
            raise ValueError("Cannot create DraftPick from empty data")

        parsed = dict(data)

        team = parsed.pop('team', None)
        if isinstance(team, dict):
            parsed['team'] = FantasyTeam.from_api_data(team)
            parsed.setdefault('fantasy_team_id', team.get('id'))
        elif team is not None:
            parsed.setdefault('fantasy_team_id', int(team))

        player = parsed.pop('player', None)
        if isinstance(player, dict):
            parsed['player'] = Player.from_api_data(player)
            parsed.setdefault('player_id', player.get('id'))
        elif player is not None:
            parsed.setdefault('player_id', int(player))

        return cls(**parsed)

    def __str__(self):
        who = self.player.name if self.player else f"Player {self.player_id}"
        team = self.team.team_name if self.team else f"Team {self.fantasy_team_id}"
        return f"Pick {self.pick_number} (Round {self.round}): {who} ({team})"
