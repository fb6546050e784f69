"""
Player model for the draftable player pool

Represents a real-world player with position and market price.
"""
from enum import Enum
from typing import Optional
from pydantic import Field

from models.base import FantasyBaseModel


class PlayerPosition(str, Enum):
    """Positions a fantasy roster is composed from."""
    GUARD = "Guard"
    FORWARD = "Forward"
    CENTER = "Center"


class Player(FantasyBaseModel):
    """Player model representing a draftable player."""

    # Override base model to make id required for database entities
    id: int = Field(..., description="Player ID from database")

    name: str = Field(..., description="Player full name")
    position: PlayerPosition = Field(..., description="Roster position")
    price: float = Field(0.0, description="Current market price")
    is_active: bool = Field(True, description="Whether the player can be drafted")

    # Real-world team relationship
    team_id: Optional[int] = Field(None, description="Real-world team ID")
    championship_id: Optional[int] = Field(None, description="Championship the team plays in")

    photo_url: Optional[str] = Field(None, description="Player photo URL")
    jersey_number: Optional[str] = Field(None, description="Jersey number")

    @classmethod
    def from_api_data(cls, data: dict) -> 'Player':
        """
        Create Player instance from API data, handling nested team structure.

        The API can return the real-world team as a nested object; only its id
        and championship are kept.
        """
        if not data:
            raise ValueError("Cannot create Player from empty data")

        parsed = dict(data)
        team = parsed.pop('team', None)
        if isinstance(team, dict):
            parsed.setdefault('team_id', team.get('id'))
            parsed.setdefault('championship_id', team.get('championship_id'))

        return cls(**parsed)

    def __str__(self):
        return f"{self.name} ({self.position.value}, {self.price:,.2f})"
