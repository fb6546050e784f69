"""
Test Factories for the draft clock service

Provides factory functions to create test instances of models with sensible defaults.
This eliminates the need for ad-hoc fixture creation and makes tests resilient
to model changes.
"""
from datetime import datetime, UTC
from typing import List, Optional

from models.player import Player, PlayerPosition
from models.fantasy_team import FantasyTeam
from models.fantasy_league import FantasyLeague
from models.draft_state import DraftState, DraftStatus
from models.draft_pick import DraftPick

T0 = datetime(2025, 3, 1, 20, 0, 0, tzinfo=UTC)


class PlayerFactory:
    """Factory for creating Player test instances."""

    @staticmethod
    def create(
        id: int = 1,
        name: Optional[str] = None,
        position: PlayerPosition = PlayerPosition.GUARD,
        price: float = 10.0,
        championship_id: int = 1,
        **kwargs
    ) -> Player:
        """Create a Player instance with sensible defaults."""
        defaults = {
            "id": id,
            "name": name or f"Player {id}",
            "position": position,
            "price": price,
            "championship_id": championship_id,
        }
        defaults.update(kwargs)
        return Player(**defaults)

    @staticmethod
    def guard(id: int = 1, **kwargs) -> Player:
        return PlayerFactory.create(id=id, position=PlayerPosition.GUARD, **kwargs)

    @staticmethod
    def forward(id: int = 2, **kwargs) -> Player:
        return PlayerFactory.create(id=id, position=PlayerPosition.FORWARD, **kwargs)

    @staticmethod
    def center(id: int = 3, **kwargs) -> Player:
        return PlayerFactory.create(id=id, position=PlayerPosition.CENTER, **kwargs)

    @staticmethod
    def pool(count: int = 30, start_id: int = 100) -> List[Player]:
        """A pool cycling Guard/Forward/Center with descending prices."""
        positions = list(PlayerPosition)
        return [
            PlayerFactory.create(
                id=start_id + i,
                position=positions[i % len(positions)],
                price=float(1000 - i * 10)
            )
            for i in range(count)
        ]


class TeamFactory:
    """Factory for creating FantasyTeam test instances."""

    @staticmethod
    def create(
        id: int = 1,
        fantasy_league_id: int = 1,
        user_id: Optional[int] = None,
        team_name: Optional[str] = None,
        draft_order: Optional[int] = None,
        players: Optional[List[Player]] = None,
        **kwargs
    ) -> FantasyTeam:
        """Create a FantasyTeam instance with sensible defaults."""
        defaults = {
            "id": id,
            "fantasy_league_id": fantasy_league_id,
            "user_id": user_id if user_id is not None else 100 + id,
            "team_name": team_name or f"Team {id}",
            "draft_order": draft_order,
            "players": players or [],
        }
        defaults.update(kwargs)
        return FantasyTeam(**defaults)

    @staticmethod
    def ordered(count: int = 2, fantasy_league_id: int = 1) -> List[FantasyTeam]:
        """Teams 1..count holding draft slots 1..count."""
        return [
            TeamFactory.create(id=i, fantasy_league_id=fantasy_league_id, draft_order=i)
            for i in range(1, count + 1)
        ]


class DraftStateFactory:
    """Factory for creating DraftState test instances."""

    @staticmethod
    def create(
        current_pick: int = 1,
        draft_status: DraftStatus = DraftStatus.NOT_STARTED,
        pick_started_at: Optional[datetime] = None,
        pick_time_limit: int = 60,
        **kwargs
    ) -> DraftState:
        defaults = {
            "current_pick": current_pick,
            "draft_status": draft_status,
            "pick_started_at": pick_started_at,
            "pick_time_limit": pick_time_limit,
        }
        defaults.update(kwargs)
        return DraftState(**defaults)

    @staticmethod
    def running(current_pick: int = 1, started: datetime = T0, pick_time_limit: int = 60, **kwargs) -> DraftState:
        """Draft in progress with the clock started at `started`."""
        return DraftStateFactory.create(
            current_pick=current_pick,
            draft_status=DraftStatus.IN_PROGRESS,
            pick_started_at=started,
            pick_time_limit=pick_time_limit,
            **kwargs
        )


class LeagueFactory:
    """Factory for creating FantasyLeague test instances."""

    @staticmethod
    def create(
        id: int = 1,
        name: str = "Test League",
        owner_id: int = 101,
        team_size: int = 10,
        draft: Optional[DraftState] = None,
        **kwargs
    ) -> FantasyLeague:
        """Create a FantasyLeague instance with sensible defaults."""
        defaults = {
            "id": id,
            "name": name,
            "owner_id": owner_id,
            "championship_id": 1,
            "mode": "draft",
            "team_size": team_size,
            "draft": draft or DraftStateFactory.create(),
        }
        defaults.update(kwargs)
        return FantasyLeague(**defaults)

    @staticmethod
    def running(current_pick: int = 1, started: datetime = T0, **kwargs) -> FantasyLeague:
        """League with its draft in progress."""
        return LeagueFactory.create(draft=DraftStateFactory.running(current_pick, started), **kwargs)


class DraftPickFactory:
    """Factory for creating DraftPick test instances."""

    @staticmethod
    def create(
        pick_number: int = 1,
        fantasy_league_id: int = 1,
        fantasy_team_id: int = 1,
        player_id: int = 1,
        round: int = 1,
        **kwargs
    ) -> DraftPick:
        defaults = {
            "id": pick_number,
            "fantasy_league_id": fantasy_league_id,
            "fantasy_team_id": fantasy_team_id,
            "player_id": player_id,
            "pick_number": pick_number,
            "round": round,
        }
        defaults.update(kwargs)
        return DraftPick(**defaults)
