"""
Auto-pick selection policies

Chooses a player for a team whose pick clock ran out. Selection works on a
snapshot (league, team, candidate pool) and does no I/O, so the same inputs
always produce the same player.
"""
from abc import ABC, abstractmethod
from typing import Iterable, List, Mapping, Optional, Set

from exceptions import NoEligiblePlayersError
from models.fantasy_league import FantasyLeague
from models.fantasy_team import FantasyTeam
from models.player import Player, PlayerPosition
from utils.draft_helpers import validate_player_for_team


class AutoPickSelector(ABC):
    """Pluggable auto-pick policy."""

    def __init__(self, minimums: Optional[Mapping[PlayerPosition, int]] = None):
        """
        Args:
            minimums: Per-position roster minimums (configured values by default)
        """
        self.minimums = minimums

    def eligible_players(
        self,
        league: FantasyLeague,
        team: FantasyTeam,
        pool: Iterable[Player],
        drafted_player_ids: Optional[Set[int]] = None
    ) -> List[Player]:
        """Players from the pool that may legally join the team right now."""
        drafted = drafted_player_ids or set()
        return [
            player for player in pool
            if player.id not in drafted
            and validate_player_for_team(team, player, league.team_size, self.minimums) is None
        ]

    @abstractmethod
    def rank(self, players: List[Player]) -> List[Player]:
        """Order eligible players best-first. Must be a total, deterministic order."""

    def select(
        self,
        league: FantasyLeague,
        team: FantasyTeam,
        pool: Iterable[Player],
        drafted_player_ids: Optional[Set[int]] = None
    ) -> Player:
        """
        Choose the player to auto-draft.

        Raises:
            NoEligiblePlayersError: If no undrafted player fits the team
        """
        eligible = self.eligible_players(league, team, pool, drafted_player_ids)
        if not eligible:
            raise NoEligiblePlayersError(
                f"No eligible players left for {team.team_name} in league {league.id}"
            )
        return self.rank(eligible)[0]


class PriceRankedSelector(AutoPickSelector):
    """Most expensive eligible player first; lowest player id breaks ties."""

    def rank(self, players: List[Player]) -> List[Player]:
        return sorted(players, key=lambda p: (-p.price, p.id))


def select_auto_pick(
    league: FantasyLeague,
    team: FantasyTeam,
    pool: Iterable[Player],
    drafted_player_ids: Optional[Set[int]] = None,
    selector: Optional[AutoPickSelector] = None
) -> Player:
    """Choose an auto-pick with the given policy (price ranking by default)."""
    return (selector or PriceRankedSelector()).select(league, team, pool, drafted_player_ids)
