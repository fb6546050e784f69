"""
Draft utility functions

Helpers for snake draft order and roster composition validation.
"""
import math
from typing import Dict, Mapping, Optional, Tuple

from models.player import Player, PlayerPosition
from models.fantasy_team import FantasyTeam
from config import get_config


def calculate_pick_details(overall: int, team_count: int) -> Tuple[int, int]:
    """
    Calculate round number and draft slot from overall pick number.

    Snake format: odd rounds run slot 1..N, even rounds run N..1.

    Args:
        overall: Overall pick number (1-based)
        team_count: Teams in the draft

    Returns:
        (round_num, draft_slot): Round number and the draft_order on the clock

    Examples:
        >>> calculate_pick_details(1, 4)
        (1, 1)

        >>> calculate_pick_details(4, 4)
        (1, 4)

        >>> calculate_pick_details(5, 4)
        (2, 4)  # Round 2 reverses - last team picks again

        >>> calculate_pick_details(8, 4)
        (2, 1)
    """
    if team_count <= 0:
        raise ValueError("team_count must be positive")
    if overall <= 0:
        raise ValueError("overall pick must be positive")

    round_num = math.ceil(overall / team_count)
    offset = (overall - 1) % team_count

    if round_num % 2 == 1:
        slot = offset + 1
    else:
        slot = team_count - offset

    return round_num, slot


def total_picks(team_count: int, team_size: int) -> int:
    """Picks needed to fill every roster."""
    return team_count * team_size


def is_draft_complete(current_pick: int, team_count: int, team_size: int) -> bool:
    """Check if the pick counter has moved past the last pick."""
    return current_pick > total_picks(team_count, team_size)


def format_pick_display(overall: int, team_count: int) -> str:
    """
    Format pick for display.

    Examples:
        >>> format_pick_display(6, 4)
        'Round 2, Pick 2 (Overall #6)'
    """
    round_num, _ = calculate_pick_details(overall, team_count)
    pick_in_round = (overall - 1) % team_count + 1
    return f"Round {round_num}, Pick {pick_in_round} (Overall #{overall})"


def get_position_minimums() -> Dict[PlayerPosition, int]:
    """Configured minimum players per position."""
    minimums = get_config().position_minimums
    return {PlayerPosition(name): count for name, count in minimums.items()}


def check_roster_composition(
    counts: Mapping[PlayerPosition, int],
    position: PlayerPosition,
    team_size: int,
    minimums: Optional[Mapping[PlayerPosition, int]] = None
) -> Optional[str]:
    """
    Check whether adding one player at `position` keeps a legal roster reachable.

    After the addition, the remaining empty slots must still cover every other
    position's unmet minimum.

    Args:
        counts: Current players per position
        position: Position of the player being added
        team_size: Roster size for the league
        minimums: Minimum players per position (configured values by default)

    Returns:
        Error message if the addition is illegal, None if it is allowed
    """
    if minimums is None:
        minimums = get_position_minimums()

    current_total = sum(counts.values())
    if current_total >= team_size:
        return f"Team is full. Maximum {team_size} players allowed."

    remaining_slots = team_size - current_total - 1

    other_slots_needed = sum(
        max(0, minimums.get(other, 0) - counts.get(other, 0))
        for other in PlayerPosition
        if other != position
    )

    if other_slots_needed > remaining_slots:
        needed = ", ".join(
            f"{minimums.get(other, 0)} {other.value}s"
            for other in PlayerPosition
            if other != position
        )
        return f"Cannot draft another {position.value}. The roster must still fit at least {needed}."

    return None


def validate_player_for_team(
    team: FantasyTeam,
    player: Player,
    team_size: int,
    minimums: Optional[Mapping[PlayerPosition, int]] = None
) -> Optional[str]:
    """
    Full eligibility check for putting `player` on `team`.

    Returns:
        Error message if the player cannot join the team, None if allowed
    """
    if not player.is_active:
        return f"{player.name} is not available to draft."

    if team.has_player(player.id):
        return f"{team.team_name} already has {player.name}."

    return check_roster_composition(team.position_counts(), player.position, team_size, minimums)
