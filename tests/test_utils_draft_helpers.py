"""
Unit tests for draft helper functions in utils/draft_helpers.py.

These tests verify:
1. calculate_pick_details() follows snake order
2. check_roster_composition() keeps every position minimum reachable
3. validate_player_for_team() combines availability and composition checks
"""
import pytest

from models.player import PlayerPosition
from utils.draft_helpers import (
    calculate_pick_details,
    total_picks,
    is_draft_complete,
    format_pick_display,
    get_position_minimums,
    check_roster_composition,
    validate_player_for_team,
)
from tests.factories import PlayerFactory, TeamFactory

MINIMUMS = {
    PlayerPosition.GUARD: 3,
    PlayerPosition.FORWARD: 3,
    PlayerPosition.CENTER: 2,
}


def counts(guards=0, forwards=0, centers=0):
    return {
        PlayerPosition.GUARD: guards,
        PlayerPosition.FORWARD: forwards,
        PlayerPosition.CENTER: centers,
    }


class TestCalculatePickDetails:
    """Tests for calculate_pick_details() with snake ordering."""

    def test_first_pick(self):
        assert calculate_pick_details(1, 4) == (1, 1)

    def test_last_pick_of_round_one(self):
        assert calculate_pick_details(4, 4) == (1, 4)

    def test_round_two_reverses(self):
        """The team that picked last in round 1 picks first in round 2."""
        assert calculate_pick_details(5, 4) == (2, 4)
        assert calculate_pick_details(8, 4) == (2, 1)

    def test_round_three_runs_forward_again(self):
        assert calculate_pick_details(9, 4) == (3, 1)

    def test_two_team_snake(self):
        slots = [calculate_pick_details(pick, 2)[1] for pick in range(1, 7)]
        assert slots == [1, 2, 2, 1, 1, 2]

    @pytest.mark.parametrize("overall,team_count", [(0, 4), (1, 0), (-3, 4)])
    def test_rejects_non_positive(self, overall, team_count):
        with pytest.raises(ValueError):
            calculate_pick_details(overall, team_count)


class TestDraftProgress:
    """Tests for total_picks(), is_draft_complete() and format_pick_display()."""

    def test_total_picks(self):
        assert total_picks(4, 10) == 40

    def test_complete_only_past_last_pick(self):
        assert is_draft_complete(40, 4, 10) is False
        assert is_draft_complete(41, 4, 10) is True

    def test_format_pick_display(self):
        assert format_pick_display(6, 4) == "Round 2, Pick 2 (Overall #6)"


class TestRosterComposition:
    """Tests for check_roster_composition()."""

    def test_empty_roster_accepts_any_position(self):
        for position in PlayerPosition:
            assert check_roster_composition(counts(), position, 10, MINIMUMS) is None

    def test_full_roster_rejected(self):
        error = check_roster_composition(counts(4, 4, 2), PlayerPosition.GUARD, 10, MINIMUMS)
        assert error is not None
        assert "full" in error

    def test_last_slots_reserved_for_missing_centers(self):
        """8 filled, no centers: both remaining slots must go to centers."""
        current = counts(guards=5, forwards=3)
        assert check_roster_composition(current, PlayerPosition.GUARD, 10, MINIMUMS) is not None
        assert check_roster_composition(current, PlayerPosition.FORWARD, 10, MINIMUMS) is not None
        assert check_roster_composition(current, PlayerPosition.CENTER, 10, MINIMUMS) is None

    def test_surplus_allowed_while_slots_cover_minimums(self):
        """5 filled (3G, 2F): one more guard still leaves 4 slots for 1F + 2C."""
        assert check_roster_composition(counts(3, 2), PlayerPosition.GUARD, 10, MINIMUMS) is None

    def test_error_message_names_position(self):
        error = check_roster_composition(counts(guards=5, forwards=3), PlayerPosition.GUARD, 10, MINIMUMS)
        assert "Guard" in error

    def test_defaults_to_configured_minimums(self):
        assert get_position_minimums() == MINIMUMS
        assert check_roster_composition(counts(guards=5, forwards=3), PlayerPosition.GUARD, 10) is not None


class TestValidatePlayerForTeam:
    """Tests for validate_player_for_team()."""

    def test_valid_player(self):
        team = TeamFactory.create()
        player = PlayerFactory.guard(id=10)
        assert validate_player_for_team(team, player, 10, MINIMUMS) is None

    def test_inactive_player(self):
        team = TeamFactory.create()
        player = PlayerFactory.guard(id=10, is_active=False)
        assert "not available" in validate_player_for_team(team, player, 10, MINIMUMS)

    def test_player_already_on_team(self):
        player = PlayerFactory.guard(id=10)
        team = TeamFactory.create(players=[player])
        assert "already has" in validate_player_for_team(team, player, 10, MINIMUMS)

    def test_composition_applies(self):
        roster = [PlayerFactory.guard(id=i) for i in range(1, 6)] + \
                 [PlayerFactory.forward(id=i) for i in range(6, 9)]
        team = TeamFactory.create(players=roster)
        assert validate_player_for_team(team, PlayerFactory.guard(id=50), 10, MINIMUMS) is not None
        assert validate_player_for_team(team, PlayerFactory.center(id=51), 10, MINIMUMS) is None
