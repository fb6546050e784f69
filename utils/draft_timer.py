"""
Pick clock evaluation

Pure functions over DraftState. Used both for the time-remaining display and
as the gate in front of an auto-pick, so they take `now` explicitly and never
read the system clock themselves.
"""
from datetime import datetime, timedelta
from typing import Optional

from models.draft_state import DraftState


def pick_deadline(state: DraftState) -> Optional[datetime]:
    """
    When the current pick expires.

    Returns:
        pick_started_at + pick_time_limit, or None when no clock is running
    """
    return state.pick_deadline


def is_expired(state: DraftState, now: datetime) -> bool:
    """
    Check whether the pick on the clock has used up its time.

    Boundary-inclusive: a pick is expired at exactly
    pick_started_at + pick_time_limit.

    Args:
        state: Draft state to evaluate
        now: Current time (tz-aware)

    Returns:
        False unless the draft is in progress with a running clock
    """
    if not state.is_in_progress or state.pick_started_at is None:
        return False

    elapsed = now - state.pick_started_at
    return elapsed >= timedelta(seconds=state.pick_time_limit)


def time_remaining(state: DraftState, now: datetime) -> timedelta:
    """
    Time left on the clock, clamped at zero. Display only.

    While paused, reports the time frozen at the pause.
    """
    if state.is_paused:
        return timedelta(seconds=state.pause_time_remaining or 0)

    deadline = pick_deadline(state)
    if deadline is None:
        return timedelta(0)

    return max(timedelta(0), deadline - now)


def seconds_until_deadline(state: DraftState, now: datetime) -> float:
    """Non-negative scheduling delay until the current pick expires."""
    deadline = pick_deadline(state)
    if deadline is None:
        return 0.0
    return max(0.0, (deadline - now).total_seconds())


def format_time_remaining(remaining: timedelta) -> str:
    """
    Format a clock value as M:SS.

    Examples:
        >>> format_time_remaining(timedelta(seconds=75))
        '1:15'
    """
    total = int(remaining.total_seconds())
    minutes, seconds = divmod(max(0, total), 60)
    return f"{minutes}:{seconds:02d}"
