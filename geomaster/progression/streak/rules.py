from __future__ import annotations

from dataclasses import replace
from datetime import date, timedelta

from geomaster.progression.streak.types import StreakChange, StreakSnapshot


def apply_play_date(snapshot: StreakSnapshot, *, play_date: date) -> tuple[StreakSnapshot, StreakChange]:
    last_played = snapshot.last_played_date
    if last_played is not None and last_played >= play_date:
        return snapshot, StreakChange.UNCHANGED

    if last_played is not None and last_played == play_date - timedelta(days=1):
        current_streak = snapshot.current_streak + 1
        change = StreakChange.CONTINUED
    else:
        current_streak = 1
        change = StreakChange.STARTED if last_played is None else StreakChange.RESET

    updated = replace(
        snapshot,
        current_streak=current_streak,
        longest_streak=max(snapshot.longest_streak, current_streak),
        last_played_date=play_date,
    )
    return updated, change


def effective_current_streak(snapshot: StreakSnapshot, *, today: date) -> int:
    """Stored streak, or 0 when the last play is older than yesterday."""
    if snapshot.last_played_date is None:
        return 0
    if snapshot.last_played_date < today - timedelta(days=1):
        return 0
    return snapshot.current_streak
