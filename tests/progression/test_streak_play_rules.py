from __future__ import annotations

from datetime import date, datetime, timezone

from geomaster.progression.streak.rules import apply_play_date, effective_current_streak
from geomaster.progression.streak.time import local_play_date
from geomaster.progression.streak.types import StreakChange, StreakSnapshot

UTC = timezone.utc


def _empty() -> StreakSnapshot:
    return StreakSnapshot(current_streak=0, longest_streak=0, last_played_date=None)


def test_first_play_starts_streak() -> None:
    snapshot, change = apply_play_date(_empty(), play_date=date(2026, 3, 1))

    assert change == StreakChange.STARTED
    assert snapshot.current_streak == 1
    assert snapshot.longest_streak == 1
    assert snapshot.last_played_date == date(2026, 3, 1)


def test_consecutive_days_then_gap_resets() -> None:
    snapshot = _empty()
    changes = []
    for day in (1, 2, 4):
        snapshot, change = apply_play_date(snapshot, play_date=date(2026, 3, day))
        changes.append(change)

    assert changes == [StreakChange.STARTED, StreakChange.CONTINUED, StreakChange.RESET]
    assert snapshot.current_streak == 1
    assert snapshot.longest_streak == 2


def test_same_day_play_is_unchanged() -> None:
    snapshot, _ = apply_play_date(_empty(), play_date=date(2026, 3, 1))
    again, change = apply_play_date(snapshot, play_date=date(2026, 3, 1))

    assert change == StreakChange.UNCHANGED
    assert again == snapshot


def test_older_play_date_does_not_rewind() -> None:
    snapshot = StreakSnapshot(current_streak=3, longest_streak=5, last_played_date=date(2026, 3, 10))
    updated, change = apply_play_date(snapshot, play_date=date(2026, 3, 8))

    assert change == StreakChange.UNCHANGED
    assert updated.current_streak == 3


def test_apply_does_not_mutate_input() -> None:
    snapshot = StreakSnapshot(current_streak=2, longest_streak=2, last_played_date=date(2026, 3, 1))
    apply_play_date(snapshot, play_date=date(2026, 3, 2))
    assert snapshot.current_streak == 2


def test_effective_streak_decays_after_missed_day() -> None:
    snapshot = StreakSnapshot(current_streak=4, longest_streak=6, last_played_date=date(2026, 3, 10))

    assert effective_current_streak(snapshot, today=date(2026, 3, 10)) == 4
    assert effective_current_streak(snapshot, today=date(2026, 3, 11)) == 4
    assert effective_current_streak(snapshot, today=date(2026, 3, 12)) == 0
    assert effective_current_streak(_empty(), today=date(2026, 3, 12)) == 0


def test_local_play_date_crosses_midnight_in_game_timezone() -> None:
    now_utc = datetime(2026, 3, 1, 23, 30, tzinfo=UTC)
    assert local_play_date(now_utc, timezone_name="Europe/Zurich") == date(2026, 3, 2)
    assert local_play_date(now_utc, timezone_name="UTC") == date(2026, 3, 1)
