from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum


class StreakChange(str, Enum):
    STARTED = "STARTED"
    CONTINUED = "CONTINUED"
    RESET = "RESET"
    UNCHANGED = "UNCHANGED"


@dataclass(slots=True)
class StreakSnapshot:
    current_streak: int
    longest_streak: int
    last_played_date: date | None


@dataclass(slots=True)
class StreakUpdateResult:
    change: StreakChange
    current_streak: int
    longest_streak: int
    last_played_date: date | None
