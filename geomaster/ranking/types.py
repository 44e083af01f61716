from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from geomaster.ranking.periods import RankingPeriod


class LeaderboardSort(str, Enum):
    BEST = "best"
    TOTAL = "total"


@dataclass(frozen=True, slots=True)
class RankingKey:
    user_id: int
    game_type: str
    period: RankingPeriod
    period_key: str


@dataclass(frozen=True, slots=True)
class CompletedGame:
    user_id: int
    game_type: str
    total_score: int
    completed_at: datetime


@dataclass(frozen=True, slots=True)
class RankingAggregate:
    total_score: int
    total_games: int
    best_score: int
    best_score_at: datetime
    average_score: float
    updated_at: datetime


@dataclass(slots=True)
class RankingEntryView:
    game_type: str
    period: RankingPeriod
    period_key: str
    total_score: int
    total_games: int
    best_score: int
    average_score: float
    rank: int | None = None


@dataclass(slots=True)
class LeaderboardRow:
    rank: int
    user_id: int
    display_name: str | None
    total_score: int
    total_games: int
    best_score: int
    average_score: float


@dataclass(slots=True)
class RankingsRebuildResult:
    games_folded: int
    entries_deleted: int
    entries_written: int
