from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

from geomaster.game.sessions.types import SessionView


class DuelRole(str, Enum):
    CHALLENGER = "challenger"
    ACCEPTER = "accepter"


@dataclass(frozen=True, slots=True)
class DuelChallenge:
    seed: str
    game_type: str
    challenger_id: int
    challenger_name: str
    challenger_score: int
    challenger_time: float
    challenger_game_id: UUID


@dataclass(frozen=True, slots=True)
class DuelOutcome:
    winner: DuelRole
    winner_points_delta: int
    loser_points_delta: int


@dataclass(slots=True)
class DuelSessionCreated:
    role: DuelRole
    session: SessionView
    challenge: DuelChallenge | None = None


@dataclass(slots=True)
class DuelCompletion:
    role: DuelRole
    game_session_id: UUID
    game_type: str
    score: int
    time_seconds: float
    encoded_challenge: str | None = None
    duel_result_id: UUID | None = None
    challenger_score: int | None = None
    challenger_time_seconds: float | None = None
    winner_user_id: int | None = None
    points_delta: int | None = None
    idempotent_replay: bool = False


@dataclass(slots=True)
class DuelStatsView:
    user_id: int
    game_type: str
    total_duels: int
    wins: int
    losses: int
    win_rate: float
    duel_points: int
    rank: int | None = None


@dataclass(slots=True)
class DuelLeaderboardRow:
    rank: int
    user_id: int
    display_name: str | None
    total_duels: int
    wins: int
    losses: int
    win_rate: float
    duel_points: int


@dataclass(slots=True)
class DuelHistoryEntry:
    duel_result_id: UUID
    game_type: str
    role: DuelRole
    opponent_user_id: int
    opponent_name: str
    score: int
    time_seconds: float
    opponent_score: int
    opponent_time_seconds: float
    won: bool
    points_delta: int
    created_at: datetime
