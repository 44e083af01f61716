from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID

from geomaster.game.hints import HintCircle
from geomaster.progression.levels import LevelUpResult
from geomaster.progression.streak.types import StreakUpdateResult
from geomaster.ranking.types import RankingEntryView


class GameMode(str, Enum):
    SOLO = "solo"
    GROUP = "group"
    RANKED = "ranked"
    DUEL = "duel"


class GameStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"


@dataclass(frozen=True, slots=True)
class PlayerIdentity:
    user_id: int | None = None
    guest_id: str | None = None

    @property
    def is_guest(self) -> bool:
        return self.user_id is None

    @property
    def is_anonymous(self) -> bool:
        return self.user_id is None and self.guest_id is None


@dataclass(slots=True)
class GuessView:
    distance_km: float
    time_seconds: float | None
    score: int
    is_timeout: bool
    latitude: float | None
    longitude: float | None


@dataclass(slots=True)
class RoundView:
    round_id: UUID
    round_number: int
    location_index: int
    location_source: str
    game_type: str
    time_limit_seconds: int | None
    answered: bool
    name: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    imagery_key: str | None = None
    heading: float | None = None
    pitch: float | None = None
    guess: GuessView | None = None


@dataclass(slots=True)
class SessionView:
    game_session_id: UUID
    mode: str
    game_type: str
    status: str
    scoring_version: int
    locations_per_game: int
    time_limit_seconds: int | None
    active_location_index: int
    location_started_at: datetime | None
    duel_seed: str | None
    rounds: list[RoundView]
    total_score: int


@dataclass(slots=True)
class LocationActivationResult:
    game_session_id: UUID
    location_index: int
    name: str
    time_limit_seconds: int | None
    hint: HintCircle | None = None
    imagery_key: str | None = None
    heading: float | None = None
    pitch: float | None = None


@dataclass(slots=True)
class MapReadyResult:
    game_session_id: UUID
    location_index: int
    location_started_at: datetime
    time_limit_seconds: int | None
    time_remaining_seconds: int | None
    already_started: bool


@dataclass(slots=True)
class GuessResult:
    guess_id: UUID
    game_session_id: UUID
    location_index: int
    distance_km: float
    time_seconds: float | None
    score: int
    is_timeout: bool
    target_latitude: float
    target_longitude: float
    all_locations_guessed: bool


@dataclass(slots=True)
class CompleteSessionResult:
    game_session_id: UUID
    mode: str
    game_type: str
    total_score: int
    average_score: float
    total_distance_km: float
    total_time_seconds: float
    rankings: list[RankingEntryView] = field(default_factory=list)
    level_up: LevelUpResult | None = None
    streak: StreakUpdateResult | None = None
    side_effects_failed: list[str] = field(default_factory=list)
