from __future__ import annotations

from datetime import date, datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from geomaster.ranking.periods import RankingPeriod


class _FromAttributes(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class CreateGameRequest(BaseModel):
    game_type: str = Field(min_length=3, max_length=96)
    mode: Literal["solo", "ranked"] = "ranked"
    timed: bool = True
    locale: str = Field(default="de", min_length=2, max_length=8)


class LocationIndexRequest(BaseModel):
    location_index: int = Field(ge=1, le=20)
    locale: str = Field(default="de", min_length=2, max_length=8)


class GuessRequest(BaseModel):
    location_index: int = Field(ge=1, le=20)
    latitude: float | None = Field(default=None, ge=-90.0, le=90.0)
    longitude: float | None = Field(default=None, ge=-180.0, le=180.0)
    timeout: bool = False
    clicked_country_code: str | None = Field(default=None, min_length=2, max_length=3)


class GuessViewResponse(_FromAttributes):
    distance_km: float
    time_seconds: float | None
    score: int
    is_timeout: bool
    latitude: float | None
    longitude: float | None


class RoundResponse(_FromAttributes):
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
    guess: GuessViewResponse | None = None


class SessionResponse(_FromAttributes):
    game_session_id: UUID
    mode: str
    game_type: str
    status: str
    scoring_version: int
    locations_per_game: int
    time_limit_seconds: int | None
    active_location_index: int
    location_started_at: datetime | None
    rounds: list[RoundResponse]
    total_score: int


class HintResponse(_FromAttributes):
    center_lat: float
    center_lng: float
    radius_km: float


class LocationActivationResponse(_FromAttributes):
    game_session_id: UUID
    location_index: int
    name: str
    time_limit_seconds: int | None
    hint: HintResponse | None = None
    imagery_key: str | None = None
    heading: float | None = None
    pitch: float | None = None


class MapReadyResponse(_FromAttributes):
    game_session_id: UUID
    location_index: int
    location_started_at: datetime
    time_limit_seconds: int | None
    time_remaining_seconds: int | None
    already_started: bool


class GuessResponse(_FromAttributes):
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


class RankingEntryResponse(_FromAttributes):
    game_type: str
    period: RankingPeriod
    period_key: str
    total_score: int
    total_games: int
    best_score: int
    average_score: float
    rank: int | None = None


class LevelUpResponse(BaseModel):
    leveled_up: bool
    previous_level: int
    new_level: int
    new_level_name: str


class StreakResponse(BaseModel):
    change: str | None = None
    current_streak: int
    longest_streak: int
    last_played_date: date | None


class CompleteGameResponse(BaseModel):
    game_session_id: UUID
    mode: str
    game_type: str
    total_score: int
    average_score: float
    total_distance_km: float
    total_time_seconds: float
    rankings: list[RankingEntryResponse]
    level_up: LevelUpResponse | None = None
    streak: StreakResponse | None = None
    side_effects_failed: list[str]
