from __future__ import annotations

import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

import structlog

from geomaster.game.scoring.constants import (
    DEFAULT_SCALE_FACTOR_KM,
    DEFAULT_TIME_LIMIT_SECONDS,
    FAIR_TIME_MAX_BONUS,
    FAIR_TIME_MAX_ROUND_POINTS,
    MAX_ROUND_POINTS,
    TIME_BONUS_CAP,
    TIME_BONUS_NUMERATOR,
    TIME_BONUS_OFFSET_SECONDS,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ScoringParams:
    distance_km: float
    elapsed_seconds: float | None
    scale_factor: float
    is_correct_country: bool | None = None
    time_limit_seconds: int | None = None


@dataclass(frozen=True, slots=True)
class ScoringStrategy:
    version: int
    name: str
    description: str
    calculate: Callable[[ScoringParams], float]


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def time_multiplier(elapsed_seconds: float | None) -> float:
    """1.0 for unknown time, up to 3.0 for answers within about a second."""
    if elapsed_seconds is None or elapsed_seconds < 0:
        return 1.0
    return 1.0 + min(TIME_BONUS_CAP, TIME_BONUS_NUMERATOR / (elapsed_seconds + TIME_BONUS_OFFSET_SECONDS))


def _distance_points(distance_km: float, scale_factor: float, max_points: float = MAX_ROUND_POINTS) -> float:
    return max_points * math.exp(-max(0.0, distance_km) / scale_factor)


def _distance_only(params: ScoringParams) -> float:
    return _distance_points(params.distance_km, params.scale_factor)


def _time_based(params: ScoringParams) -> float:
    return _distance_only(params) * time_multiplier(params.elapsed_seconds)


def _world_quiz(params: ScoringParams) -> float:
    if params.is_correct_country is True:
        base = float(MAX_ROUND_POINTS)
    else:
        base = _distance_only(params)
    return base * time_multiplier(params.elapsed_seconds)


def _fair_time(params: ScoringParams) -> float:
    base = _distance_points(params.distance_km, params.scale_factor, FAIR_TIME_MAX_ROUND_POINTS)
    time_limit = params.time_limit_seconds or DEFAULT_TIME_LIMIT_SECONDS
    elapsed = params.elapsed_seconds if params.elapsed_seconds is not None else time_limit
    clamped = max(0.0, min(float(elapsed), float(time_limit)))
    return base * (1 + FAIR_TIME_MAX_BONUS * (1 - clamped / time_limit))


SCORING_STRATEGIES: Mapping[int, ScoringStrategy] = MappingProxyType(
    {
        1: ScoringStrategy(
            version=1,
            name="Distance Only",
            description="Score based on distance accuracy only",
            calculate=_distance_only,
        ),
        2: ScoringStrategy(
            version=2,
            name="Time-Based Scoring",
            description="Distance score multiplied by a response-time bonus of up to 3x",
            calculate=_time_based,
        ),
        3: ScoringStrategy(
            version=3,
            name="World Quiz Scoring",
            description="Full base points for hitting the target country, distance-based otherwise",
            calculate=_world_quiz,
        ),
        4: ScoringStrategy(
            version=4,
            name="Fair Time Scoring",
            description="Precision-focused scoring with a time bonus of at most 50%",
            calculate=_fair_time,
        ),
    }
)

FALLBACK_SCORING_VERSION = 1
CURRENT_SCORING_VERSION = 2


def get_strategy(version: int) -> ScoringStrategy:
    strategy = SCORING_STRATEGIES.get(version)
    if strategy is None:
        logger.warning(
            "scoring_version_unknown",
            requested_version=version,
            fallback_version=FALLBACK_SCORING_VERSION,
        )
        return SCORING_STRATEGIES[FALLBACK_SCORING_VERSION]
    return strategy


def score(
    version: int,
    distance_km: float,
    elapsed_seconds: float | None,
    scale_factor: float | None,
    *,
    is_correct_country: bool | None = None,
    time_limit_seconds: int | None = None,
) -> int:
    resolved_scale = DEFAULT_SCALE_FACTOR_KM if scale_factor is None else float(scale_factor)
    if resolved_scale <= 0:
        raise ValueError(f"scale factor must be positive, got {scale_factor!r}")

    params = ScoringParams(
        distance_km=distance_km,
        elapsed_seconds=elapsed_seconds,
        scale_factor=resolved_scale,
        is_correct_country=is_correct_country,
        time_limit_seconds=time_limit_seconds,
    )
    return max(0, round_half_up(get_strategy(version).calculate(params)))
