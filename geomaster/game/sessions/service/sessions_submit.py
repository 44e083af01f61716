from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from geomaster.db.models.guesses import Guess
from geomaster.db.repo.game_rounds_repo import GameRoundsRepo
from geomaster.db.repo.guesses_repo import GuessesRepo
from geomaster.db.repo.locations_repo import LocationsRepo
from geomaster.game.game_types import resolve_game_type
from geomaster.game.geo import haversine_km
from geomaster.game.scoring import score
from geomaster.game.sessions.errors import (
    GuessAlreadySubmittedError,
    InvalidGuessError,
    LocationDataMissingError,
    LocationNotActiveError,
    LocationNotStartedError,
)
from geomaster.game.sessions.types import GuessResult, PlayerIdentity

from .location_pool import target_country_code
from .sessions_queries import (
    _effective_time_limit,
    _guesses_by_round,
    _load_owned_session,
    _round_for_index,
)
from .sessions_rounds import _ensure_active

logger = structlog.get_logger(__name__)


def elapsed_seconds(
    *,
    started_at: datetime,
    now_utc: datetime,
    time_limit_seconds: int | None,
) -> float:
    """Server-side elapsed time; late answers count as exactly the limit."""
    elapsed = max(0.0, (now_utc - started_at).total_seconds())
    if time_limit_seconds is not None:
        elapsed = min(elapsed, float(time_limit_seconds))
    return elapsed


def _validate_coordinates(latitude: float | None, longitude: float | None) -> tuple[float, float]:
    if latitude is None or longitude is None:
        raise InvalidGuessError("latitude and longitude are required")
    if not -90.0 <= latitude <= 90.0 or not -180.0 <= longitude <= 180.0:
        raise InvalidGuessError("coordinates out of range")
    return latitude, longitude


def _is_correct_country(target_code: str | None, clicked_country_code: str | None) -> bool | None:
    if target_code is None or clicked_country_code is None:
        return None
    return target_code.strip().upper() == clicked_country_code.strip().upper()


async def submit_guess(
    session: AsyncSession,
    *,
    identity: PlayerIdentity,
    game_session_id: UUID,
    location_index: int,
    latitude: float | None,
    longitude: float | None,
    now_utc: datetime,
    timeout: bool = False,
    clicked_country_code: str | None = None,
) -> GuessResult:
    game_session = await _load_owned_session(
        session,
        game_session_id=game_session_id,
        identity=identity,
        for_update=True,
    )
    _ensure_active(game_session)

    rounds = await GameRoundsRepo.list_for_session(session, game_session_id=game_session.id)
    game_round = _round_for_index(rounds, location_index, total=game_session.locations_per_game)
    guesses = await _guesses_by_round(session, game_session_id=game_session.id, identity=identity)
    if game_round.id in guesses:
        raise GuessAlreadySubmittedError
    if game_session.active_location_index != location_index:
        raise LocationNotActiveError
    if game_session.location_started_at is None:
        raise LocationNotStartedError
    if not timeout:
        latitude, longitude = _validate_coordinates(latitude, longitude)

    location = await LocationsRepo.get_by_source(
        session,
        location_source=game_round.location_source,
        location_id=game_round.location_id,
    )
    if location is None:
        raise LocationDataMissingError
    config = await resolve_game_type(
        session,
        game_round.game_type or game_session.game_type,
        allow_inactive=True,
    )

    time_limit = _effective_time_limit(game_session, game_round)
    elapsed = elapsed_seconds(
        started_at=game_session.location_started_at,
        now_utc=now_utc,
        time_limit_seconds=time_limit,
    )
    if timeout:
        latitude = longitude = None
        distance_km = config.timeout_penalty_km
        is_correct_country = None
    else:
        distance_km = haversine_km(latitude, longitude, location.latitude, location.longitude)
        is_correct_country = _is_correct_country(target_country_code(location), clicked_country_code)

    points = score(
        game_session.scoring_version,
        distance_km,
        elapsed,
        config.score_scale_factor,
        is_correct_country=is_correct_country,
        time_limit_seconds=time_limit,
    )

    guess = Guess(
        id=uuid4(),
        game_round_id=game_round.id,
        user_id=identity.user_id,
        guest_id=identity.guest_id if identity.user_id is None else None,
        latitude=latitude,
        longitude=longitude,
        distance_km=distance_km,
        time_seconds=elapsed,
        score=points,
        is_timeout=timeout,
        created_at=now_utc,
    )
    try:
        async with session.begin_nested():
            await GuessesRepo.create(session, guess=guess)
    except IntegrityError as exc:
        raise GuessAlreadySubmittedError from exc

    game_session.location_started_at = None
    await session.flush()

    logger.info(
        "game_guess_submitted",
        game_session_id=str(game_session.id),
        location_index=location_index,
        score=points,
        distance_km=round(distance_km, 3),
        is_timeout=timeout,
    )
    return GuessResult(
        guess_id=guess.id,
        game_session_id=game_session.id,
        location_index=location_index,
        distance_km=distance_km,
        time_seconds=elapsed,
        score=points,
        is_timeout=timeout,
        target_latitude=location.latitude,
        target_longitude=location.longitude,
        all_locations_guessed=len(guesses) + 1 >= len(rounds),
    )
