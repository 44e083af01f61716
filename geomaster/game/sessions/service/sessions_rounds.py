from __future__ import annotations

import math
from datetime import datetime
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from geomaster.core.config import get_settings
from geomaster.db.models.game_sessions import GameSession
from geomaster.db.repo.game_rounds_repo import GameRoundsRepo
from geomaster.db.repo.locations_repo import LocationsRepo
from geomaster.game.game_types import resolve_game_type
from geomaster.game.hints import generate_hint_circle
from geomaster.game.sessions.errors import (
    LocationAlreadyGuessedError,
    LocationDataMissingError,
    LocationNotActiveError,
    PreviousLocationNotGuessedError,
    SessionAlreadyCompletedError,
)
from geomaster.game.sessions.types import (
    GameStatus,
    LocationActivationResult,
    MapReadyResult,
    PlayerIdentity,
)
from geomaster.game.shuffle import seeded_random

from .constants import DEFAULT_LOCALE
from .location_pool import imagery_fields, location_name
from .sessions_queries import (
    _effective_time_limit,
    _guesses_by_round,
    _load_owned_session,
    _round_for_index,
)

logger = structlog.get_logger(__name__)


def _ensure_active(game_session: GameSession) -> None:
    if game_session.status == GameStatus.COMPLETED.value:
        raise SessionAlreadyCompletedError


def time_remaining_seconds(
    *,
    started_at: datetime,
    time_limit_seconds: int | None,
    now_utc: datetime,
) -> int | None:
    if time_limit_seconds is None:
        return None
    elapsed = (now_utc - started_at).total_seconds()
    return max(0, math.ceil(time_limit_seconds - elapsed))


async def activate_location(
    session: AsyncSession,
    *,
    identity: PlayerIdentity,
    game_session_id: UUID,
    location_index: int,
    locale: str = DEFAULT_LOCALE,
) -> LocationActivationResult:
    """Makes a location the active one and returns what the client may see before guessing."""
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
        raise LocationAlreadyGuessedError

    missing = sorted(
        candidate.location_index
        for candidate in rounds
        if candidate.location_index < location_index and candidate.id not in guesses
    )
    if missing:
        raise PreviousLocationNotGuessedError(missing_index=missing[0])

    location = await LocationsRepo.get_by_source(
        session,
        location_source=game_round.location_source,
        location_id=game_round.location_id,
    )
    if location is None:
        logger.error(
            "game_round_location_missing",
            game_session_id=str(game_session.id),
            location_source=game_round.location_source,
            location_id=str(game_round.location_id),
        )
        raise LocationDataMissingError

    if game_session.active_location_index != location_index:
        game_session.active_location_index = location_index
        game_session.location_started_at = None
        await session.flush()

    config = await resolve_game_type(
        session,
        game_round.game_type or game_session.game_type,
        allow_inactive=True,
    )
    hint = generate_hint_circle(
        location.latitude,
        location.longitude,
        radius_km=get_settings().hint_circle_radius_km,
        bounds=config.bounds,
        # Same circle on every activation of this round.
        rng=seeded_random(f"hint:{game_round.id}"),
    )
    return LocationActivationResult(
        game_session_id=game_session.id,
        location_index=location_index,
        name=location_name(location, locale),
        time_limit_seconds=_effective_time_limit(game_session, game_round),
        hint=hint,
        **imagery_fields(location),
    )


async def mark_map_ready(
    session: AsyncSession,
    *,
    identity: PlayerIdentity,
    game_session_id: UUID,
    location_index: int,
    now_utc: datetime,
) -> MapReadyResult:
    """Starts the location timer once; later calls report the original start."""
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
        raise LocationAlreadyGuessedError
    if game_session.active_location_index != location_index:
        raise LocationNotActiveError

    time_limit = _effective_time_limit(game_session, game_round)
    started_at = game_session.location_started_at
    already_started = started_at is not None
    if started_at is None:
        started_at = now_utc
        game_session.location_started_at = started_at
        await session.flush()
        logger.info(
            "game_location_timer_started",
            game_session_id=str(game_session.id),
            location_index=location_index,
        )

    return MapReadyResult(
        game_session_id=game_session.id,
        location_index=location_index,
        location_started_at=started_at,
        time_limit_seconds=time_limit,
        time_remaining_seconds=time_remaining_seconds(
            started_at=started_at,
            time_limit_seconds=time_limit,
            now_utc=now_utc,
        ),
        already_started=already_started,
    )
