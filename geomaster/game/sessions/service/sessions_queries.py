from __future__ import annotations

from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from geomaster.db.models.game_rounds import GameRound
from geomaster.db.models.game_sessions import GameSession
from geomaster.db.models.guesses import Guess
from geomaster.db.repo.game_rounds_repo import GameRoundsRepo
from geomaster.db.repo.game_sessions_repo import GameSessionsRepo
from geomaster.db.repo.guesses_repo import GuessesRepo
from geomaster.db.repo.locations_repo import LocationsRepo
from geomaster.game.sessions.errors import (
    InvalidLocationIndexError,
    SessionAccessDeniedError,
    SessionNotFoundError,
)
from geomaster.game.sessions.types import GuessView, PlayerIdentity, RoundView, SessionView

from .constants import DEFAULT_LOCALE
from .location_pool import imagery_fields, location_name

logger = structlog.get_logger(__name__)


def _owns_session(game_session: GameSession, identity: PlayerIdentity) -> bool:
    if game_session.user_id is not None:
        return identity.user_id == game_session.user_id
    return identity.user_id is None and identity.guest_id == game_session.guest_id


async def _load_owned_session(
    session: AsyncSession,
    *,
    game_session_id: UUID,
    identity: PlayerIdentity,
    for_update: bool = False,
) -> GameSession:
    if for_update:
        game_session = await GameSessionsRepo.get_by_id_for_update(session, game_session_id)
    else:
        game_session = await GameSessionsRepo.get_by_id(session, game_session_id)

    if game_session is None:
        raise SessionNotFoundError
    if not _owns_session(game_session, identity):
        logger.warning(
            "game_session_access_denied",
            game_session_id=str(game_session_id),
            user_id=identity.user_id,
            guest_id=identity.guest_id,
        )
        raise SessionAccessDeniedError
    return game_session


def _round_for_index(rounds: list[GameRound], location_index: int, *, total: int) -> GameRound:
    if location_index < 1 or location_index > total:
        raise InvalidLocationIndexError(f"location index must be between 1 and {total}")
    for game_round in rounds:
        if game_round.location_index == location_index:
            return game_round
    raise InvalidLocationIndexError(f"no round at location index {location_index}")


def _effective_time_limit(game_session: GameSession, game_round: GameRound) -> int | None:
    if game_round.time_limit_seconds is not None:
        return game_round.time_limit_seconds
    return game_session.time_limit_seconds


def _guess_view(guess: Guess) -> GuessView:
    return GuessView(
        distance_km=guess.distance_km,
        time_seconds=guess.time_seconds,
        score=guess.score,
        is_timeout=guess.is_timeout,
        latitude=guess.latitude,
        longitude=guess.longitude,
    )


async def _guesses_by_round(
    session: AsyncSession,
    *,
    game_session_id: UUID,
    identity: PlayerIdentity,
) -> dict[UUID, Guess]:
    guesses = await GuessesRepo.list_for_session(
        session,
        game_session_id=game_session_id,
        user_id=identity.user_id,
        guest_id=identity.guest_id if identity.user_id is None else None,
    )
    return {guess.game_round_id: guess for guess in guesses}


async def get_session_view(
    session: AsyncSession,
    *,
    identity: PlayerIdentity,
    game_session_id: UUID,
    locale: str = DEFAULT_LOCALE,
) -> SessionView:
    """Session with rounds; true coordinates only for answered rounds or guest sessions."""
    game_session = await _load_owned_session(session, game_session_id=game_session_id, identity=identity)
    rounds = await GameRoundsRepo.list_for_session(session, game_session_id=game_session.id)
    guesses = await _guesses_by_round(session, game_session_id=game_session.id, identity=identity)
    reveal_all = game_session.user_id is None

    round_views: list[RoundView] = []
    for game_round in rounds:
        guess = guesses.get(game_round.id)
        view = RoundView(
            round_id=game_round.id,
            round_number=game_round.round_number,
            location_index=game_round.location_index,
            location_source=game_round.location_source,
            game_type=game_round.game_type or game_session.game_type,
            time_limit_seconds=_effective_time_limit(game_session, game_round),
            answered=guess is not None,
            guess=_guess_view(guess) if guess is not None else None,
        )
        is_active = game_round.location_index == game_session.active_location_index
        if guess is not None or reveal_all or is_active:
            location = await LocationsRepo.get_by_source(
                session,
                location_source=game_round.location_source,
                location_id=game_round.location_id,
            )
            if location is not None:
                view.name = location_name(location, locale)
                if guess is not None or reveal_all:
                    view.latitude = location.latitude
                    view.longitude = location.longitude
                    for key, value in imagery_fields(location).items():
                        setattr(view, key, value)
        round_views.append(view)

    return SessionView(
        game_session_id=game_session.id,
        mode=game_session.mode,
        game_type=game_session.game_type,
        status=game_session.status,
        scoring_version=game_session.scoring_version,
        locations_per_game=game_session.locations_per_game,
        time_limit_seconds=game_session.time_limit_seconds,
        active_location_index=game_session.active_location_index,
        location_started_at=game_session.location_started_at,
        duel_seed=game_session.duel_seed,
        rounds=round_views,
        total_score=sum(guess.score for guess in guesses.values()),
    )
