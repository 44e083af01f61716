from __future__ import annotations

from datetime import datetime
from uuid import uuid4

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from geomaster.core.config import get_settings
from geomaster.db.models.game_rounds import GameRound
from geomaster.db.models.game_sessions import GameSession
from geomaster.db.repo.game_rounds_repo import GameRoundsRepo
from geomaster.db.repo.game_sessions_repo import GameSessionsRepo
from geomaster.game.game_types import resolve_game_type
from geomaster.game.scoring import SCORING_STRATEGIES
from geomaster.game.sessions.errors import AuthenticationRequiredError, InvalidSessionModeError
from geomaster.game.sessions.types import GameMode, GameStatus, PlayerIdentity, SessionView
from geomaster.game.shuffle import new_seed

from .constants import CREATABLE_MODES, DEFAULT_LOCALE, DEFAULT_ROUND_NUMBER, NO_ACTIVE_LOCATION
from .location_pool import load_location_pool, select_locations
from .sessions_queries import get_session_view

logger = structlog.get_logger(__name__)

ALWAYS_TIMED_MODES = frozenset({GameMode.RANKED.value, GameMode.DUEL.value})


def _pinned_scoring_version() -> int:
    version = get_settings().scoring_version
    if version not in SCORING_STRATEGIES:
        logger.warning("scoring_version_not_registered", configured_version=version)
    return version


async def create_session(
    session: AsyncSession,
    *,
    identity: PlayerIdentity,
    mode: str,
    game_type: str,
    now_utc: datetime,
    seed: str | None = None,
    timed: bool = True,
    locale: str = DEFAULT_LOCALE,
    allow_duel: bool = False,
) -> SessionView:
    """Resolves the game type, picks the locations and persists session plus rounds in order.

    Nothing is written until the game type and the location pool are validated.
    """
    if identity.is_anonymous:
        raise AuthenticationRequiredError
    if mode not in CREATABLE_MODES and not (allow_duel and mode == GameMode.DUEL.value):
        raise InvalidSessionModeError(mode)
    if mode == GameMode.DUEL.value and identity.user_id is None:
        raise AuthenticationRequiredError

    config = await resolve_game_type(session, game_type)
    count = get_settings().locations_per_game
    seed = seed or new_seed()
    pool = await load_location_pool(session, config=config)
    selected = select_locations(pool, count=count, seed=seed)

    is_timed = timed or mode in ALWAYS_TIMED_MODES
    game_session = await GameSessionsRepo.create(
        session,
        game_session=GameSession(
            id=uuid4(),
            user_id=identity.user_id,
            guest_id=identity.guest_id if identity.user_id is None else None,
            mode=mode,
            game_type=config.id,
            status=GameStatus.ACTIVE.value,
            scoring_version=_pinned_scoring_version(),
            locations_per_game=count,
            time_limit_seconds=config.default_time_limit_seconds if is_timed else None,
            active_location_index=NO_ACTIVE_LOCATION,
            location_started_at=None,
            duel_seed=seed if mode == GameMode.DUEL.value else None,
            created_at=now_utc,
            completed_at=None,
        ),
    )
    await GameRoundsRepo.create_many(
        session,
        rounds=[
            GameRound(
                id=uuid4(),
                game_session_id=game_session.id,
                round_number=DEFAULT_ROUND_NUMBER,
                location_index=index,
                location_id=location.id,
                location_source=config.location_source.value,
                game_type=None,
                time_limit_seconds=None,
            )
            for index, location in enumerate(selected, start=1)
        ],
    )

    logger.info(
        "game_session_created",
        game_session_id=str(game_session.id),
        mode=mode,
        game_type=config.id,
        user_id=identity.user_id,
        is_guest=identity.is_guest,
        locations=count,
    )
    return await get_session_view(
        session,
        identity=identity,
        game_session_id=game_session.id,
        locale=locale,
    )
