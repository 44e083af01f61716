from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import TypeVar
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from geomaster.db.models.game_sessions import GameSession
from geomaster.db.repo.game_rounds_repo import GameRoundsRepo
from geomaster.game.sessions.errors import SessionAlreadyCompletedError, SessionIncompleteError
from geomaster.game.sessions.types import CompleteSessionResult, GameStatus, PlayerIdentity
from geomaster.progression.levels import check_level_up
from geomaster.progression.streak.service import StreakService
from geomaster.ranking.service import RankingService

from .sessions_queries import _guesses_by_round, _load_owned_session

logger = structlog.get_logger(__name__)

T = TypeVar("T")


async def _best_effort(
    session: AsyncSession,
    *,
    name: str,
    game_session: GameSession,
    failed: list[str],
    action: Callable[[], Awaitable[T]],
) -> T | None:
    try:
        async with session.begin_nested():
            return await action()
    except Exception:
        logger.exception(
            "game_completion_side_effect_failed",
            side_effect=name,
            game_session_id=str(game_session.id),
            user_id=game_session.user_id,
        )
        failed.append(name)
        return None


async def complete_session(
    session: AsyncSession,
    *,
    identity: PlayerIdentity,
    game_session_id: UUID,
    now_utc: datetime,
) -> CompleteSessionResult:
    """Finishes a fully guessed session, then applies rankings and progression for users.

    The completion itself always stands; each follow-up runs in its own savepoint and a
    failure there is logged and listed in ``side_effects_failed``.
    """
    game_session = await _load_owned_session(
        session,
        game_session_id=game_session_id,
        identity=identity,
        for_update=True,
    )
    if game_session.status == GameStatus.COMPLETED.value:
        raise SessionAlreadyCompletedError

    rounds = await GameRoundsRepo.list_for_session(session, game_session_id=game_session.id)
    guesses = await _guesses_by_round(session, game_session_id=game_session.id, identity=identity)
    round_guesses = [guesses[game_round.id] for game_round in rounds if game_round.id in guesses]
    if not rounds or len(round_guesses) < len(rounds):
        raise SessionIncompleteError(guessed=len(round_guesses), total=len(rounds))

    total_score = sum(guess.score for guess in round_guesses)
    average_score = total_score / len(round_guesses)
    total_distance_km = sum(guess.distance_km for guess in round_guesses)
    total_time_seconds = sum(guess.time_seconds or 0.0 for guess in round_guesses)

    game_session.status = GameStatus.COMPLETED.value
    game_session.completed_at = now_utc
    game_session.location_started_at = None
    await session.flush()

    result = CompleteSessionResult(
        game_session_id=game_session.id,
        mode=game_session.mode,
        game_type=game_session.game_type,
        total_score=total_score,
        average_score=average_score,
        total_distance_km=total_distance_km,
        total_time_seconds=total_time_seconds,
    )
    logger.info(
        "game_session_completed",
        game_session_id=str(game_session.id),
        mode=game_session.mode,
        game_type=game_session.game_type,
        user_id=game_session.user_id,
        total_score=total_score,
    )
    if game_session.user_id is None:
        return result

    user_id = game_session.user_id
    previous_total = await _best_effort(
        session,
        name="level",
        game_session=game_session,
        failed=result.side_effects_failed,
        action=lambda: RankingService.get_alltime_total(session, user_id=user_id),
    )
    rankings = await _best_effort(
        session,
        name="rankings",
        game_session=game_session,
        failed=result.side_effects_failed,
        action=lambda: RankingService.record_completed_game(
            session,
            game_session_id=game_session.id,
            user_id=user_id,
            game_type=game_session.game_type,
            mode=game_session.mode,
            total_score=total_score,
            average_score=average_score,
            total_distance_km=total_distance_km,
            total_time_seconds=total_time_seconds,
            completed_at=now_utc,
        ),
    )
    if rankings is not None:
        result.rankings = rankings
    result.streak = await _best_effort(
        session,
        name="streak",
        game_session=game_session,
        failed=result.side_effects_failed,
        action=lambda: StreakService.record_play(session, user_id=user_id, played_at_utc=now_utc),
    )
    if previous_total is not None:
        result.level_up = check_level_up(previous_total, previous_total + total_score)
    return result
