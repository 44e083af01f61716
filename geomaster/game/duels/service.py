from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from geomaster.core.config import get_settings
from geomaster.db.models.duels import DuelResult, DuelStats
from geomaster.db.models.game_sessions import GameSession
from geomaster.db.repo.duels_repo import DuelsRepo
from geomaster.db.repo.game_sessions_repo import GameSessionsRepo
from geomaster.db.repo.users_repo import UsersRepo
from geomaster.game.duels.codec import decode_challenge, encode_challenge
from geomaster.game.duels.errors import (
    DuelAlreadyPlayedError,
    DuelChallengerSessionInvalidError,
    DuelGameTypeMismatchError,
    DuelResultNotFoundError,
    DuelSeedMismatchError,
    DuelSelfChallengeError,
    DuelSessionModeError,
)
from geomaster.game.duels.rules import resolve_duel, win_rate
from geomaster.game.duels.types import (
    DuelChallenge,
    DuelCompletion,
    DuelHistoryEntry,
    DuelLeaderboardRow,
    DuelRole,
    DuelSessionCreated,
    DuelStatsView,
)
from geomaster.game.game_types import resolve_game_type
from geomaster.game.sessions.errors import AuthenticationRequiredError
from geomaster.game.sessions.service import GameSessionService
from geomaster.game.sessions.types import GameMode, GameStatus, PlayerIdentity

logger = structlog.get_logger(__name__)

ANONYMOUS_DISPLAY_NAME = "Anonym"


def _require_user(user_id: int | None) -> int:
    if user_id is None:
        raise AuthenticationRequiredError
    return user_id


def _decode(token: str) -> DuelChallenge:
    return decode_challenge(token, secret=get_settings().duel_token_secret)


def _stats_view(stats: DuelStats, *, rank: int | None = None) -> DuelStatsView:
    return DuelStatsView(
        user_id=stats.user_id,
        game_type=stats.game_type,
        total_duels=stats.total_duels,
        wins=stats.wins,
        losses=stats.losses,
        win_rate=stats.win_rate,
        duel_points=stats.duel_points,
        rank=rank,
    )


async def _display_name(session: AsyncSession, user_id: int) -> str:
    user = await UsersRepo.get_by_id(session, user_id)
    if user is None or not user.display_name:
        return ANONYMOUS_DISPLAY_NAME
    return user.display_name


async def _get_or_create_stats_for_update(
    session: AsyncSession,
    *,
    user_id: int,
    game_type: str,
    now_utc: datetime,
) -> DuelStats:
    stats = await DuelsRepo.get_stats_for_update(session, user_id=user_id, game_type=game_type)
    if stats is not None:
        return stats
    try:
        async with session.begin_nested():
            return await DuelsRepo.create_stats(
                session,
                stats=DuelStats(
                    user_id=user_id,
                    game_type=game_type,
                    total_duels=0,
                    wins=0,
                    losses=0,
                    win_rate=0.0,
                    duel_points=0,
                    updated_at=now_utc,
                ),
            )
    except IntegrityError:
        stats = await DuelsRepo.get_stats_for_update(session, user_id=user_id, game_type=game_type)
        if stats is None:
            raise
        return stats


def _apply_duel(stats: DuelStats, *, won: bool, points_delta: int, now_utc: datetime) -> None:
    stats.total_duels += 1
    if won:
        stats.wins += 1
    else:
        stats.losses += 1
    stats.win_rate = win_rate(wins=stats.wins, total=stats.total_duels)
    stats.duel_points += points_delta
    stats.updated_at = now_utc


async def create_duel_session(
    session: AsyncSession,
    *,
    user_id: int | None,
    game_type: str,
    now_utc: datetime,
    challenge_token: str | None = None,
    locale: str = "de",
) -> DuelSessionCreated:
    """Challenger gets a fresh seed; an accepter replays the challenger's seed."""
    user_id = _require_user(user_id)
    challenge = None
    seed = None
    if challenge_token is not None:
        challenge = _decode(challenge_token)
        config = await resolve_game_type(session, game_type)
        if challenge.game_type != config.id:
            raise DuelGameTypeMismatchError
        if challenge.challenger_id == user_id:
            raise DuelSelfChallengeError
        # One accept per challenge and user.
        already_played = await GameSessionsRepo.find_duel_session(session, user_id=user_id, duel_seed=challenge.seed)
        if already_played is not None:
            raise DuelAlreadyPlayedError
        seed = challenge.seed

    view = await GameSessionService.create_session(
        session,
        identity=PlayerIdentity(user_id=user_id),
        mode=GameMode.DUEL.value,
        game_type=game_type,
        now_utc=now_utc,
        seed=seed,
        locale=locale,
        allow_duel=True,
    )
    role = DuelRole.CHALLENGER if challenge is None else DuelRole.ACCEPTER
    logger.info(
        "duel_session_created",
        game_session_id=str(view.game_session_id),
        user_id=user_id,
        role=role.value,
        game_type=view.game_type,
    )
    return DuelSessionCreated(role=role, session=view, challenge=challenge)


async def _finish_own_session(
    session: AsyncSession,
    *,
    identity: PlayerIdentity,
    game_session: GameSession,
    now_utc: datetime,
) -> tuple[int, float]:
    if game_session.status != GameStatus.COMPLETED.value:
        completed = await GameSessionService.complete_session(
            session,
            identity=identity,
            game_session_id=game_session.id,
            now_utc=now_utc,
        )
        return completed.total_score, completed.total_time_seconds

    view = await GameSessionService.get_session_view(
        session,
        identity=identity,
        game_session_id=game_session.id,
    )
    total_time = sum(
        (round_view.guess.time_seconds or 0.0) for round_view in view.rounds if round_view.guess is not None
    )
    return view.total_score, total_time


async def _verify_challenger_session(
    session: AsyncSession,
    *,
    challenge: DuelChallenge,
) -> GameSession:
    challenger_session = await GameSessionsRepo.get_by_id(session, challenge.challenger_game_id)
    if (
        challenger_session is None
        or challenger_session.mode != GameMode.DUEL.value
        or challenger_session.duel_seed != challenge.seed
        or challenger_session.user_id != challenge.challenger_id
        or challenger_session.status != GameStatus.COMPLETED.value
    ):
        raise DuelChallengerSessionInvalidError
    return challenger_session


def _replay(existing: DuelResult, *, accepter_user_id: int) -> DuelCompletion:
    won = existing.winner_user_id == accepter_user_id
    return DuelCompletion(
        role=DuelRole.ACCEPTER,
        game_session_id=existing.accepter_session_id,
        game_type=existing.game_type,
        score=existing.accepter_score,
        time_seconds=existing.accepter_time_seconds,
        duel_result_id=existing.id,
        challenger_score=existing.challenger_score,
        challenger_time_seconds=existing.challenger_time_seconds,
        winner_user_id=existing.winner_user_id,
        points_delta=existing.winner_points_delta if won else existing.loser_points_delta,
        idempotent_replay=True,
    )


async def _ensure_not_played(session: AsyncSession, *, duel_seed: str, accepter_user_id: int) -> None:
    played = await DuelsRepo.get_result_by_seed_and_accepter(
        session,
        duel_seed=duel_seed,
        accepter_user_id=accepter_user_id,
    )
    if played is not None:
        raise DuelAlreadyPlayedError


async def complete_duel(
    session: AsyncSession,
    *,
    user_id: int | None,
    game_session_id: UUID,
    now_utc: datetime,
    challenge_token: str | None = None,
) -> DuelCompletion:
    """Completes a duel session.

    Without a token the caller is the challenger and receives the shareable token.
    With a token the caller is the accepter and the duel is reconciled once.
    """
    user_id = _require_user(user_id)
    identity = PlayerIdentity(user_id=user_id)
    challenge = _decode(challenge_token) if challenge_token is not None else None

    game_session = await GameSessionService._load_owned_session(
        session,
        game_session_id=game_session_id,
        identity=identity,
        for_update=True,
    )
    if game_session.mode != GameMode.DUEL.value:
        raise DuelSessionModeError
    if challenge is not None and challenge.seed != game_session.duel_seed:
        raise DuelSeedMismatchError

    if challenge is not None:
        existing = await DuelsRepo.get_result_by_accepter_session(session, game_session.id)
        if existing is not None:
            return _replay(existing, accepter_user_id=user_id)
        await _ensure_not_played(session, duel_seed=challenge.seed, accepter_user_id=user_id)

    score, time_seconds = await _finish_own_session(
        session,
        identity=identity,
        game_session=game_session,
        now_utc=now_utc,
    )

    if challenge is None:
        token = encode_challenge(
            DuelChallenge(
                seed=game_session.duel_seed,
                game_type=game_session.game_type,
                challenger_id=user_id,
                challenger_name=await _display_name(session, user_id),
                challenger_score=score,
                challenger_time=time_seconds,
                challenger_game_id=game_session.id,
            ),
            secret=get_settings().duel_token_secret,
        )
        logger.info(
            "duel_challenge_issued",
            game_session_id=str(game_session.id),
            user_id=user_id,
            score=score,
        )
        return DuelCompletion(
            role=DuelRole.CHALLENGER,
            game_session_id=game_session.id,
            game_type=game_session.game_type,
            score=score,
            time_seconds=time_seconds,
            encoded_challenge=token,
        )

    if challenge.challenger_id == user_id:
        raise DuelSelfChallengeError
    await _verify_challenger_session(session, challenge=challenge)

    game_type = game_session.game_type
    # Lock both stats rows in user id order.
    locked: dict[int, DuelStats] = {}
    for player_id in sorted((challenge.challenger_id, user_id)):
        locked[player_id] = await _get_or_create_stats_for_update(
            session,
            user_id=player_id,
            game_type=game_type,
            now_utc=now_utc,
        )
    challenger_stats = locked[challenge.challenger_id]
    accepter_stats = locked[user_id]
    outcome = resolve_duel(
        challenger_score=challenge.challenger_score,
        challenger_time=challenge.challenger_time,
        challenger_points=challenger_stats.duel_points,
        accepter_score=score,
        accepter_time=time_seconds,
        accepter_points=accepter_stats.duel_points,
    )
    accepter_won = outcome.winner == DuelRole.ACCEPTER
    winner_user_id = user_id if accepter_won else challenge.challenger_id

    duel_result = DuelResult(
        id=uuid4(),
        duel_seed=challenge.seed,
        game_type=game_type,
        challenger_user_id=challenge.challenger_id,
        challenger_session_id=challenge.challenger_game_id,
        challenger_score=challenge.challenger_score,
        challenger_time_seconds=challenge.challenger_time,
        accepter_user_id=user_id,
        accepter_session_id=game_session.id,
        accepter_score=score,
        accepter_time_seconds=time_seconds,
        winner_user_id=winner_user_id,
        winner_points_delta=outcome.winner_points_delta,
        loser_points_delta=outcome.loser_points_delta,
        created_at=now_utc,
    )
    try:
        async with session.begin_nested():
            await DuelsRepo.create_result(session, duel_result=duel_result)
    except IntegrityError:
        existing = await DuelsRepo.get_result_by_accepter_session(session, game_session.id)
        if existing is not None:
            return _replay(existing, accepter_user_id=user_id)
        await _ensure_not_played(session, duel_seed=challenge.seed, accepter_user_id=user_id)
        raise

    _apply_duel(
        accepter_stats,
        won=accepter_won,
        points_delta=outcome.winner_points_delta if accepter_won else outcome.loser_points_delta,
        now_utc=now_utc,
    )
    _apply_duel(
        challenger_stats,
        won=not accepter_won,
        points_delta=outcome.loser_points_delta if accepter_won else outcome.winner_points_delta,
        now_utc=now_utc,
    )
    await session.flush()

    logger.info(
        "duel_reconciled",
        duel_result_id=str(duel_result.id),
        game_type=game_type,
        challenger_user_id=challenge.challenger_id,
        accepter_user_id=user_id,
        winner_user_id=winner_user_id,
        points_delta=outcome.winner_points_delta,
    )
    return DuelCompletion(
        role=DuelRole.ACCEPTER,
        game_session_id=game_session.id,
        game_type=game_type,
        score=score,
        time_seconds=time_seconds,
        duel_result_id=duel_result.id,
        challenger_score=challenge.challenger_score,
        challenger_time_seconds=challenge.challenger_time,
        winner_user_id=winner_user_id,
        points_delta=outcome.winner_points_delta if accepter_won else outcome.loser_points_delta,
    )


async def get_duel_stats(session: AsyncSession, *, user_id: int | None, game_type: str) -> DuelStatsView | None:
    user_id = _require_user(user_id)
    stats = await DuelsRepo.get_stats(session, user_id=user_id, game_type=game_type)
    if stats is None:
        return None
    rank = await DuelsRepo.count_ahead_of(session, stats=stats) + 1
    return _stats_view(stats, rank=rank)


async def get_duel_leaderboard(
    session: AsyncSession,
    *,
    game_type: str,
    limit: int = 50,
) -> list[DuelLeaderboardRow]:
    board = await DuelsRepo.list_board(session, game_type=game_type, limit=limit)
    names = await UsersRepo.get_display_names(session, user_ids=[stats.user_id for stats in board])
    return [
        DuelLeaderboardRow(
            rank=index,
            user_id=stats.user_id,
            display_name=names.get(stats.user_id),
            total_duels=stats.total_duels,
            wins=stats.wins,
            losses=stats.losses,
            win_rate=stats.win_rate,
            duel_points=stats.duel_points,
        )
        for index, stats in enumerate(board, start=1)
    ]


def _history_entry(duel_result: DuelResult, *, user_id: int, opponent_name: str | None) -> DuelHistoryEntry:
    is_challenger = duel_result.challenger_user_id == user_id
    won = duel_result.winner_user_id == user_id
    if is_challenger:
        role = DuelRole.CHALLENGER
        opponent_user_id = duel_result.accepter_user_id
        score, time_seconds = duel_result.challenger_score, duel_result.challenger_time_seconds
        opponent_score, opponent_time = duel_result.accepter_score, duel_result.accepter_time_seconds
    else:
        role = DuelRole.ACCEPTER
        opponent_user_id = duel_result.challenger_user_id
        score, time_seconds = duel_result.accepter_score, duel_result.accepter_time_seconds
        opponent_score, opponent_time = duel_result.challenger_score, duel_result.challenger_time_seconds
    return DuelHistoryEntry(
        duel_result_id=duel_result.id,
        game_type=duel_result.game_type,
        role=role,
        opponent_user_id=opponent_user_id,
        opponent_name=opponent_name or ANONYMOUS_DISPLAY_NAME,
        score=score,
        time_seconds=time_seconds,
        opponent_score=opponent_score,
        opponent_time_seconds=opponent_time,
        won=won,
        points_delta=duel_result.winner_points_delta if won else duel_result.loser_points_delta,
        created_at=duel_result.created_at,
    )


def _opponent_id(duel_result: DuelResult, user_id: int) -> int:
    if duel_result.challenger_user_id == user_id:
        return duel_result.accepter_user_id
    return duel_result.challenger_user_id


async def get_duel_history(
    session: AsyncSession,
    *,
    user_id: int | None,
    game_type: str | None = None,
    limit: int = 20,
    offset: int = 0,
) -> list[DuelHistoryEntry]:
    """Newest first; each entry is seen from the caller's side of the duel."""
    user_id = _require_user(user_id)
    results = await DuelsRepo.list_history(
        session,
        user_id=user_id,
        game_type=game_type,
        limit=limit,
        offset=offset,
    )
    names = await UsersRepo.get_display_names(
        session,
        user_ids=sorted({_opponent_id(duel_result, user_id) for duel_result in results}),
    )
    return [
        _history_entry(duel_result, user_id=user_id, opponent_name=names.get(_opponent_id(duel_result, user_id)))
        for duel_result in results
    ]


async def get_duel_result(
    session: AsyncSession,
    *,
    user_id: int | None,
    duel_result_id: UUID,
) -> DuelHistoryEntry:
    user_id = _require_user(user_id)
    duel_result = await DuelsRepo.get_result_by_id(session, duel_result_id)
    # Outsiders get the same answer as for a missing result.
    if duel_result is None or user_id not in (duel_result.challenger_user_id, duel_result.accepter_user_id):
        raise DuelResultNotFoundError
    opponent_id = _opponent_id(duel_result, user_id)
    names = await UsersRepo.get_display_names(session, user_ids=[opponent_id])
    return _history_entry(duel_result, user_id=user_id, opponent_name=names.get(opponent_id))
