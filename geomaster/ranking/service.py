from __future__ import annotations

from datetime import datetime
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from geomaster.core.config import get_settings
from geomaster.db.models.ranked_game_results import RankedGameResult
from geomaster.db.models.rankings import RankingEntry
from geomaster.db.repo.ranked_game_results_repo import RankedGameResultsRepo
from geomaster.db.repo.rankings_repo import RankingsRepo
from geomaster.db.repo.users_repo import UsersRepo
from geomaster.ranking.periods import (
    ALLTIME_PERIOD_KEY,
    OVERALL_GAME_TYPE,
    RankingPeriod,
    period_key_at,
)
from geomaster.ranking.rules import aggregate_games, fold, ranking_keys_for
from geomaster.ranking.types import (
    CompletedGame,
    LeaderboardRow,
    LeaderboardSort,
    RankingAggregate,
    RankingEntryView,
    RankingKey,
    RankingsRebuildResult,
)

logger = structlog.get_logger(__name__)


def _aggregate_from_entry(entry: RankingEntry) -> RankingAggregate:
    return RankingAggregate(
        total_score=entry.total_score,
        total_games=entry.total_games,
        best_score=entry.best_score,
        best_score_at=entry.best_score_at,
        average_score=entry.average_score,
        updated_at=entry.updated_at,
    )


def _apply_aggregate(entry: RankingEntry, aggregate: RankingAggregate) -> None:
    entry.total_score = aggregate.total_score
    entry.total_games = aggregate.total_games
    entry.best_score = aggregate.best_score
    entry.best_score_at = aggregate.best_score_at
    entry.average_score = aggregate.average_score
    entry.updated_at = aggregate.updated_at


def _entry_for_key(key: RankingKey, aggregate: RankingAggregate) -> RankingEntry:
    entry = RankingEntry(
        user_id=key.user_id,
        game_type=key.game_type,
        period=key.period.value,
        period_key=key.period_key,
    )
    _apply_aggregate(entry, aggregate)
    return entry


def _entry_view(entry: RankingEntry, *, rank: int | None = None) -> RankingEntryView:
    return RankingEntryView(
        game_type=entry.game_type,
        period=RankingPeriod(entry.period),
        period_key=entry.period_key,
        total_score=entry.total_score,
        total_games=entry.total_games,
        best_score=entry.best_score,
        average_score=entry.average_score,
        rank=rank,
    )


def _completed_game_from_row(row: RankedGameResult) -> CompletedGame:
    return CompletedGame(
        user_id=row.user_id,
        game_type=row.game_type,
        total_score=row.total_score,
        completed_at=row.completed_at,
    )


async def _fold_into_entry(session: AsyncSession, *, key: RankingKey, game: CompletedGame) -> RankingEntry:
    lookup = {
        "user_id": key.user_id,
        "game_type": key.game_type,
        "period": key.period.value,
        "period_key": key.period_key,
    }
    entry = await RankingsRepo.get_for_update(session, **lookup)
    if entry is None:
        try:
            async with session.begin_nested():
                return await RankingsRepo.create(session, entry=_entry_for_key(key, fold(None, game)))
        except IntegrityError:
            entry = await RankingsRepo.get_for_update(session, **lookup)
            if entry is None:
                raise

    _apply_aggregate(entry, fold(_aggregate_from_entry(entry), game))
    await session.flush()
    return entry


class RankingService:
    @staticmethod
    async def record_completed_game(
        session: AsyncSession,
        *,
        game_session_id: UUID,
        user_id: int,
        game_type: str,
        mode: str,
        total_score: int,
        average_score: float,
        total_distance_km: float,
        total_time_seconds: float,
        completed_at: datetime,
    ) -> list[RankingEntryView]:
        """Stores the game in the ranked history and folds it into every period window."""
        await RankingsRepo.lock_for_fold(session)
        await RankedGameResultsRepo.create(
            session,
            result_row=RankedGameResult(
                game_session_id=game_session_id,
                user_id=user_id,
                game_type=game_type,
                mode=mode,
                total_score=total_score,
                average_score=average_score,
                total_distance_km=total_distance_km,
                total_time_seconds=total_time_seconds,
                completed_at=completed_at,
            ),
        )

        game = CompletedGame(
            user_id=user_id,
            game_type=game_type,
            total_score=total_score,
            completed_at=completed_at,
        )
        views: list[RankingEntryView] = []
        for key in ranking_keys_for(game, timezone_name=get_settings().game_timezone):
            entry = await _fold_into_entry(session, key=key, game=game)
            rank = await RankingsRepo.count_ahead_of(session, entry=entry) + 1
            views.append(_entry_view(entry, rank=rank))

        logger.info(
            "ranking_game_folded",
            game_session_id=str(game_session_id),
            user_id=user_id,
            game_type=game_type,
            total_score=total_score,
        )
        return views

    @staticmethod
    async def get_user_entry(
        session: AsyncSession,
        *,
        user_id: int,
        game_type: str,
        period: RankingPeriod,
        now_utc: datetime,
    ) -> RankingEntryView | None:
        entry = await RankingsRepo.get(
            session,
            user_id=user_id,
            game_type=game_type,
            period=period.value,
            period_key=period_key_at(period, now_utc, timezone_name=get_settings().game_timezone),
        )
        if entry is None:
            return None
        rank = await RankingsRepo.count_ahead_of(session, entry=entry) + 1
        return _entry_view(entry, rank=rank)

    @staticmethod
    async def get_user_rank(
        session: AsyncSession,
        *,
        user_id: int,
        game_type: str,
        period: RankingPeriod,
        now_utc: datetime,
    ) -> int | None:
        view = await RankingService.get_user_entry(
            session,
            user_id=user_id,
            game_type=game_type,
            period=period,
            now_utc=now_utc,
        )
        return view.rank if view is not None else None

    @staticmethod
    async def get_alltime_total(session: AsyncSession, *, user_id: int) -> int:
        entry = await RankingsRepo.get(
            session,
            user_id=user_id,
            game_type=OVERALL_GAME_TYPE,
            period=RankingPeriod.ALLTIME.value,
            period_key=ALLTIME_PERIOD_KEY,
        )
        return entry.total_score if entry is not None else 0

    @staticmethod
    async def get_leaderboard(
        session: AsyncSession,
        *,
        game_type: str,
        period: RankingPeriod,
        now_utc: datetime,
        limit: int = 50,
        sort_by: LeaderboardSort = LeaderboardSort.BEST,
    ) -> list[LeaderboardRow]:
        """Rows ranked by best single game, or by summed score for `LeaderboardSort.TOTAL`."""
        entries = await RankingsRepo.list_board(
            session,
            game_type=game_type,
            period=period.value,
            period_key=period_key_at(period, now_utc, timezone_name=get_settings().game_timezone),
            limit=limit,
            sort_by=sort_by.value,
        )
        names = await UsersRepo.get_display_names(session, user_ids=[entry.user_id for entry in entries])
        return [
            LeaderboardRow(
                rank=index,
                user_id=entry.user_id,
                display_name=names.get(entry.user_id),
                total_score=entry.total_score,
                total_games=entry.total_games,
                best_score=entry.best_score,
                average_score=entry.average_score,
            )
            for index, entry in enumerate(entries, start=1)
        ]

    @staticmethod
    async def rebuild_rankings(session: AsyncSession) -> RankingsRebuildResult:
        """Recomputes every entry from the ranked game history."""
        await RankingsRepo.lock_for_rebuild(session)
        games = [_completed_game_from_row(row) async for row in RankedGameResultsRepo.iter_all(session)]
        aggregates = aggregate_games(games, timezone_name=get_settings().game_timezone)

        deleted = await RankingsRepo.delete_all(session)
        await RankingsRepo.create_many(
            session,
            entries=[_entry_for_key(key, aggregate) for key, aggregate in aggregates.items()],
        )
        return RankingsRebuildResult(
            games_folded=len(games),
            entries_deleted=deleted,
            entries_written=len(aggregates),
        )
