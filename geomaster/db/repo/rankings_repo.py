from __future__ import annotations

from sqlalchemy import and_, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from geomaster.db.models.rankings import RankingEntry

# Folds hold it shared, the nightly rebuild exclusively.
RANKINGS_LOCK_KEY = 7_341_202_611

_BOARD_ORDER = {
    "best": (
        RankingEntry.best_score.desc(),
        RankingEntry.best_score_at.asc(),
        RankingEntry.total_games.asc(),
        RankingEntry.user_id.asc(),
    ),
    "total": (
        RankingEntry.total_score.desc(),
        RankingEntry.best_score.desc(),
        RankingEntry.user_id.asc(),
    ),
}


class RankingsRepo:
    @staticmethod
    async def lock_for_fold(session: AsyncSession) -> None:
        await session.execute(select(func.pg_advisory_xact_lock_shared(RANKINGS_LOCK_KEY)))

    @staticmethod
    async def lock_for_rebuild(session: AsyncSession) -> None:
        await session.execute(select(func.pg_advisory_xact_lock(RANKINGS_LOCK_KEY)))

    @staticmethod
    async def get_for_update(
        session: AsyncSession,
        *,
        user_id: int,
        game_type: str,
        period: str,
        period_key: str,
    ) -> RankingEntry | None:
        stmt = (
            select(RankingEntry)
            .where(
                RankingEntry.user_id == user_id,
                RankingEntry.game_type == game_type,
                RankingEntry.period == period,
                RankingEntry.period_key == period_key,
            )
            .with_for_update()
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get(
        session: AsyncSession,
        *,
        user_id: int,
        game_type: str,
        period: str,
        period_key: str,
    ) -> RankingEntry | None:
        stmt = select(RankingEntry).where(
            RankingEntry.user_id == user_id,
            RankingEntry.game_type == game_type,
            RankingEntry.period == period,
            RankingEntry.period_key == period_key,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def create(session: AsyncSession, *, entry: RankingEntry) -> RankingEntry:
        session.add(entry)
        await session.flush()
        return entry

    @staticmethod
    async def count_ahead_of(session: AsyncSession, *, entry: RankingEntry) -> int:
        # Ordering: best score desc, earlier best, fewer games, lower user id.
        stmt = select(func.count(RankingEntry.id)).where(
            RankingEntry.game_type == entry.game_type,
            RankingEntry.period == entry.period,
            RankingEntry.period_key == entry.period_key,
            or_(
                RankingEntry.best_score > entry.best_score,
                and_(
                    RankingEntry.best_score == entry.best_score,
                    RankingEntry.best_score_at < entry.best_score_at,
                ),
                and_(
                    RankingEntry.best_score == entry.best_score,
                    RankingEntry.best_score_at == entry.best_score_at,
                    RankingEntry.total_games < entry.total_games,
                ),
                and_(
                    RankingEntry.best_score == entry.best_score,
                    RankingEntry.best_score_at == entry.best_score_at,
                    RankingEntry.total_games == entry.total_games,
                    RankingEntry.user_id < entry.user_id,
                ),
            ),
        )
        result = await session.execute(stmt)
        return int(result.scalar_one())

    @staticmethod
    async def list_board(
        session: AsyncSession,
        *,
        game_type: str,
        period: str,
        period_key: str,
        limit: int,
        sort_by: str = "best",
    ) -> list[RankingEntry]:
        stmt = (
            select(RankingEntry)
            .where(
                RankingEntry.game_type == game_type,
                RankingEntry.period == period,
                RankingEntry.period_key == period_key,
            )
            .order_by(*_BOARD_ORDER[sort_by])
            .limit(limit)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def delete_all(session: AsyncSession) -> int:
        result = await session.execute(delete(RankingEntry))
        return int(result.rowcount or 0)

    @staticmethod
    async def create_many(session: AsyncSession, *, entries: list[RankingEntry]) -> None:
        session.add_all(entries)
        await session.flush()
