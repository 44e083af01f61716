from __future__ import annotations

from uuid import UUID

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from geomaster.db.models.duels import DuelResult, DuelStats


class DuelsRepo:
    @staticmethod
    async def get_result_by_accepter_session(
        session: AsyncSession,
        accepter_session_id: UUID,
    ) -> DuelResult | None:
        stmt = select(DuelResult).where(DuelResult.accepter_session_id == accepter_session_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_result_by_seed_and_accepter(
        session: AsyncSession,
        *,
        duel_seed: str,
        accepter_user_id: int,
    ) -> DuelResult | None:
        stmt = select(DuelResult).where(
            DuelResult.duel_seed == duel_seed,
            DuelResult.accepter_user_id == accepter_user_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_result_by_id(session: AsyncSession, duel_result_id: UUID) -> DuelResult | None:
        return await session.get(DuelResult, duel_result_id)

    @staticmethod
    async def list_history(
        session: AsyncSession,
        *,
        user_id: int,
        game_type: str | None,
        limit: int,
        offset: int,
    ) -> list[DuelResult]:
        stmt = select(DuelResult).where(
            or_(DuelResult.challenger_user_id == user_id, DuelResult.accepter_user_id == user_id)
        )
        if game_type is not None:
            stmt = stmt.where(DuelResult.game_type == game_type)
        stmt = stmt.order_by(DuelResult.created_at.desc(), DuelResult.id.asc()).offset(offset).limit(limit)
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def create_result(session: AsyncSession, *, duel_result: DuelResult) -> DuelResult:
        session.add(duel_result)
        await session.flush()
        return duel_result

    @staticmethod
    async def get_stats(session: AsyncSession, *, user_id: int, game_type: str) -> DuelStats | None:
        stmt = select(DuelStats).where(DuelStats.user_id == user_id, DuelStats.game_type == game_type)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_stats_for_update(
        session: AsyncSession,
        *,
        user_id: int,
        game_type: str,
    ) -> DuelStats | None:
        stmt = (
            select(DuelStats)
            .where(DuelStats.user_id == user_id, DuelStats.game_type == game_type)
            .with_for_update()
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def create_stats(session: AsyncSession, *, stats: DuelStats) -> DuelStats:
        session.add(stats)
        await session.flush()
        return stats

    @staticmethod
    async def count_ahead_of(session: AsyncSession, *, stats: DuelStats) -> int:
        stmt = select(func.count(DuelStats.id)).where(
            DuelStats.game_type == stats.game_type,
            or_(
                DuelStats.duel_points > stats.duel_points,
                and_(DuelStats.duel_points == stats.duel_points, DuelStats.wins > stats.wins),
                and_(
                    DuelStats.duel_points == stats.duel_points,
                    DuelStats.wins == stats.wins,
                    DuelStats.win_rate > stats.win_rate,
                ),
                and_(
                    DuelStats.duel_points == stats.duel_points,
                    DuelStats.wins == stats.wins,
                    DuelStats.win_rate == stats.win_rate,
                    DuelStats.total_duels > stats.total_duels,
                ),
            ),
        )
        result = await session.execute(stmt)
        return int(result.scalar_one())

    @staticmethod
    async def list_board(session: AsyncSession, *, game_type: str, limit: int) -> list[DuelStats]:
        stmt = (
            select(DuelStats)
            .where(DuelStats.game_type == game_type)
            .order_by(
                DuelStats.duel_points.desc(),
                DuelStats.wins.desc(),
                DuelStats.win_rate.desc(),
                DuelStats.total_duels.desc(),
                DuelStats.user_id.asc(),
            )
            .limit(limit)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())
