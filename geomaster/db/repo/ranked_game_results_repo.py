from __future__ import annotations

from collections.abc import AsyncIterator
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from geomaster.db.models.ranked_game_results import RankedGameResult


class RankedGameResultsRepo:
    @staticmethod
    async def get_by_session_id(session: AsyncSession, game_session_id: UUID) -> RankedGameResult | None:
        stmt = select(RankedGameResult).where(RankedGameResult.game_session_id == game_session_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def create(session: AsyncSession, *, result_row: RankedGameResult) -> RankedGameResult:
        session.add(result_row)
        await session.flush()
        return result_row

    @staticmethod
    async def iter_all(session: AsyncSession, *, batch_size: int = 1000) -> AsyncIterator[RankedGameResult]:
        stmt = select(RankedGameResult).order_by(RankedGameResult.id.asc()).execution_options(
            yield_per=batch_size
        )
        result = await session.stream_scalars(stmt)
        async for row in result:
            yield row
