from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from geomaster.db.models.game_rounds import GameRound


class GameRoundsRepo:
    @staticmethod
    async def list_for_session(session: AsyncSession, *, game_session_id: UUID) -> list[GameRound]:
        stmt = (
            select(GameRound)
            .where(GameRound.game_session_id == game_session_id)
            .order_by(GameRound.round_number.asc(), GameRound.location_index.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def create_many(session: AsyncSession, *, rounds: list[GameRound]) -> list[GameRound]:
        session.add_all(rounds)
        await session.flush()
        return rounds
