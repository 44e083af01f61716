from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from geomaster.db.models.game_sessions import GameSession


class GameSessionsRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, game_session_id: UUID) -> GameSession | None:
        return await session.get(GameSession, game_session_id)

    @staticmethod
    async def get_by_id_for_update(session: AsyncSession, game_session_id: UUID) -> GameSession | None:
        stmt = select(GameSession).where(GameSession.id == game_session_id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def create(session: AsyncSession, *, game_session: GameSession) -> GameSession:
        session.add(game_session)
        await session.flush()
        return game_session

    @staticmethod
    async def find_duel_session(session: AsyncSession, *, user_id: int, duel_seed: str) -> GameSession | None:
        stmt = (
            select(GameSession)
            .where(GameSession.user_id == user_id, GameSession.duel_seed == duel_seed)
            .order_by(GameSession.created_at.asc())
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()
