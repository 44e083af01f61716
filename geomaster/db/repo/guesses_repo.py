from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from geomaster.db.models.game_rounds import GameRound
from geomaster.db.models.guesses import Guess


class GuessesRepo:
    @staticmethod
    async def get_for_round(
        session: AsyncSession,
        *,
        game_round_id: UUID,
        user_id: int | None,
        guest_id: str | None,
    ) -> Guess | None:
        stmt = select(Guess).where(Guess.game_round_id == game_round_id)
        if user_id is not None:
            stmt = stmt.where(Guess.user_id == user_id)
        else:
            stmt = stmt.where(Guess.guest_id == guest_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_for_session(
        session: AsyncSession,
        *,
        game_session_id: UUID,
        user_id: int | None,
        guest_id: str | None,
    ) -> list[Guess]:
        stmt = (
            select(Guess)
            .join(GameRound, GameRound.id == Guess.game_round_id)
            .where(GameRound.game_session_id == game_session_id)
        )
        if user_id is not None:
            stmt = stmt.where(Guess.user_id == user_id)
        else:
            stmt = stmt.where(Guess.guest_id == guest_id)
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def create(session: AsyncSession, *, guess: Guess) -> Guess:
        session.add(guess)
        await session.flush()
        return guess
