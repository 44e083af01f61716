from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from geomaster.db.models.users import User


class UsersRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, user_id: int) -> User | None:
        return await session.get(User, user_id)

    @staticmethod
    async def get_display_names(session: AsyncSession, *, user_ids: list[int]) -> dict[int, str | None]:
        if not user_ids:
            return {}
        stmt = select(User.id, User.display_name).where(User.id.in_(user_ids))
        result = await session.execute(stmt)
        return {row.id: row.display_name for row in result}
