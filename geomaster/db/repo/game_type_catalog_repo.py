from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from geomaster.db.models.game_type_catalog import Country, PanoramaType, WorldQuizType


class GameTypeCatalogRepo:
    @staticmethod
    async def get_country(session: AsyncSession, country_id: str) -> Country | None:
        return await session.get(Country, country_id)

    @staticmethod
    async def get_world_quiz_type(session: AsyncSession, category: str) -> WorldQuizType | None:
        return await session.get(WorldQuizType, category)

    @staticmethod
    async def get_panorama_type(session: AsyncSession, category: str) -> PanoramaType | None:
        return await session.get(PanoramaType, category)
