from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from geomaster.db.models.locations import Location, PanoramaLocation, WorldLocation

LocationRow = Location | WorldLocation | PanoramaLocation

_MODELS_BY_SOURCE: dict[str, type[Location] | type[WorldLocation] | type[PanoramaLocation]] = {
    "locations": Location,
    "world_locations": WorldLocation,
    "panorama_locations": PanoramaLocation,
}


class LocationsRepo:
    @staticmethod
    async def list_country_pool(session: AsyncSession, *, country_id: str) -> list[Location]:
        stmt = select(Location).where(Location.country_id == country_id).order_by(Location.id.asc())
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_world_pool(session: AsyncSession, *, category: str) -> list[WorldLocation]:
        stmt = (
            select(WorldLocation)
            .where(WorldLocation.category == category)
            .order_by(WorldLocation.id.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_panorama_pool(session: AsyncSession, *, category: str) -> list[PanoramaLocation]:
        stmt = (
            select(PanoramaLocation)
            .where(PanoramaLocation.category == category)
            .order_by(PanoramaLocation.id.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def get_by_source(
        session: AsyncSession,
        *,
        location_source: str,
        location_id: UUID,
    ) -> LocationRow | None:
        model = _MODELS_BY_SOURCE.get(location_source)
        if model is None:
            return None
        return await session.get(model, location_id)

    @staticmethod
    async def list_by_source(
        session: AsyncSession,
        *,
        location_source: str,
        location_ids: list[UUID],
    ) -> dict[UUID, LocationRow]:
        model = _MODELS_BY_SOURCE.get(location_source)
        if model is None or not location_ids:
            return {}
        stmt = select(model).where(model.id.in_(location_ids))
        result = await session.execute(stmt)
        return {row.id: row for row in result.scalars().all()}
