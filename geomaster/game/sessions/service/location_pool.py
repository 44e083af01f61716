from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from geomaster.db.models.locations import PanoramaLocation, WorldLocation
from geomaster.db.repo.locations_repo import LocationRow, LocationsRepo
from geomaster.game.game_types.types import GameTypeConfig, GameTypeKind
from geomaster.game.sessions.errors import NotEnoughLocationsError
from geomaster.game.shuffle import pick


async def load_location_pool(session: AsyncSession, *, config: GameTypeConfig) -> list[LocationRow]:
    """Candidate pool ordered by id, so a seed always maps to the same picks."""
    if config.kind == GameTypeKind.PANORAMA:
        return list(await LocationsRepo.list_panorama_pool(session, category=config.catalog_key))
    if config.kind == GameTypeKind.WORLD:
        return list(await LocationsRepo.list_world_pool(session, category=config.catalog_key))
    return list(await LocationsRepo.list_country_pool(session, country_id=config.catalog_key))


def select_locations(pool: list[LocationRow], *, count: int, seed: str) -> list[LocationRow]:
    if len(pool) < count:
        raise NotEnoughLocationsError(available=len(pool), required=count)
    return pick(sorted(pool, key=lambda row: str(row.id)), count=count, seed=seed)


def location_name(row: LocationRow, locale: str) -> str:
    localized = getattr(row, f"name_{locale}", None)
    return localized or row.name


def imagery_fields(row: LocationRow) -> dict[str, object]:
    if not isinstance(row, PanoramaLocation):
        return {}
    return {"imagery_key": row.imagery_key, "heading": row.heading, "pitch": row.pitch}


def target_country_code(row: LocationRow) -> str | None:
    if isinstance(row, WorldLocation):
        return row.country_code
    return None
