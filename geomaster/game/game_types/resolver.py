from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from geomaster.db.models.game_type_catalog import Country, PanoramaType, WorldQuizType
from geomaster.db.repo.game_type_catalog_repo import GameTypeCatalogRepo
from geomaster.game.game_types.errors import (
    GameTypeInactiveError,
    GameTypeNotRankableError,
    UnknownGameTypeError,
)
from geomaster.game.game_types.static import (
    COUNTRY_DEFAULT_SCALE_FACTOR_KM,
    COUNTRY_DEFAULT_TIMEOUT_PENALTY_KM,
    COUNTRY_TIME_LIMIT_SECONDS,
    STATIC_GAME_TYPES,
)
from geomaster.game.game_types.types import GameTypeConfig, GameTypeKind
from geomaster.game.geo import Bounds

UNRANKABLE_PREFIXES = ("image:",)


def split_game_type(game_type: str) -> tuple[GameTypeKind, str]:
    prefix, separator, key = game_type.partition(":")
    if not separator or not key:
        raise UnknownGameTypeError(game_type)
    try:
        kind = GameTypeKind(prefix)
    except ValueError as exc:
        raise UnknownGameTypeError(game_type) from exc
    return kind, key


def _names(row: Country | WorldQuizType | PanoramaType, *, de: str) -> dict[str, str]:
    names = {"de": de, "en": row.name_en or row.name}
    if row.name_sl:
        names["sl"] = row.name_sl
    return names


def country_to_config(row: Country) -> GameTypeConfig:
    return GameTypeConfig(
        id=f"country:{row.id}",
        kind=GameTypeKind.COUNTRY,
        catalog_key=row.id,
        names=_names(row, de=row.name),
        bounds=Bounds(
            north=row.bounds_north,
            south=row.bounds_south,
            east=row.bounds_east,
            west=row.bounds_west,
        ),
        timeout_penalty_km=row.timeout_penalty_km or COUNTRY_DEFAULT_TIMEOUT_PENALTY_KM,
        score_scale_factor=row.score_scale_factor or COUNTRY_DEFAULT_SCALE_FACTOR_KM,
        default_time_limit_seconds=COUNTRY_TIME_LIMIT_SECONDS,
    )


def world_quiz_to_config(row: WorldQuizType) -> GameTypeConfig:
    return GameTypeConfig(
        id=f"world:{row.id}",
        kind=GameTypeKind.WORLD,
        catalog_key=row.id,
        names=_names(row, de=row.name),
        bounds=None,
        timeout_penalty_km=row.timeout_penalty_km,
        score_scale_factor=row.score_scale_factor,
        default_time_limit_seconds=COUNTRY_TIME_LIMIT_SECONDS,
    )


def panorama_to_config(row: PanoramaType) -> GameTypeConfig:
    return GameTypeConfig(
        id=f"panorama:{row.id}",
        kind=GameTypeKind.PANORAMA,
        catalog_key=row.id,
        names=_names(row, de=row.name),
        bounds=None,
        timeout_penalty_km=row.timeout_penalty_km,
        score_scale_factor=row.score_scale_factor,
        default_time_limit_seconds=row.default_time_limit_seconds,
    )


async def _load_catalog_row(
    session: AsyncSession,
    *,
    kind: GameTypeKind,
    key: str,
) -> Country | WorldQuizType | PanoramaType | None:
    if kind == GameTypeKind.COUNTRY:
        return await GameTypeCatalogRepo.get_country(session, key)
    if kind == GameTypeKind.WORLD:
        return await GameTypeCatalogRepo.get_world_quiz_type(session, key)
    return await GameTypeCatalogRepo.get_panorama_type(session, key)


_CONVERTERS = {
    GameTypeKind.COUNTRY: country_to_config,
    GameTypeKind.WORLD: world_quiz_to_config,
    GameTypeKind.PANORAMA: panorama_to_config,
}


async def resolve_game_type(
    session: AsyncSession,
    game_type: str,
    *,
    allow_inactive: bool = False,
) -> GameTypeConfig:
    """Single normalized config for a game type; catalog rows win, static table is the fallback."""
    normalized = game_type.strip()
    if normalized.startswith(UNRANKABLE_PREFIXES):
        raise GameTypeNotRankableError(normalized)

    kind, key = split_game_type(normalized)
    row = await _load_catalog_row(session, kind=kind, key=key)
    if row is not None:
        if not row.is_active and not allow_inactive:
            raise GameTypeInactiveError(normalized)
        return _CONVERTERS[kind](row)

    static_config = STATIC_GAME_TYPES.get(normalized)
    if static_config is None:
        raise UnknownGameTypeError(normalized)
    return static_config
