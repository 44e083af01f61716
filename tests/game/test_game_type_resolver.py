from __future__ import annotations

import pytest

from geomaster.db.models.game_type_catalog import Country, PanoramaType
from geomaster.game.game_types import (
    GameTypeInactiveError,
    GameTypeKind,
    GameTypeNotRankableError,
    LocationSource,
    UnknownGameTypeError,
    resolve_game_type,
    split_game_type,
)
from tests.game.ranked_fixtures import FakeSession, GameStore


@pytest.fixture
def store(monkeypatch) -> GameStore:
    game_store = GameStore()
    game_store.install(monkeypatch)
    return game_store


def _austria(*, is_active: bool = True) -> Country:
    return Country(
        id="austria",
        name="Österreich",
        name_en="Austria",
        name_sl="Avstrija",
        bounds_north=49.0205,
        bounds_south=46.3723,
        bounds_east=17.1608,
        bounds_west=9.5307,
        timeout_penalty_km=350.0,
        score_scale_factor=90.0,
        is_active=is_active,
    )


def test_split_game_type() -> None:
    assert split_game_type("country:switzerland") == (GameTypeKind.COUNTRY, "switzerland")
    assert split_game_type("world:capitals") == (GameTypeKind.WORLD, "capitals")
    for bad in ("switzerland", "country:", "planet:mars"):
        with pytest.raises(UnknownGameTypeError):
            split_game_type(bad)


@pytest.mark.asyncio
async def test_static_table_is_the_fallback(store: GameStore) -> None:
    config = await resolve_game_type(FakeSession(), "country:switzerland")

    assert config.id == "country:switzerland"
    assert config.timeout_penalty_km == 400.0
    assert config.score_scale_factor == 100.0
    assert config.default_time_limit_seconds == 30
    assert config.location_source == LocationSource.LOCATIONS
    assert config.bounds is not None


@pytest.mark.asyncio
async def test_world_quiz_static_config(store: GameStore) -> None:
    config = await resolve_game_type(FakeSession(), " world:unesco ")

    assert config.id == "world:unesco"
    assert config.bounds is None
    assert config.timeout_penalty_km == 5000.0
    assert config.score_scale_factor == 3000.0
    assert config.location_source == LocationSource.WORLD_LOCATIONS


@pytest.mark.asyncio
async def test_catalog_row_wins(store: GameStore) -> None:
    store.catalog[("country", "austria")] = _austria()

    config = await resolve_game_type(FakeSession(), "country:austria")

    assert config.id == "country:austria"
    assert config.score_scale_factor == 90.0
    assert config.timeout_penalty_km == 350.0
    assert config.name("de") == "Österreich"
    assert config.name("en") == "Austria"
    assert config.bounds.contains(48.2082, 16.3738)


@pytest.mark.asyncio
async def test_inactive_catalog_row_is_rejected_for_new_games_only(store: GameStore) -> None:
    store.catalog[("country", "austria")] = _austria(is_active=False)

    with pytest.raises(GameTypeInactiveError):
        await resolve_game_type(FakeSession(), "country:austria")

    config = await resolve_game_type(FakeSession(), "country:austria", allow_inactive=True)
    assert config.id == "country:austria"


@pytest.mark.asyncio
async def test_panorama_catalog_row_carries_its_own_time_limit(store: GameStore) -> None:
    store.catalog[("panorama", "alps")] = PanoramaType(
        id="alps",
        name="Alpen",
        name_en="Alps",
        name_sl=None,
        timeout_penalty_km=2000.0,
        score_scale_factor=500.0,
        default_time_limit_seconds=60,
        is_active=True,
    )

    config = await resolve_game_type(FakeSession(), "panorama:alps")

    assert config.kind == GameTypeKind.PANORAMA
    assert config.default_time_limit_seconds == 60
    assert config.location_source == LocationSource.PANORAMA_LOCATIONS
    assert "sl" not in config.names


@pytest.mark.asyncio
async def test_image_prefix_is_not_rankable(store: GameStore) -> None:
    with pytest.raises(GameTypeNotRankableError):
        await resolve_game_type(FakeSession(), "image:city-skylines")


@pytest.mark.asyncio
async def test_unknown_key_without_row_or_static_entry(store: GameStore) -> None:
    with pytest.raises(UnknownGameTypeError):
        await resolve_game_type(FakeSession(), "world:volcanoes")
