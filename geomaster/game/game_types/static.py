from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from geomaster.game.game_types.types import GameTypeConfig, GameTypeKind
from geomaster.game.geo import Bounds

COUNTRY_TIME_LIMIT_SECONDS = 30
PANORAMA_TIME_LIMIT_SECONDS = 60
COUNTRY_DEFAULT_SCALE_FACTOR_KM = 80.0
COUNTRY_DEFAULT_TIMEOUT_PENALTY_KM = 300.0
WORLD_SCALE_FACTOR_KM = 3000.0
WORLD_TIMEOUT_PENALTY_KM = 5000.0

SWITZERLAND_BOUNDS = Bounds(north=47.8084, south=45.818, east=10.4922, west=5.9559)
SLOVENIA_BOUNDS = Bounds(north=46.8766, south=45.4215, east=16.6106, west=13.3754)


def _world(category: str, *, de: str, en: str, sl: str) -> GameTypeConfig:
    return GameTypeConfig(
        id=f"world:{category}",
        kind=GameTypeKind.WORLD,
        catalog_key=category,
        names={"de": de, "en": en, "sl": sl},
        bounds=None,
        timeout_penalty_km=WORLD_TIMEOUT_PENALTY_KM,
        score_scale_factor=WORLD_SCALE_FACTOR_KM,
        default_time_limit_seconds=COUNTRY_TIME_LIMIT_SECONDS,
    )


_STATIC_GAME_TYPES = (
    GameTypeConfig(
        id="country:switzerland",
        kind=GameTypeKind.COUNTRY,
        catalog_key="switzerland",
        names={"de": "Schweiz", "en": "Switzerland", "sl": "Švica"},
        bounds=SWITZERLAND_BOUNDS,
        timeout_penalty_km=400.0,
        score_scale_factor=100.0,
        default_time_limit_seconds=COUNTRY_TIME_LIMIT_SECONDS,
    ),
    GameTypeConfig(
        id="country:slovenia",
        kind=GameTypeKind.COUNTRY,
        catalog_key="slovenia",
        names={"de": "Slowenien", "en": "Slovenia", "sl": "Slovenija"},
        bounds=SLOVENIA_BOUNDS,
        timeout_penalty_km=250.0,
        score_scale_factor=60.0,
        default_time_limit_seconds=COUNTRY_TIME_LIMIT_SECONDS,
    ),
    _world("highest-mountains", de="Höchste Berge", en="Highest Mountains", sl="Najvišje gore"),
    _world("capitals", de="Hauptstädte", en="World Capitals", sl="Prestolnice"),
    _world("famous-places", de="Berühmte Orte", en="Famous Places", sl="Znamenite lokacije"),
    _world("unesco", de="UNESCO Welterbe", en="UNESCO World Heritage", sl="UNESCO svetovna dediščina"),
    _world(
        "airports",
        de="Internationale Flughäfen",
        en="International Airports",
        sl="Mednarodna letališča",
    ),
)

STATIC_GAME_TYPES: Mapping[str, GameTypeConfig] = MappingProxyType(
    {config.id: config for config in _STATIC_GAME_TYPES}
)
