from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from geomaster.game.geo import Bounds


class GameTypeKind(str, Enum):
    COUNTRY = "country"
    WORLD = "world"
    PANORAMA = "panorama"


class LocationSource(str, Enum):
    LOCATIONS = "locations"
    WORLD_LOCATIONS = "world_locations"
    PANORAMA_LOCATIONS = "panorama_locations"


LOCATION_SOURCE_BY_KIND = {
    GameTypeKind.COUNTRY: LocationSource.LOCATIONS,
    GameTypeKind.WORLD: LocationSource.WORLD_LOCATIONS,
    GameTypeKind.PANORAMA: LocationSource.PANORAMA_LOCATIONS,
}


@dataclass(frozen=True, slots=True)
class GameTypeConfig:
    id: str
    kind: GameTypeKind
    catalog_key: str
    names: dict[str, str] = field(hash=False)
    bounds: Bounds | None
    timeout_penalty_km: float
    score_scale_factor: float
    default_time_limit_seconds: int

    @property
    def location_source(self) -> LocationSource:
        return LOCATION_SOURCE_BY_KIND[self.kind]

    def name(self, locale: str = "en") -> str:
        return self.names.get(locale) or self.names.get("en") or self.id
