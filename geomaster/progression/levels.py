from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Level:
    level: int
    min_points: int
    names: tuple[tuple[str, str], ...]

    def name(self, locale: str = "en") -> str:
        names = dict(self.names)
        return names.get(locale) or names["en"]


@dataclass(frozen=True, slots=True)
class LevelProgress:
    current_level: Level
    next_level: Level | None
    progress: float
    points_to_next: int
    points_in_current_level: int


@dataclass(frozen=True, slots=True)
class LevelUpResult:
    leveled_up: bool
    previous_level: Level
    new_level: Level


def _level(level: int, min_points: int, *, de: str, en: str, sl: str) -> Level:
    return Level(level=level, min_points=min_points, names=(("de", de), ("en", en), ("sl", sl)))


LEVELS: tuple[Level, ...] = (
    _level(1, 0, de="Anfänger", en="Newcomer", sl="Začetnik"),
    _level(2, 1_000, de="Entdecker", en="Explorer", sl="Raziskovalec"),
    _level(3, 3_000, de="Wanderer", en="Wanderer", sl="Popotnik"),
    _level(4, 6_000, de="Pfadfinder", en="Pathfinder", sl="Izsledovalec"),
    _level(5, 10_000, de="Abenteurer", en="Adventurer", sl="Pustolovec"),
    _level(6, 16_000, de="Kartograph", en="Cartographer", sl="Kartograf"),
    _level(7, 24_000, de="Navigator", en="Navigator", sl="Navigator"),
    _level(8, 36_000, de="Globetrotter", en="Globetrotter", sl="Globetrotter"),
    _level(9, 50_000, de="Weltenbummler", en="World Traveler", sl="Svetovni popotnik"),
    _level(10, 70_000, de="Geograph", en="Geographer", sl="Geograf"),
    _level(11, 100_000, de="Expeditionsleiter", en="Expedition Leader", sl="Vodja ekspedicije"),
    _level(12, 140_000, de="Polarforscher", en="Polar Explorer", sl="Polarni raziskovalec"),
    _level(13, 200_000, de="Kosmopolit", en="Cosmopolitan", sl="Kozmopolit"),
    _level(14, 300_000, de="Weltenkenner", en="World Expert", sl="Svetovni strokovnjak"),
    _level(15, 400_000, de="Meisternavigator", en="Master Navigator", sl="Mojstrski navigator"),
    _level(16, 600_000, de="Geografie-Guru", en="Geography Guru", sl="Geografski guru"),
    _level(17, 900_000, de="Legendärer Entdecker", en="Legendary Explorer", sl="Legendarni raziskovalec"),
    _level(18, 1_300_000, de="Erdkundler", en="Earth Scholar", sl="Zemljepisec"),
    _level(19, 1_800_000, de="Weltenmeister", en="World Master", sl="Svetovni mojster"),
    _level(20, 2_400_000, de="GeoMaster", en="GeoMaster", sl="GeoMaster"),
)

_THRESHOLDS = tuple(level.min_points for level in LEVELS)


def level_for(total_points: int) -> Level:
    index = bisect_right(_THRESHOLDS, total_points) - 1
    return LEVELS[max(0, index)]


def level_progress(total_points: int) -> LevelProgress:
    current = level_for(total_points)
    points_in_level = max(0, total_points - current.min_points)
    if current.level == LEVELS[-1].level:
        return LevelProgress(
            current_level=current,
            next_level=None,
            progress=1.0,
            points_to_next=0,
            points_in_current_level=points_in_level,
        )

    next_level = LEVELS[current.level]
    span = next_level.min_points - current.min_points
    return LevelProgress(
        current_level=current,
        next_level=next_level,
        progress=min(points_in_level / span, 1.0),
        points_to_next=next_level.min_points - max(total_points, current.min_points),
        points_in_current_level=points_in_level,
    )


def check_level_up(previous_points: int, new_points: int) -> LevelUpResult:
    previous_level = level_for(previous_points)
    new_level = level_for(new_points)
    return LevelUpResult(
        leveled_up=new_level.level > previous_level.level,
        previous_level=previous_level,
        new_level=new_level,
    )


def level_name(level: Level, locale: str) -> str:
    return level.name(locale)
