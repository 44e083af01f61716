from geomaster.game.game_types.errors import (
    GameTypeError,
    GameTypeInactiveError,
    GameTypeNotRankableError,
    UnknownGameTypeError,
)
from geomaster.game.game_types.resolver import resolve_game_type, split_game_type
from geomaster.game.game_types.static import STATIC_GAME_TYPES
from geomaster.game.game_types.types import GameTypeConfig, GameTypeKind, LocationSource

__all__ = [
    "STATIC_GAME_TYPES",
    "GameTypeConfig",
    "GameTypeError",
    "GameTypeInactiveError",
    "GameTypeKind",
    "GameTypeNotRankableError",
    "LocationSource",
    "UnknownGameTypeError",
    "resolve_game_type",
    "split_game_type",
]
