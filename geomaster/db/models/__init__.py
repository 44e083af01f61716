from geomaster.db.models.duels import DuelResult, DuelStats
from geomaster.db.models.game_rounds import GameRound
from geomaster.db.models.game_sessions import GameSession
from geomaster.db.models.game_type_catalog import Country, PanoramaType, WorldQuizType
from geomaster.db.models.guesses import Guess
from geomaster.db.models.locations import Location, PanoramaLocation, WorldLocation
from geomaster.db.models.ranked_game_results import RankedGameResult
from geomaster.db.models.rankings import RankingEntry
from geomaster.db.models.user_streaks import UserStreak
from geomaster.db.models.users import User

__all__ = [
    "Country",
    "DuelResult",
    "DuelStats",
    "GameRound",
    "GameSession",
    "Guess",
    "Location",
    "PanoramaLocation",
    "PanoramaType",
    "RankedGameResult",
    "RankingEntry",
    "User",
    "UserStreak",
    "WorldLocation",
    "WorldQuizType",
]
