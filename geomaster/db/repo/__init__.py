from geomaster.db.repo.duels_repo import DuelsRepo
from geomaster.db.repo.game_rounds_repo import GameRoundsRepo
from geomaster.db.repo.game_sessions_repo import GameSessionsRepo
from geomaster.db.repo.game_type_catalog_repo import GameTypeCatalogRepo
from geomaster.db.repo.guesses_repo import GuessesRepo
from geomaster.db.repo.locations_repo import LocationsRepo
from geomaster.db.repo.ranked_game_results_repo import RankedGameResultsRepo
from geomaster.db.repo.rankings_repo import RankingsRepo
from geomaster.db.repo.user_streaks_repo import UserStreaksRepo
from geomaster.db.repo.users_repo import UsersRepo

__all__ = [
    "DuelsRepo",
    "GameRoundsRepo",
    "GameSessionsRepo",
    "GameTypeCatalogRepo",
    "GuessesRepo",
    "LocationsRepo",
    "RankedGameResultsRepo",
    "RankingsRepo",
    "UserStreaksRepo",
    "UsersRepo",
]
