from geomaster.game.duels.service import (
    complete_duel,
    create_duel_session,
    get_duel_history,
    get_duel_leaderboard,
    get_duel_result,
    get_duel_stats,
)


class DuelService:
    create_duel_session = staticmethod(create_duel_session)
    complete_duel = staticmethod(complete_duel)
    get_duel_stats = staticmethod(get_duel_stats)
    get_duel_leaderboard = staticmethod(get_duel_leaderboard)
    get_duel_history = staticmethod(get_duel_history)
    get_duel_result = staticmethod(get_duel_result)


__all__ = ["DuelService"]
