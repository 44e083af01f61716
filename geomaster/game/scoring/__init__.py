from geomaster.game.scoring.strategies import (
    CURRENT_SCORING_VERSION,
    SCORING_STRATEGIES,
    ScoringStrategy,
    get_strategy,
    score,
    time_multiplier,
)

__all__ = [
    "CURRENT_SCORING_VERSION",
    "SCORING_STRATEGIES",
    "ScoringStrategy",
    "get_strategy",
    "score",
    "time_multiplier",
]
