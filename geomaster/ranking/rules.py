from __future__ import annotations

from collections.abc import Iterable

from geomaster.ranking.periods import OVERALL_GAME_TYPE, period_keys_at
from geomaster.ranking.types import CompletedGame, RankingAggregate, RankingKey


def ranking_keys_for(game: CompletedGame, *, timezone_name: str) -> list[RankingKey]:
    keys: list[RankingKey] = []
    for period, key in period_keys_at(game.completed_at, timezone_name=timezone_name).items():
        for game_type in (game.game_type, OVERALL_GAME_TYPE):
            keys.append(
                RankingKey(user_id=game.user_id, game_type=game_type, period=period, period_key=key)
            )
    return keys


def fold(aggregate: RankingAggregate | None, game: CompletedGame) -> RankingAggregate:
    """Adds one completed game to an aggregate; every field is order-independent."""
    if aggregate is None:
        return RankingAggregate(
            total_score=game.total_score,
            total_games=1,
            best_score=game.total_score,
            best_score_at=game.completed_at,
            average_score=float(game.total_score),
            updated_at=game.completed_at,
        )

    total_score = aggregate.total_score + game.total_score
    total_games = aggregate.total_games + 1
    if game.total_score > aggregate.best_score:
        best_score, best_score_at = game.total_score, game.completed_at
    elif game.total_score == aggregate.best_score:
        best_score, best_score_at = aggregate.best_score, min(aggregate.best_score_at, game.completed_at)
    else:
        best_score, best_score_at = aggregate.best_score, aggregate.best_score_at

    return RankingAggregate(
        total_score=total_score,
        total_games=total_games,
        best_score=best_score,
        best_score_at=best_score_at,
        average_score=total_score / total_games,
        updated_at=max(aggregate.updated_at, game.completed_at),
    )


def aggregate_games(
    games: Iterable[CompletedGame],
    *,
    timezone_name: str,
) -> dict[RankingKey, RankingAggregate]:
    aggregates: dict[RankingKey, RankingAggregate] = {}
    for game in games:
        for key in ranking_keys_for(game, timezone_name=timezone_name):
            aggregates[key] = fold(aggregates.get(key), game)
    return aggregates
