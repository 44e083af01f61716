from __future__ import annotations

from geomaster.game.duels.types import DuelOutcome, DuelRole

WIN_POINTS = 3
UPSET_BONUS_POINTS = 3
LOSS_POINTS = 0


def determine_winner(
    *,
    challenger_score: int,
    challenger_time: float,
    accepter_score: int,
    accepter_time: float,
) -> DuelRole:
    """Higher score wins, then the faster total time; a full tie goes to the challenger."""
    if challenger_score != accepter_score:
        return DuelRole.CHALLENGER if challenger_score > accepter_score else DuelRole.ACCEPTER
    if accepter_time < challenger_time:
        return DuelRole.ACCEPTER
    return DuelRole.CHALLENGER


def winner_points_delta(*, winner_points: int, loser_points: int) -> int:
    # Beating an opponent with at least as many points earns the bonus.
    if loser_points >= winner_points:
        return WIN_POINTS + UPSET_BONUS_POINTS
    return WIN_POINTS


def resolve_duel(
    *,
    challenger_score: int,
    challenger_time: float,
    challenger_points: int,
    accepter_score: int,
    accepter_time: float,
    accepter_points: int,
) -> DuelOutcome:
    winner = determine_winner(
        challenger_score=challenger_score,
        challenger_time=challenger_time,
        accepter_score=accepter_score,
        accepter_time=accepter_time,
    )
    if winner == DuelRole.CHALLENGER:
        delta = winner_points_delta(winner_points=challenger_points, loser_points=accepter_points)
    else:
        delta = winner_points_delta(winner_points=accepter_points, loser_points=challenger_points)
    return DuelOutcome(winner=winner, winner_points_delta=delta, loser_points_delta=LOSS_POINTS)


def win_rate(*, wins: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return wins / total
