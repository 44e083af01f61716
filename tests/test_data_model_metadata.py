from __future__ import annotations

from sqlalchemy import CheckConstraint, UniqueConstraint

import geomaster.db.models  # noqa: F401
from geomaster.db.models.base import Base


def _check_names(table_name: str) -> set[str]:
    table = Base.metadata.tables[table_name]
    return {constraint.name for constraint in table.constraints if isinstance(constraint, CheckConstraint)}


def _index_names(table_name: str) -> set[str]:
    return {index.name for index in Base.metadata.tables[table_name].indexes}


def test_all_ranked_play_tables_registered() -> None:
    expected_tables = {
        "users",
        "countries",
        "world_quiz_types",
        "panorama_types",
        "locations",
        "world_locations",
        "panorama_locations",
        "game_sessions",
        "game_rounds",
        "guesses",
        "ranked_game_results",
        "rankings",
        "user_streaks",
        "duel_results",
        "duel_stats",
    }
    assert expected_tables.issubset(set(Base.metadata.tables))


def test_one_guess_per_player_and_round() -> None:
    guesses_indexes = _index_names("guesses")
    assert "uq_guesses_round_user" in guesses_indexes
    assert "uq_guesses_round_guest" in guesses_indexes
    assert "ck_guesses_single_identity" in _check_names("guesses")
    assert "ck_guesses_coordinates_present" in _check_names("guesses")


def test_session_constraints_present() -> None:
    checks = _check_names("game_sessions")
    assert "ck_game_sessions_single_identity" in checks
    assert "ck_game_sessions_duel_seed" in checks
    assert "ck_game_sessions_completed_at_consistency" in checks

    rounds = Base.metadata.tables["game_rounds"]
    round_uniques = {
        constraint.name for constraint in rounds.constraints if isinstance(constraint, UniqueConstraint)
    }
    assert "uq_game_rounds_session_round_location" in round_uniques


def test_completed_game_is_folded_once() -> None:
    results = Base.metadata.tables["ranked_game_results"]
    unique_columns = {
        tuple(column.name for column in constraint.columns)
        for constraint in results.constraints
        if isinstance(constraint, UniqueConstraint)
    }
    assert ("game_session_id",) in unique_columns
