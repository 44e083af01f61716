"""ranked_play_core_schema

Revision ID: 5c1e2a7d9b30
Revises:
Create Date: 2026-10-18 09:00:00.000000
"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "5c1e2a7d9b30"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None

LAT_RANGE = "latitude BETWEEN -90 AND 90"
LNG_RANGE = "longitude BETWEEN -180 AND 180"


def _location_name_columns() -> list[sa.Column]:
    return [
        sa.Column("name", sa.String(160), nullable=False),
        sa.Column("name_de", sa.String(160), nullable=True),
        sa.Column("name_en", sa.String(160), nullable=True),
        sa.Column("name_sl", sa.String(160), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("display_name", sa.String(64), nullable=True),
        sa.Column("locale", sa.String(8), nullable=False, server_default=sa.text("'de'")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )
    op.create_index("idx_users_created_at", "users", ["created_at"])

    op.create_table(
        "countries",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("name_en", sa.String(128), nullable=True),
        sa.Column("name_sl", sa.String(128), nullable=True),
        sa.Column("bounds_north", sa.Float(), nullable=False),
        sa.Column("bounds_south", sa.Float(), nullable=False),
        sa.Column("bounds_east", sa.Float(), nullable=False),
        sa.Column("bounds_west", sa.Float(), nullable=False),
        sa.Column("timeout_penalty_km", sa.Float(), nullable=False),
        sa.Column("score_scale_factor", sa.Float(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.CheckConstraint("score_scale_factor > 0", name="ck_countries_scale_factor_positive"),
        sa.CheckConstraint("timeout_penalty_km >= 0", name="ck_countries_timeout_penalty_non_negative"),
        sa.CheckConstraint(
            "bounds_north > bounds_south AND bounds_east > bounds_west",
            name="ck_countries_bounds_order",
        ),
    )

    for table_name, extra_columns, extra_checks in (
        ("world_quiz_types", [], []),
        (
            "panorama_types",
            [
                sa.Column(
                    "default_time_limit_seconds",
                    sa.Integer(),
                    nullable=False,
                    server_default=sa.text("60"),
                )
            ],
            [sa.CheckConstraint("default_time_limit_seconds > 0", name="ck_panorama_types_time_limit_positive")],
        ),
    ):
        op.create_table(
            table_name,
            sa.Column("id", sa.String(64), primary_key=True),
            sa.Column("name", sa.String(128), nullable=False),
            sa.Column("name_en", sa.String(128), nullable=True),
            sa.Column("name_sl", sa.String(128), nullable=True),
            sa.Column("timeout_penalty_km", sa.Float(), nullable=False, server_default=sa.text("5000")),
            sa.Column("score_scale_factor", sa.Float(), nullable=False, server_default=sa.text("3000")),
            *extra_columns,
            sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
            sa.CheckConstraint("score_scale_factor > 0", name=f"ck_{table_name}_scale_factor_positive"),
            sa.CheckConstraint("timeout_penalty_km >= 0", name=f"ck_{table_name}_timeout_penalty_non_negative"),
            *extra_checks,
        )

    op.create_table(
        "locations",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("country_id", sa.String(64), nullable=False),
        *_location_name_columns(),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.CheckConstraint(LAT_RANGE, name="ck_locations_latitude_range"),
        sa.CheckConstraint(LNG_RANGE, name="ck_locations_longitude_range"),
    )
    op.create_index("idx_locations_country", "locations", ["country_id"])

    op.create_table(
        "world_locations",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("category", sa.String(64), nullable=False),
        *_location_name_columns(),
        sa.Column("country_code", sa.String(2), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.CheckConstraint(LAT_RANGE, name="ck_world_locations_latitude_range"),
        sa.CheckConstraint(LNG_RANGE, name="ck_world_locations_longitude_range"),
    )
    op.create_index("idx_world_locations_category", "world_locations", ["category"])

    op.create_table(
        "panorama_locations",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("category", sa.String(64), nullable=False),
        *_location_name_columns(),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("imagery_key", sa.String(128), nullable=False),
        sa.Column("heading", sa.Float(), nullable=True),
        sa.Column("pitch", sa.Float(), nullable=True),
        sa.CheckConstraint(LAT_RANGE, name="ck_panorama_locations_latitude_range"),
        sa.CheckConstraint(LNG_RANGE, name="ck_panorama_locations_longitude_range"),
    )
    op.create_index("idx_panorama_locations_category", "panorama_locations", ["category"])

    op.create_table(
        "game_sessions",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", sa.BigInteger(), nullable=True),
        sa.Column("guest_id", sa.String(64), nullable=True),
        sa.Column("mode", sa.String(16), nullable=False),
        sa.Column("game_type", sa.String(96), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("scoring_version", sa.SmallInteger(), nullable=False),
        sa.Column("locations_per_game", sa.SmallInteger(), nullable=False),
        sa.Column("time_limit_seconds", sa.Integer(), nullable=True),
        sa.Column("active_location_index", sa.SmallInteger(), nullable=False),
        sa.Column("location_started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("duel_seed", sa.String(32), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("mode IN ('solo','group','ranked','duel')", name="ck_game_sessions_mode"),
        sa.CheckConstraint("status IN ('active','completed')", name="ck_game_sessions_status"),
        sa.CheckConstraint("(user_id IS NULL) <> (guest_id IS NULL)", name="ck_game_sessions_single_identity"),
        sa.CheckConstraint(
            "mode != 'duel' OR (duel_seed IS NOT NULL AND user_id IS NOT NULL)",
            name="ck_game_sessions_duel_seed",
        ),
        sa.CheckConstraint("scoring_version >= 1", name="ck_game_sessions_scoring_version_positive"),
        sa.CheckConstraint("locations_per_game >= 1", name="ck_game_sessions_locations_positive"),
        sa.CheckConstraint(
            "active_location_index >= 0 AND active_location_index <= locations_per_game",
            name="ck_game_sessions_active_location_range",
        ),
        sa.CheckConstraint(
            "(status = 'completed') = (completed_at IS NOT NULL)",
            name="ck_game_sessions_completed_at_consistency",
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
    )
    op.create_index("idx_game_sessions_user_created", "game_sessions", ["user_id", "created_at"])
    op.create_index("idx_game_sessions_guest_created", "game_sessions", ["guest_id", "created_at"])
    op.create_index("idx_game_sessions_duel_seed", "game_sessions", ["duel_seed"])
    op.create_index("idx_game_sessions_type_status", "game_sessions", ["game_type", "status"])

    op.create_table(
        "game_rounds",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("game_session_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("round_number", sa.SmallInteger(), nullable=False),
        sa.Column("location_index", sa.SmallInteger(), nullable=False),
        sa.Column("location_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("location_source", sa.String(24), nullable=False),
        sa.Column("game_type", sa.String(96), nullable=True),
        sa.Column("time_limit_seconds", sa.Integer(), nullable=True),
        sa.CheckConstraint(
            "location_source IN ('locations','world_locations','panorama_locations')",
            name="ck_game_rounds_location_source",
        ),
        sa.CheckConstraint("round_number >= 1", name="ck_game_rounds_round_number_positive"),
        sa.CheckConstraint("location_index >= 1", name="ck_game_rounds_location_index_positive"),
        sa.ForeignKeyConstraint(["game_session_id"], ["game_sessions.id"], ondelete="CASCADE"),
        sa.UniqueConstraint(
            "game_session_id",
            "round_number",
            "location_index",
            name="uq_game_rounds_session_round_location",
        ),
    )
    op.create_index("idx_game_rounds_location", "game_rounds", ["location_source", "location_id"])

    op.create_table(
        "guesses",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("game_round_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=True),
        sa.Column("guest_id", sa.String(64), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("distance_km", sa.Float(), nullable=False),
        sa.Column("time_seconds", sa.Float(), nullable=True),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("is_timeout", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("(user_id IS NULL) <> (guest_id IS NULL)", name="ck_guesses_single_identity"),
        sa.CheckConstraint("distance_km >= 0", name="ck_guesses_distance_non_negative"),
        sa.CheckConstraint("score >= 0", name="ck_guesses_score_non_negative"),
        sa.CheckConstraint("time_seconds IS NULL OR time_seconds >= 0", name="ck_guesses_time_non_negative"),
        sa.CheckConstraint(
            "is_timeout OR (latitude IS NOT NULL AND longitude IS NOT NULL)",
            name="ck_guesses_coordinates_present",
        ),
        sa.ForeignKeyConstraint(["game_round_id"], ["game_rounds.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
    )
    op.create_index(
        "uq_guesses_round_user",
        "guesses",
        ["game_round_id", "user_id"],
        unique=True,
        postgresql_where=sa.text("user_id IS NOT NULL"),
    )
    op.create_index(
        "uq_guesses_round_guest",
        "guesses",
        ["game_round_id", "guest_id"],
        unique=True,
        postgresql_where=sa.text("guest_id IS NOT NULL"),
    )
    op.create_index("idx_guesses_user_created", "guesses", ["user_id", "created_at"])

    op.create_table(
        "ranked_game_results",
        sa.Column("id", sa.BigInteger(), sa.Identity(), primary_key=True),
        sa.Column("game_session_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("game_type", sa.String(96), nullable=False),
        sa.Column("mode", sa.String(16), nullable=False),
        sa.Column("total_score", sa.Integer(), nullable=False),
        sa.Column("average_score", sa.Float(), nullable=False),
        sa.Column("total_distance_km", sa.Float(), nullable=False),
        sa.Column("total_time_seconds", sa.Float(), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("total_score >= 0", name="ck_ranked_game_results_total_non_negative"),
        sa.CheckConstraint("average_score >= 0", name="ck_ranked_game_results_average_non_negative"),
        sa.ForeignKeyConstraint(["game_session_id"], ["game_sessions.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.UniqueConstraint("game_session_id", name="uq_ranked_game_results_game_session_id"),
    )
    op.create_index(
        "idx_ranked_game_results_user_completed",
        "ranked_game_results",
        ["user_id", "completed_at"],
    )
    op.create_index(
        "idx_ranked_game_results_type_completed",
        "ranked_game_results",
        ["game_type", "completed_at"],
    )

    op.create_table(
        "rankings",
        sa.Column("id", sa.BigInteger(), sa.Identity(), primary_key=True),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("game_type", sa.String(96), nullable=False),
        sa.Column("period", sa.String(16), nullable=False),
        sa.Column("period_key", sa.String(16), nullable=False),
        sa.Column("total_score", sa.BigInteger(), nullable=False),
        sa.Column("total_games", sa.Integer(), nullable=False),
        sa.Column("best_score", sa.Integer(), nullable=False),
        sa.Column("best_score_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("average_score", sa.Float(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("period IN ('daily','weekly','monthly','alltime')", name="ck_rankings_period"),
        sa.CheckConstraint("total_games >= 1", name="ck_rankings_total_games_positive"),
        sa.CheckConstraint("total_score >= 0", name="ck_rankings_total_score_non_negative"),
        sa.CheckConstraint("best_score <= total_score", name="ck_rankings_best_within_total"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.UniqueConstraint(
            "user_id",
            "game_type",
            "period",
            "period_key",
            name="uq_rankings_user_type_period_key",
        ),
    )
    op.create_index("idx_rankings_board", "rankings", ["game_type", "period", "period_key", "best_score"])

    op.create_table(
        "duel_results",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("duel_seed", sa.String(32), nullable=False),
        sa.Column("game_type", sa.String(96), nullable=False),
        sa.Column("challenger_user_id", sa.BigInteger(), nullable=False),
        sa.Column("challenger_session_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("challenger_score", sa.Integer(), nullable=False),
        sa.Column("challenger_time_seconds", sa.Float(), nullable=False),
        sa.Column("accepter_user_id", sa.BigInteger(), nullable=False),
        sa.Column("accepter_session_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("accepter_score", sa.Integer(), nullable=False),
        sa.Column("accepter_time_seconds", sa.Float(), nullable=False),
        sa.Column("winner_user_id", sa.BigInteger(), nullable=False),
        sa.Column("winner_points_delta", sa.Integer(), nullable=False),
        sa.Column("loser_points_delta", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("challenger_user_id != accepter_user_id", name="ck_duel_results_distinct_players"),
        sa.CheckConstraint(
            "winner_user_id IN (challenger_user_id, accepter_user_id)",
            name="ck_duel_results_winner_is_player",
        ),
        sa.CheckConstraint("winner_points_delta >= 0", name="ck_duel_results_winner_delta_non_negative"),
        sa.CheckConstraint("loser_points_delta >= 0", name="ck_duel_results_loser_delta_non_negative"),
        sa.ForeignKeyConstraint(["challenger_user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["accepter_user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["challenger_session_id"], ["game_sessions.id"]),
        sa.ForeignKeyConstraint(["accepter_session_id"], ["game_sessions.id"]),
        sa.UniqueConstraint("accepter_session_id", name="uq_duel_results_accepter_session"),
        sa.UniqueConstraint("duel_seed", "accepter_user_id", name="uq_duel_results_seed_accepter"),
    )
    op.create_index("idx_duel_results_type_created", "duel_results", ["game_type", "created_at"])
    op.create_index("idx_duel_results_challenger", "duel_results", ["challenger_user_id", "created_at"])
    op.create_index("idx_duel_results_accepter", "duel_results", ["accepter_user_id", "created_at"])

    op.create_table(
        "duel_stats",
        sa.Column("id", sa.BigInteger(), sa.Identity(), primary_key=True),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("game_type", sa.String(96), nullable=False),
        sa.Column("total_duels", sa.Integer(), nullable=False),
        sa.Column("wins", sa.Integer(), nullable=False),
        sa.Column("losses", sa.Integer(), nullable=False),
        sa.Column("win_rate", sa.Float(), nullable=False),
        sa.Column("duel_points", sa.Integer(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("total_duels = wins + losses", name="ck_duel_stats_totals"),
        sa.CheckConstraint("duel_points >= 0", name="ck_duel_stats_points_non_negative"),
        sa.CheckConstraint("win_rate >= 0 AND win_rate <= 1", name="ck_duel_stats_win_rate_range"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.UniqueConstraint("user_id", "game_type", name="uq_duel_stats_user_type"),
    )
    op.create_index("idx_duel_stats_board", "duel_stats", ["game_type", "duel_points"])

    op.create_table(
        "user_streaks",
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("current_streak", sa.Integer(), nullable=False),
        sa.Column("longest_streak", sa.Integer(), nullable=False),
        sa.Column("last_played_date", sa.Date(), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("current_streak >= 0", name="ck_user_streaks_current_non_negative"),
        sa.CheckConstraint("longest_streak >= current_streak", name="ck_user_streaks_longest_covers_current"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("user_id"),
    )
    op.create_index("idx_user_streaks_last_played", "user_streaks", ["last_played_date"])


def downgrade() -> None:
    for table_name in (
        "user_streaks",
        "duel_stats",
        "duel_results",
        "rankings",
        "ranked_game_results",
        "guesses",
        "game_rounds",
        "game_sessions",
        "panorama_locations",
        "world_locations",
        "locations",
        "panorama_types",
        "world_quiz_types",
        "countries",
        "users",
    ):
        op.drop_table(table_name)
