from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from geomaster.db.models.base import Base


class DuelResult(Base):
    __tablename__ = "duel_results"
    __table_args__ = (
        CheckConstraint(
            "challenger_user_id != accepter_user_id",
            name="ck_duel_results_distinct_players",
        ),
        CheckConstraint(
            "winner_user_id IN (challenger_user_id, accepter_user_id)",
            name="ck_duel_results_winner_is_player",
        ),
        CheckConstraint("winner_points_delta >= 0", name="ck_duel_results_winner_delta_non_negative"),
        CheckConstraint("loser_points_delta >= 0", name="ck_duel_results_loser_delta_non_negative"),
        UniqueConstraint("accepter_session_id", name="uq_duel_results_accepter_session"),
        UniqueConstraint("duel_seed", "accepter_user_id", name="uq_duel_results_seed_accepter"),
        Index("idx_duel_results_type_created", "game_type", "created_at"),
        Index("idx_duel_results_challenger", "challenger_user_id", "created_at"),
        Index("idx_duel_results_accepter", "accepter_user_id", "created_at"),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    duel_seed: Mapped[str] = mapped_column(String(32), nullable=False)
    game_type: Mapped[str] = mapped_column(String(96), nullable=False)
    challenger_user_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("users.id"), nullable=False)
    challenger_session_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("game_sessions.id"),
        nullable=False,
    )
    challenger_score: Mapped[int] = mapped_column(Integer, nullable=False)
    challenger_time_seconds: Mapped[float] = mapped_column(Float, nullable=False)
    accepter_user_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("users.id"), nullable=False)
    accepter_session_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("game_sessions.id"),
        nullable=False,
    )
    accepter_score: Mapped[int] = mapped_column(Integer, nullable=False)
    accepter_time_seconds: Mapped[float] = mapped_column(Float, nullable=False)
    winner_user_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    winner_points_delta: Mapped[int] = mapped_column(Integer, nullable=False)
    loser_points_delta: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class DuelStats(Base):
    __tablename__ = "duel_stats"
    __table_args__ = (
        CheckConstraint("total_duels = wins + losses", name="ck_duel_stats_totals"),
        CheckConstraint("duel_points >= 0", name="ck_duel_stats_points_non_negative"),
        CheckConstraint("win_rate >= 0 AND win_rate <= 1", name="ck_duel_stats_win_rate_range"),
        UniqueConstraint("user_id", "game_type", name="uq_duel_stats_user_type"),
        Index("idx_duel_stats_board", "game_type", "duel_points"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("users.id"), nullable=False)
    game_type: Mapped[str] = mapped_column(String(96), nullable=False)
    total_duels: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    wins: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    losses: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    win_rate: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    duel_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
