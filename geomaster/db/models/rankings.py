from __future__ import annotations

from datetime import datetime

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
from sqlalchemy.orm import Mapped, mapped_column

from geomaster.db.models.base import Base


class RankingEntry(Base):
    __tablename__ = "rankings"
    __table_args__ = (
        CheckConstraint(
            "period IN ('daily','weekly','monthly','alltime')",
            name="ck_rankings_period",
        ),
        CheckConstraint("total_games >= 1", name="ck_rankings_total_games_positive"),
        CheckConstraint("total_score >= 0", name="ck_rankings_total_score_non_negative"),
        CheckConstraint("best_score <= total_score", name="ck_rankings_best_within_total"),
        UniqueConstraint(
            "user_id",
            "game_type",
            "period",
            "period_key",
            name="uq_rankings_user_type_period_key",
        ),
        Index(
            "idx_rankings_board",
            "game_type",
            "period",
            "period_key",
            "best_score",
        ),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("users.id"), nullable=False)
    game_type: Mapped[str] = mapped_column(String(96), nullable=False)
    period: Mapped[str] = mapped_column(String(16), nullable=False)
    period_key: Mapped[str] = mapped_column(String(16), nullable=False)
    total_score: Mapped[int] = mapped_column(BigInteger, nullable=False)
    total_games: Mapped[int] = mapped_column(Integer, nullable=False)
    best_score: Mapped[int] = mapped_column(Integer, nullable=False)
    best_score_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    average_score: Mapped[float] = mapped_column(Float, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
