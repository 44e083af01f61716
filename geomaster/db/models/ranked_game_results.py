from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import BigInteger, CheckConstraint, DateTime, Float, ForeignKey, Index, Integer, String
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from geomaster.db.models.base import Base


class RankedGameResult(Base):
    __tablename__ = "ranked_game_results"
    __table_args__ = (
        CheckConstraint("total_score >= 0", name="ck_ranked_game_results_total_non_negative"),
        CheckConstraint("average_score >= 0", name="ck_ranked_game_results_average_non_negative"),
        Index("idx_ranked_game_results_user_completed", "user_id", "completed_at"),
        Index("idx_ranked_game_results_type_completed", "game_type", "completed_at"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    game_session_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("game_sessions.id"),
        unique=True,
        nullable=False,
    )
    user_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("users.id"), nullable=False)
    game_type: Mapped[str] = mapped_column(String(96), nullable=False)
    mode: Mapped[str] = mapped_column(String(16), nullable=False)
    total_score: Mapped[int] = mapped_column(Integer, nullable=False)
    average_score: Mapped[float] = mapped_column(Float, nullable=False)
    total_distance_km: Mapped[float] = mapped_column(Float, nullable=False)
    total_time_seconds: Mapped[float] = mapped_column(Float, nullable=False)
    completed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
