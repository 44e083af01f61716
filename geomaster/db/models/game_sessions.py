from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import BigInteger, CheckConstraint, DateTime, ForeignKey, Index, Integer, SmallInteger, String
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from geomaster.db.models.base import Base


class GameSession(Base):
    __tablename__ = "game_sessions"
    __table_args__ = (
        CheckConstraint(
            "mode IN ('solo','group','ranked','duel')",
            name="ck_game_sessions_mode",
        ),
        CheckConstraint(
            "status IN ('active','completed')",
            name="ck_game_sessions_status",
        ),
        CheckConstraint(
            "(user_id IS NULL) <> (guest_id IS NULL)",
            name="ck_game_sessions_single_identity",
        ),
        CheckConstraint(
            "mode != 'duel' OR (duel_seed IS NOT NULL AND user_id IS NOT NULL)",
            name="ck_game_sessions_duel_seed",
        ),
        CheckConstraint("scoring_version >= 1", name="ck_game_sessions_scoring_version_positive"),
        CheckConstraint("locations_per_game >= 1", name="ck_game_sessions_locations_positive"),
        CheckConstraint(
            "active_location_index >= 0 AND active_location_index <= locations_per_game",
            name="ck_game_sessions_active_location_range",
        ),
        CheckConstraint(
            "(status = 'completed') = (completed_at IS NOT NULL)",
            name="ck_game_sessions_completed_at_consistency",
        ),
        Index("idx_game_sessions_user_created", "user_id", "created_at"),
        Index("idx_game_sessions_guest_created", "guest_id", "created_at"),
        Index("idx_game_sessions_duel_seed", "duel_seed"),
        Index("idx_game_sessions_type_status", "game_type", "status"),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    user_id: Mapped[int | None] = mapped_column(BigInteger, ForeignKey("users.id"), nullable=True)
    guest_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    mode: Mapped[str] = mapped_column(String(16), nullable=False)
    game_type: Mapped[str] = mapped_column(String(96), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    scoring_version: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    locations_per_game: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    time_limit_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    active_location_index: Mapped[int] = mapped_column(SmallInteger, nullable=False, default=0)
    location_started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    duel_seed: Mapped[str | None] = mapped_column(String(32), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
