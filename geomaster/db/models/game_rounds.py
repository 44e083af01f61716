from __future__ import annotations

from uuid import UUID

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, SmallInteger, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from geomaster.db.models.base import Base


class GameRound(Base):
    __tablename__ = "game_rounds"
    __table_args__ = (
        CheckConstraint(
            "location_source IN ('locations','world_locations','panorama_locations')",
            name="ck_game_rounds_location_source",
        ),
        CheckConstraint("round_number >= 1", name="ck_game_rounds_round_number_positive"),
        CheckConstraint("location_index >= 1", name="ck_game_rounds_location_index_positive"),
        UniqueConstraint(
            "game_session_id",
            "round_number",
            "location_index",
            name="uq_game_rounds_session_round_location",
        ),
        Index("idx_game_rounds_location", "location_source", "location_id"),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    game_session_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("game_sessions.id", ondelete="CASCADE"),
        nullable=False,
    )
    round_number: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    location_index: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    location_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), nullable=False)
    location_source: Mapped[str] = mapped_column(String(24), nullable=False)
    game_type: Mapped[str | None] = mapped_column(String(96), nullable=True)
    time_limit_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
