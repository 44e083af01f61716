from __future__ import annotations

from sqlalchemy import Boolean, CheckConstraint, Float, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from geomaster.db.models.base import Base


class Country(Base):
    __tablename__ = "countries"
    __table_args__ = (
        CheckConstraint("score_scale_factor > 0", name="ck_countries_scale_factor_positive"),
        CheckConstraint("timeout_penalty_km >= 0", name="ck_countries_timeout_penalty_non_negative"),
        CheckConstraint(
            "bounds_north > bounds_south AND bounds_east > bounds_west",
            name="ck_countries_bounds_order",
        ),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    name_en: Mapped[str | None] = mapped_column(String(128), nullable=True)
    name_sl: Mapped[str | None] = mapped_column(String(128), nullable=True)
    bounds_north: Mapped[float] = mapped_column(Float, nullable=False)
    bounds_south: Mapped[float] = mapped_column(Float, nullable=False)
    bounds_east: Mapped[float] = mapped_column(Float, nullable=False)
    bounds_west: Mapped[float] = mapped_column(Float, nullable=False)
    timeout_penalty_km: Mapped[float] = mapped_column(Float, nullable=False)
    score_scale_factor: Mapped[float] = mapped_column(Float, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("true"))


class WorldQuizType(Base):
    __tablename__ = "world_quiz_types"
    __table_args__ = (
        CheckConstraint("score_scale_factor > 0", name="ck_world_quiz_types_scale_factor_positive"),
        CheckConstraint(
            "timeout_penalty_km >= 0",
            name="ck_world_quiz_types_timeout_penalty_non_negative",
        ),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    name_en: Mapped[str | None] = mapped_column(String(128), nullable=True)
    name_sl: Mapped[str | None] = mapped_column(String(128), nullable=True)
    timeout_penalty_km: Mapped[float] = mapped_column(Float, nullable=False, server_default=text("5000"))
    score_scale_factor: Mapped[float] = mapped_column(Float, nullable=False, server_default=text("3000"))
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("true"))


class PanoramaType(Base):
    __tablename__ = "panorama_types"
    __table_args__ = (
        CheckConstraint("score_scale_factor > 0", name="ck_panorama_types_scale_factor_positive"),
        CheckConstraint(
            "timeout_penalty_km >= 0",
            name="ck_panorama_types_timeout_penalty_non_negative",
        ),
        CheckConstraint(
            "default_time_limit_seconds > 0",
            name="ck_panorama_types_time_limit_positive",
        ),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    name_en: Mapped[str | None] = mapped_column(String(128), nullable=True)
    name_sl: Mapped[str | None] = mapped_column(String(128), nullable=True)
    timeout_penalty_km: Mapped[float] = mapped_column(Float, nullable=False, server_default=text("5000"))
    score_scale_factor: Mapped[float] = mapped_column(Float, nullable=False, server_default=text("3000"))
    default_time_limit_seconds: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        server_default=text("60"),
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("true"))
