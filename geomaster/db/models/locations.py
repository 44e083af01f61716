from __future__ import annotations

from uuid import UUID

from sqlalchemy import CheckConstraint, Float, Index, String
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from geomaster.db.models.base import Base

_LAT_RANGE = "latitude BETWEEN -90 AND 90"
_LNG_RANGE = "longitude BETWEEN -180 AND 180"


class Location(Base):
    """Country-bounded location, keyed by the country id of its game type."""

    __tablename__ = "locations"
    __table_args__ = (
        CheckConstraint(_LAT_RANGE, name="ck_locations_latitude_range"),
        CheckConstraint(_LNG_RANGE, name="ck_locations_longitude_range"),
        Index("idx_locations_country", "country_id"),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    country_id: Mapped[str] = mapped_column(String(64), nullable=False)
    name: Mapped[str] = mapped_column(String(160), nullable=False)
    name_de: Mapped[str | None] = mapped_column(String(160), nullable=True)
    name_en: Mapped[str | None] = mapped_column(String(160), nullable=True)
    name_sl: Mapped[str | None] = mapped_column(String(160), nullable=True)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)


class WorldLocation(Base):
    __tablename__ = "world_locations"
    __table_args__ = (
        CheckConstraint(_LAT_RANGE, name="ck_world_locations_latitude_range"),
        CheckConstraint(_LNG_RANGE, name="ck_world_locations_longitude_range"),
        Index("idx_world_locations_category", "category"),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    category: Mapped[str] = mapped_column(String(64), nullable=False)
    name: Mapped[str] = mapped_column(String(160), nullable=False)
    name_de: Mapped[str | None] = mapped_column(String(160), nullable=True)
    name_en: Mapped[str | None] = mapped_column(String(160), nullable=True)
    name_sl: Mapped[str | None] = mapped_column(String(160), nullable=True)
    country_code: Mapped[str | None] = mapped_column(String(2), nullable=True)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)


class PanoramaLocation(Base):
    __tablename__ = "panorama_locations"
    __table_args__ = (
        CheckConstraint(_LAT_RANGE, name="ck_panorama_locations_latitude_range"),
        CheckConstraint(_LNG_RANGE, name="ck_panorama_locations_longitude_range"),
        Index("idx_panorama_locations_category", "category"),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    category: Mapped[str] = mapped_column(String(64), nullable=False)
    name: Mapped[str] = mapped_column(String(160), nullable=False)
    name_de: Mapped[str | None] = mapped_column(String(160), nullable=True)
    name_en: Mapped[str | None] = mapped_column(String(160), nullable=True)
    name_sl: Mapped[str | None] = mapped_column(String(160), nullable=True)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    imagery_key: Mapped[str] = mapped_column(String(128), nullable=False)
    heading: Mapped[float | None] = mapped_column(Float, nullable=True)
    pitch: Mapped[float | None] = mapped_column(Float, nullable=True)
