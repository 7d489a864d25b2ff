# app/trips/models.py

"""
SQLAlchemy 2.x models for the trips module.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    String, DateTime, Float, ForeignKey, Index,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.db import Base
from app.users.models import AuditMixin


class Trip(Base, AuditMixin):
    """
    Trip imported from the car-sharing platform export.

    Raw amounts are copied from the export; gross_earned, turo_fee,
    operation_expense and net_earned are derived at import time and
    gross_earned always equals net_earned + turo_fee + operation_expense.
    Trips are never updated after import.
    """
    __tablename__ = "trips"

    __table_args__ = (
        Index('idx_trip_vehicle_end', 'vehicle_id', 'trip_end'),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    trip_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    vehicle_id: Mapped[int] = mapped_column(
        ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False, index=True
    )

    trip_start: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    trip_end: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)

    distance_traveled: Mapped[float] = mapped_column(Float, default=0.0)
    trip_days: Mapped[int] = mapped_column(default=0)

    trip_price: Mapped[float] = mapped_column(Float, default=0.0)
    total_discount: Mapped[float] = mapped_column(Float, default=0.0)
    delivery_fee: Mapped[float] = mapped_column(Float, default=0.0)
    excess_distance: Mapped[float] = mapped_column(Float, default=0.0)
    additional_usage: Mapped[float] = mapped_column(Float, default=0.0)
    late_fee: Mapped[float] = mapped_column(Float, default=0.0)

    gross_earned: Mapped[float] = mapped_column(Float, default=0.0)
    turo_fee: Mapped[float] = mapped_column(Float, default=0.0)
    operation_expense: Mapped[float] = mapped_column(Float, default=0.0)
    net_earned: Mapped[float] = mapped_column(Float, default=0.0)

    import_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("trip_import_logs.id", ondelete="SET NULL"), nullable=True
    )

    vehicle: Mapped["Vehicle"] = relationship("Vehicle", back_populates="trips")
    import_log: Mapped[Optional["TripImportLog"]] = relationship("TripImportLog", back_populates="trips")

    def __repr__(self) -> str:
        return f"<Trip(id={self.id}, trip_id={self.trip_id}, vehicle_id={self.vehicle_id})>"


class TripImportLog(Base, AuditMixin):
    """
    One row per upload that stored trips (COMPLETED) or that failed
    (FAILED). Failed uploads store no trips, so their success_count is 0.
    """
    __tablename__ = "trip_import_logs"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    imported_by: Mapped[str] = mapped_column(String(255), default="SYSTEM")

    import_start: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(timezone.utc))
    import_end: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    total_records: Mapped[int] = mapped_column(default=0)
    success_count: Mapped[int] = mapped_column(default=0)
    duplicate_count: Mapped[int] = mapped_column(default=0)
    skipped_count: Mapped[int] = mapped_column(default=0)
    vehicles_created: Mapped[int] = mapped_column(default=0)

    status: Mapped[str] = mapped_column(String(32), default="COMPLETED", index=True)

    trips: Mapped[list["Trip"]] = relationship("Trip", back_populates="import_log")

    def __repr__(self) -> str:
        return f"<TripImportLog(id={self.id}, file_name={self.file_name}, records={self.success_count})>"
