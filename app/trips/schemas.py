# app/trips/schemas.py

"""
Pydantic schemas for the trips module
"""

from datetime import datetime
from enum import Enum as PyEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ImportStatus(str, PyEnum):
    """Outcome recorded on a trip import log"""
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


# === Trip Schemas ===

class TripFinancials(BaseModel):
    """Money fields derived from a raw export record."""
    total_discount: float = 0.0
    net_earned: float = 0.0
    turo_fee: float = 0.0
    operation_expense: float = 0.0
    gross_earned: float = 0.0


class TripCreate(TripFinancials):
    """Schema for creating a Trip."""
    trip_id: str
    vehicle_id: int

    trip_start: datetime
    trip_end: datetime

    distance_traveled: float = 0.0
    trip_days: int = 0

    trip_price: float = 0.0
    delivery_fee: float = 0.0
    excess_distance: float = 0.0
    additional_usage: float = 0.0
    late_fee: float = 0.0

    import_id: Optional[int] = None
    created_by: Optional[int] = None


# === Trip Import Log Schemas ===

class TripImportLogCreate(BaseModel):
    """Schema for creating a Trip Import Log."""
    file_name: str
    imported_by: str = "SYSTEM"
    import_start: datetime
    import_end: Optional[datetime] = None
    total_records: int = 0
    success_count: int = 0
    duplicate_count: int = 0
    skipped_count: int = 0
    vehicles_created: int = 0
    status: ImportStatus = ImportStatus.COMPLETED
    created_by: Optional[int] = None

    model_config = ConfigDict(use_enum_values=True, validate_default=True)


# === Upload Schemas ===

class TripUploadRequest(BaseModel):
    """CSV export sent as text, e.g. {"csvContent": "...", "fileName": "trips.csv"}."""
    csv_content: str
    file_name: str = Field(..., min_length=1)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TripUploadResult(BaseModel):
    """Result of a trip upload."""
    success: bool
    records_processed: int = 0
    message: Optional[str] = None
    import_id: Optional[int] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
