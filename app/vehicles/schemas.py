### app/vehicles/schemas.py

from typing import Optional

from pydantic import BaseModel


class VehicleCandidate(BaseModel):
    """A vehicle as described by an import record, before it is matched."""
    license_plate: str
    make_model: str = ""


class VehicleCreate(VehicleCandidate):
    """Schema for creating a vehicle."""
    created_by: Optional[int] = None


class VehicleReconciliationResult(BaseModel):
    """Plate to vehicle id mapping produced by a reconciliation run."""
    plate_mapping: dict[str, int]
    created_count: int = 0
