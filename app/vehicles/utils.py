### app/vehicles/utils.py

import re
from typing import Any, Dict, Iterable, Mapping, Optional

from app.vehicles.schemas import VehicleCandidate

# Plate is the first parenthesized group: "Fleet's Jeep (OR #097NVA)"
LICENSE_PLATE_PATTERN = re.compile(r"\((.*?)\)")

VEHICLE_DESCRIPTION_COLUMN = "vehicle"
VEHICLE_NAME_COLUMN = "vehicle_name"


def extract_license_plate(description: Optional[str]) -> str:
    """
    Extract the license plate from a vehicle description.

    Returns an empty string when the description has no parenthesized part.
    """
    if not description:
        return ""
    match = LICENSE_PLATE_PATTERN.search(str(description))
    return match.group(1) if match else ""


def get_record_license_plate(record: Mapping[str, Any]) -> str:
    """License plate of a raw import record"""
    return extract_license_plate(record.get(VEHICLE_DESCRIPTION_COLUMN))


def collect_vehicle_candidates(records: Iterable[Mapping[str, Any]]) -> Dict[str, VehicleCandidate]:
    """
    Unique vehicles referenced by the records, keyed by plate.

    The first record seen for a plate decides its make/model. Records
    without a plate are left out; they fail later when trips are resolved.
    """
    candidates: Dict[str, VehicleCandidate] = {}
    for record in records:
        plate = get_record_license_plate(record)
        if not plate or plate in candidates:
            continue
        candidates[plate] = VehicleCandidate(
            license_plate=plate,
            make_model=str(record.get(VEHICLE_NAME_COLUMN) or ""),
        )
    return candidates
