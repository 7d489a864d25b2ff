### app/vehicles/services.py

# Standard library imports
from typing import Any, Dict, Iterable, Mapping, Optional

# Third party imports
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

# Local imports
from app.core.db import get_async_db
from app.utils.logger import get_logger
from app.vehicles.exceptions import VehicleCreateException
from app.vehicles.repository import VehicleRepository
from app.vehicles.schemas import VehicleCreate, VehicleReconciliationResult
from app.vehicles.utils import collect_vehicle_candidates

logger = get_logger(__name__)


def get_vehicle_repository(db: AsyncSession = Depends(get_async_db)) -> VehicleRepository:
    """Get vehicle repository"""
    return VehicleRepository(db)


class VehicleReconciler:
    """
    Matches vehicles described by import records to stored vehicles by
    license plate and creates the ones that are missing.
    """

    def __init__(self, repo: VehicleRepository = Depends(get_vehicle_repository)):
        self.repo = repo

    async def reconcile(
        self,
        records: Iterable[Mapping[str, Any]],
        created_by: Optional[int] = None,
    ) -> VehicleReconciliationResult:
        """
        Build the plate -> vehicle id mapping for a batch of records.

        Stored vehicles are loaded once. Missing plates are worked out
        before anything is written, then created one at a time. Vehicles
        created here are committed and stay even if the import fails later.
        Existing vehicles are never updated, so a plate change is not picked
        up: the stale vehicle has to be deleted (its trips go with it) and
        the export ingested again.
        """
        candidates = collect_vehicle_candidates(records)

        stored_vehicles = await self.repo.get_all_vehicles()
        plate_mapping: Dict[str, int] = {
            vehicle.license_plate: vehicle.id for vehicle in stored_vehicles
        }

        missing = [
            candidate for plate, candidate in candidates.items()
            if plate not in plate_mapping
        ]
        logger.info(
            "Reconciling vehicles",
            referenced=len(candidates),
            stored=len(plate_mapping),
            missing=len(missing),
        )

        for candidate in missing:
            try:
                vehicle = await self.repo.create_vehicle(
                    VehicleCreate(
                        license_plate=candidate.license_plate,
                        make_model=candidate.make_model,
                        created_by=created_by,
                    )
                )
            except Exception as e:
                logger.error(
                    "Failed to create vehicle",
                    license_plate=candidate.license_plate,
                    error=str(e),
                )
                raise VehicleCreateException(candidate.license_plate, str(e)) from e
            plate_mapping[vehicle.license_plate] = vehicle.id

        return VehicleReconciliationResult(
            plate_mapping=plate_mapping,
            created_count=len(missing),
        )
