# app/vehicles/repository.py

"""
Data Access Layer for vehicles using async SQLAlchemy 2.x
"""

from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.vehicles.models import Vehicle
from app.vehicles.schemas import VehicleCreate
from app.utils.logger import get_logger

logger = get_logger(__name__)


class VehicleRepository:
    """
    Data Access Layer for vehicle operations.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_all_vehicles(self) -> List[Vehicle]:
        """Fetch every stored vehicle"""
        result = await self.db.execute(select(Vehicle))
        vehicles = result.scalars().all()

        logger.debug("Retrieved vehicles", count=len(vehicles))
        return list(vehicles)

    async def create_vehicle(self, vehicle_data: VehicleCreate) -> Vehicle:
        """
        Create a vehicle and commit it right away.

        Vehicles are committed on their own so that they survive a later
        failure of the import that created them.
        """
        logger.debug("Creating vehicle", license_plate=vehicle_data.license_plate)

        vehicle = Vehicle(**vehicle_data.model_dump())
        self.db.add(vehicle)
        await self.db.commit()
        await self.db.refresh(vehicle)

        logger.info("Vehicle created", vehicle_id=vehicle.id, license_plate=vehicle.license_plate)
        return vehicle
