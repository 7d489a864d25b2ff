# app/trips/repository.py

"""
Data Access Layer for the trips module using async SQLAlchemy 2.x
"""

from typing import List, Set

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.trips.models import Trip, TripImportLog
from app.trips.schemas import TripCreate, TripImportLogCreate
from app.utils.logger import get_logger

logger = get_logger(__name__)


class TripRepository:
    """
    Data Access Layer for trip operations.
    Handles all database interactions using async SQLAlchemy 2.x
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        logger.debug("TripRepository initialized", session_id=id(db))

    # === Trip Operations ===

    async def get_trip_ids(self) -> Set[str]:
        """External reservation ids of every stored trip"""
        result = await self.db.execute(select(Trip.trip_id))
        trip_ids = {row[0] for row in result.all()}

        logger.debug("Retrieved stored trip ids", count=len(trip_ids))
        return trip_ids

    async def bulk_create_trips(self, trips_data: List[TripCreate]) -> List[Trip]:
        """Bulk create trips in a single flush"""
        logger.debug("Bulk creating trips", count=len(trips_data))

        trips = [Trip(**trip_data.model_dump()) for trip_data in trips_data]
        self.db.add_all(trips)
        await self.db.flush()

        logger.info("Trips bulk created", count=len(trips))
        return trips

    # === Import Log Operations ===

    async def create_import_log(self, log_data: TripImportLogCreate) -> TripImportLog:
        """Create a new import log"""
        logger.debug("Creating import log", file_name=log_data.file_name)

        log = TripImportLog(**log_data.model_dump())
        self.db.add(log)
        await self.db.flush()
        await self.db.refresh(log)

        logger.info("Import log created", log_id=log.id)
        return log
