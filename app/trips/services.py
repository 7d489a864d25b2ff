# app/trips/services.py

"""
Business logic layer for trip imports.
Turns a platform CSV export into stored trips with derived financials.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_async_db
from app.trips.exceptions import TripImportException
from app.trips.financials import derive_trip_financials
from app.trips.repository import TripRepository
from app.trips.schemas import ImportStatus, TripCreate, TripImportLogCreate, TripUploadResult
from app.trips.utils import (
    RESERVATION_ID_COLUMN, parse_trip_datetime, parse_trips_csv,
    select_new_records, to_int, to_number,
)
from app.vehicles.exceptions import VehicleNotFoundException
from app.vehicles.services import VehicleReconciler
from app.vehicles.utils import get_record_license_plate
from app.utils.logger import bind_upload_context, get_logger

logger = get_logger(__name__)

NO_NEW_RECORDS_MESSAGE = "No new records to process"


def get_trip_repository(db: AsyncSession = Depends(get_async_db)) -> TripRepository:
    """Get trip repository"""
    return TripRepository(db)


class TripImportService:
    """
    Business logic layer for trip imports.
    """

    def __init__(
        self,
        repo: TripRepository = Depends(get_trip_repository),
        reconciler: VehicleReconciler = Depends(),
    ):
        self.repo = repo
        self.reconciler = reconciler
        logger.debug("TripImportService initialized")

    async def upload_trips(
        self,
        csv_content: str,
        file_name: str,
        imported_by: str = "SYSTEM",
        user_id: Optional[int] = None,
    ) -> TripUploadResult:
        """
        Import trips from a platform CSV export.

        Only completed trips whose reservation id is not stored yet are
        imported, so uploading the same export again imports nothing.
        Trips are stored all-or-nothing. Vehicles created while matching
        plates are committed as they are created and are kept even when
        the import fails afterwards. A failed import stores no trips and
        leaves a FAILED import log.

        Args:
            csv_content: Raw CSV text of the export
            file_name: Name of the uploaded file, kept on the import log
            imported_by: User performing the import
            user_id: Id of that user, recorded as creator of new rows

        Returns:
            TripUploadResult: Number of trips stored

        Raises:
            TripImportException: If anything goes wrong. The cause is
                logged but not exposed.
        """
        import_start = datetime.now(timezone.utc)
        records: List[Dict[str, Any]] = []
        vehicles_created = 0

        with bind_upload_context(file_name=file_name, imported_by=imported_by):
            logger.info("Starting trip upload")

            try:
                # === Parse CSV ===
                records = parse_trips_csv(csv_content)

                # === Drop stored, repeated and non-completed trips ===
                stored_trip_ids = await self.repo.get_trip_ids()
                new_records, duplicate_count, skipped_count = select_new_records(
                    records, stored_trip_ids
                )
                logger.info(
                    "Selected new trips",
                    total=len(records),
                    new=len(new_records),
                    duplicates=duplicate_count,
                    not_completed=skipped_count,
                )

                if not new_records:
                    return TripUploadResult(
                        success=True,
                        records_processed=0,
                        message=NO_NEW_RECORDS_MESSAGE,
                    )

                # === Match or create vehicles ===
                reconciliation = await self.reconciler.reconcile(new_records, created_by=user_id)
                vehicles_created = reconciliation.created_count

                # === Resolve vehicles and derive financials ===
                trips_data = [
                    self.build_trip(record, reconciliation.plate_mapping, user_id)
                    for record in new_records
                ]

                # === Create import log ===
                import_log = await self.repo.create_import_log(
                    TripImportLogCreate(
                        file_name=file_name,
                        imported_by=imported_by,
                        import_start=import_start,
                        import_end=datetime.now(timezone.utc),
                        total_records=len(records),
                        success_count=len(trips_data),
                        duplicate_count=duplicate_count,
                        skipped_count=skipped_count,
                        vehicles_created=vehicles_created,
                        status=ImportStatus.COMPLETED,
                        created_by=user_id,
                    )
                )

                # === Bulk insert new trips ===
                created_trips = await self.repo.bulk_create_trips(
                    [trip.model_copy(update={"import_id": import_log.id}) for trip in trips_data]
                )

                # === Commit transaction ===
                await self.repo.db.commit()

                logger.info(
                    "Trip upload completed",
                    log_id=import_log.id,
                    inserted=len(created_trips),
                    vehicles_created=vehicles_created,
                )

                return TripUploadResult(
                    success=True,
                    records_processed=len(created_trips),
                    message=f"Imported {len(created_trips)} trips from {file_name}",
                    import_id=import_log.id,
                )

            except Exception as e:
                logger.error("Trip upload failed", error=str(e), exc_info=True)
                await self.repo.db.rollback()
                await self.record_failed_import(
                    TripImportLogCreate(
                        file_name=file_name,
                        imported_by=imported_by,
                        import_start=import_start,
                        import_end=datetime.now(timezone.utc),
                        total_records=len(records),
                        vehicles_created=vehicles_created,
                        status=ImportStatus.FAILED,
                        created_by=user_id,
                    )
                )
                raise TripImportException() from e

    # === Helper Functions ===

    async def record_failed_import(self, log_data: TripImportLogCreate) -> None:
        """
        Store the log of a failed upload in its own transaction.

        Runs after the upload was rolled back. A failure here is logged and
        does not replace the upload's own error.
        """
        try:
            import_log = await self.repo.create_import_log(log_data)
            await self.repo.db.commit()
            logger.info("Failed upload recorded", log_id=import_log.id)
        except Exception as e:
            logger.error("Could not record failed upload", error=str(e), exc_info=True)
            await self.repo.db.rollback()

    def build_trip(
        self,
        record: Mapping[str, Any],
        plate_mapping: Dict[str, int],
        user_id: Optional[int] = None,
    ) -> TripCreate:
        """
        Map one export record to a trip.

        Raises:
            VehicleNotFoundException: If the record's plate has no vehicle
        """
        license_plate = get_record_license_plate(record)
        vehicle_id = plate_mapping.get(license_plate)
        if vehicle_id is None:
            raise VehicleNotFoundException(license_plate)

        financials = derive_trip_financials(record)

        return TripCreate(
            trip_id=record.get(RESERVATION_ID_COLUMN),
            vehicle_id=vehicle_id,
            trip_start=parse_trip_datetime(record.get("trip_start")),
            trip_end=parse_trip_datetime(record.get("trip_end")),
            distance_traveled=to_number(record.get("distance_traveled")),
            trip_days=to_int(record.get("trip_days")),
            trip_price=to_number(record.get("trip_price")),
            delivery_fee=to_number(record.get("delivery")),
            excess_distance=to_number(record.get("excess_distance")),
            additional_usage=to_number(record.get("additional_usage")),
            late_fee=to_number(record.get("late_fee")),
            created_by=user_id,
            **financials.model_dump(),
        )
