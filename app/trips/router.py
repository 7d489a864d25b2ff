# app/trips/router.py

"""
FastAPI router for trip uploads.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from app.trips.exceptions import (
    GENERIC_IMPORT_FAILURE_MESSAGE, TripBaseException,
    TripFileValidationException, convert_to_http_exception,
)
from app.trips.schemas import TripUploadRequest, TripUploadResult
from app.trips.services import TripImportService
from app.users.models import User
from app.users.utils import get_current_user
from app.utils.file_utils import validate_file
from app.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter(tags=["Trips"], prefix="/trips")


async def run_upload(
    trip_service: TripImportService,
    csv_content: str,
    file_name: str,
    current_user: User,
) -> TripUploadResult:
    """Run an upload and map failures to HTTP errors"""
    try:
        result = await trip_service.upload_trips(
            csv_content=csv_content,
            file_name=file_name,
            imported_by=current_user.email_address or str(current_user.id),
            user_id=current_user.id,
        )

        logger.info(
            "Trip upload request completed",
            file_name=file_name,
            records_processed=result.records_processed,
        )
        return result

    except TripBaseException as e:
        logger.error("Trip upload failed", file_name=file_name, error=e.message)
        raise convert_to_http_exception(e) from e
    except Exception as e:
        logger.error("Unexpected error during trip upload", error=str(e), exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=GENERIC_IMPORT_FAILURE_MESSAGE
        ) from e


@router.post("/upload", response_model=TripUploadResult, status_code=status.HTTP_201_CREATED)
async def upload_trips(
    upload: TripUploadRequest,
    trip_service: TripImportService = Depends(),
    current_user: User = Depends(get_current_user),
):
    """
    Import trips from a CSV export sent as text.
    """
    logger.info("Trip upload request received", file_name=upload.file_name, user_id=current_user.id)
    return await run_upload(trip_service, upload.csv_content, upload.file_name, current_user)


@router.post("/upload-file", response_model=TripUploadResult, status_code=status.HTTP_201_CREATED)
async def upload_trips_file(
    file: Optional[UploadFile] = File(default=None),
    trip_service: TripImportService = Depends(),
    current_user: User = Depends(get_current_user),
):
    """
    Import trips from an uploaded CSV export file.
    """
    is_valid, error = validate_file(file)
    if not is_valid:
        logger.error("Invalid file", error_message=error)
        raise convert_to_http_exception(TripFileValidationException(error))

    logger.info("Trip file upload received", file_name=file.filename, user_id=current_user.id)

    content = await file.read()
    try:
        csv_content = content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        logger.error("Uploaded file is not UTF-8 text", file_name=file.filename, error=str(e))
        raise convert_to_http_exception(
            TripFileValidationException("File must be UTF-8 encoded CSV text.")
        ) from e

    return await run_upload(trip_service, csv_content, file.filename, current_user)
