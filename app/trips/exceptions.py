# app/trips/exceptions.py

"""
Custom exceptions for the trips module.
"""

from fastapi import HTTPException, status

GENERIC_IMPORT_FAILURE_MESSAGE = "Failed to process CSV file"


class TripBaseException(Exception):
    """Base exception for trips module"""
    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class TripCSVParseException(TripBaseException):
    """
    Raised when the uploaded CSV cannot be parsed.
    Internal only: the import service wraps it in TripImportException.
    """
    def __init__(self, message: str):
        super().__init__(message=f"CSV parsing failed: {message}")


class TripFileValidationException(TripBaseException):
    """Raised when an uploaded file is rejected before parsing"""
    def __init__(self, message: str):
        super().__init__(
            message=f"File validation failed: {message}",
            status_code=status.HTTP_400_BAD_REQUEST
        )


class TripImportException(TripBaseException):
    """
    Raised when an import fails for any reason.
    The message is generic; the cause is only logged.
    """
    def __init__(self, message: str = GENERIC_IMPORT_FAILURE_MESSAGE):
        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


def convert_to_http_exception(exc: TripBaseException) -> HTTPException:
    """Convert custom exception to HTTPException"""
    return HTTPException(
        status_code=exc.status_code,
        detail=exc.message
    )
