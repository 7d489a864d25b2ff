# app/vehicles/exceptions.py

"""
Custom exceptions for the vehicles module.

These never reach a client directly: the trip import wraps them in its
own generic failure.
"""


class VehicleBaseException(Exception):
    """Base exception for vehicles module"""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class VehicleNotFoundException(VehicleBaseException):
    """Raised when no vehicle matches a license plate"""
    def __init__(self, license_plate: str):
        self.license_plate = license_plate
        super().__init__(message=f"Vehicle not found for license plate: {license_plate}")


class VehicleCreateException(VehicleBaseException):
    """Raised when a vehicle cannot be stored"""
    def __init__(self, license_plate: str, message: str):
        self.license_plate = license_plate
        super().__init__(message=f"Failed to create vehicle {license_plate}: {message}")
