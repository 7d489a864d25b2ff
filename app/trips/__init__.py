# app/trips/__init__.py

"""
Trips Module

This module handles trip data exported from the car-sharing platform:
- Parsing the platform's CSV export
- Skipping trips that are not completed or already imported
- Reconciling vehicles by license plate
- Deriving net earnings, platform fee and operation expense per trip
- Storing new trips in one batch

Architecture:
- Models: SQLAlchemy 2.x ORM models
- Repository: Data access layer with async database operations
- Services: Import workflow with dependency injection
- Financials: Pure functions deriving the money fields of a trip
- Router: FastAPI upload endpoints
- Utils: CSV parsing and value normalization
"""
