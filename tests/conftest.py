import asyncio
import os
from contextlib import asynccontextmanager

# Settings are read at import time, so the test database must be set first
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")

import pandas as pd
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.db import init_models
from app.main import fleet_app as fast_api_app
from app.trips.repository import TripRepository
from app.trips.services import TripImportService
from app.users.models import User
from app.users.utils import get_current_user
from app.vehicles.repository import VehicleRepository
from app.vehicles.services import VehicleReconciler


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def session_scope():
    """
    Async context manager yielding a session on a fresh in-memory database.
    Each call builds its own engine so it can be used inside asyncio.run.
    """
    @asynccontextmanager
    async def _session_scope():
        engine = create_async_engine(
            TEST_DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        await init_models(engine)
        TestSessionLocal = async_sessionmaker(
            bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )
        try:
            async with TestSessionLocal() as session:
                yield session
        finally:
            await engine.dispose()

    return _session_scope


@pytest.fixture
def build_service():
    """Wire a TripImportService to a session the way FastAPI does"""
    def _build_service(session: AsyncSession) -> TripImportService:
        return TripImportService(
            repo=TripRepository(session),
            reconciler=VehicleReconciler(VehicleRepository(session)),
        )

    return _build_service


@pytest.fixture
def run():
    """Run a coroutine to completion"""
    return asyncio.run


@pytest.fixture
def trip_row():
    """Factory for one row of the platform export"""
    def _trip_row(**overrides) -> dict:
        row = {
            "reservation_id": "1001",
            "trip_status": "Completed",
            "vehicle": "Fleet's Jeep (OR #097NVA)",
            "vehicle_name": "Jeep Grand Cherokee L 2022",
            "trip_start": "2024-01-05 10:00",
            "trip_end": "2024-01-08 10:00",
            "distance_traveled": "250",
            "trip_days": "3",
            "trip_price": "$300.00",
            "delivery": "$20.00",
            "three_day_discount": "-$15.00",
            "early_bird_discount": "",
            "excess_distance": "",
            "additional_usage": "",
            "late_fee": "",
            "cleaning": "",
        }
        row.update(overrides)
        return row

    return _trip_row


@pytest.fixture
def make_csv():
    """Render export rows as CSV text"""
    def _make_csv(rows: list) -> str:
        return pd.DataFrame(rows).to_csv(index=False)

    return _make_csv


@pytest.fixture
def current_user():
    return User(id=1, email_address="admin@example.com", first_name="Fleet", last_name="Admin", is_active=True)


@pytest.fixture
def client(current_user):
    """TestClient with an authenticated caller"""
    fast_api_app.dependency_overrides[get_current_user] = lambda: current_user
    client = TestClient(fast_api_app)
    yield client
    fast_api_app.dependency_overrides.clear()
