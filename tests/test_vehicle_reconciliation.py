import pytest
from sqlalchemy import select

from app.vehicles.models import Vehicle
from app.vehicles.repository import VehicleRepository
from app.vehicles.services import VehicleReconciler
from app.vehicles.utils import collect_vehicle_candidates, extract_license_plate


@pytest.mark.parametrize("description, expected", [
    ("Fleet's Jeep (OR #097NVA)", "OR #097NVA"),
    ("Tesla Model 3 (WA BXY1234) (second)", "WA BXY1234"),
    ("Toyota Corolla", ""),
    ("Broken (", ""),
    ("", ""),
    (None, ""),
])
def test_extract_license_plate(description, expected):
    assert extract_license_plate(description) == expected


def test_collect_vehicle_candidates_first_record_wins():
    records = [
        {"vehicle": "Jeep (OR 111)", "vehicle_name": "Jeep Grand Cherokee L 2022"},
        {"vehicle": "Jeep again (OR 111)", "vehicle_name": "Jeep Grand Cherokee 2022"},
        {"vehicle": "No plate here", "vehicle_name": "Mystery"},
        {"vehicle": "Mazda (OR 222)", "vehicle_name": "Mazda CX-5 2021"},
    ]

    candidates = collect_vehicle_candidates(records)

    assert list(candidates) == ["OR 111", "OR 222"]
    assert candidates["OR 111"].make_model == "Jeep Grand Cherokee L 2022"


def test_reconcile_creates_only_missing_vehicles(session_scope, run):
    async def scenario():
        async with session_scope() as session:
            session.add(Vehicle(license_plate="OR 111", make_model="Stored Jeep"))
            await session.commit()

            reconciler = VehicleReconciler(VehicleRepository(session))
            result = await reconciler.reconcile(
                [
                    {"vehicle": "Jeep (OR 111)", "vehicle_name": "Renamed Jeep"},
                    {"vehicle": "Mazda (OR 222)", "vehicle_name": "Mazda CX-5 2021"},
                    {"vehicle": "Mazda (OR 222)", "vehicle_name": "Mazda CX-5"},
                ],
                created_by=7,
            )

            vehicles = (await session.execute(select(Vehicle).order_by(Vehicle.id))).scalars().all()
            return result, vehicles

    result, vehicles = run(scenario())

    assert result.created_count == 1
    assert set(result.plate_mapping) == {"OR 111", "OR 222"}
    assert [(v.license_plate, v.make_model) for v in vehicles] == [
        ("OR 111", "Stored Jeep"),
        ("OR 222", "Mazda CX-5 2021"),
    ]
    assert vehicles[1].created_by == 7
    assert result.plate_mapping["OR 222"] == vehicles[1].id


def test_reconcile_with_no_plates_creates_nothing(session_scope, run):
    async def scenario():
        async with session_scope() as session:
            reconciler = VehicleReconciler(VehicleRepository(session))
            return await reconciler.reconcile([{"vehicle": "Jeep", "vehicle_name": "Jeep"}])

    result = run(scenario())

    assert result.created_count == 0
    assert result.plate_mapping == {}
