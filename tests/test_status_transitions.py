"""Status changes and the side effects they drag along."""

import pytest
from sqlalchemy import select

from cargotrack.core.exceptions import NotFoundError, ValidationError
from cargotrack.database import get_db_context
from cargotrack.models.booking import Booking
from cargotrack.models.fleet import OwnedVehicle, VehicleAssignment
from cargotrack.models.warehouse import Consignment, Warehouse
from cargotrack.services.booking_service import booking_service
from cargotrack.services.stock_service import stock_service


async def test_lateral_change_records_status_change(db, booking):
    await booking_service.set_status(db, booking.id, "CONFIRMED")

    assert booking.status == "CONFIRMED"
    timeline = await booking_service.get_timeline(db, booking.id)
    assert timeline[-1].action == "STATUS_CHANGED"
    assert timeline[-1].description == "Status changed from DRAFT to CONFIRMED"


async def test_same_status_is_a_no_op(db, booking):
    await booking_service.set_status(db, booking.id, "DRAFT")

    timeline = await booking_service.get_timeline(db, booking.id)
    assert [e.action for e in timeline] == ["BOOKING_CREATED"]


async def test_invalid_status(db, booking):
    with pytest.raises(ValidationError):
        await booking_service.set_status(db, booking.id, "SHIPPED")


async def test_unknown_booking(db):
    from uuid import uuid4

    with pytest.raises(NotFoundError):
        await booking_service.set_status(db, uuid4(), "CONFIRMED")


async def test_deliver_releases_vehicle(db, booking, owned_vehicle, driver):
    assignment = await booking_service.assign_vehicle(
        db, booking.id, "OWNED", owned_vehicle.id, driver.id
    )
    await booking_service.set_status(db, booking.id, "IN_TRANSIT")

    await booking_service.set_status(db, booking.id, "DELIVERED")

    assert booking.status == "DELIVERED"
    assert booking.actual_delivery is not None
    assert assignment.status == "COMPLETED"
    assert owned_vehicle.status == "AVAILABLE"

    timeline = await booking_service.get_timeline(db, booking.id)
    assert [e.action for e in timeline[-2:]] == ["VEHICLE_UNASSIGNED", "DELIVERED"]
    assert timeline[-2].description == "Vehicle automatically unassigned - booking delivered"
    assert timeline[-1].description == "Booking delivered"


async def test_deliver_closes_consignment(db, booking, warehouse):
    await booking_service.move_to_warehouse(db, booking.id, warehouse.id)

    await booking_service.set_status(db, booking.id, "DELIVERED")

    consignment = (
        await db.execute(select(Consignment).where(Consignment.booking_id == booking.id))
    ).scalar_one()
    assert consignment.status == "DELIVERED"
    assert consignment.departure_date is not None
    assert warehouse.current_stock == 0
    assert booking.current_warehouse_id is None

    # Delivery is its own event, no departure entry
    actions = [e.action for e in await booking_service.get_timeline(db, booking.id)]
    assert "DEPARTED_FROM_WAREHOUSE" not in actions


async def test_deliver_with_nothing_attached(db, booking):
    await booking_service.set_status(db, booking.id, "DELIVERED")

    assert booking.status == "DELIVERED"
    assert booking.actual_delivery is not None


async def test_failed_side_effect_rolls_back_whole_transition(
    db, booking, warehouse, monkeypatch
):
    await booking_service.move_to_warehouse(db, booking.id, warehouse.id)
    await db.commit()

    async def broken_decrement(session, warehouse_id):
        raise RuntimeError("stock update failed")

    monkeypatch.setattr(stock_service, "decrement", broken_decrement)

    with pytest.raises(RuntimeError):
        async with get_db_context() as session:
            await booking_service.set_status(session, booking.id, "DELIVERED")

    async with get_db_context() as session:
        stored = await session.get(Booking, booking.id)
        assert stored.status == "AT_WAREHOUSE"
        assert stored.current_warehouse_id == warehouse.id
        assert stored.actual_delivery is None

        consignment = (
            await session.execute(select(Consignment).where(Consignment.booking_id == booking.id))
        ).scalar_one()
        assert consignment.departure_date is None
        assert consignment.status == "IN_WAREHOUSE"

        stored_warehouse = await session.get(Warehouse, warehouse.id)
        assert stored_warehouse.current_stock == 1


async def test_failed_release_keeps_vehicle_occupied(db, booking, owned_vehicle, driver, monkeypatch):
    await booking_service.assign_vehicle(db, booking.id, "OWNED", owned_vehicle.id, driver.id)
    await db.commit()

    from cargotrack.services.timeline_service import timeline_service

    real_record = timeline_service.record

    async def record_then_fail(session, booking_id, action, *args, **kwargs):
        if action.value == "DELIVERED":
            raise RuntimeError("timeline unavailable")
        return await real_record(session, booking_id, action, *args, **kwargs)

    monkeypatch.setattr(timeline_service, "record", record_then_fail)

    with pytest.raises(RuntimeError):
        async with get_db_context() as session:
            await booking_service.set_status(session, booking.id, "DELIVERED")

    async with get_db_context() as session:
        vehicle = await session.get(OwnedVehicle, owned_vehicle.id)
        assert vehicle.status == "OCCUPIED"
        active = (
            await session.execute(
                select(VehicleAssignment).where(
                    VehicleAssignment.booking_id == booking.id,
                    VehicleAssignment.status == "ACTIVE",
                )
            )
        ).scalar_one_or_none()
        assert active is not None
        assert (await session.get(Booking, booking.id)).status == "DISPATCHED"
