"""Vehicle assignment and release."""

import pytest
from sqlalchemy import func, select

from cargotrack.core.exceptions import (
    AssignmentAlreadyActive,
    BookingClosed,
    NoActiveAssignment,
    NotFoundError,
    ValidationError,
    VehicleNotAvailable,
)
from cargotrack.models.booking import TimelineEntry
from cargotrack.models.fleet import VehicleAssignment
from cargotrack.services.booking_service import booking_service


async def _timeline_actions(db, booking_id):
    entries = await booking_service.get_timeline(db, booking_id)
    return [e.action for e in entries]


async def test_assign_owned_vehicle(db, booking, owned_vehicle, driver):
    assignment = await booking_service.assign_vehicle(
        db, booking.id, "OWNED", owned_vehicle.id, driver.id
    )

    assert assignment.status == "ACTIVE"
    assert assignment.vehicle_type == "OWNED"
    assert assignment.vehicle_id == owned_vehicle.id
    assert assignment.hired_vehicle_id is None
    assert owned_vehicle.status == "OCCUPIED"
    assert booking.status == "DISPATCHED"
    assert await _timeline_actions(db, booking.id) == ["BOOKING_CREATED", "VEHICLE_ASSIGNED"]


async def test_assign_hired_vehicle_defaults_broker(db, booking, hired_vehicle, broker, driver):
    assignment = await booking_service.assign_vehicle(
        db, booking.id, "HIRED", hired_vehicle.id, driver.id
    )

    assert assignment.hired_vehicle_id == hired_vehicle.id
    assert assignment.broker_id == broker.id
    assert hired_vehicle.status == "OCCUPIED"


async def test_broker_on_owned_vehicle_is_rejected(db, booking, owned_vehicle, driver, broker):
    with pytest.raises(ValidationError):
        await booking_service.assign_vehicle(
            db, booking.id, "OWNED", owned_vehicle.id, driver.id, broker_id=broker.id
        )


async def test_assign_does_not_touch_status_once_moving(db, booking, owned_vehicle, driver):
    await booking_service.set_status(db, booking.id, "IN_TRANSIT")
    await booking_service.assign_vehicle(db, booking.id, "OWNED", owned_vehicle.id, driver.id)
    assert booking.status == "IN_TRANSIT"


@pytest.mark.parametrize("closed_status", ["DELIVERED", "CANCELLED"])
async def test_assign_on_closed_booking_is_refused(db, booking, owned_vehicle, driver, closed_status):
    await booking_service.set_status(db, booking.id, closed_status)

    with pytest.raises(BookingClosed) as exc:
        await booking_service.assign_vehicle(db, booking.id, "OWNED", owned_vehicle.id, driver.id)

    assert exc.value.status_code == 409
    assert booking.status == closed_status
    assert owned_vehicle.status == "AVAILABLE"
    assert await db.scalar(select(func.count()).select_from(VehicleAssignment)) == 0


async def test_assign_after_leaving_delivered(db, booking, owned_vehicle, driver):
    await booking_service.set_status(db, booking.id, "DELIVERED")
    await booking_service.set_status(db, booking.id, "CONFIRMED")

    await booking_service.assign_vehicle(db, booking.id, "OWNED", owned_vehicle.id, driver.id)

    assert booking.status == "DISPATCHED"
    assert booking.actual_delivery is None
    assert owned_vehicle.status == "OCCUPIED"


async def test_second_assignment_is_rejected(
    db, booking, owned_vehicle, second_owned_vehicle, driver
):
    await booking_service.assign_vehicle(db, booking.id, "OWNED", owned_vehicle.id, driver.id)

    with pytest.raises(AssignmentAlreadyActive) as exc:
        await booking_service.assign_vehicle(
            db, booking.id, "OWNED", second_owned_vehicle.id, driver.id
        )
    assert exc.value.status_code == 409
    assert second_owned_vehicle.status == "AVAILABLE"


async def test_occupied_vehicle_cannot_be_assigned_elsewhere(
    db, booking_factory, owned_vehicle, driver
):
    first = await booking_factory()
    second = await booking_factory(consignor_name="Initech")
    await booking_service.assign_vehicle(db, first.id, "OWNED", owned_vehicle.id, driver.id)

    with pytest.raises(VehicleNotAvailable) as exc:
        await booking_service.assign_vehicle(db, second.id, "OWNED", owned_vehicle.id, driver.id)
    assert "OCCUPIED" in exc.value.detail


async def test_unknown_driver(db, booking, owned_vehicle):
    from uuid import uuid4

    with pytest.raises(NotFoundError):
        await booking_service.assign_vehicle(db, booking.id, "OWNED", owned_vehicle.id, uuid4())


async def test_invalid_vehicle_type(db, booking, owned_vehicle, driver):
    with pytest.raises(ValidationError):
        await booking_service.assign_vehicle(db, booking.id, "LEASED", owned_vehicle.id, driver.id)


async def test_unassign_releases_vehicle(db, booking, owned_vehicle, driver):
    await booking_service.assign_vehicle(db, booking.id, "OWNED", owned_vehicle.id, driver.id)

    assignment = await booking_service.unassign_vehicle(db, booking.id)

    assert assignment.status == "COMPLETED"
    assert assignment.released_at is not None
    assert owned_vehicle.status == "AVAILABLE"
    # Unassigning leaves the booking status alone
    assert booking.status == "DISPATCHED"
    actions = await _timeline_actions(db, booking.id)
    assert actions[-1] == "VEHICLE_UNASSIGNED"


async def test_unassign_without_active_assignment_writes_nothing(db, booking):
    before = await db.scalar(select(func.count()).select_from(TimelineEntry))

    with pytest.raises(NoActiveAssignment) as exc:
        await booking_service.unassign_vehicle(db, booking.id)

    assert exc.value.status_code == 409
    assert exc.value.detail == "No active assignment to unassign"
    assert await db.scalar(select(func.count()).select_from(TimelineEntry)) == before
    assert await db.scalar(select(func.count()).select_from(VehicleAssignment)) == 0
    assert booking.status == "DRAFT"


async def test_reassign_after_unassign(db, booking, owned_vehicle, second_owned_vehicle, driver):
    await booking_service.assign_vehicle(db, booking.id, "OWNED", owned_vehicle.id, driver.id)
    await booking_service.unassign_vehicle(db, booking.id)
    await booking_service.assign_vehicle(
        db, booking.id, "OWNED", second_owned_vehicle.id, driver.id
    )

    result = await db.execute(
        select(VehicleAssignment).where(VehicleAssignment.booking_id == booking.id)
    )
    statuses = sorted(a.status for a in result.scalars())
    assert statuses == ["ACTIVE", "COMPLETED"]
