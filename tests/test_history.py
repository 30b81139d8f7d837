"""Restoring vehicle/warehouse state when a booking leaves DELIVERED."""

from sqlalchemy import select

from cargotrack.config import settings
from cargotrack.domain.timeline import TimelineAction
from cargotrack.models.fleet import VehicleAssignment
from cargotrack.models.warehouse import Consignment
from cargotrack.services.booking_service import booking_service
from cargotrack.services.history_service import HistoryService, RestorationPath, pick_signal
from cargotrack.services.timeline_service import timeline_service


async def _assignments(db, booking_id):
    result = await db.execute(
        select(VehicleAssignment)
        .where(VehicleAssignment.booking_id == booking_id)
        .order_by(VehicleAssignment.assigned_at)
    )
    return list(result.scalars())


async def _consignments(db, booking_id):
    result = await db.execute(
        select(Consignment)
        .where(Consignment.booking_id == booking_id)
        .order_by(Consignment.arrival_date)
    )
    return list(result.scalars())


async def _push_departures(db, booking_id, count):
    for _ in range(count):
        await timeline_service.record(
            db, booking_id, TimelineAction.DEPARTED_FROM_WAREHOUSE, "Goods removed from warehouse"
        )


async def test_vehicle_round_trip(db, booking, owned_vehicle, driver):
    await booking_service.assign_vehicle(db, booking.id, "OWNED", owned_vehicle.id, driver.id)
    await booking_service.set_status(db, booking.id, "DELIVERED")
    assert owned_vehicle.status == "AVAILABLE"

    await booking_service.set_status(db, booking.id, "IN_TRANSIT")

    previous, restored = await _assignments(db, booking.id)
    assert previous.status == "COMPLETED"
    assert restored.status == "ACTIVE"
    assert restored.id != previous.id
    assert restored.owned_vehicle_id == owned_vehicle.id
    assert restored.driver_id == driver.id
    assert owned_vehicle.status == "OCCUPIED"
    assert booking.status == "IN_TRANSIT"
    assert booking.actual_delivery is None

    timeline = await booking_service.get_timeline(db, booking.id)
    restored_entry = [e for e in timeline if e.action == "VEHICLE_ASSIGNED"][-1]
    assert restored_entry.description == "Vehicle restored - booking status changed from DELIVERED"
    assert timeline[-1].action == "STATUS_CHANGED"


async def test_hired_vehicle_round_trip(db, booking, hired_vehicle, broker, driver):
    await booking_service.assign_vehicle(db, booking.id, "HIRED", hired_vehicle.id, driver.id)
    await booking_service.set_status(db, booking.id, "DELIVERED")
    assert hired_vehicle.status == "AVAILABLE"

    await booking_service.set_status(db, booking.id, "IN_TRANSIT")

    previous, restored = await _assignments(db, booking.id)
    assert previous.status == "COMPLETED"
    assert restored.status == "ACTIVE"
    assert restored.vehicle_type == "HIRED"
    assert restored.hired_vehicle_id == hired_vehicle.id
    assert restored.owned_vehicle_id is None
    assert restored.broker_id == broker.id
    assert restored.driver_id == driver.id
    assert hired_vehicle.status == "OCCUPIED"

async def test_restored_vehicle_skips_availability_check(
    db, booking_factory, owned_vehicle, driver
):
    first = await booking_factory()
    second = await booking_factory(consignor_name="Initech")
    await booking_service.assign_vehicle(db, first.id, "OWNED", owned_vehicle.id, driver.id)
    await booking_service.set_status(db, first.id, "DELIVERED")
    # The freed vehicle goes to another booking
    await booking_service.assign_vehicle(db, second.id, "OWNED", owned_vehicle.id, driver.id)

    await booking_service.set_status(db, first.id, "DISPATCHED")

    active = [a for a in await _assignments(db, first.id) if a.status == "ACTIVE"]
    assert len(active) == 1
    assert owned_vehicle.status == "OCCUPIED"


async def test_warehouse_round_trip(db, booking, warehouse):
    await booking_service.move_to_warehouse(db, booking.id, warehouse.id)
    await booking_service.set_status(db, booking.id, "DELIVERED")
    assert warehouse.current_stock == 0

    await booking_service.set_status(db, booking.id, "AT_WAREHOUSE")

    delivered, reopened = await _consignments(db, booking.id)
    assert delivered.status == "DELIVERED"
    assert reopened.is_open
    assert reopened.status == "IN_WAREHOUSE"
    assert reopened.warehouse_id == warehouse.id
    assert booking.current_warehouse_id == warehouse.id
    assert warehouse.current_stock == 1
    assert booking.status == "AT_WAREHOUSE"


async def test_vehicle_signal_wins_when_newest(db, booking, warehouse, owned_vehicle, driver):
    await booking_service.move_to_warehouse(db, booking.id, warehouse.id)
    await booking_service.assign_vehicle(db, booking.id, "OWNED", owned_vehicle.id, driver.id)
    await booking_service.set_status(db, booking.id, "DELIVERED")

    await booking_service.set_status(db, booking.id, "IN_TRANSIT")

    assert [a.status for a in await _assignments(db, booking.id)] == ["COMPLETED", "ACTIVE"]
    assert booking.current_warehouse_id is None
    assert warehouse.current_stock == 0


async def test_departure_entries_are_skipped(db, booking, warehouse):
    await booking_service.move_to_warehouse(db, booking.id, warehouse.id)
    await booking_service.remove_from_warehouse(db, booking.id)
    await booking_service.set_status(db, booking.id, "DELIVERED")

    await booking_service.set_status(db, booking.id, "CONFIRMED")

    # Newest signal is the departure, the arrival behind it decides
    removed, reopened = await _consignments(db, booking.id)
    assert removed.status == "DEPARTED"
    assert reopened.is_open
    assert booking.current_warehouse_id == warehouse.id
    assert warehouse.current_stock == 1


async def test_no_history(db, booking, warehouse):
    await booking_service.set_status(db, booking.id, "DELIVERED")

    await booking_service.set_status(db, booking.id, "CONFIRMED")

    assert booking.status == "CONFIRMED"
    assert booking.current_warehouse_id is None
    assert await _assignments(db, booking.id) == []
    assert await _consignments(db, booking.id) == []
    assert warehouse.current_stock == 0


async def test_signal_outside_lookback_window_is_ignored(db, booking, owned_vehicle, driver):
    await booking_service.assign_vehicle(db, booking.id, "OWNED", owned_vehicle.id, driver.id)
    await booking_service.set_status(db, booking.id, "DELIVERED")
    await _push_departures(db, booking.id, 5)

    await booking_service.set_status(db, booking.id, "IN_TRANSIT")

    assert [a.status for a in await _assignments(db, booking.id)] == ["COMPLETED"]
    assert owned_vehicle.status == "AVAILABLE"


async def test_signal_at_edge_of_lookback_window(db, booking, owned_vehicle, driver):
    await booking_service.assign_vehicle(db, booking.id, "OWNED", owned_vehicle.id, driver.id)
    await booking_service.set_status(db, booking.id, "DELIVERED")
    await _push_departures(db, booking.id, 4)

    await booking_service.set_status(db, booking.id, "IN_TRANSIT")

    assert [a.status for a in await _assignments(db, booking.id)] == ["COMPLETED", "ACTIVE"]


async def test_fallback_points_back_at_delivered_warehouse(db, booking, warehouse):
    await booking_service.move_to_warehouse(db, booking.id, warehouse.id)
    await booking_service.set_status(db, booking.id, "DELIVERED")
    await _push_departures(db, booking.id, 5)

    result = await HistoryService().restore_after_delivery(db, booking)

    assert result.path == RestorationPath.FALLBACK
    assert result.warehouse_id == warehouse.id
    assert booking.current_warehouse_id == warehouse.id
    # Placement only; no consignment is reopened
    assert [c.is_open for c in await _consignments(db, booking.id)] == [False]
    assert warehouse.current_stock == 0


async def test_vehicle_signal_without_completed_assignment_falls_back(db, booking, warehouse):
    await booking_service.move_to_warehouse(db, booking.id, warehouse.id)
    await booking_service.set_status(db, booking.id, "DELIVERED")
    await timeline_service.record(
        db, booking.id, TimelineAction.VEHICLE_ASSIGNED, "Vehicle assigned"
    )

    result = await HistoryService().restore_after_delivery(db, booking)

    assert result.path == RestorationPath.FALLBACK
    assert booking.current_warehouse_id == warehouse.id


async def test_custom_lookback(db, booking, warehouse):
    await booking_service.move_to_warehouse(db, booking.id, warehouse.id)
    await booking_service.remove_from_warehouse(db, booking.id)
    await booking_service.set_status(db, booking.id, "DELIVERED")

    # Only the departure is visible with a window of one
    result = await HistoryService(lookback=1).restore_after_delivery(db, booking)

    assert result.path == RestorationPath.NONE
    assert booking.current_warehouse_id is None


async def test_zero_lookback_sees_no_history(db, booking, owned_vehicle, driver):
    await booking_service.assign_vehicle(db, booking.id, "OWNED", owned_vehicle.id, driver.id)
    await booking_service.set_status(db, booking.id, "DELIVERED")

    history = HistoryService(lookback=0)
    result = await history.restore_after_delivery(db, booking)

    assert history.lookback == 0
    assert result.path == RestorationPath.NONE
    assert [a.status for a in await _assignments(db, booking.id)] == ["COMPLETED"]
    assert owned_vehicle.status == "AVAILABLE"


def test_default_lookback_comes_from_settings():
    assert HistoryService().lookback == settings.history_lookback


async def test_pick_signal_skips_departures(db, booking):
    await timeline_service.record(
        db, booking.id, TimelineAction.ARRIVED_AT_WAREHOUSE, "Goods arrived"
    )
    await timeline_service.record(
        db, booking.id, TimelineAction.DEPARTED_FROM_WAREHOUSE, "Goods removed"
    )
    entries = await timeline_service.recent(
        db,
        booking.id,
        (TimelineAction.VEHICLE_ASSIGNED, TimelineAction.ARRIVED_AT_WAREHOUSE, TimelineAction.DEPARTED_FROM_WAREHOUSE),
        limit=5,
    )

    assert [e.action for e in entries] == ["DEPARTED_FROM_WAREHOUSE", "ARRIVED_AT_WAREHOUSE"]
    assert pick_signal(entries).action == "ARRIVED_AT_WAREHOUSE"
    assert pick_signal(entries[:1]) is None
