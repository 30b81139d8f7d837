"""Booking lifecycle orchestration.

Every entry point that can change a booking's status, vehicle or warehouse
goes through here. Each method is one unit of work inside the caller's
session transaction: side effects run first, the booking status is written
last, and any exception leaves the transaction to be rolled back by the
session owner (``get_db`` / ``get_db_context``).
"""

import logging
from datetime import UTC, date, datetime
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cargotrack.core.exceptions import (
    BookingClosed,
    BookingDeletionRefused,
    BookingNotInWarehouse,
    NotFoundError,
    ValidationError,
)
from cargotrack.domain.booking_state import (
    CLOSED_STATUSES,
    DISPATCHABLE_STATUSES,
    BookingStatus,
    SideEffect,
    StatusTransition,
    parse_status,
    plan_status_change,
)
from cargotrack.domain.fleet import ServiceType
from cargotrack.domain.timeline import TimelineAction
from cargotrack.domain.warehouse_state import DepartureReason
from cargotrack.models.booking import Booking, TimelineEntry
from cargotrack.models.fleet import VehicleAssignment
from cargotrack.models.warehouse import Consignment, WarehouseLog
from cargotrack.services.assignment_service import assignment_service
from cargotrack.services.consignment_service import consignment_service
from cargotrack.services.history_service import history_service
from cargotrack.services.timeline_service import timeline_service
from cargotrack.utils.booking_number import generate_booking_number

logger = logging.getLogger(__name__)


class BookingService:
    """Booking status state machine and its cross-entity side effects."""

    # ==================== LOOKUPS ====================

    async def get_booking(self, db: AsyncSession, booking_id: UUID, for_update: bool = False) -> Booking:
        """Get booking by ID or raise NotFoundError.

        ``for_update`` locks the row so concurrent transitions on the same
        booking serialise.
        """
        query = select(Booking).where(Booking.id == booking_id)
        if for_update:
            query = query.with_for_update()
        result = await db.execute(query)
        booking = result.scalar_one_or_none()
        if not booking:
            raise NotFoundError("Booking", str(booking_id))
        return booking

    async def list_bookings(
        self,
        db: AsyncSession,
        status: str | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Booking], int]:
        """Paginated bookings, newest first."""
        query = select(Booking)
        if status:
            query = query.where(Booking.status == parse_status(status).value)

        count_result = await db.execute(select(func.count()).select_from(query.subquery()))
        total = count_result.scalar() or 0

        offset = (page - 1) * page_size
        result = await db.execute(
            query.order_by(Booking.created_at.desc()).offset(offset).limit(page_size)
        )
        return list(result.scalars().all()), total

    async def get_timeline(self, db: AsyncSession, booking_id: UUID) -> list[TimelineEntry]:
        await self.get_booking(db, booking_id)
        return await timeline_service.list_for_booking(db, booking_id)

    # ==================== CREATE / DELETE ====================

    async def create_booking(
        self,
        db: AsyncSession,
        consignor_name: str,
        consignee_name: str,
        from_location: str,
        to_location: str,
        material_description: str,
        cargo_units: str,
        service_type: str = ServiceType.FTL.value,
        pickup_date: date | None = None,
        created_by: UUID | None = None,
    ) -> Booking:
        """Create a DRAFT booking."""
        try:
            service_type = ServiceType(service_type).value
        except ValueError:
            raise ValidationError(f"Invalid service type: {service_type}")

        booking = Booking(
            booking_number=await generate_booking_number(db),
            consignor_name=consignor_name,
            consignee_name=consignee_name,
            from_location=from_location,
            to_location=to_location,
            material_description=material_description,
            cargo_units=cargo_units,
            service_type=service_type,
            pickup_date=pickup_date,
            status=BookingStatus.DRAFT.value,
            created_by=created_by,
        )
        db.add(booking)
        await db.flush()

        await timeline_service.record(
            db,
            booking.id,
            TimelineAction.BOOKING_CREATED,
            f"Booking {booking.booking_number} created",
            performed_by=created_by,
        )
        logger.info("Created booking %s", booking.booking_number)
        return booking

    async def delete_booking(self, db: AsyncSession, booking_id: UUID) -> None:
        """Delete a booking and all of its history.

        Raises:
            BookingDeletionRefused: Booking has an active vehicle or sits in a warehouse
        """
        booking = await self.get_booking(db, booking_id, for_update=True)

        if await assignment_service.get_active(db, booking_id):
            raise BookingDeletionRefused("Cannot delete booking with active vehicle assignments")
        if booking.current_warehouse_id:
            raise BookingDeletionRefused("Cannot delete booking currently in warehouse")

        # Bulk deletes on purpose: the append-only listeners guard ORM deletes only
        consignment_ids = select(Consignment.id).where(Consignment.booking_id == booking_id)
        await db.execute(
            delete(WarehouseLog)
            .where(WarehouseLog.consignment_id.in_(consignment_ids))
            .execution_options(synchronize_session=False)
        )
        await db.execute(
            delete(Consignment)
            .where(Consignment.booking_id == booking_id)
            .execution_options(synchronize_session=False)
        )
        await db.execute(
            delete(VehicleAssignment)
            .where(VehicleAssignment.booking_id == booking_id)
            .execution_options(synchronize_session=False)
        )
        await db.execute(
            delete(TimelineEntry)
            .where(TimelineEntry.booking_id == booking_id)
            .execution_options(synchronize_session=False)
        )
        await db.execute(
            delete(Booking)
            .where(Booking.id == booking_id)
            .execution_options(synchronize_session=False)
        )
        db.expunge(booking)
        logger.info("Deleted booking %s", booking.booking_number)

    # ==================== STATUS ====================

    async def set_status(
        self,
        db: AsyncSession,
        booking_id: UUID,
        new_status: str,
        performed_by: UUID | None = None,
    ) -> Booking:
        """Change a booking's status, running whatever side effects the change implies.

        Args:
            db: Database session (the caller owns the transaction)
            booking_id: Booking ID
            new_status: Requested status
            performed_by: Acting user, for the timeline

        Returns:
            The updated booking

        Raises:
            ValidationError: Unknown status value
            NotFoundError: Unknown booking
        """
        target = parse_status(new_status)
        booking = await self.get_booking(db, booking_id, for_update=True)
        active = await assignment_service.get_active(db, booking.id)

        plan = plan_status_change(
            booking.status,
            target.value,
            has_active_assignment=active is not None,
            has_warehouse_placement=booking.current_warehouse_id is not None,
        )
        if not plan.writes_status:
            return booking

        for effect in plan.side_effects:
            await self._apply(db, booking, effect, performed_by)

        old_status = booking.status
        booking.status = plan.target.value
        await db.flush()

        if plan.kind == StatusTransition.ENTER_DELIVERED:
            action, description = TimelineAction.DELIVERED, "Booking delivered"
        else:
            action = TimelineAction.STATUS_CHANGED
            description = f"Status changed from {old_status} to {plan.target.value}"
        await timeline_service.record(db, booking.id, action, description, performed_by=performed_by)

        logger.info(
            "Booking %s: %s -> %s (%s)",
            booking.booking_number,
            old_status,
            plan.target.value,
            plan.kind.value,
        )
        return booking

    async def _apply(
        self,
        db: AsyncSession,
        booking: Booking,
        effect: SideEffect,
        performed_by: UUID | None,
    ) -> None:
        if effect == SideEffect.RELEASE_VEHICLE:
            await assignment_service.release_active(
                db,
                booking,
                "Vehicle automatically unassigned - booking delivered",
                performed_by=performed_by,
            )
        elif effect == SideEffect.CLOSE_CONSIGNMENT:
            await consignment_service.depart(
                db, booking, DepartureReason.DELIVERY, performed_by=performed_by
            )
        elif effect == SideEffect.CLEAR_WAREHOUSE:
            booking.current_warehouse_id = None
        elif effect == SideEffect.SET_ACTUAL_DELIVERY:
            booking.actual_delivery = datetime.now(UTC)
        elif effect == SideEffect.RESTORE_FROM_HISTORY:
            await history_service.restore_after_delivery(db, booking, performed_by=performed_by)
        elif effect == SideEffect.CLEAR_ACTUAL_DELIVERY:
            booking.actual_delivery = None
        await db.flush()

    def _ensure_open(self, booking: Booking) -> None:
        # DELIVERED and CANCELLED are left only through set_status
        if booking.status in {s.value for s in CLOSED_STATUSES}:
            logger.warning("Booking %s is %s; refusing vehicle/warehouse change", booking.booking_number, booking.status)
            raise BookingClosed(booking.status)

    # ==================== VEHICLE ====================

    async def assign_vehicle(
        self,
        db: AsyncSession,
        booking_id: UUID,
        vehicle_type: str,
        vehicle_id: UUID,
        driver_id: UUID,
        broker_id: UUID | None = None,
        performed_by: UUID | None = None,
    ) -> VehicleAssignment:
        """Assign a vehicle; the booking becomes DISPATCHED if it was not yet moving.

        Raises:
            BookingClosed: Booking is DELIVERED or CANCELLED
        """
        booking = await self.get_booking(db, booking_id, for_update=True)
        self._ensure_open(booking)
        assignment = await assignment_service.assign(
            db,
            booking,
            vehicle_type=vehicle_type,
            vehicle_id=vehicle_id,
            driver_id=driver_id,
            broker_id=broker_id,
            performed_by=performed_by,
        )

        if booking.status in {s.value for s in DISPATCHABLE_STATUSES}:
            booking.status = BookingStatus.DISPATCHED.value
        await db.flush()
        return assignment

    async def unassign_vehicle(
        self,
        db: AsyncSession,
        booking_id: UUID,
        performed_by: UUID | None = None,
    ) -> VehicleAssignment:
        """Release the booking's vehicle. Booking status is left as is."""
        booking = await self.get_booking(db, booking_id, for_update=True)
        return await assignment_service.unassign(db, booking, performed_by=performed_by)

    # ==================== WAREHOUSE ====================

    async def move_to_warehouse(
        self,
        db: AsyncSession,
        booking_id: UUID,
        warehouse_id: UUID,
        performed_by: UUID | None = None,
    ) -> Booking:
        """Place the booking in a warehouse; status becomes AT_WAREHOUSE.

        Raises:
            BookingClosed: Booking is DELIVERED or CANCELLED
        """
        booking = await self.get_booking(db, booking_id, for_update=True)
        self._ensure_open(booking)
        await consignment_service.arrive(db, booking, warehouse_id, performed_by=performed_by)

        booking.status = BookingStatus.AT_WAREHOUSE.value
        await db.flush()
        return booking

    async def remove_from_warehouse(
        self,
        db: AsyncSession,
        booking_id: UUID,
        performed_by: UUID | None = None,
    ) -> Booking:
        """Take the goods out of their warehouse; status resets to CONFIRMED.

        Raises:
            BookingNotInWarehouse: Booking has no warehouse placement
        """
        booking = await self.get_booking(db, booking_id, for_update=True)
        if not booking.current_warehouse_id:
            raise BookingNotInWarehouse()

        await consignment_service.depart(
            db, booking, DepartureReason.MANUAL_REMOVAL, performed_by=performed_by
        )

        booking.status = BookingStatus.CONFIRMED.value
        await db.flush()
        return booking


booking_service = BookingService()
