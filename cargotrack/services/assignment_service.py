"""Vehicle assignment lifecycle service (ACTIVE → COMPLETED)."""

import logging
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cargotrack.core.exceptions import AssignmentAlreadyActive, NoActiveAssignment, ValidationError
from cargotrack.domain.fleet import AssignmentStatus, VehicleStatus, VehicleType
from cargotrack.domain.timeline import TimelineAction
from cargotrack.domain.warehouse_state import DepartureReason
from cargotrack.models.booking import Booking
from cargotrack.models.fleet import VehicleAssignment
from cargotrack.services.timeline_service import timeline_service
from cargotrack.services.vehicle_registry import vehicle_registry

logger = logging.getLogger(__name__)


class AssignmentService:
    """Service for attaching vehicles to bookings and releasing them."""

    async def get_active(self, db: AsyncSession, booking_id: UUID) -> VehicleAssignment | None:
        """The booking's ACTIVE assignment, if any."""
        result = await db.execute(
            select(VehicleAssignment).where(
                VehicleAssignment.booking_id == booking_id,
                VehicleAssignment.status == AssignmentStatus.ACTIVE.value,
            )
        )
        return result.scalar_one_or_none()

    async def get_latest_completed(self, db: AsyncSession, booking_id: UUID) -> VehicleAssignment | None:
        """Most recently released assignment for a booking."""
        result = await db.execute(
            select(VehicleAssignment)
            .where(
                VehicleAssignment.booking_id == booking_id,
                VehicleAssignment.status == AssignmentStatus.COMPLETED.value,
            )
            .order_by(VehicleAssignment.released_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def assign(
        self,
        db: AsyncSession,
        booking: Booking,
        vehicle_type: str,
        vehicle_id: UUID,
        driver_id: UUID,
        broker_id: UUID | None = None,
        performed_by: UUID | None = None,
    ) -> VehicleAssignment:
        """Attach a vehicle to a booking.

        Goods still recorded inside a warehouse are dispatched from it first.

        Raises:
            AssignmentAlreadyActive: Booking already has an ACTIVE assignment
            VehicleNotAvailable: Vehicle registry flag is not AVAILABLE
            NotFoundError: Unknown vehicle or driver
        """
        from cargotrack.services.consignment_service import consignment_service

        try:
            vtype = VehicleType(vehicle_type)
        except ValueError:
            raise ValidationError(f"Invalid vehicle type: {vehicle_type}")

        if await self.get_active(db, booking.id):
            logger.warning("Booking %s already has an active assignment", booking.booking_number)
            raise AssignmentAlreadyActive()

        vehicle = await vehicle_registry.assert_available(db, vtype.value, vehicle_id)
        await vehicle_registry.get_driver(db, driver_id)

        if vtype == VehicleType.HIRED:
            if broker_id is None:
                broker_id = vehicle.broker_id
            else:
                await vehicle_registry.get_broker(db, broker_id)
        elif broker_id is not None:
            raise ValidationError("broker_id only applies to hired vehicles")

        if booking.current_warehouse_id:
            await consignment_service.depart(
                db,
                booking,
                DepartureReason.VEHICLE_ASSIGNMENT,
                vehicle_id=vehicle_id,
                performed_by=performed_by,
            )

        assignment = await self._create_active(
            db,
            booking_id=booking.id,
            vehicle_type=vtype.value,
            vehicle_id=vehicle_id,
            driver_id=driver_id,
            broker_id=broker_id,
        )
        await vehicle_registry.mark_occupied(db, vtype.value, vehicle_id)
        await timeline_service.record(
            db,
            booking.id,
            TimelineAction.VEHICLE_ASSIGNED,
            f"Vehicle {vehicle.vehicle_number} assigned",
            performed_by=performed_by,
        )

        logger.info(
            "Assigned %s vehicle %s to booking %s",
            vtype.value,
            vehicle.vehicle_number,
            booking.booking_number,
        )
        return assignment

    async def unassign(
        self,
        db: AsyncSession,
        booking: Booking,
        performed_by: UUID | None = None,
    ) -> VehicleAssignment:
        """Release the booking's ACTIVE assignment.

        Raises:
            NoActiveAssignment: Nothing to release
        """
        assignment = await self.get_active(db, booking.id)
        if not assignment:
            logger.warning("Unassign requested for booking %s with no active assignment", booking.booking_number)
            raise NoActiveAssignment()

        return await self.release(
            db, assignment, "Vehicle unassigned", performed_by=performed_by
        )

    async def release(
        self,
        db: AsyncSession,
        assignment: VehicleAssignment,
        description: str,
        performed_by: UUID | None = None,
    ) -> VehicleAssignment:
        """Complete an assignment and free its vehicle."""
        assignment.status = AssignmentStatus.COMPLETED.value
        assignment.released_at = datetime.now(UTC)
        await db.flush()

        await vehicle_registry.mark_available(db, assignment.vehicle_type, assignment.vehicle_id)
        await timeline_service.record(
            db,
            assignment.booking_id,
            TimelineAction.VEHICLE_UNASSIGNED,
            description,
            performed_by=performed_by,
        )
        return assignment

    async def release_active(
        self,
        db: AsyncSession,
        booking: Booking,
        description: str,
        performed_by: UUID | None = None,
    ) -> VehicleAssignment | None:
        """Release the ACTIVE assignment if there is one. Never raises for absence."""
        assignment = await self.get_active(db, booking.id)
        if not assignment:
            return None
        return await self.release(db, assignment, description, performed_by=performed_by)

    async def reactivate_latest(
        self,
        db: AsyncSession,
        booking: Booking,
        performed_by: UUID | None = None,
    ) -> VehicleAssignment | None:
        """Re-create the most recently completed assignment as a new ACTIVE one.

        The vehicle is marked OCCUPIED again without an availability check.
        Returns None when the booking has no completed assignment.
        """
        active = await self.get_active(db, booking.id)
        if active:
            logger.info("Booking %s already has an active vehicle, nothing to restore", booking.booking_number)
            return active

        previous = await self.get_latest_completed(db, booking.id)
        if not previous:
            return None

        assignment = await self._create_active(
            db,
            booking_id=booking.id,
            vehicle_type=previous.vehicle_type,
            vehicle_id=previous.vehicle_id,
            driver_id=previous.driver_id,
            broker_id=previous.broker_id,
        )
        vehicle = await vehicle_registry.get_vehicle(db, previous.vehicle_type, previous.vehicle_id)
        if vehicle.status != VehicleStatus.AVAILABLE.value:
            logger.warning(
                "Restoring vehicle %s to booking %s while registry shows %s",
                vehicle.vehicle_number,
                booking.booking_number,
                vehicle.status,
            )
        await vehicle_registry.mark_occupied(db, previous.vehicle_type, previous.vehicle_id)
        await timeline_service.record(
            db,
            booking.id,
            TimelineAction.VEHICLE_ASSIGNED,
            "Vehicle restored - booking status changed from DELIVERED",
            performed_by=performed_by,
        )
        return assignment

    async def _create_active(
        self,
        db: AsyncSession,
        booking_id: UUID,
        vehicle_type: str,
        vehicle_id: UUID,
        driver_id: UUID,
        broker_id: UUID | None,
    ) -> VehicleAssignment:
        assignment = VehicleAssignment(
            booking_id=booking_id,
            vehicle_type=vehicle_type,
            owned_vehicle_id=vehicle_id if vehicle_type == VehicleType.OWNED.value else None,
            hired_vehicle_id=vehicle_id if vehicle_type == VehicleType.HIRED.value else None,
            driver_id=driver_id,
            broker_id=broker_id,
            status=AssignmentStatus.ACTIVE.value,
            assigned_at=datetime.now(UTC),
        )
        db.add(assignment)
        try:
            await db.flush()
        except IntegrityError:
            # Lost a race with a concurrent assign for the same booking
            raise AssignmentAlreadyActive()
        return assignment


assignment_service = AssignmentService()
