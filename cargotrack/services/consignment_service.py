"""Consignment (warehouse stay) lifecycle service."""

import logging
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cargotrack.core.exceptions import NotFoundError, PreconditionFailed
from cargotrack.domain.timeline import TimelineAction
from cargotrack.domain.warehouse_state import (
    OUTGOING_NOTES_BY_REASON,
    ConsignmentStatus,
    DepartureReason,
    WarehouseLogType,
    WarehouseStatus,
    closing_status,
)
from cargotrack.models.booking import Booking
from cargotrack.models.warehouse import Consignment, Warehouse, WarehouseLog
from cargotrack.services.assignment_service import assignment_service
from cargotrack.services.stock_service import stock_service
from cargotrack.services.timeline_service import timeline_service
from cargotrack.utils.booking_number import generate_consignment_number

logger = logging.getLogger(__name__)


class ConsignmentService:
    """Opens and closes a booking's physical presence at a warehouse.

    Every open writes an INCOMING log and bumps stock by one; every close
    writes an OUTGOING log and drops it by one.
    """

    async def get_open(
        self, db: AsyncSession, booking_id: UUID, warehouse_id: UUID
    ) -> Consignment | None:
        """Open consignment for a (booking, warehouse) pair."""
        result = await db.execute(
            select(Consignment).where(
                Consignment.booking_id == booking_id,
                Consignment.warehouse_id == warehouse_id,
                Consignment.departure_date.is_(None),
            )
        )
        return result.scalar_one_or_none()

    async def get_latest_delivered(self, db: AsyncSession, booking_id: UUID) -> Consignment | None:
        """Most recent consignment closed by a delivery."""
        result = await db.execute(
            select(Consignment)
            .where(
                Consignment.booking_id == booking_id,
                Consignment.status == ConsignmentStatus.DELIVERED.value,
            )
            .order_by(Consignment.departure_date.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def arrive(
        self,
        db: AsyncSession,
        booking: Booking,
        warehouse_id: UUID,
        performed_by: UUID | None = None,
    ) -> Consignment:
        """Place a booking's goods in a warehouse.

        Releases any attached vehicle first and closes a stay at another
        warehouse. Re-arriving at the current warehouse reuses the open
        consignment. The caller writes the booking status.
        """
        warehouse = await db.get(Warehouse, warehouse_id)
        if not warehouse:
            raise NotFoundError("Warehouse", str(warehouse_id))
        if warehouse.status != WarehouseStatus.ACTIVE.value:
            raise PreconditionFailed(f"Warehouse {warehouse.code} is not active")

        await assignment_service.release_active(
            db,
            booking,
            "Vehicle unassigned - goods moved to warehouse",
            performed_by=performed_by,
        )

        if booking.current_warehouse_id and booking.current_warehouse_id != warehouse_id:
            await self.depart(db, booking, DepartureReason.MANUAL_REMOVAL, performed_by=performed_by)

        consignment = await self.get_open(db, booking.id, warehouse_id)
        if consignment:
            logger.info(
                "Booking %s already has open consignment %s at %s",
                booking.booking_number,
                consignment.consignment_number,
                warehouse.code,
            )
        else:
            consignment = await self.open(
                db,
                booking,
                warehouse_id,
                notes=f"Goods received from booking {booking.booking_number} - "
                f"{booking.consignor_name} to {booking.consignee_name}",
                performed_by=performed_by,
            )
            await timeline_service.record(
                db,
                booking.id,
                TimelineAction.ARRIVED_AT_WAREHOUSE,
                f"Goods arrived at warehouse {warehouse.name}",
                warehouse_id=warehouse_id,
                performed_by=performed_by,
            )

        booking.current_warehouse_id = warehouse_id
        await db.flush()
        return consignment

    async def open(
        self,
        db: AsyncSession,
        booking: Booking,
        warehouse_id: UUID,
        notes: str,
        performed_by: UUID | None = None,
    ) -> Consignment:
        """Create an open consignment with its INCOMING log and stock +1."""
        consignment = Consignment(
            consignment_number=generate_consignment_number(),
            booking_id=booking.id,
            warehouse_id=warehouse_id,
            status=ConsignmentStatus.IN_WAREHOUSE.value,
            arrival_date=datetime.now(UTC),
        )
        db.add(consignment)
        try:
            await db.flush()
        except IntegrityError:
            raise PreconditionFailed("Booking already has an open consignment at this warehouse")

        db.add(
            WarehouseLog(
                consignment_id=consignment.id,
                warehouse_id=warehouse_id,
                type=WarehouseLogType.INCOMING.value,
                notes=notes,
                performed_by=performed_by,
            )
        )
        await db.flush()
        await stock_service.increment(db, warehouse_id)
        return consignment

    async def depart(
        self,
        db: AsyncSession,
        booking: Booking,
        reason: DepartureReason,
        vehicle_id: UUID | None = None,
        performed_by: UUID | None = None,
    ) -> Consignment | None:
        """Close the open consignment at the booking's current warehouse.

        Only a manual removal writes a DEPARTED_FROM_WAREHOUSE timeline entry;
        vehicle assignment and delivery record their own events. Returns None
        if there was nothing open.
        """
        warehouse_id = booking.current_warehouse_id
        if not warehouse_id:
            return None

        consignment = await self.get_open(db, booking.id, warehouse_id)
        booking.current_warehouse_id = None
        if not consignment:
            logger.warning(
                "Booking %s pointed at warehouse %s without an open consignment",
                booking.booking_number,
                warehouse_id,
            )
            await db.flush()
            return None

        consignment.departure_date = datetime.now(UTC)
        consignment.status = closing_status(reason).value
        db.add(
            WarehouseLog(
                consignment_id=consignment.id,
                warehouse_id=warehouse_id,
                type=WarehouseLogType.OUTGOING.value,
                notes=OUTGOING_NOTES_BY_REASON[reason],
                vehicle_id=vehicle_id,
                performed_by=performed_by,
            )
        )
        await db.flush()
        await stock_service.decrement(db, warehouse_id)

        if reason == DepartureReason.MANUAL_REMOVAL:
            await timeline_service.record(
                db,
                booking.id,
                TimelineAction.DEPARTED_FROM_WAREHOUSE,
                "Goods removed from warehouse",
                warehouse_id=warehouse_id,
                performed_by=performed_by,
            )

        logger.info(
            "Consignment %s closed as %s (%s)",
            consignment.consignment_number,
            consignment.status,
            reason.value,
        )
        return consignment


consignment_service = ConsignmentService()
