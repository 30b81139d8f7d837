"""Reconstruct a booking's vehicle/warehouse side after it leaves DELIVERED.

Nothing stores what a booking was doing right before delivery, so the
timeline is read backwards instead. This is a heuristic rather than an exact
inverse of delivery: it is only as good as the timeline, it looks at a fixed
number of recent entries, and a vehicle signal wins over a warehouse signal
simply because it is checked first.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from cargotrack.config import settings
from cargotrack.domain.timeline import HISTORY_SIGNAL_ACTIONS, TimelineAction
from cargotrack.models.booking import Booking, TimelineEntry
from cargotrack.services.assignment_service import assignment_service
from cargotrack.services.consignment_service import consignment_service
from cargotrack.services.timeline_service import timeline_service

logger = logging.getLogger(__name__)


class RestorationPath(str, Enum):
    VEHICLE = "vehicle"
    WAREHOUSE = "warehouse"
    FALLBACK = "fallback"
    NONE = "none"


@dataclass
class RestorationResult:
    path: RestorationPath
    assignment_id: UUID | None = None
    consignment_id: UUID | None = None
    warehouse_id: UUID | None = None


def pick_signal(entries: list[TimelineEntry]) -> TimelineEntry | None:
    """First VEHICLE_ASSIGNED or ARRIVED_AT_WAREHOUSE entry in newest-first order.

    DEPARTED_FROM_WAREHOUSE entries are passed over, not treated as a stop.
    """
    for entry in entries:
        if entry.action in (
            TimelineAction.VEHICLE_ASSIGNED.value,
            TimelineAction.ARRIVED_AT_WAREHOUSE.value,
        ):
            return entry
    return None


class HistoryService:
    """Restores the pre-delivery assignment or warehouse placement."""

    def __init__(self, lookback: int | None = None):
        self.lookback = lookback if lookback is not None else settings.history_lookback

    async def restore_after_delivery(
        self,
        db: AsyncSession,
        booking: Booking,
        performed_by: UUID | None = None,
    ) -> RestorationResult:
        """Try the vehicle path, then the warehouse path, then the fallback.

        Never raises for missing history; the caller writes the new status.
        """
        entries = await timeline_service.recent(
            db, booking.id, HISTORY_SIGNAL_ACTIONS, limit=self.lookback
        )
        signal = pick_signal(entries)

        result = None
        if signal and signal.action == TimelineAction.VEHICLE_ASSIGNED.value:
            result = await self._restore_vehicle(db, booking, performed_by)
        elif signal and signal.action == TimelineAction.ARRIVED_AT_WAREHOUSE.value and signal.warehouse_id:
            result = await self._restore_warehouse(db, booking, signal.warehouse_id, performed_by)

        if result is None:
            result = await self._fallback(db, booking)

        logger.info(
            "Booking %s restored from DELIVERED via %s path",
            booking.booking_number,
            result.path.value,
        )
        return result

    async def _restore_vehicle(
        self, db: AsyncSession, booking: Booking, performed_by: UUID | None
    ) -> RestorationResult | None:
        assignment = await assignment_service.reactivate_latest(db, booking, performed_by=performed_by)
        if not assignment:
            logger.info("No completed assignment to restore for booking %s", booking.booking_number)
            return None
        return RestorationResult(path=RestorationPath.VEHICLE, assignment_id=assignment.id)

    async def _restore_warehouse(
        self,
        db: AsyncSession,
        booking: Booking,
        warehouse_id: UUID,
        performed_by: UUID | None,
    ) -> RestorationResult:
        consignment = await consignment_service.get_open(db, booking.id, warehouse_id)
        if not consignment:
            consignment = await consignment_service.open(
                db,
                booking,
                warehouse_id,
                notes="Goods restored to warehouse - booking status changed from DELIVERED",
                performed_by=performed_by,
            )
        booking.current_warehouse_id = warehouse_id
        await db.flush()
        return RestorationResult(
            path=RestorationPath.WAREHOUSE,
            consignment_id=consignment.id,
            warehouse_id=warehouse_id,
        )

    async def _fallback(self, db: AsyncSession, booking: Booking) -> RestorationResult:
        # Best effort: points the booking back at the warehouse it was delivered
        # from without reopening a consignment there.
        consignment = await consignment_service.get_latest_delivered(db, booking.id)
        if not consignment:
            return RestorationResult(path=RestorationPath.NONE)

        booking.current_warehouse_id = consignment.warehouse_id
        await db.flush()
        return RestorationResult(path=RestorationPath.FALLBACK, warehouse_id=consignment.warehouse_id)


history_service = HistoryService()
