"""Booking timeline (append-only event log) service."""

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cargotrack.domain.timeline import TimelineAction
from cargotrack.models.booking import TimelineEntry


class TimelineService:
    """Writes and reads per-booking timeline entries. Never updates them."""

    async def record(
        self,
        db: AsyncSession,
        booking_id: UUID,
        action: TimelineAction,
        description: str,
        warehouse_id: UUID | None = None,
        performed_by: UUID | None = None,
    ) -> TimelineEntry:
        """Append a timeline entry.

        Args:
            db: Database session
            booking_id: Booking the event belongs to
            action: Domain event
            description: Human-readable detail shown on the booking journey
            warehouse_id: Warehouse involved, for warehouse events
            performed_by: Acting user, if known

        Returns:
            Created timeline entry
        """
        entry = TimelineEntry(
            booking_id=booking_id,
            action=action.value,
            description=description,
            warehouse_id=warehouse_id,
            performed_by=performed_by,
        )
        db.add(entry)
        await db.flush()
        return entry

    async def list_for_booking(self, db: AsyncSession, booking_id: UUID) -> list[TimelineEntry]:
        """All entries for a booking, oldest first."""
        result = await db.execute(
            select(TimelineEntry)
            .where(TimelineEntry.booking_id == booking_id)
            .order_by(TimelineEntry.created_at.asc())
        )
        return list(result.scalars().all())

    async def recent(
        self,
        db: AsyncSession,
        booking_id: UUID,
        actions: Iterable[TimelineAction],
        limit: int,
    ) -> list[TimelineEntry]:
        """Newest-first entries restricted to the given actions."""
        result = await db.execute(
            select(TimelineEntry)
            .where(
                TimelineEntry.booking_id == booking_id,
                TimelineEntry.action.in_([a.value for a in actions]),
            )
            .order_by(TimelineEntry.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())


timeline_service = TimelineService()
