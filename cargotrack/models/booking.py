"""Booking-related database models."""

from __future__ import annotations

import uuid
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Date, DateTime, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from cargotrack.database import Base

if TYPE_CHECKING:
    from cargotrack.models.fleet import VehicleAssignment
    from cargotrack.models.warehouse import Consignment, Warehouse


def utcnow() -> datetime:
    return datetime.now(UTC)


class Booking(Base):
    """Freight booking tracked from creation to delivery."""

    __tablename__ = "bookings"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    booking_number: Mapped[str] = mapped_column(
        String(20), unique=True, nullable=False, index=True
    )  # BKG-XXXXXX

    # Parties & route
    consignor_name: Mapped[str] = mapped_column(String(200), nullable=False)
    consignee_name: Mapped[str] = mapped_column(String(200), nullable=False)
    from_location: Mapped[str] = mapped_column(String(200), nullable=False)
    to_location: Mapped[str] = mapped_column(String(200), nullable=False)
    service_type: Mapped[str] = mapped_column(String(3), default="FTL")  # FTL, PTL
    pickup_date: Mapped[date | None] = mapped_column(Date)

    # Cargo
    material_description: Mapped[str] = mapped_column(Text, nullable=False)
    cargo_units: Mapped[str] = mapped_column(String(50), nullable=False)

    # Status
    status: Mapped[str] = mapped_column(
        String(20), default="DRAFT", nullable=False, index=True
    )  # DRAFT, CONFIRMED, AT_WAREHOUSE, DISPATCHED, IN_TRANSIT, DELIVERED, CANCELLED

    # Non-null iff an open consignment exists at this warehouse
    current_warehouse_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("warehouses.id"), index=True
    )
    actual_delivery: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    created_by: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow
    )

    # Relationships
    current_warehouse: Mapped["Warehouse | None"] = relationship("Warehouse")
    assignments: Mapped[list["VehicleAssignment"]] = relationship(
        "VehicleAssignment", back_populates="booking", passive_deletes=True
    )
    consignments: Mapped[list["Consignment"]] = relationship(
        "Consignment", back_populates="booking", passive_deletes=True
    )


class TimelineEntry(Base):
    """Append-only booking event log.

    Also the only record of what a booking was doing before it was delivered.
    """

    __tablename__ = "booking_timeline"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    booking_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    action: Mapped[str] = mapped_column(String(40), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    warehouse_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("warehouses.id")
    )
    performed_by: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )
