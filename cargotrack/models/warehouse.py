"""Warehouse, consignment and warehouse log models."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from cargotrack.database import Base
from cargotrack.models.booking import utcnow

if TYPE_CHECKING:
    from cargotrack.models.booking import Booking


class Warehouse(Base):
    """Warehouse with a derived stock counter."""

    __tablename__ = "warehouses"
    __table_args__ = (
        CheckConstraint("current_stock >= 0", name="ck_warehouses_stock_non_negative"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    code: Mapped[str] = mapped_column(String(10), unique=True, nullable=False)  # W123
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    state: Mapped[str | None] = mapped_column(String(100))
    address: Mapped[str | None] = mapped_column(Text)
    capacity: Mapped[int] = mapped_column(Integer, default=0)

    # Open consignments at this warehouse; only ever moved by +1/-1
    current_stock: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    manager_name: Mapped[str | None] = mapped_column(String(200))
    manager_phone: Mapped[str | None] = mapped_column(String(20))
    manager_email: Mapped[str | None] = mapped_column(String(255))
    status: Mapped[str] = mapped_column(String(20), default="ACTIVE")  # ACTIVE, INACTIVE
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    consignments: Mapped[list["Consignment"]] = relationship(
        "Consignment", back_populates="warehouse"
    )


class Consignment(Base):
    """A booking's stay at one warehouse. Open while departure_date is null."""

    __tablename__ = "consignments"
    __table_args__ = (
        # At most one open consignment per (booking, warehouse)
        Index(
            "uq_consignments_open_booking_warehouse",
            "booking_id",
            "warehouse_id",
            unique=True,
            postgresql_where=text("departure_date IS NULL"),
            sqlite_where=text("departure_date IS NULL"),
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    consignment_number: Mapped[str] = mapped_column(String(20), nullable=False, index=True)  # CNS-XXXXXX
    booking_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    warehouse_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("warehouses.id"), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(
        String(20), default="IN_WAREHOUSE", nullable=False
    )  # IN_WAREHOUSE, IN_TRANSIT, DEPARTED, DELIVERED
    arrival_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    departure_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    # Relationships
    booking: Mapped["Booking"] = relationship("Booking", back_populates="consignments")
    warehouse: Mapped["Warehouse"] = relationship("Warehouse", back_populates="consignments")

    @property
    def is_open(self) -> bool:
        return self.departure_date is None


class WarehouseLog(Base):
    """Append-only INCOMING/OUTGOING record, one per consignment open/close."""

    __tablename__ = "warehouse_logs"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    consignment_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("consignments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    warehouse_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("warehouses.id"), nullable=False, index=True
    )
    type: Mapped[str] = mapped_column(String(10), nullable=False)  # INCOMING, OUTGOING
    notes: Mapped[str | None] = mapped_column(Text)
    vehicle_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True))
    performed_by: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )
