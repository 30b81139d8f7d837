"""Initial database schema.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

Creates all initial tables for CargoTrack:
- Warehouses, consignments and warehouse logs
- Vehicle registry (owned, hired, drivers, brokers)
- Bookings and booking timeline
- Vehicle assignments
"""

from typing import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create all database tables."""

    # ==================== WAREHOUSES ====================
    op.create_table(
        "warehouses",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("code", sa.String(10), unique=True, nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("city", sa.String(100), nullable=False),
        sa.Column("state", sa.String(100)),
        sa.Column("address", sa.Text),
        sa.Column("capacity", sa.Integer, default=0),
        sa.Column("current_stock", sa.Integer, nullable=False, server_default="0"),
        sa.Column("manager_name", sa.String(200)),
        sa.Column("manager_phone", sa.String(20)),
        sa.Column("manager_email", sa.String(255)),
        sa.Column("status", sa.String(20), default="ACTIVE"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("current_stock >= 0", name="ck_warehouses_stock_non_negative"),
    )

    # ==================== VEHICLE REGISTRY ====================
    op.create_table(
        "brokers",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("contact_person", sa.String(200)),
        sa.Column("phone", sa.String(20)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "drivers",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("phone", sa.String(20), nullable=False),
        sa.Column("license_number", sa.String(50), nullable=False),
        sa.Column("experience", sa.String(50)),
        sa.Column("status", sa.String(20), default="ACTIVE"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "owned_vehicles",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("vehicle_number", sa.String(20), unique=True, nullable=False, index=True),
        sa.Column("vehicle_type", sa.String(50), nullable=False),
        sa.Column("capacity", sa.String(50), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="AVAILABLE"),
        sa.Column("is_verified", sa.Boolean, default=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "hired_vehicles",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("vehicle_number", sa.String(20), unique=True, nullable=False, index=True),
        sa.Column("vehicle_type", sa.String(50), nullable=False),
        sa.Column("capacity", sa.String(50), nullable=False),
        sa.Column("broker_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("brokers.id"), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="AVAILABLE"),
        sa.Column("rate_per_trip", sa.Integer),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # ==================== BOOKINGS ====================
    op.create_table(
        "bookings",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("booking_number", sa.String(20), unique=True, nullable=False, index=True),
        sa.Column("consignor_name", sa.String(200), nullable=False),
        sa.Column("consignee_name", sa.String(200), nullable=False),
        sa.Column("from_location", sa.String(200), nullable=False),
        sa.Column("to_location", sa.String(200), nullable=False),
        sa.Column("service_type", sa.String(3), default="FTL"),
        sa.Column("pickup_date", sa.Date),
        sa.Column("material_description", sa.Text, nullable=False),
        sa.Column("cargo_units", sa.String(50), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="DRAFT", index=True),
        sa.Column("current_warehouse_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("warehouses.id"), index=True),
        sa.Column("actual_delivery", sa.DateTime(timezone=True)),
        sa.Column("created_by", postgresql.UUID(as_uuid=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "booking_timeline",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("booking_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("action", sa.String(40), nullable=False, index=True),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("warehouse_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("warehouses.id")),
        sa.Column("performed_by", postgresql.UUID(as_uuid=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now(), index=True),
    )

    # ==================== ASSIGNMENTS ====================
    op.create_table(
        "vehicle_assignments",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("booking_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("vehicle_type", sa.String(10), nullable=False),
        sa.Column("owned_vehicle_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("owned_vehicles.id"), index=True),
        sa.Column("hired_vehicle_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("hired_vehicles.id"), index=True),
        sa.Column("driver_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("drivers.id"), nullable=False),
        sa.Column("broker_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("brokers.id")),
        sa.Column("status", sa.String(20), nullable=False, server_default="ACTIVE", index=True),
        sa.Column("assigned_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("released_at", sa.DateTime(timezone=True)),
    )
    op.create_index(
        "uq_vehicle_assignments_active_booking",
        "vehicle_assignments",
        ["booking_id"],
        unique=True,
        postgresql_where=sa.text("status = 'ACTIVE'"),
    )

    # ==================== CONSIGNMENTS ====================
    op.create_table(
        "consignments",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("consignment_number", sa.String(20), nullable=False, index=True),
        sa.Column("booking_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("warehouse_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("warehouses.id"), nullable=False, index=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="IN_WAREHOUSE"),
        sa.Column("arrival_date", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("departure_date", sa.DateTime(timezone=True)),
    )
    op.create_index(
        "uq_consignments_open_booking_warehouse",
        "consignments",
        ["booking_id", "warehouse_id"],
        unique=True,
        postgresql_where=sa.text("departure_date IS NULL"),
    )

    op.create_table(
        "warehouse_logs",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("consignment_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("consignments.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("warehouse_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("warehouses.id"), nullable=False, index=True),
        sa.Column("type", sa.String(10), nullable=False),
        sa.Column("notes", sa.Text),
        sa.Column("vehicle_id", postgresql.UUID(as_uuid=True)),
        sa.Column("performed_by", postgresql.UUID(as_uuid=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now(), index=True),
    )


def downgrade() -> None:
    """Drop all database tables in reverse order."""
    op.drop_table("warehouse_logs")
    op.drop_index("uq_consignments_open_booking_warehouse", table_name="consignments")
    op.drop_table("consignments")
    op.drop_index("uq_vehicle_assignments_active_booking", table_name="vehicle_assignments")
    op.drop_table("vehicle_assignments")
    op.drop_table("booking_timeline")
    op.drop_table("bookings")
    op.drop_table("hired_vehicles")
    op.drop_table("owned_vehicles")
    op.drop_table("drivers")
    op.drop_table("brokers")
    op.drop_table("warehouses")
