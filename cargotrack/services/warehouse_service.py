"""Warehouse management service."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cargotrack.core.exceptions import NotFoundError
from cargotrack.domain.warehouse_state import WarehouseStatus
from cargotrack.models.warehouse import Consignment, Warehouse, WarehouseLog
from cargotrack.utils.booking_number import generate_warehouse_code


class WarehouseService:
    """Service for warehouses, their open consignments and logs."""

    async def create_warehouse(
        self,
        db: AsyncSession,
        name: str,
        city: str,
        capacity: int,
        state: str | None = None,
        address: str | None = None,
        manager_name: str | None = None,
        manager_phone: str | None = None,
        manager_email: str | None = None,
    ) -> Warehouse:
        """Create an ACTIVE warehouse with zero stock."""
        warehouse = Warehouse(
            code=await generate_warehouse_code(db),
            name=name,
            city=city,
            state=state,
            address=address,
            capacity=capacity,
            current_stock=0,
            manager_name=manager_name,
            manager_phone=manager_phone,
            manager_email=manager_email,
            status=WarehouseStatus.ACTIVE.value,
        )
        db.add(warehouse)
        await db.flush()
        return warehouse

    async def list_active(self, db: AsyncSession) -> list[Warehouse]:
        result = await db.execute(
            select(Warehouse)
            .where(Warehouse.status == WarehouseStatus.ACTIVE.value)
            .order_by(Warehouse.name)
        )
        return list(result.scalars().all())

    async def get_warehouse(self, db: AsyncSession, warehouse_id: UUID) -> Warehouse:
        """Get warehouse by ID or raise NotFoundError."""
        warehouse = await db.get(Warehouse, warehouse_id)
        if not warehouse:
            raise NotFoundError("Warehouse", str(warehouse_id))
        return warehouse

    async def list_open_consignments(self, db: AsyncSession, warehouse_id: UUID) -> list[Consignment]:
        """Consignments currently inside the warehouse, oldest arrival first."""
        await self.get_warehouse(db, warehouse_id)
        result = await db.execute(
            select(Consignment)
            .where(
                Consignment.warehouse_id == warehouse_id,
                Consignment.departure_date.is_(None),
            )
            .order_by(Consignment.arrival_date.asc())
        )
        return list(result.scalars().all())

    async def list_logs(self, db: AsyncSession, warehouse_id: UUID) -> list[WarehouseLog]:
        """INCOMING/OUTGOING log, newest first."""
        await self.get_warehouse(db, warehouse_id)
        result = await db.execute(
            select(WarehouseLog)
            .where(WarehouseLog.warehouse_id == warehouse_id)
            .order_by(WarehouseLog.created_at.desc())
        )
        return list(result.scalars().all())


warehouse_service = WarehouseService()
