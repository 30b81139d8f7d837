"""Warehouse stock counter."""

import logging
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from cargotrack.core.exceptions import NotFoundError
from cargotrack.models.warehouse import Warehouse

logger = logging.getLogger(__name__)


class StockService:
    """Moves a warehouse's current_stock by exactly one per consignment event.

    The counter is never recomputed here; each call must sit in the same
    transaction as the consignment open/close it mirrors.
    """

    async def _adjust(self, db: AsyncSession, warehouse_id: UUID, delta: int) -> int:
        # Single UPDATE so concurrent deltas on the same row serialise in the database
        result = await db.execute(
            update(Warehouse)
            .where(Warehouse.id == warehouse_id)
            .values(current_stock=Warehouse.current_stock + delta)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundError("Warehouse", str(warehouse_id))

        warehouse = await db.get(Warehouse, warehouse_id, populate_existing=True)
        logger.debug("Warehouse %s stock %+d -> %d", warehouse_id, delta, warehouse.current_stock)
        return warehouse.current_stock

    async def increment(self, db: AsyncSession, warehouse_id: UUID) -> int:
        """Record one consignment opened at the warehouse. Returns the new stock."""
        return await self._adjust(db, warehouse_id, 1)

    async def decrement(self, db: AsyncSession, warehouse_id: UUID) -> int:
        """Record one consignment closed at the warehouse. Returns the new stock."""
        return await self._adjust(db, warehouse_id, -1)


stock_service = StockService()
