"""Vehicle registry: availability flags for owned and hired vehicles."""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cargotrack.core.exceptions import NotFoundError, ValidationError, VehicleNotAvailable
from cargotrack.domain.fleet import VehicleStatus, VehicleType
from cargotrack.models.fleet import Broker, Driver, HiredVehicle, OwnedVehicle

logger = logging.getLogger(__name__)

Vehicle = OwnedVehicle | HiredVehicle


class VehicleRegistry:
    """Looks up vehicles by class and flips their availability flag."""

    def _model_for(self, vehicle_type: str) -> type[OwnedVehicle] | type[HiredVehicle]:
        if vehicle_type == VehicleType.OWNED.value:
            return OwnedVehicle
        if vehicle_type == VehicleType.HIRED.value:
            return HiredVehicle
        raise ValidationError(f"Invalid vehicle type: {vehicle_type}")

    async def get_vehicle(self, db: AsyncSession, vehicle_type: str, vehicle_id: UUID) -> Vehicle:
        """Get a vehicle by class and ID or raise NotFoundError."""
        model = self._model_for(vehicle_type)
        result = await db.execute(select(model).where(model.id == vehicle_id).with_for_update())
        vehicle = result.scalar_one_or_none()
        if not vehicle:
            raise NotFoundError(f"{vehicle_type.title()} vehicle", str(vehicle_id))
        return vehicle

    async def get_driver(self, db: AsyncSession, driver_id: UUID) -> Driver:
        driver = await db.get(Driver, driver_id)
        if not driver:
            raise NotFoundError("Driver", str(driver_id))
        return driver

    async def get_broker(self, db: AsyncSession, broker_id: UUID) -> Broker:
        broker = await db.get(Broker, broker_id)
        if not broker:
            raise NotFoundError("Broker", str(broker_id))
        return broker

    async def assert_available(self, db: AsyncSession, vehicle_type: str, vehicle_id: UUID) -> Vehicle:
        """Return the vehicle if it is AVAILABLE.

        Raises:
            VehicleNotAvailable: If the registry flag is anything else
        """
        vehicle = await self.get_vehicle(db, vehicle_type, vehicle_id)
        if vehicle.status != VehicleStatus.AVAILABLE.value:
            logger.warning(
                "Vehicle %s requested while %s", vehicle.vehicle_number, vehicle.status
            )
            raise VehicleNotAvailable(vehicle.vehicle_number, vehicle.status)
        return vehicle

    async def set_status(
        self,
        db: AsyncSession,
        vehicle_type: str,
        vehicle_id: UUID,
        status: VehicleStatus,
    ) -> Vehicle:
        """Set a vehicle's availability flag."""
        vehicle = await self.get_vehicle(db, vehicle_type, vehicle_id)
        vehicle.status = status.value
        await db.flush()
        return vehicle

    async def mark_occupied(self, db: AsyncSession, vehicle_type: str, vehicle_id: UUID) -> Vehicle:
        return await self.set_status(db, vehicle_type, vehicle_id, VehicleStatus.OCCUPIED)

    async def mark_available(self, db: AsyncSession, vehicle_type: str, vehicle_id: UUID) -> Vehicle:
        return await self.set_status(db, vehicle_type, vehicle_id, VehicleStatus.AVAILABLE)

    async def list_available(self, db: AsyncSession) -> tuple[list[OwnedVehicle], list[HiredVehicle]]:
        """Available owned and hired vehicles, newest first."""
        owned = await db.execute(
            select(OwnedVehicle)
            .where(OwnedVehicle.status == VehicleStatus.AVAILABLE.value)
            .order_by(OwnedVehicle.created_at.desc())
        )
        hired = await db.execute(
            select(HiredVehicle)
            .where(HiredVehicle.status == VehicleStatus.AVAILABLE.value)
            .order_by(HiredVehicle.created_at.desc())
        )
        return list(owned.scalars().all()), list(hired.scalars().all())


vehicle_registry = VehicleRegistry()
