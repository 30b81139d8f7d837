"""Fleet master data: vehicles, drivers and brokers."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cargotrack.core.exceptions import ValidationError
from cargotrack.domain.fleet import VehicleStatus
from cargotrack.models.fleet import Broker, Driver, HiredVehicle, OwnedVehicle
from cargotrack.services.vehicle_registry import vehicle_registry
from cargotrack.utils.validators import normalize_vehicle_number, validate_vehicle_number


class FleetService:
    """Creates registry entries. Availability is owned by the vehicle registry."""

    def _clean_number(self, vehicle_number: str) -> str:
        if not validate_vehicle_number(vehicle_number):
            raise ValidationError(
                f"Invalid vehicle number: {vehicle_number}. Expected format like MH-12-AB-1234"
            )
        return normalize_vehicle_number(vehicle_number)

    async def _assert_unique_number(self, db: AsyncSession, vehicle_number: str) -> None:
        for model in (OwnedVehicle, HiredVehicle):
            result = await db.execute(select(model.id).where(model.vehicle_number == vehicle_number))
            if result.scalar_one_or_none():
                raise ValidationError(f"Vehicle {vehicle_number} is already registered")

    async def create_owned_vehicle(
        self,
        db: AsyncSession,
        vehicle_number: str,
        vehicle_type: str,
        capacity: str,
    ) -> OwnedVehicle:
        vehicle_number = self._clean_number(vehicle_number)
        await self._assert_unique_number(db, vehicle_number)
        vehicle = OwnedVehicle(
            vehicle_number=vehicle_number,
            vehicle_type=vehicle_type,
            capacity=capacity,
            status=VehicleStatus.AVAILABLE.value,
        )
        db.add(vehicle)
        await db.flush()
        return vehicle

    async def create_hired_vehicle(
        self,
        db: AsyncSession,
        vehicle_number: str,
        vehicle_type: str,
        capacity: str,
        broker_id: UUID,
        rate_per_trip: int | None = None,
    ) -> HiredVehicle:
        vehicle_number = self._clean_number(vehicle_number)
        await vehicle_registry.get_broker(db, broker_id)
        await self._assert_unique_number(db, vehicle_number)
        vehicle = HiredVehicle(
            vehicle_number=vehicle_number,
            vehicle_type=vehicle_type,
            capacity=capacity,
            broker_id=broker_id,
            rate_per_trip=rate_per_trip,
            status=VehicleStatus.AVAILABLE.value,
        )
        db.add(vehicle)
        await db.flush()
        return vehicle

    async def create_driver(
        self,
        db: AsyncSession,
        name: str,
        phone: str,
        license_number: str,
        experience: str | None = None,
    ) -> Driver:
        driver = Driver(
            name=name,
            phone=phone,
            license_number=license_number,
            experience=experience,
            status="ACTIVE",
        )
        db.add(driver)
        await db.flush()
        return driver

    async def create_broker(
        self,
        db: AsyncSession,
        name: str,
        contact_person: str | None = None,
        phone: str | None = None,
    ) -> Broker:
        broker = Broker(name=name, contact_person=contact_person, phone=phone)
        db.add(broker)
        await db.flush()
        return broker


fleet_service = FleetService()
