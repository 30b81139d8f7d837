"""Shared fixtures: in-memory SQLite database, seeded registry data and an HTTP client."""

import os

os.environ["DATABASE_URL_OVERRIDE"] = "sqlite+aiosqlite://"
os.environ.setdefault("ENVIRONMENT", "test")

from collections.abc import AsyncGenerator  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

import cargotrack.models  # noqa: E402,F401
from cargotrack.core.immutability import register_immutability_enforcement  # noqa: E402
from cargotrack.database import Base, async_session_factory, engine  # noqa: E402
from cargotrack.main import app  # noqa: E402
from cargotrack.models.booking import Booking  # noqa: E402
from cargotrack.models.fleet import Broker, Driver, HiredVehicle, OwnedVehicle  # noqa: E402
from cargotrack.models.warehouse import Warehouse  # noqa: E402
from cargotrack.services.booking_service import booking_service  # noqa: E402
from cargotrack.services.fleet_service import fleet_service  # noqa: E402
from cargotrack.services.warehouse_service import warehouse_service  # noqa: E402

register_immutability_enforcement()


@pytest.fixture(autouse=True)
async def database() -> AsyncGenerator[None, None]:
    """Fresh schema per test. Disposing the pool drops the in-memory database."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()


@pytest.fixture
async def db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        yield session


@pytest.fixture
async def warehouse(db: AsyncSession) -> Warehouse:
    warehouse = await warehouse_service.create_warehouse(
        db, name="Bhiwandi Hub", city="Mumbai", capacity=100
    )
    await db.commit()
    return warehouse


@pytest.fixture
async def second_warehouse(db: AsyncSession) -> Warehouse:
    warehouse = await warehouse_service.create_warehouse(
        db, name="Okhla Depot", city="Delhi", capacity=50
    )
    await db.commit()
    return warehouse


@pytest.fixture
async def driver(db: AsyncSession) -> Driver:
    driver = await fleet_service.create_driver(
        db, name="Ramesh Kumar", phone="9876543210", license_number="MH0420190012345"
    )
    await db.commit()
    return driver


@pytest.fixture
async def owned_vehicle(db: AsyncSession) -> OwnedVehicle:
    vehicle = await fleet_service.create_owned_vehicle(
        db, vehicle_number="MH04AB1234", vehicle_type="32FT MXL", capacity="15 MT"
    )
    await db.commit()
    return vehicle


@pytest.fixture
async def second_owned_vehicle(db: AsyncSession) -> OwnedVehicle:
    vehicle = await fleet_service.create_owned_vehicle(
        db, vehicle_number="MH04CD5678", vehicle_type="20FT SXL", capacity="7 MT"
    )
    await db.commit()
    return vehicle


@pytest.fixture
async def broker(db: AsyncSession) -> Broker:
    broker = await fleet_service.create_broker(db, name="Sai Roadlines", phone="9820012345")
    await db.commit()
    return broker


@pytest.fixture
async def hired_vehicle(db: AsyncSession, broker: Broker) -> HiredVehicle:
    vehicle = await fleet_service.create_hired_vehicle(
        db,
        vehicle_number="GJ01XY9999",
        vehicle_type="Trailer",
        capacity="25 MT",
        broker_id=broker.id,
        rate_per_trip=18000,
    )
    await db.commit()
    return vehicle


@pytest.fixture
def booking_factory(db: AsyncSession):
    async def make_booking(**overrides) -> Booking:
        fields = dict(
            consignor_name="Acme Textiles",
            consignee_name="Globex Retail",
            from_location="Surat",
            to_location="Pune",
            material_description="Cotton bales",
            cargo_units="40 bales",
        )
        fields.update(overrides)
        booking = await booking_service.create_booking(db, **fields)
        await db.commit()
        return booking

    return make_booking


@pytest.fixture
async def booking(booking_factory) -> Booking:
    return await booking_factory()


@pytest.fixture
async def client() -> AsyncGenerator[httpx.AsyncClient, None]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
