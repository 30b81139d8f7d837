"""Vehicle registry endpoints: vehicles, drivers and brokers."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from cargotrack.api.deps import get_db
from cargotrack.schemas.fleet import (
    AvailableVehiclesResponse,
    BrokerCreate,
    BrokerResponse,
    DriverCreate,
    DriverResponse,
    HiredVehicleCreate,
    HiredVehicleResponse,
    OwnedVehicleCreate,
    VehicleResponse,
)
from cargotrack.services.fleet_service import fleet_service
from cargotrack.services.vehicle_registry import vehicle_registry

router = APIRouter()


@router.post("/owned", response_model=VehicleResponse, status_code=status.HTTP_201_CREATED)
async def create_owned_vehicle(
    request: OwnedVehicleCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> VehicleResponse:
    vehicle = await fleet_service.create_owned_vehicle(db, **request.model_dump())
    return VehicleResponse.model_validate(vehicle)


@router.post("/hired", response_model=HiredVehicleResponse, status_code=status.HTTP_201_CREATED)
async def create_hired_vehicle(
    request: HiredVehicleCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> HiredVehicleResponse:
    vehicle = await fleet_service.create_hired_vehicle(db, **request.model_dump())
    return HiredVehicleResponse.model_validate(vehicle)


@router.get("/available", response_model=AvailableVehiclesResponse)
async def list_available_vehicles(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AvailableVehiclesResponse:
    """Vehicles that can take a new assignment right now."""
    owned, hired = await vehicle_registry.list_available(db)
    return AvailableVehiclesResponse(
        owned=[VehicleResponse.model_validate(v) for v in owned],
        hired=[HiredVehicleResponse.model_validate(v) for v in hired],
    )


@router.post("/drivers", response_model=DriverResponse, status_code=status.HTTP_201_CREATED)
async def create_driver(
    request: DriverCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> DriverResponse:
    driver = await fleet_service.create_driver(db, **request.model_dump())
    return DriverResponse.model_validate(driver)


@router.post("/brokers", response_model=BrokerResponse, status_code=status.HTTP_201_CREATED)
async def create_broker(
    request: BrokerCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BrokerResponse:
    broker = await fleet_service.create_broker(db, **request.model_dump())
    return BrokerResponse.model_validate(broker)
