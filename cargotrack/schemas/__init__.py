"""Pydantic schemas for API validation."""

from cargotrack.schemas.booking import (
    BookingCreate,
    BookingListResponse,
    BookingResponse,
    BookingStatusUpdate,
    TimelineEntryResponse,
    WarehousePlacement,
)
from cargotrack.schemas.fleet import (
    AssignmentCreate,
    AssignmentResponse,
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
from cargotrack.schemas.warehouse import (
    ConsignmentResponse,
    WarehouseCreate,
    WarehouseDetailResponse,
    WarehouseLogResponse,
    WarehouseResponse,
)

__all__ = [
    # Booking
    "BookingCreate",
    "BookingListResponse",
    "BookingResponse",
    "BookingStatusUpdate",
    "TimelineEntryResponse",
    "WarehousePlacement",
    # Fleet
    "AssignmentCreate",
    "AssignmentResponse",
    "AvailableVehiclesResponse",
    "BrokerCreate",
    "BrokerResponse",
    "DriverCreate",
    "DriverResponse",
    "HiredVehicleCreate",
    "HiredVehicleResponse",
    "OwnedVehicleCreate",
    "VehicleResponse",
    # Warehouse
    "ConsignmentResponse",
    "WarehouseCreate",
    "WarehouseDetailResponse",
    "WarehouseLogResponse",
    "WarehouseResponse",
]
