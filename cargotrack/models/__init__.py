"""Database models."""

from cargotrack.models.booking import Booking, TimelineEntry
from cargotrack.models.fleet import (
    Broker,
    Driver,
    HiredVehicle,
    OwnedVehicle,
    VehicleAssignment,
)
from cargotrack.models.warehouse import Consignment, Warehouse, WarehouseLog

__all__ = [
    # Booking
    "Booking",
    "TimelineEntry",
    # Fleet
    "Broker",
    "Driver",
    "OwnedVehicle",
    "HiredVehicle",
    "VehicleAssignment",
    # Warehouse
    "Warehouse",
    "Consignment",
    "WarehouseLog",
]
