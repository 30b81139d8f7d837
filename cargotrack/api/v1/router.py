"""Main API router that includes all endpoint routers."""

from fastapi import APIRouter

from cargotrack.api.v1 import bookings, vehicles, warehouses

api_router = APIRouter()

# Bookings
api_router.include_router(bookings.router, prefix="/bookings", tags=["Bookings"])

# Warehouses
api_router.include_router(warehouses.router, prefix="/warehouses", tags=["Warehouses"])

# Vehicle registry
api_router.include_router(vehicles.router, prefix="/vehicles", tags=["Vehicles"])
