"""Warehouse, consignment and log schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class WarehouseCreate(BaseModel):
    """Schema for creating a warehouse."""

    name: str = Field(..., min_length=1, max_length=200)
    city: str = Field(..., min_length=1, max_length=100)
    state: str | None = Field(None, max_length=100)
    address: str | None = Field(None, max_length=1000)
    capacity: int = Field(..., ge=0)
    manager_name: str | None = Field(None, max_length=200)
    manager_phone: str | None = Field(None, max_length=20)
    manager_email: EmailStr | None = None


class WarehouseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    code: str
    name: str
    city: str
    state: str | None
    address: str | None
    capacity: int
    current_stock: int
    status: str


class ConsignmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    consignment_number: str
    booking_id: UUID
    warehouse_id: UUID
    status: str
    arrival_date: datetime
    departure_date: datetime | None


class WarehouseDetailResponse(WarehouseResponse):
    """Warehouse with the consignments currently inside it."""

    consignments: list[ConsignmentResponse] = []


class WarehouseLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    consignment_id: UUID
    warehouse_id: UUID
    type: str
    notes: str | None
    vehicle_id: UUID | None
    performed_by: UUID | None
    created_at: datetime
