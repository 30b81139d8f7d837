"""Booking-related Pydantic schemas."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class BookingCreate(BaseModel):
    """Schema for creating a booking."""

    consignor_name: str = Field(..., min_length=1, max_length=200)
    consignee_name: str = Field(..., min_length=1, max_length=200)
    from_location: str = Field(..., min_length=1, max_length=200)
    to_location: str = Field(..., min_length=1, max_length=200)
    service_type: str = Field(default="FTL", pattern="^(FTL|PTL)$")
    pickup_date: date | None = None
    material_description: str = Field(..., min_length=1, max_length=2000)
    cargo_units: str = Field(..., min_length=1, max_length=50)


class BookingStatusUpdate(BaseModel):
    """Schema for requesting a status change."""

    status: str = Field(
        ...,
        pattern="^(DRAFT|CONFIRMED|AT_WAREHOUSE|DISPATCHED|IN_TRANSIT|DELIVERED|CANCELLED)$",
    )


class WarehousePlacement(BaseModel):
    """Schema for moving a booking into a warehouse."""

    warehouse_id: UUID


class BookingResponse(BaseModel):
    """Schema for booking response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    booking_number: str

    # Parties & route
    consignor_name: str
    consignee_name: str
    from_location: str
    to_location: str
    service_type: str
    pickup_date: date | None

    # Cargo
    material_description: str
    cargo_units: str

    # Lifecycle
    status: str
    current_warehouse_id: UUID | None
    actual_delivery: datetime | None

    created_by: UUID | None
    created_at: datetime
    updated_at: datetime


class BookingListResponse(BaseModel):
    """Schema for paginated booking list."""

    bookings: list[BookingResponse]
    total: int
    page: int
    page_size: int


class TimelineEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    booking_id: UUID
    action: str
    description: str
    warehouse_id: UUID | None
    performed_by: UUID | None
    created_at: datetime
