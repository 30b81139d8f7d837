"""Vehicle, driver, broker and assignment schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from cargotrack.utils.validators import validate_indian_phone


class AssignmentCreate(BaseModel):
    """Schema for assigning a vehicle to a booking."""

    vehicle_type: str = Field(..., pattern="^(OWNED|HIRED)$")
    vehicle_id: UUID
    driver_id: UUID
    broker_id: UUID | None = None

    @model_validator(mode="after")
    def validate_broker(self) -> "AssignmentCreate":
        if self.broker_id and self.vehicle_type != "HIRED":
            raise ValueError("broker_id only applies to hired vehicles")
        return self


class AssignmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    booking_id: UUID
    vehicle_type: str
    vehicle_id: UUID | None
    owned_vehicle_id: UUID | None
    hired_vehicle_id: UUID | None
    driver_id: UUID
    broker_id: UUID | None
    status: str
    assigned_at: datetime
    released_at: datetime | None


class OwnedVehicleCreate(BaseModel):
    vehicle_number: str = Field(..., min_length=4, max_length=20)
    vehicle_type: str = Field(..., min_length=1, max_length=50)
    capacity: str = Field(..., min_length=1, max_length=50)


class HiredVehicleCreate(OwnedVehicleCreate):
    broker_id: UUID
    rate_per_trip: int | None = Field(None, ge=0)


class VehicleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    vehicle_number: str
    vehicle_type: str
    capacity: str
    status: str
    created_at: datetime


class HiredVehicleResponse(VehicleResponse):
    broker_id: UUID
    rate_per_trip: int | None


class AvailableVehiclesResponse(BaseModel):
    owned: list[VehicleResponse]
    hired: list[HiredVehicleResponse]


class DriverCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    phone: str = Field(..., min_length=6, max_length=20)
    license_number: str = Field(..., min_length=1, max_length=50)
    experience: str | None = Field(None, max_length=50)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        if not validate_indian_phone(v):
            raise ValueError("Invalid phone number")
        return v


class DriverResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    phone: str
    license_number: str
    experience: str | None
    status: str


class BrokerCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    contact_person: str | None = Field(None, max_length=200)
    phone: str | None = Field(None, max_length=20)


class BrokerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    contact_person: str | None
    phone: str | None
