"""Booking endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from cargotrack.api.deps import ActingUser, get_db
from cargotrack.schemas.booking import (
    BookingCreate,
    BookingListResponse,
    BookingResponse,
    BookingStatusUpdate,
    TimelineEntryResponse,
    WarehousePlacement,
)
from cargotrack.schemas.fleet import AssignmentCreate, AssignmentResponse
from cargotrack.services.booking_service import booking_service

router = APIRouter()


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    request: BookingCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    acting_user: ActingUser,
) -> BookingResponse:
    """Create a new DRAFT booking."""
    booking = await booking_service.create_booking(
        db,
        created_by=acting_user,
        **request.model_dump(),
    )
    return BookingResponse.model_validate(booking)


@router.get("", response_model=BookingListResponse)
async def list_bookings(
    db: Annotated[AsyncSession, Depends(get_db)],
    status_filter: str | None = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
) -> BookingListResponse:
    """List bookings, newest first."""
    bookings, total = await booking_service.list_bookings(
        db, status=status_filter, page=page, page_size=page_size
    )
    return BookingListResponse(
        bookings=[BookingResponse.model_validate(b) for b in bookings],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BookingResponse:
    """Get booking details."""
    booking = await booking_service.get_booking(db, booking_id)
    return BookingResponse.model_validate(booking)


@router.delete("/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_booking(
    booking_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Response:
    """Delete a booking that holds no vehicle and no warehouse placement."""
    await booking_service.delete_booking(db, booking_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{booking_id}/status", response_model=BookingResponse)
async def update_booking_status(
    booking_id: UUID,
    request: BookingStatusUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    acting_user: ActingUser,
) -> BookingResponse:
    """Change booking status.

    Entering DELIVERED releases the vehicle and closes the open consignment;
    leaving it restores the last vehicle or warehouse from the timeline.
    """
    booking = await booking_service.set_status(
        db, booking_id, request.status, performed_by=acting_user
    )
    return BookingResponse.model_validate(booking)


@router.post(
    "/{booking_id}/assignment",
    response_model=AssignmentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def assign_vehicle(
    booking_id: UUID,
    request: AssignmentCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    acting_user: ActingUser,
) -> AssignmentResponse:
    """Assign a vehicle and driver to the booking."""
    assignment = await booking_service.assign_vehicle(
        db,
        booking_id,
        vehicle_type=request.vehicle_type,
        vehicle_id=request.vehicle_id,
        driver_id=request.driver_id,
        broker_id=request.broker_id,
        performed_by=acting_user,
    )
    return AssignmentResponse.model_validate(assignment)


@router.delete("/{booking_id}/assignment", response_model=AssignmentResponse)
async def unassign_vehicle(
    booking_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    acting_user: ActingUser,
) -> AssignmentResponse:
    """Release the booking's active vehicle."""
    assignment = await booking_service.unassign_vehicle(db, booking_id, performed_by=acting_user)
    return AssignmentResponse.model_validate(assignment)


@router.put("/{booking_id}/warehouse", response_model=BookingResponse)
async def move_to_warehouse(
    booking_id: UUID,
    request: WarehousePlacement,
    db: Annotated[AsyncSession, Depends(get_db)],
    acting_user: ActingUser,
) -> BookingResponse:
    """Move the goods into a warehouse."""
    booking = await booking_service.move_to_warehouse(
        db, booking_id, request.warehouse_id, performed_by=acting_user
    )
    return BookingResponse.model_validate(booking)


@router.delete("/{booking_id}/warehouse", response_model=BookingResponse)
async def remove_from_warehouse(
    booking_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    acting_user: ActingUser,
) -> BookingResponse:
    """Take the goods out of their warehouse."""
    booking = await booking_service.remove_from_warehouse(db, booking_id, performed_by=acting_user)
    return BookingResponse.model_validate(booking)


@router.get("/{booking_id}/timeline", response_model=list[TimelineEntryResponse])
async def get_booking_timeline(
    booking_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[TimelineEntryResponse]:
    """Booking timeline, oldest first."""
    entries = await booking_service.get_timeline(db, booking_id)
    return [TimelineEntryResponse.model_validate(e) for e in entries]
