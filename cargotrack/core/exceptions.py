"""Custom application exceptions."""

from typing import Any

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application exception."""

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class ValidationError(AppException):
    """Validation error exception."""

    def __init__(self, detail: str = "Validation failed", errors: list[dict[str, Any]] | None = None) -> None:
        self.errors = errors
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)


class NotFoundError(AppException):
    """Resource not found exception."""

    def __init__(self, resource: str = "Resource", identifier: str | None = None) -> None:
        detail = f"{resource} not found"
        if identifier:
            detail = f"{resource} with ID '{identifier}' not found"
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class AuthenticationError(AppException):
    """Authentication failed exception."""

    def __init__(self, detail: str = "Authentication failed") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class PreconditionFailed(AppException):
    """Operation rejected before any write because the booking is in the wrong state."""

    def __init__(self, detail: str = "This operation is not allowed in the booking's current state") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class NoActiveAssignment(PreconditionFailed):
    """Unassign requested but the booking has no ACTIVE vehicle assignment."""

    def __init__(self, detail: str = "No active assignment to unassign") -> None:
        super().__init__(detail=detail)


class AssignmentAlreadyActive(PreconditionFailed):
    """Booking already has an ACTIVE vehicle assignment."""

    def __init__(self, detail: str = "Assignment already active; unassign the current vehicle first") -> None:
        super().__init__(detail=detail)


class VehicleNotAvailable(PreconditionFailed):
    """Vehicle registry reports the vehicle as not AVAILABLE."""

    def __init__(self, vehicle_number: str | None = None, current_status: str | None = None) -> None:
        detail = "Vehicle not available"
        if vehicle_number:
            detail = f"Vehicle {vehicle_number} not available"
        if current_status:
            detail = f"{detail} (status: {current_status})"
        super().__init__(detail=detail)


class BookingNotInWarehouse(PreconditionFailed):
    """Warehouse removal requested for a booking with no warehouse placement."""

    def __init__(self, detail: str = "Booking is not in any warehouse") -> None:
        super().__init__(detail=detail)


class BookingDeletionRefused(PreconditionFailed):
    """Booking still holds an active assignment or a warehouse placement."""

    def __init__(self, detail: str = "Booking cannot be deleted in its current state") -> None:
        super().__init__(detail=detail)


class BookingClosed(PreconditionFailed):
    """Vehicle or warehouse change requested on a DELIVERED or CANCELLED booking."""

    def __init__(self, status: str) -> None:
        super().__init__(detail=f"Booking is {status}; change its status before assigning a vehicle or warehouse")
