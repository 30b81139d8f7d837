"""Core utilities: exceptions, security, logging and middleware."""

from cargotrack.core.exceptions import (
    AppException,
    AssignmentAlreadyActive,
    AuthenticationError,
    BookingClosed,
    BookingDeletionRefused,
    BookingNotInWarehouse,
    NoActiveAssignment,
    NotFoundError,
    PreconditionFailed,
    ValidationError,
    VehicleNotAvailable,
)
from cargotrack.core.security import acting_user_id, create_access_token, verify_token

__all__ = [
    "AppException",
    "AssignmentAlreadyActive",
    "AuthenticationError",
    "BookingClosed",
    "BookingDeletionRefused",
    "BookingNotInWarehouse",
    "NoActiveAssignment",
    "NotFoundError",
    "PreconditionFailed",
    "ValidationError",
    "VehicleNotAvailable",
    "acting_user_id",
    "create_access_token",
    "verify_token",
]
