"""Append-only enforcement for audit records using SQLAlchemy events."""

import logging
from datetime import UTC, datetime

from sqlalchemy import event

from cargotrack.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

_registered = False


class ImmutabilityViolationError(ValidationError):
    """Raised when attempting to modify an append-only record."""

    def __init__(self, model_name: str, operation: str, record_id: str):
        self.model_name = model_name
        self.operation = operation
        self.record_id = record_id
        super().__init__(
            f"Immutability violation: Cannot {operation} {model_name} record {record_id}. "
            "Audit records are append-only."
        )


def _log_immutability_violation(model_name: str, operation: str, record_id: str) -> None:
    """Log immutability violation for audit purposes."""
    logger.error(
        f"IMMUTABILITY_VIOLATION: Attempted to {operation} {model_name} "
        f"record_id={record_id} at {datetime.now(UTC).isoformat()}"
    )


def _reject(model_name: str, operation: str):
    def listener(mapper, connection, target):
        _log_immutability_violation(model_name, operation, str(target.id))
        raise ImmutabilityViolationError(model_name, operation, str(target.id))

    return listener


def register_immutability_enforcement() -> None:
    """Register SQLAlchemy event listeners for the timeline and warehouse logs.

    Must be called after models are imported but before session use. Safe to
    call more than once. Bulk deletes issued with ``delete()`` statements are
    not intercepted; booking purges rely on that.
    """
    global _registered
    if _registered:
        return

    from cargotrack.models.booking import TimelineEntry
    from cargotrack.models.warehouse import WarehouseLog

    # ============ TimelineEntry: Append-Only ============
    event.listen(TimelineEntry, "before_update", _reject("TimelineEntry", "UPDATE"))
    event.listen(TimelineEntry, "before_delete", _reject("TimelineEntry", "DELETE"))

    # ============ WarehouseLog: Append-Only ============
    event.listen(WarehouseLog, "before_update", _reject("WarehouseLog", "UPDATE"))
    event.listen(WarehouseLog, "before_delete", _reject("WarehouseLog", "DELETE"))

    _registered = True
    logger.info("Immutability enforcement registered for timeline and warehouse logs")
