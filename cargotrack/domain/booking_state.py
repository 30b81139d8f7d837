"""Booking status state machine.

States: DRAFT, CONFIRMED, AT_WAREHOUSE, DISPATCHED, IN_TRANSIT, DELIVERED, CANCELLED

Any status may be requested from any other. What differs is the set of side
effects a change drags along, and that depends only on whether DELIVERED is
one of the two endpoints:

- entering DELIVERED releases the vehicle and closes the warehouse stay
- leaving DELIVERED reconstructs the vehicle/warehouse side from the timeline
- every other change is a plain status write
"""

from dataclasses import dataclass, field
from enum import Enum

from cargotrack.core.exceptions import ValidationError


class BookingStatus(str, Enum):
    """Booking lifecycle status."""

    DRAFT = "DRAFT"
    CONFIRMED = "CONFIRMED"
    AT_WAREHOUSE = "AT_WAREHOUSE"
    DISPATCHED = "DISPATCHED"
    IN_TRANSIT = "IN_TRANSIT"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class StatusTransition(str, Enum):
    """Kind of status change, decides which handler runs."""

    UNCHANGED = "unchanged"
    LATERAL = "lateral"
    ENTER_DELIVERED = "enter_delivered"
    LEAVE_DELIVERED = "leave_delivered"


class SideEffect(str, Enum):
    """Writes a status change performs before the status itself is written."""

    RELEASE_VEHICLE = "release_vehicle"
    CLOSE_CONSIGNMENT = "close_consignment"
    CLEAR_WAREHOUSE = "clear_warehouse"
    SET_ACTUAL_DELIVERY = "set_actual_delivery"
    RESTORE_FROM_HISTORY = "restore_from_history"
    CLEAR_ACTUAL_DELIVERY = "clear_actual_delivery"


# Statuses from which a vehicle assignment moves the booking to DISPATCHED
DISPATCHABLE_STATUSES = {
    BookingStatus.DRAFT,
    BookingStatus.CONFIRMED,
    BookingStatus.AT_WAREHOUSE,
}


# Vehicle assignment and warehouse placement are refused in these statuses
CLOSED_STATUSES = {
    BookingStatus.DELIVERED,
    BookingStatus.CANCELLED,
}


@dataclass(frozen=True)
class TransitionPlan:
    """Ordered writes for one status change. The status write is always last."""

    current: BookingStatus
    target: BookingStatus
    kind: StatusTransition
    side_effects: tuple[SideEffect, ...] = field(default_factory=tuple)

    @property
    def writes_status(self) -> bool:
        return self.kind != StatusTransition.UNCHANGED


def parse_status(value: str) -> BookingStatus:
    """Validate a requested status value.

    Raises:
        ValidationError: If the value is not a known booking status
    """
    try:
        return BookingStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in BookingStatus)
        raise ValidationError(f"Invalid booking status: {value!r} (expected one of {allowed})")


def classify_transition(current: BookingStatus, target: BookingStatus) -> StatusTransition:
    """Classify a (current, target) pair."""
    if current == target:
        return StatusTransition.UNCHANGED
    if target == BookingStatus.DELIVERED:
        return StatusTransition.ENTER_DELIVERED
    if current == BookingStatus.DELIVERED:
        return StatusTransition.LEAVE_DELIVERED
    return StatusTransition.LATERAL


def plan_status_change(
    current: str,
    target: str,
    has_active_assignment: bool = False,
    has_warehouse_placement: bool = False,
) -> TransitionPlan:
    """Compute the full set of writes for a status change.

    Args:
        current: Booking's stored status
        target: Requested status
        has_active_assignment: Whether an ACTIVE vehicle assignment exists
        has_warehouse_placement: Whether the booking has a current warehouse

    Returns:
        TransitionPlan with side effects in execution order

    Raises:
        ValidationError: If either status is not a known booking status
    """
    current_status = parse_status(current)
    target_status = parse_status(target)
    kind = classify_transition(current_status, target_status)

    effects: list[SideEffect] = []
    if kind == StatusTransition.ENTER_DELIVERED:
        if has_active_assignment:
            effects.append(SideEffect.RELEASE_VEHICLE)
        if has_warehouse_placement:
            effects.append(SideEffect.CLOSE_CONSIGNMENT)
            effects.append(SideEffect.CLEAR_WAREHOUSE)
        effects.append(SideEffect.SET_ACTUAL_DELIVERY)
    elif kind == StatusTransition.LEAVE_DELIVERED:
        effects.append(SideEffect.RESTORE_FROM_HISTORY)
        effects.append(SideEffect.CLEAR_ACTUAL_DELIVERY)

    return TransitionPlan(
        current=current_status,
        target=target_status,
        kind=kind,
        side_effects=tuple(effects),
    )
