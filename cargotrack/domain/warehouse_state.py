"""Consignment (warehouse stay) states.

A consignment is open while departure_date is null. It is opened with status
IN_WAREHOUSE and closed into one of the other three, chosen by why the goods
left the warehouse.
"""

from enum import Enum


class ConsignmentStatus(str, Enum):
    IN_WAREHOUSE = "IN_WAREHOUSE"
    IN_TRANSIT = "IN_TRANSIT"
    DEPARTED = "DEPARTED"
    DELIVERED = "DELIVERED"


class DepartureReason(str, Enum):
    VEHICLE_ASSIGNMENT = "VEHICLE_ASSIGNMENT"
    MANUAL_REMOVAL = "MANUAL_REMOVAL"
    DELIVERY = "DELIVERY"


class WarehouseLogType(str, Enum):
    INCOMING = "INCOMING"
    OUTGOING = "OUTGOING"


class WarehouseStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


CLOSING_STATUS_BY_REASON: dict[DepartureReason, ConsignmentStatus] = {
    DepartureReason.VEHICLE_ASSIGNMENT: ConsignmentStatus.IN_TRANSIT,
    DepartureReason.DELIVERY: ConsignmentStatus.DELIVERED,
    DepartureReason.MANUAL_REMOVAL: ConsignmentStatus.DEPARTED,
}

OUTGOING_NOTES_BY_REASON: dict[DepartureReason, str] = {
    DepartureReason.VEHICLE_ASSIGNMENT: "Vehicle assigned for delivery - goods dispatched from warehouse",
    DepartureReason.DELIVERY: "Goods delivered - booking completed",
    DepartureReason.MANUAL_REMOVAL: "Goods removed from warehouse",
}


def closing_status(reason: DepartureReason) -> ConsignmentStatus:
    """Consignment status to record when goods leave for the given reason."""
    return CLOSING_STATUS_BY_REASON[reason]
