"""Timeline actions recorded per booking."""

from enum import Enum


class TimelineAction(str, Enum):
    BOOKING_CREATED = "BOOKING_CREATED"
    STATUS_CHANGED = "STATUS_CHANGED"
    VEHICLE_ASSIGNED = "VEHICLE_ASSIGNED"
    VEHICLE_UNASSIGNED = "VEHICLE_UNASSIGNED"
    ARRIVED_AT_WAREHOUSE = "ARRIVED_AT_WAREHOUSE"
    DEPARTED_FROM_WAREHOUSE = "DEPARTED_FROM_WAREHOUSE"
    DELIVERED = "DELIVERED"


# Actions read when reconstructing state after leaving DELIVERED
HISTORY_SIGNAL_ACTIONS = (
    TimelineAction.VEHICLE_ASSIGNED,
    TimelineAction.ARRIVED_AT_WAREHOUSE,
    TimelineAction.DEPARTED_FROM_WAREHOUSE,
)
