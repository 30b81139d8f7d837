"""Vehicle registry and assignment states."""

from enum import Enum


class VehicleType(str, Enum):
    """Vehicle ownership class."""

    OWNED = "OWNED"
    HIRED = "HIRED"


class VehicleStatus(str, Enum):
    """Registry availability flag.

    Owned vehicles use AVAILABLE/OCCUPIED/MAINTENANCE/INACTIVE,
    hired vehicles use AVAILABLE/OCCUPIED/RELEASED.
    """

    AVAILABLE = "AVAILABLE"
    OCCUPIED = "OCCUPIED"
    MAINTENANCE = "MAINTENANCE"
    INACTIVE = "INACTIVE"
    RELEASED = "RELEASED"


class AssignmentStatus(str, Enum):
    """Vehicle assignment lifecycle: ACTIVE → COMPLETED."""

    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"


class ServiceType(str, Enum):
    """Full or part truck load."""

    FTL = "FTL"
    PTL = "PTL"
