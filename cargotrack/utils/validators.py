"""Custom validation utilities."""

import re

# RTO state codes accepted in registration numbers
INDIAN_STATE_CODES = {
    "AN", "AP", "AR", "AS", "BR", "CH", "CG", "DD", "DL", "DN", "GA", "GJ",
    "HP", "HR", "JH", "JK", "KA", "KL", "LA", "LD", "MH", "ML", "MN", "MP",
    "MZ", "NL", "OD", "OR", "PB", "PY", "RJ", "SK", "TN", "TR", "TS", "UP",
    "UK", "WB",
}

# MH12AB1234, MH12A1234, DL1CAB1234
VEHICLE_NUMBER_PATTERN = re.compile(r"^([A-Z]{2})(\d{1,2})([A-Z]{1,3})(\d{4})$")


def normalize_vehicle_number(vehicle_number: str) -> str:
    """Strip spaces and dashes and uppercase a registration number.

    Args:
        vehicle_number: Registration as typed, e.g. "mh-12 ab-1234"

    Returns:
        str: Compact form like MH12AB1234
    """
    return re.sub(r"[\s\-]", "", vehicle_number).upper()


def validate_vehicle_number(vehicle_number: str) -> bool:
    """Validate an Indian vehicle registration number.

    Accepted formats (after normalization):
    - XX00XX0000 (standard, e.g. MH12AB1234)
    - XX00X0000 (older series, e.g. MH12A1234)
    - XX0XXX0000 (single-digit RTO, e.g. DL1CAB1234)

    Args:
        vehicle_number: Registration number, with or without separators

    Returns:
        bool: True if the format and state code are valid
    """
    match = VEHICLE_NUMBER_PATTERN.match(normalize_vehicle_number(vehicle_number))
    if not match:
        return False
    return match.group(1) in INDIAN_STATE_CODES


def format_vehicle_number(vehicle_number: str) -> str:
    """Format a registration number with dashes, e.g. MH-12-AB-1234."""
    match = VEHICLE_NUMBER_PATTERN.match(normalize_vehicle_number(vehicle_number))
    if not match:
        return vehicle_number
    return "-".join(match.groups())


def validate_indian_phone(phone: str) -> bool:
    """Validate an Indian mobile number.

    Accepted formats:
    - 9876543210 (10 digits)
    - +919876543210 / 919876543210 (with country code)
    - 09876543210 (trunk prefix)
    """
    cleaned = re.sub(r"[\s\-\(\)]", "", phone)

    if cleaned.startswith("+91"):
        cleaned = cleaned[3:]
    elif cleaned.startswith("91") and len(cleaned) == 12:
        cleaned = cleaned[2:]
    elif cleaned.startswith("0") and len(cleaned) == 11:
        cleaned = cleaned[1:]

    return bool(re.match(r"^[6-9]\d{9}$", cleaned))
