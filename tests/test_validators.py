import pytest

from cargotrack.core.exceptions import ValidationError
from cargotrack.services.fleet_service import fleet_service
from cargotrack.utils.validators import (
    format_vehicle_number,
    normalize_vehicle_number,
    validate_indian_phone,
    validate_vehicle_number,
)


@pytest.mark.parametrize("number", ["MH12AB1234", "mh-12-ab-1234", "MH12A1234", "DL1CAB1234", "GJ 01 XY 9999"])
def test_valid_vehicle_numbers(number):
    assert validate_vehicle_number(number)


@pytest.mark.parametrize("number", ["", "XX12AB1234", "MH12AB123", "1234MH12", "MH12ABCD1234"])
def test_invalid_vehicle_numbers(number):
    assert not validate_vehicle_number(number)


def test_vehicle_number_formatting():
    assert normalize_vehicle_number("mh-12 ab-1234") == "MH12AB1234"
    assert format_vehicle_number("mh12ab1234") == "MH-12-AB-1234"


@pytest.mark.parametrize(
    "phone,valid",
    [
        ("9876543210", True),
        ("+91 98765 43210", True),
        ("09876543210", True),
        ("1234567890", False),
        ("98765", False),
    ],
)
def test_indian_phone(phone, valid):
    assert validate_indian_phone(phone) is valid


async def test_registry_rejects_malformed_number(db):
    with pytest.raises(ValidationError):
        await fleet_service.create_owned_vehicle(
            db, vehicle_number="TRUCK-1", vehicle_type="32FT MXL", capacity="15 MT"
        )


async def test_registry_stores_normalized_number(db):
    vehicle = await fleet_service.create_owned_vehicle(
        db, vehicle_number="mh-04 ab-1234", vehicle_type="32FT MXL", capacity="15 MT"
    )
    assert vehicle.vehicle_number == "MH04AB1234"
