"""Booking, consignment and warehouse code generation utilities."""

import random
import string

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession


async def generate_booking_number(db: AsyncSession) -> str:
    """Generate a unique booking number in format BKG-XXXXXX.

    Args:
        db: Database session for uniqueness check

    Returns:
        str: Unique booking number like 'BKG-A3B7K9'
    """
    from cargotrack.models.booking import Booking

    while True:
        # Generate 6 alphanumeric characters (uppercase + digits)
        chars = string.ascii_uppercase + string.digits
        random_part = "".join(random.choices(chars, k=6))
        booking_number = f"BKG-{random_part}"

        # Check uniqueness
        result = await db.execute(
            select(Booking).where(Booking.booking_number == booking_number)
        )
        if not result.scalar_one_or_none():
            return booking_number


def generate_consignment_number() -> str:
    """Generate a consignment number.

    Returns:
        str: Consignment number like 'CNS-K9M2X7'
    """
    random_part = "".join(random.choices(string.ascii_uppercase + string.digits, k=6))
    return f"CNS-{random_part}"


async def generate_warehouse_code(db: AsyncSession) -> str:
    """Generate a unique warehouse code like 'W482'."""
    from cargotrack.models.warehouse import Warehouse

    while True:
        code = f"W{random.randint(100, 999)}"
        result = await db.execute(select(Warehouse).where(Warehouse.code == code))
        if not result.scalar_one_or_none():
            return code
