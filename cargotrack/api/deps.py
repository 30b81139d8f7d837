"""API dependencies for acting-user attribution and common operations."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from cargotrack.core.security import acting_user_id
from cargotrack.database import get_db

__all__ = ["ActingUser", "get_acting_user_id", "get_db"]


async def get_acting_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(HTTPBearer(auto_error=False))],
) -> UUID | None:
    """Resolve the acting user id from an optional bearer token.

    Anonymous requests are allowed and attributed to nobody. A token that is
    present but invalid is rejected rather than ignored.
    """
    if not credentials:
        return None
    return acting_user_id(credentials.credentials)


ActingUser = Annotated[UUID | None, Depends(get_acting_user_id)]
