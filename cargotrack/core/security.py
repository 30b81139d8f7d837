"""Bearer tokens that identify the acting user.

Tokens are issued by the identity service; this side only decodes them to
attribute timeline entries and warehouse logs. ``create_access_token`` exists
for scripts and tests that need to act as a given user.
"""

from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

from jose import JWTError, jwt

from cargotrack.config import settings
from cargotrack.core.exceptions import AuthenticationError


def create_access_token(
    subject: UUID | str,
    expires_delta: timedelta | None = None,
    **claims: Any,
) -> str:
    """Create a JWT access token for a user id."""
    expire = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    payload = {**claims, "sub": str(subject), "exp": expire, "type": "access"}
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_token(token: str, token_type: str = "access") -> dict[str, Any]:
    """Verify and decode a JWT token."""
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as e:
        raise AuthenticationError(f"Token validation failed: {str(e)}")

    if payload.get("type") != token_type:
        raise AuthenticationError("Invalid token type")
    return payload


def acting_user_id(token: str) -> UUID:
    """User id carried in the token's ``sub`` claim.

    Raises:
        AuthenticationError: Token is invalid or its subject is not a user id
    """
    subject = verify_token(token).get("sub")
    if not subject:
        raise AuthenticationError("Invalid token payload")
    try:
        return UUID(subject)
    except ValueError:
        raise AuthenticationError("Invalid token subject")
