"""Bearer JWT issue/verify for API authentication."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from elgar.config.settings import get_settings
from elgar.security.exceptions import UnauthenticatedError


def create_access_token(user_id: str, expires_minutes: Optional[int] = None) -> str:
    settings = get_settings()
    if expires_minutes is None:
        expires_minutes = settings.jwt_expiration_minutes
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "iat": now,
        "exp": now + timedelta(minutes=expires_minutes),
        "type": "access",
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> str:
    """Return the user id carried by token. Raises UnauthenticatedError if invalid or expired."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise UnauthenticatedError("Invalid or expired token") from e
    user_id = payload.get("sub")
    if not user_id:
        raise UnauthenticatedError("Invalid token")
    return user_id
