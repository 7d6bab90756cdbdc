"""Token authentication and role checks.

Tokens are HS256 JWTs whose payload carries the signed-in user under
``current_user``. The ``Authorization`` header may hold the raw token or
``Bearer <token>``.
"""
import logging
from datetime import UTC, datetime, timedelta
from uuid import UUID

from fastapi import Depends, Header, HTTPException
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel
from sqlmodel import Session

from app.core.config import settings
from app.core.database import get_session
from app.models import Event

logger = logging.getLogger(__name__)

ROLE_SUDO = 10
ROLE_ADMIN = 20

# Tells the frontend to send the user back to the login page
TOKEN_EXPIRED_STATUS = 419


class CurrentUser(BaseModel):
    id: int
    club_id: int | None = None
    role: int | None = None

    @property
    def is_sudo(self) -> bool:
        return self.role == ROLE_SUDO

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def create_access_token(user: CurrentUser, expires_delta: timedelta | None = None) -> str:
    """Sign a token for ``user``."""
    expire = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    payload = {"current_user": user.model_dump(), "exp": expire}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.token_algorithm)


def decode_access_token(token: str) -> CurrentUser:
    """Verify ``token`` and return its user. Raises jose errors."""
    payload = jwt.decode(token, settings.secret_key, algorithms=[settings.token_algorithm])
    current_user = payload.get("current_user")
    if not current_user:
        raise JWTError("Token has no current_user")
    return CurrentUser.model_validate(current_user)


def _extract_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, credentials = authorization.partition(" ")
    if credentials and scheme.lower() == "bearer":
        return credentials.strip()
    return authorization.strip()


def get_current_user(authorization: str | None = Header(default=None)) -> CurrentUser:
    """Dependency requiring a valid token."""
    token = _extract_token(authorization)
    if not token:
        logger.warning("Access denied: no token")
        raise HTTPException(status_code=401, detail="Access denied")
    try:
        return decode_access_token(token)
    except ExpiredSignatureError:
        raise HTTPException(
            status_code=TOKEN_EXPIRED_STATUS,
            detail="Token expired, Please login again!",
        )
    except (JWTError, ValueError) as e:
        logger.warning(f"Invalid token: {e}")
        raise HTTPException(status_code=401, detail="Invalid token")


def get_optional_user(authorization: str | None = Header(default=None)) -> CurrentUser | None:
    """Dependency returning the user if a valid token was sent, else None."""
    token = _extract_token(authorization)
    if not token:
        return None
    try:
        return decode_access_token(token)
    except (JWTError, ValueError):
        return None


def require_sudo(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.is_sudo:
        raise HTTPException(status_code=401, detail="Invalid request")
    return user


def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Admins of a club, and sudo users."""
    if not (user.is_admin or user.is_sudo):
        raise HTTPException(status_code=401, detail="Invalid request")
    return user


def require_event_author(
    event_id: UUID,
    user: CurrentUser = Depends(require_admin),
    session: Session = Depends(get_session),
) -> CurrentUser:
    """Sudo users, or admins of the club that owns the event in the path."""
    if user.is_sudo:
        return user

    event = session.get(Event, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    if event.club_id != user.club_id:
        raise HTTPException(status_code=401, detail="Access denied")
    return user


def require_club_author(
    club_id: int,
    user: CurrentUser = Depends(require_admin),
) -> CurrentUser:
    """Sudo users, or admins acting on their own club (``club_id`` query)."""
    if user.is_sudo or user.club_id == club_id:
        return user
    raise HTTPException(status_code=401, detail="Access denied")
