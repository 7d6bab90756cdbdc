"""Authentication status routes."""
from fastapi import APIRouter, Depends

from app.core.security import CurrentUser, get_current_user, get_optional_user

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me", response_model=CurrentUser)
async def me(current_user: CurrentUser = Depends(get_current_user)):
    """Return the user the request's token was issued to."""
    return current_user


@router.get("/status")
async def auth_status(current_user: CurrentUser | None = Depends(get_optional_user)):
    """
    Check whether the request carries a valid token.

    Never fails; anonymous requests get ``logged_in: false``.
    """
    return {
        "logged_in": current_user is not None,
        "role": current_user.role if current_user else None,
    }
