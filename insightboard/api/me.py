"""Identity of the authenticated caller."""

from typing import Annotated

from fastapi import APIRouter, Depends

from insightboard.api.deps import get_current_user
from insightboard.schemas.auth import CurrentUser

router = APIRouter()


@router.get("", response_model=CurrentUser)
def get_me(current_user: Annotated[CurrentUser, Depends(get_current_user)]) -> CurrentUser:
    """Return id, email and role as carried by the bearer token."""
    return current_user
