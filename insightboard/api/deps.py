"""Request dependencies: settings, DB session, and the bearer-token auth gate."""

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from insightboard.core.config import Settings
from insightboard.core.security import InvalidTokenError, decode_access_token
from insightboard.schemas.auth import CurrentUser

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

BEARER_SCHEME = "Bearer"
INVALID_TOKEN_DETAIL = "Invalid or expired token"


def get_app_settings(request: Request) -> Settings:
    """Settings the app was constructed with."""
    return request.app.state.settings


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": BEARER_SCHEME},
    )


def authenticate(
    credentials: HTTPAuthorizationCredentials | None,
    settings: Settings,
) -> CurrentUser:
    """Verify `Authorization: Bearer <token>` and return the caller. Raises 401."""
    if credentials is None:
        raise _unauthorized("Not authenticated")
    if credentials.scheme != BEARER_SCHEME or not credentials.credentials.strip():
        raise _unauthorized("Not authenticated")
    try:
        identity = decode_access_token(credentials.credentials, settings)
    except InvalidTokenError:
        raise _unauthorized(INVALID_TOKEN_DETAIL)
    return CurrentUser(id=identity.id, email=identity.email, role=identity.role)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> CurrentUser:
    """Dependency: require a valid Bearer JWT and return the caller. Raises 401 if missing or invalid."""
    return authenticate(credentials, settings)
