"""Registration and login. Tokens are stateless; there is no logout endpoint."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from insightboard.api.deps import authenticate, get_app_settings, security
from insightboard.core.config import Settings
from insightboard.core.database import get_db
from insightboard.core.security import (
    ROLE_ADMIN,
    create_access_token,
    hash_password,
    verify_password,
)
from insightboard.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
    UserOut,
)
from insightboard.services.users import (
    DuplicateEmailError,
    find_by_email,
    insert_user,
    normalize_email,
    resolve_role,
)

logger = logging.getLogger(__name__)
router = APIRouter()

MISSING_FIELDS_DETAIL = "email and password required"
INVALID_CREDENTIALS_DETAIL = "Invalid credentials"
SERVER_ERROR_DETAIL = "Server error"


def _require_fields(email: str | None, password: str | None) -> tuple[str, str]:
    if not email or not email.strip() or not password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=MISSING_FIELDS_DETAIL,
        )
    return email, password


def _check_admin_grant(
    credentials: HTTPAuthorizationCredentials | None,
    settings: Settings,
) -> None:
    """With self-registration of admins disabled, only an existing admin may create one."""
    if settings.ALLOW_ADMIN_SELF_REGISTRATION:
        return
    if credentials is not None:
        try:
            caller = authenticate(credentials, settings)
        except HTTPException:
            caller = None
        if caller is not None and caller.role == ROLE_ADMIN:
            return
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="Admin access required",
    )


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> RegisterResponse:
    """
    Create a user. The role is 'user' unless 'admin' is requested explicitly.
    Emails are trimmed and lowercased, so case variants collide with 409.
    """
    email, password = _require_fields(body.email, body.password)
    role = resolve_role(body.role)
    if role == ROLE_ADMIN:
        _check_admin_grant(credentials, settings)

    try:
        user = insert_user(db, normalize_email(email), hash_password(password), role)
    except DuplicateEmailError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    except SQLAlchemyError as e:
        logger.exception("Registration failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=SERVER_ERROR_DETAIL,
        ) from e
    return RegisterResponse(user=UserOut.model_validate(user))


@router.post("/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> TokenResponse:
    """
    Authenticate with email and password; returns a JWT valid for JWT_EXPIRE_MINUTES.
    Include the token in the Authorization header as: Bearer <token>
    """
    email, password = _require_fields(body.email, body.password)

    try:
        user = find_by_email(db, email)
    except SQLAlchemyError as e:
        logger.exception("Login lookup failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=SERVER_ERROR_DETAIL,
        ) from e

    # Same response for unknown email and wrong password.
    if user is None or not verify_password(password, user.password_hash):
        logger.info("Login rejected", extra={"email_domain": normalize_email(email).partition("@")[2]})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_CREDENTIALS_DETAIL,
        )

    token = create_access_token(user.id, user.email, user.role, settings)
    return TokenResponse(token=token)
