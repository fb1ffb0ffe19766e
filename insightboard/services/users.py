"""Credential store: user lookup and creation keyed by normalized email."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from insightboard.core.security import ROLE_ADMIN, ROLE_USER
from insightboard.models import User

logger = logging.getLogger(__name__)


class DuplicateEmailError(Exception):
    """Raised when a user with the same normalized email already exists."""

    def __init__(self, email: str) -> None:
        self.email = email
        self.message = "Email already exists"
        super().__init__(self.message)


def normalize_email(email: str) -> str:
    """Trim and lowercase so case variants map to one account."""
    return email.strip().lower()


def resolve_role(requested: object) -> str:
    """Only an explicit 'admin' request yields admin; everything else is 'user'."""
    return ROLE_ADMIN if requested == ROLE_ADMIN else ROLE_USER


def find_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def insert_user(db: Session, email: str, password_hash: str, role: str) -> User:
    """
    Persist a new user. Raises DuplicateEmailError if the normalized email is taken,
    whether caught by the lookup or by the unique index on a concurrent insert.
    """
    normalized = normalize_email(email)
    if find_by_email(db, normalized) is not None:
        raise DuplicateEmailError(normalized)

    user = User(email=normalized, password_hash=password_hash, role=role)
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateEmailError(normalized) from e
    db.refresh(user)
    logger.info("User created", extra={"user_id": user.id, "role": user.role})
    return user
