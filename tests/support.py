"""Shared builders for tests: settings, app with in-memory SQLite, and seeded rows."""

from datetime import datetime

from fastapi import FastAPI
from pydantic import SecretStr
from sqlalchemy.orm import Session

from insightboard.core.config import Settings
from insightboard.main import create_app
from insightboard.models import Base, Event, User

TEST_SECRET = "insightboard-test-secret-0123456789abcdef"
OTHER_SECRET = "some-other-secret-not-used-by-the-server-0123"


def make_settings(**overrides: object) -> Settings:
    """Settings that never touch a real database or the developer's .env."""
    values: dict[str, object] = {
        "APP_ENV": "dev",
        "LOG_LEVEL": "WARNING",
        "DATABASE_URL": "sqlite://",
        "JWT_SECRET": SecretStr(TEST_SECRET),
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_app(**overrides: object) -> FastAPI:
    """App bound to a fresh in-memory database with all tables created."""
    app = create_app(make_settings(**overrides))
    Base.metadata.create_all(bind=app.state.engine)
    return app


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def add_user(db: Session, email: str, role: str = "user", password_hash: str = "x") -> User:
    """Insert a user row directly, bypassing password hashing."""
    user = User(email=email, password_hash=password_hash, role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def add_event(
    db: Session,
    user_id: int,
    event_type: str,
    amount_cents: int,
    created_at: datetime,
) -> Event:
    event = Event(
        user_id=user_id,
        type=event_type,
        amount_cents=amount_cents,
        created_at=created_at,
    )
    db.add(event)
    db.commit()
    return event
