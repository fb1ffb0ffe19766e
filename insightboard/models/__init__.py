"""SQLAlchemy ORM models."""

from insightboard.models.base import Base
from insightboard.models.event import Event
from insightboard.models.user import User

__all__ = ["Base", "Event", "User"]
