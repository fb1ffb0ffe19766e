"""ORM model for dashboard users (auth and role scoping)."""

from sqlalchemy import Column, DateTime, Integer, String, func

from insightboard.models.base import Base


class User(Base):
    """
    User account for JWT authentication and KPI scoping.

    email is stored normalized (trimmed, lowercase) so the unique index is
    effectively case-insensitive. role: 'admin' or 'user'
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default="user", server_default="user")
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
