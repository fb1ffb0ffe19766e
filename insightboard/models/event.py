"""ORM model for the append-only business event log."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, func

from insightboard.models.base import Base


class Event(Base):
    """
    One business action (sale, refund, ...) attributed to a user.

    amount_cents is a signed integer; money never goes through floats.
    """

    __tablename__ = "events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    type = Column(String(64), nullable=False, index=True)
    amount_cents = Column(Integer, nullable=False, default=0, server_default="0")
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        index=True,
    )
