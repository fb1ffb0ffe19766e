"""
KPI query engine: role-scoped aggregates over the event log.

Every query takes an explicit scope. AdminScope reads all rows; UserScope(owner_id)
restricts rows to events.user_id == owner_id. Money is summed in SQL as integers.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Union

from sqlalchemy import Select, case, distinct, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from insightboard.core.security import ROLE_ADMIN
from insightboard.models import Event
from insightboard.schemas.kpis import (
    AdminKpiSummary,
    DailyRevenuePoint,
    KpiSummary,
    TopEventType,
    UserKpiSummary,
)

if TYPE_CHECKING:
    from insightboard.schemas.auth import CurrentUser

logger = logging.getLogger(__name__)

SALE = "sale"
REFUND = "refund"
DAILY_WINDOW_DAYS = 14
TOP_TYPES_LIMIT = 5


@dataclass(frozen=True)
class AdminScope:
    """No row filter."""


@dataclass(frozen=True)
class UserScope:
    """Rows owned by owner_id only."""

    owner_id: int


KpiScope = Union[AdminScope, UserScope]


class KpiQueryError(Exception):
    """Raised when a KPI query cannot be completed (store unavailable, SQL error)."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


def scope_for(caller: "CurrentUser") -> KpiScope:
    """Derive the row scope from the caller's role."""
    if caller.role == ROLE_ADMIN:
        return AdminScope()
    return UserScope(owner_id=caller.id)


def apply_scope(stmt: Select, scope: KpiScope) -> Select:
    if isinstance(scope, AdminScope):
        return stmt
    if isinstance(scope, UserScope):
        return stmt.where(Event.user_id == scope.owner_id)
    raise TypeError(f"Unknown KPI scope: {scope!r}")


def _day():
    return func.date(Event.created_at)


def _typed_sum(event_type: str):
    return func.coalesce(
        func.sum(case((Event.type == event_type, Event.amount_cents), else_=0)),
        0,
    )


def _signed_revenue():
    """Per-row revenue: sales positive, refunds negative, everything else zero."""
    return func.coalesce(
        func.sum(
            case(
                (Event.type == SALE, Event.amount_cents),
                (Event.type == REFUND, -Event.amount_cents),
                else_=0,
            )
        ),
        0,
    )


def summary(db: Session, scope: KpiScope) -> KpiSummary:
    """
    Event count and revenue (sales minus refunds) over the scoped rows, plus
    active_users for admins or active_days for regular users.
    """
    base = apply_scope(
        select(
            func.count(Event.id).label("event_count"),
            _typed_sum(SALE).label("sales_cents"),
            _typed_sum(REFUND).label("refunds_cents"),
        ),
        scope,
    )
    try:
        row = db.execute(base).one()
        event_count = int(row.event_count)
        revenue_cents = int(row.sales_cents) - int(row.refunds_cents)

        if isinstance(scope, AdminScope):
            active_users = db.execute(
                select(func.count(distinct(Event.user_id)))
            ).scalar_one()
            return AdminKpiSummary(
                event_count=event_count,
                revenue_cents=revenue_cents,
                active_users=int(active_users),
            )

        active_days = db.execute(
            apply_scope(select(func.count(distinct(_day()))), scope)
        ).scalar_one()
    except SQLAlchemyError as e:
        raise KpiQueryError("Failed to compute KPIs", cause=e) from e
    return UserKpiSummary(
        event_count=event_count,
        revenue_cents=revenue_cents,
        active_days=int(active_days),
    )


def daily(db: Session, scope: KpiScope, now: datetime | None = None) -> list[DailyRevenuePoint]:
    """Signed revenue per calendar day for the trailing DAILY_WINDOW_DAYS, oldest first."""
    end = now or datetime.now(UTC)
    start = end - timedelta(days=DAILY_WINDOW_DAYS)
    day = _day().label("date")
    stmt = (
        apply_scope(select(day, _signed_revenue().label("revenue_cents")), scope)
        .where(Event.created_at >= start, Event.created_at <= end)
        .group_by(day)
        .order_by(day)
    )
    try:
        rows = db.execute(stmt).all()
    except SQLAlchemyError as e:
        raise KpiQueryError("Failed to compute daily KPIs", cause=e) from e
    return [
        DailyRevenuePoint(date=r.date, revenue_cents=int(r.revenue_cents)) for r in rows
    ]


def top(db: Session, scope: KpiScope) -> list[TopEventType]:
    """The TOP_TYPES_LIMIT most frequent event types; ties ordered by type name."""
    type_count = func.count(Event.id).label("type_count")
    stmt = (
        apply_scope(select(Event.type, type_count), scope)
        .group_by(Event.type)
        .order_by(type_count.desc(), Event.type.asc())
        .limit(TOP_TYPES_LIMIT)
    )
    try:
        rows = db.execute(stmt).all()
    except SQLAlchemyError as e:
        raise KpiQueryError("Failed to compute top KPIs", cause=e) from e
    return [TopEventType(type=r.type, count=int(r.type_count)) for r in rows]
