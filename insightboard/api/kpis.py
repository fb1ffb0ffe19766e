"""KPI endpoints for the dashboard: summary cards, daily revenue series, top event types."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from insightboard.api.deps import get_current_user
from insightboard.core.database import get_db
from insightboard.schemas.auth import CurrentUser
from insightboard.schemas.kpis import DailyRevenuePoint, KpiSummary, TopEventType
from insightboard.services import kpis
from insightboard.services.kpis import KpiQueryError

logger = logging.getLogger(__name__)
router = APIRouter()


def _query_failed(e: KpiQueryError, endpoint: str, caller: CurrentUser) -> HTTPException:
    logger.error(
        "KPI query failed",
        exc_info=e.cause or e,
        extra={"endpoint": endpoint, "user_id": caller.id, "role": caller.role},
    )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=e.message,
    )


@router.get("/summary", response_model=KpiSummary)
def get_summary(
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> KpiSummary:
    """
    Event count and revenue_cents (sales minus refunds) for the caller's scope.
    Admins additionally get active_users; regular users get active_days.
    """
    try:
        return kpis.summary(db, kpis.scope_for(current_user))
    except KpiQueryError as e:
        raise _query_failed(e, "summary", current_user) from e


@router.get("/daily", response_model=list[DailyRevenuePoint])
def get_daily(
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> list[DailyRevenuePoint]:
    """Revenue per day for the last 14 days, oldest first. Divide by 100 for display only."""
    try:
        return kpis.daily(db, kpis.scope_for(current_user))
    except KpiQueryError as e:
        raise _query_failed(e, "daily", current_user) from e


@router.get("/top", response_model=list[TopEventType])
def get_top(
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> list[TopEventType]:
    """Top 5 event types by row count."""
    try:
        return kpis.top(db, kpis.scope_for(current_user))
    except KpiQueryError as e:
        raise _query_failed(e, "top", current_user) from e
