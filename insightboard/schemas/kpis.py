"""Response schemas for KPI endpoints. All money values are integer cents."""

import datetime as dt

from pydantic import BaseModel, Field


class AdminKpiSummary(BaseModel):
    """Summary across every user's events."""

    event_count: int = Field(..., ge=0)
    revenue_cents: int = Field(..., description="Sales minus refunds, in cents")
    active_users: int = Field(..., ge=0, description="Distinct users with at least one event")


class UserKpiSummary(BaseModel):
    """Summary of the caller's own events."""

    event_count: int = Field(..., ge=0)
    revenue_cents: int = Field(..., description="Sales minus refunds, in cents")
    active_days: int = Field(..., ge=0, description="Distinct calendar days with events")


KpiSummary = AdminKpiSummary | UserKpiSummary


class DailyRevenuePoint(BaseModel):
    """One day of the trailing revenue series."""

    date: dt.date
    revenue_cents: int


class TopEventType(BaseModel):
    """Event type ranked by number of rows."""

    type: str
    count: int = Field(..., ge=0)
