"""Pydantic request/response schemas."""

from insightboard.schemas.auth import (
    CurrentUser,
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
    UserOut,
)
from insightboard.schemas.health import HealthResponse
from insightboard.schemas.kpis import (
    AdminKpiSummary,
    DailyRevenuePoint,
    KpiSummary,
    TopEventType,
    UserKpiSummary,
)

__all__ = [
    "AdminKpiSummary",
    "CurrentUser",
    "DailyRevenuePoint",
    "HealthResponse",
    "KpiSummary",
    "LoginRequest",
    "RegisterRequest",
    "RegisterResponse",
    "TokenResponse",
    "TopEventType",
    "UserKpiSummary",
    "UserOut",
]
