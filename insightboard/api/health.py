"""Liveness endpoint."""

from fastapi import APIRouter

from insightboard.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health() -> HealthResponse:
    """Return {"ok": true} while the process is serving requests. No auth, no DB access."""
    return HealthResponse(ok=True)
