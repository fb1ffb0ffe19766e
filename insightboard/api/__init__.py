"""HTTP routes."""

from fastapi import APIRouter

from insightboard.api import auth, health, kpis, me

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(me.router, prefix="/me", tags=["me"])
router.include_router(kpis.router, prefix="/kpis", tags=["kpis"])
