"""Pydantic schemas for health check responses."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response body for the health check endpoint."""

    ok: bool = Field(default=True, description="True while the process is serving requests")
