"""Core app configuration, database, and security."""

from insightboard.core.config import Settings, get_settings
from insightboard.core.database import get_db

__all__ = ["Settings", "get_settings", "get_db"]
