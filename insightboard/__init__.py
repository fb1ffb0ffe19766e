"""InsightBoard: role-scoped KPI dashboard API."""

__version__ = "0.1.0"
