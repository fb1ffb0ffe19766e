"""Domain services: credential store and KPI query engine."""
