"""Service layer for the trip planner API."""
