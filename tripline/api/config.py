# tripline/api/config.py
"""Configuration management for the trip planner API."""
import os
from dotenv import load_dotenv

load_dotenv()

DEFAULT_STOPS_PER_DAY = 1


class ConfigurationError(RuntimeError):
    """Raised when an environment setting holds an unusable value."""


def get_stops_per_day():
    """Get the number of stops that make up one day by default.

    Shared by the route-segment partitioner and the day-assignment helpers,
    so segment colors always agree with the day labels shown for each stop.
    """
    raw = os.getenv("TRIPLINE_STOPS_PER_DAY", str(DEFAULT_STOPS_PER_DAY))
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"TRIPLINE_STOPS_PER_DAY must be an integer, got {raw!r}")
    if value < 1:
        raise ConfigurationError("TRIPLINE_STOPS_PER_DAY must be at least 1")
    return value


def get_routing_config():
    """Get OSRM road-routing configuration."""
    return {
        "base_url": os.getenv("OSRM_BASE_URL", "https://router.project-osrm.org").rstrip("/"),
        "timeout": float(os.getenv("OSRM_TIMEOUT_SECONDS", "20")),
    }


def get_places_config():
    """Get OpenStreetMap place lookup configuration."""
    return {
        "overpass_url": os.getenv("OVERPASS_URL", "https://overpass-api.de/api/interpreter"),
        "nominatim_url": os.getenv("NOMINATIM_URL", "https://nominatim.openstreetmap.org/search"),
        "psgc_url": os.getenv("PSGC_BASE_URL", "https://psgc.gitlab.io/api").rstrip("/"),
        "country_codes": os.getenv("NOMINATIM_COUNTRY_CODES", "ph"),
        "search_limit": int(os.getenv("NOMINATIM_SEARCH_LIMIT", "15")),
        "user_agent": os.getenv("TRIPLINE_USER_AGENT", "Tripline/1.0 (trip planner)"),
        "timeout": float(os.getenv("PLACES_TIMEOUT_SECONDS", "35")),
    }


def get_google_maps_config():
    """Get Google Maps configuration."""
    return {
        "api_key": os.getenv("GOOGLE_MAPS_API_KEY", ""),
    }


def get_port():
    """Get port configuration."""
    return int(os.getenv("PORT", 5000))
