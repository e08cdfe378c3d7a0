# tripline/api/geocoding.py
"""Place-name search through the Google Geocoding API.

Optional alternative to Nominatim: only active when GOOGLE_MAPS_API_KEY is
set. Results come back as the same ``Place`` objects the OSM lookups return.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import List, Optional, Tuple

import googlemaps
from googlemaps.exceptions import ApiError, HTTPError, Timeout, TransportError

from tripline.api.config import get_google_maps_config
from tripline.api.models import Place

logger = logging.getLogger(__name__)

_gmaps: googlemaps.Client | None = None


def _get_client() -> googlemaps.Client | None:
    """Return a cached googlemaps.Client instance, or None without a key."""
    global _gmaps
    if _gmaps is None:
        api_key = get_google_maps_config().get("api_key", "")
        if not api_key:
            logger.debug("No Google Maps API key configured")
            return None
        logger.info(f"Initializing Google Maps client with key: {api_key[:6]}...")
        _gmaps = googlemaps.Client(key=api_key)
    return _gmaps


def _bounds_from_bbox(bbox) -> dict:
    south, west, north, east = bbox
    return {
        "southwest": {"lat": south, "lng": west},
        "northeast": {"lat": north, "lng": east},
    }


def _parse_result(result: dict) -> Place:
    loc = result["geometry"]["location"]
    address = result.get("formatted_address", "")
    components = result.get("address_components") or []
    name = components[0]["long_name"] if components else address.split(",")[0].strip()
    types = result.get("types") or []
    place_id = result.get("place_id", "")
    return Place(
        id=f"google:{place_id}",
        name=name or address,
        coords=(float(loc["lng"]), float(loc["lat"])),
        url=f"https://www.google.com/maps/place/?q=place_id:{place_id}",
        address=address or None,
        place_type=types[0] if types else "place",
    )


@lru_cache(maxsize=1000)
def _geocode(query: str, bbox: Optional[tuple]) -> tuple:
    client = _get_client()
    kwargs = {"language": "en"}
    if bbox is not None:
        kwargs["bounds"] = _bounds_from_bbox(bbox)
    return tuple(_parse_result(r) for r in client.geocode(query, **kwargs))


def search_places_google(query: str, bbox=None) -> Tuple[List[Place], Optional[str]]:
    """Resolve a free-text place name to places, optionally biased to a bbox."""
    q = (query or "").strip()
    if not q:
        return [], None
    if _get_client() is None:
        return [], "Google geocoding is not configured"

    try:
        places = list(_geocode(q, tuple(bbox) if bbox is not None else None))
    except (ApiError, HTTPError, Timeout, TransportError) as e:
        logger.error(f"Geocoding error for '{q}': {e}")
        return [], str(e)

    if not places:
        logger.warning(f"No results found for place: {q}")
    else:
        logger.debug(f"Geocoded '{q}' to {len(places)} places")
    return places, None


__all__ = ["search_places_google"]
