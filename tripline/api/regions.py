# tripline/api/regions.py
"""Supported regions and provinces, plus the PSGC province lookup.

PSGC is the Philippine Standard Geographic Code: https://psgc.gitlab.io/api/
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

import requests

from tripline.api.config import get_places_config

logger = logging.getLogger(__name__)


class RegionLookupError(Exception):
    """Raised when the PSGC service cannot be reached or answers badly."""


# (south_lat, west_lon, north_lat, east_lon), five provinces per region.
PROVINCE_BBOXES = {
    # Luzon
    "Batangas": (13.5, 120.6, 14.2, 121.2),
    "Cavite": (14.1, 120.3, 14.6, 121.0),
    "Laguna": (13.9, 121.0, 14.4, 121.6),
    "Pampanga": (14.8, 120.3, 15.2, 121.0),
    "Rizal": (14.4, 121.0, 14.8, 121.5),
    # Visayas
    "Cebu": (10.18, 123.78, 10.42, 124.0),
    "Bohol": (9.5, 123.5, 10.2, 124.2),
    "Negros Oriental": (9.1, 122.9, 10.0, 123.4),
    "Siquijor": (9.1, 123.5, 9.2, 123.6),
    "Iloilo": (10.5, 122.3, 11.2, 123.0),
    # Mindanao
    "Bukidnon": (7.5, 124.5, 8.5, 125.2),
    "Davao del Sur": (5.8, 125.2, 7.2, 126.0),
    "Misamis Oriental": (8.0, 124.5, 8.8, 125.2),
    "South Cotabato": (5.5, 124.2, 6.5, 125.5),
    "Zamboanga del Sur": (7.0, 122.0, 8.2, 122.8),
}

PROVINCES_BY_REGION = {
    "luzon": ["Batangas", "Cavite", "Laguna", "Pampanga", "Rizal"],
    "visayas": ["Cebu", "Bohol", "Negros Oriental", "Siquijor", "Iloilo"],
    "mindanao": ["Bukidnon", "Davao del Sur", "Misamis Oriental", "South Cotabato", "Zamboanga del Sur"],
}

REGIONS = [
    {"id": "luzon", "name": "Luzon"},
    {"id": "visayas", "name": "Visayas"},
    {"id": "mindanao", "name": "Mindanao"},
]

SUPPORTED_PROVINCE_NAMES = list(PROVINCE_BBOXES)

DEFAULT_PROVINCE = "Cebu"


def get_province_bbox(province: str):
    """Bounding box for a province name (case-insensitive), or None."""
    for name, bbox in PROVINCE_BBOXES.items():
        if name.lower() == (province or "").strip().lower():
            return bbox
    return None


def fetch_provinces() -> List[Dict]:
    """All provinces known to PSGC."""
    cfg = get_places_config()
    url = f"{cfg['psgc_url']}/provinces.json"
    try:
        response = requests.get(url, headers={"Accept": "application/json"}, timeout=cfg["timeout"])
    except requests.RequestException as e:
        raise RegionLookupError(f"PSGC: {e}") from e
    if not response.ok:
        raise RegionLookupError(f"PSGC: {response.reason}")
    try:
        data = response.json()
    except ValueError as e:
        raise RegionLookupError(f"PSGC: invalid JSON ({e})") from e
    return data if isinstance(data, list) else []


def filter_provinces_by_name(provinces: Iterable[Dict], allowed_names: Iterable[str]) -> List[Dict]:
    allowed = {n.lower() for n in allowed_names}
    return [p for p in provinces if p.get("name", "").lower() in allowed]


def provinces_by_region(fetched: Optional[Iterable[Dict]] = None) -> Dict[str, List[Dict[str, str]]]:
    """Province names per region, using PSGC spelling where available."""
    by_name = {}
    if fetched:
        for p in filter_provinces_by_name(fetched, SUPPORTED_PROVINCE_NAMES):
            by_name[p["name"].lower()] = p
    return {
        region: [{"name": by_name.get(name.lower(), {}).get("name", name)} for name in names]
        for region, names in PROVINCES_BY_REGION.items()
    }


def load_provinces_by_region() -> Dict[str, List[Dict[str, str]]]:
    """Like ``provinces_by_region`` but fetches PSGC first, falling back to built-in names."""
    try:
        fetched = fetch_provinces()
    except RegionLookupError as e:
        logger.warning(f"Province lookup failed, using built-in names: {e}")
        fetched = None
    return provinces_by_region(fetched)


__all__ = [
    "RegionLookupError",
    "PROVINCE_BBOXES",
    "PROVINCES_BY_REGION",
    "REGIONS",
    "SUPPORTED_PROVINCE_NAMES",
    "DEFAULT_PROVINCE",
    "get_province_bbox",
    "fetch_provinces",
    "filter_provinces_by_name",
    "provinces_by_region",
    "load_provinces_by_region",
]
