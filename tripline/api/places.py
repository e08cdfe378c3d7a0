# tripline/api/places.py
"""Points of interest from OpenStreetMap (Overpass + Nominatim).

Neither service needs an API key. Both have usage policies that require an
identifying User-Agent:
https://operations.osmfoundation.org/policies/overpass/
https://operations.osmfoundation.org/policies/nominatim/

Every fetch returns ``(places, error)``; network problems are logged and
reported through ``error`` rather than raised.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

import requests

from tripline.api.config import get_places_config
from tripline.api.models import Place

logger = logging.getLogger(__name__)

# (south_lat, west_lon, north_lat, east_lon)
Bbox = Tuple[float, float, float, float]

CATEGORIES = ("beaches", "mountains", "heritage")

_CATEGORY_KEYWORDS = {
    "beaches": ("beach", "resort", "island"),
    "mountains": ("mountain", "peak", "hill", "view"),
    "heritage": ("church", "temple", "museum", "heritage", "monument"),
}

_ADDRESS_TAGS = ("addr:housenumber", "addr:street", "addr:suburb", None, "addr:state", "addr:postcode", "addr:country")


def _headers() -> Dict[str, str]:
    cfg = get_places_config()
    return {"Accept": "application/json", "User-Agent": cfg["user_agent"]}


def _osm_url(osm_type: str, osm_id) -> str:
    return f"https://www.openstreetmap.org/{osm_type}/{osm_id}"


# ---------------------------------------------------------------------------
# Overpass
# ---------------------------------------------------------------------------

def build_overpass_query(bbox: Bbox) -> str:
    """Overpass QL for named amenities, shops, tourism, places and streets."""
    south, west, north, east = bbox
    area = f"({south},{west},{north},{east})"
    selectors = [
        f'node["amenity"]["name"]{area};',
        f'node["shop"]["name"]{area};',
        f'node["tourism"]["name"]{area};',
        f'node["place"]["name"]{area};',
        f'way["amenity"]["name"]{area};',
        f'way["shop"]["name"]{area};',
        f'way["tourism"]["name"]{area};',
        f'way["place"]["name"]{area};',
        f'way["highway"]["name"]{area};',
    ]
    body = "\n".join(f"  {s}" for s in selectors)
    return f"[out:json][timeout:30];\n(\n{body}\n);\nout center;"


def _element_coords(el: Dict[str, Any]):
    if el.get("lat") is not None and el.get("lon") is not None:
        return float(el["lon"]), float(el["lat"])
    center = el.get("center")
    if center:
        return float(center["lon"]), float(center["lat"])
    bounds = el.get("bounds")
    if bounds:
        lon = (bounds["minlon"] + bounds["maxlon"]) / 2
        lat = (bounds["minlat"] + bounds["maxlat"]) / 2
        return float(lon), float(lat)
    return None


def _element_type(tags: Dict[str, str]) -> str:
    for key in ("amenity", "shop", "tourism", "place"):
        if tags.get(key):
            return tags[key]
    if tags.get("highway"):
        return "street"
    if tags.get("building"):
        return "building"
    return "place"


def _element_address(tags: Dict[str, str]) -> Optional[str]:
    parts = []
    for key in _ADDRESS_TAGS:
        if key is None:
            value = tags.get("addr:city") or tags.get("addr:municipality")
        else:
            value = tags.get(key)
        if value:
            parts.append(value)
    return ", ".join(parts) if parts else None


def parse_overpass_elements(elements: Iterable[Dict[str, Any]]) -> List[Place]:
    """Turn raw Overpass elements into de-duplicated places sorted by name."""
    seen = set()
    places = []
    for el in elements:
        coords = _element_coords(el)
        if coords is None:
            continue
        tags = el.get("tags") or {}
        name = tags.get("name") or tags.get("name:en")
        if not name:
            continue
        place_id = f"osm:{el['type']}:{el['id']}"
        if place_id in seen:
            continue
        seen.add(place_id)
        places.append(Place(
            id=place_id,
            name=name,
            coords=coords,
            url=_osm_url(el["type"], el["id"]),
            address=_element_address(tags),
            place_type=_element_type(tags),
        ))
    places.sort(key=lambda p: p.name.lower())
    return places


def fetch_places_overpass(bbox: Bbox) -> Tuple[List[Place], Optional[str]]:
    """Fetch every named place of interest inside a province bbox."""
    cfg = get_places_config()
    query = build_overpass_query(bbox)
    try:
        response = requests.post(
            cfg["overpass_url"],
            data={"data": query},
            headers=_headers(),
            timeout=cfg["timeout"],
        )
        if not response.ok:
            logger.warning(f"Overpass returned HTTP {response.status_code}")
            return [], f"Overpass: {response.reason}"
        data = response.json()
    except (requests.RequestException, ValueError) as e:
        logger.error(f"Overpass request failed: {e}")
        return [], str(e) or "Failed to fetch from OpenStreetMap"

    places = parse_overpass_elements(data.get("elements") or [])
    logger.info(f"Fetched {len(places)} places from Overpass")
    return places, None


# ---------------------------------------------------------------------------
# Nominatim
# ---------------------------------------------------------------------------

def viewbox_from_bbox(bbox: Bbox) -> str:
    """Nominatim viewbox is left,top,right,bottom = west,north,east,south."""
    south, west, north, east = bbox
    return f"{west},{north},{east},{south}"


def _parse_nominatim_result(r: Dict[str, Any]) -> Place:
    display_name = r.get("display_name", "")
    name = r.get("name") or display_name.split(",")[0].strip() or display_name
    osm_type = r.get("osm_type") or "node"
    osm_id = r.get("osm_id") or r.get("place_id")
    return Place(
        id=f"osm:{osm_type}:{osm_id}",
        name=name,
        coords=(float(r["lon"]), float(r["lat"])),
        url=_osm_url(osm_type, osm_id),
        address=display_name or None,
        place_type=r.get("type") or r.get("class") or "place",
    )


def search_places_nominatim(query: str, bbox: Bbox) -> Tuple[List[Place], Optional[str]]:
    """Search places, streets, suburbs and addresses by name within a bbox."""
    q = (query or "").strip()
    if not q:
        return [], None

    cfg = get_places_config()
    params = {
        "q": q,
        "format": "json",
        "addressdetails": "1",
        "limit": str(cfg["search_limit"]),
        "countrycodes": cfg["country_codes"],
        "viewbox": viewbox_from_bbox(bbox),
        "bounded": "1",
    }
    try:
        response = requests.get(cfg["nominatim_url"], params=params, headers=_headers(), timeout=cfg["timeout"])
        if not response.ok:
            logger.warning(f"Nominatim returned HTTP {response.status_code} for '{q}'")
            return [], f"Search failed: {response.reason}"
        results = response.json()
    except (requests.RequestException, ValueError) as e:
        logger.error(f"Nominatim search failed for '{q}': {e}")
        return [], str(e) or "Search failed"

    places = [_parse_nominatim_result(r) for r in results]
    logger.debug(f"Nominatim found {len(places)} results for '{q}'")
    return places, None


# ---------------------------------------------------------------------------
# Filtering helpers
# ---------------------------------------------------------------------------

def place_matches_type(place: Place, category: Optional[str]) -> bool:
    if not category:
        return True
    if place.category == category:
        return True
    name = place.name.lower()
    return any(word in name for word in _CATEGORY_KEYWORDS.get(category, ()))


def place_category_tag(place: Place) -> str:
    """Short uppercase-ish tag shown next to a place in lists."""
    if place.category in ("beaches", "mountains"):
        return "NATURE"
    if place.category == "heritage":
        return "HERITAGE"
    if place.place_type:
        t = place.place_type
        return t[:1].upper() + t[1:].replace("_", " ")
    return "LANDMARK"


def merge_places(existing: Iterable[Place], new: Iterable[Place]) -> List[Place]:
    """Merge by id (new entries win), sorted by name."""
    by_id = {p.id: p for p in existing}
    for p in new:
        by_id[p.id] = p
    return sorted(by_id.values(), key=lambda p: p.name.lower())


def filter_places(places: List[Place], query: str = "", category: Optional[str] = None) -> List[Place]:
    """Name and category filter.

    When the category matches nothing the category is ignored, so the list
    of spots never goes blank just because a province has no beaches.
    """
    q = (query or "").strip().lower()
    by_name = [p for p in places if not q or q in p.name.lower()]
    if not category:
        return by_name
    matching = [p for p in by_name if place_matches_type(p, category)]
    if not matching and places:
        return by_name
    return matching


__all__ = [
    "Bbox",
    "CATEGORIES",
    "build_overpass_query",
    "parse_overpass_elements",
    "fetch_places_overpass",
    "viewbox_from_bbox",
    "search_places_nominatim",
    "place_matches_type",
    "place_category_tag",
    "merge_places",
    "filter_places",
]
