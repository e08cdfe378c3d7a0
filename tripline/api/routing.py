# tripline/api/routing.py
"""OSRM (Open Source Routing Machine) helpers.

Defaults to the public demo server at https://router.project-osrm.org, which
needs no API key but is rate limited. Point ``OSRM_BASE_URL`` at a
self-hosted instance for anything serious.

Service failures never raise: the result carries an ``error`` string and
falls back to the input coordinates so the caller can still draw something.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Sequence

import requests

from tripline.api.config import get_routing_config
from tripline.api.models import Point, RouteResult, TripResult, Waypoint, as_point

logger = logging.getLogger(__name__)

PROFILES = ("driving", "walking", "cycling")


def _check_profile(profile: str) -> None:
    if profile not in PROFILES:
        raise ValueError(f"Invalid profile. Must be one of: {', '.join(PROFILES)}")


def _coord_string(coords: Sequence[Point]) -> str:
    """lng,lat;lng,lat;..."""
    return ";".join(f"{lng},{lat}" for lng, lat in coords)


def _geometry(route: Dict[str, Any]) -> list[Point]:
    coordinates = (route.get("geometry") or {}).get("coordinates") or []
    return [as_point(c) for c in coordinates]


def _identity_waypoints(coords: Sequence[Point]) -> list[Waypoint]:
    return [Waypoint(location=c, waypoint_index=i, input_index=i) for i, c in enumerate(coords)]


def _request(url: str, params: Dict[str, str]) -> Dict[str, Any]:
    cfg = get_routing_config()
    logger.debug(f"OSRM request: {url}")
    response = requests.get(url, params=params, timeout=cfg["timeout"])
    return response.json()


def get_route_by_road(coords: Sequence[Point], profile: str = "driving") -> RouteResult:
    """Road-following route through ``coords`` in the given order.

    Does not change the order of stops.
    """
    _check_profile(profile)
    coords = [as_point(c) for c in coords]
    if len(coords) < 2:
        return RouteResult(route_coords=list(coords))

    cfg = get_routing_config()
    url = f"{cfg['base_url']}/route/v1/{profile}/{_coord_string(coords)}"
    try:
        data = _request(url, {"geometries": "geojson", "overview": "full"})
    except (requests.RequestException, ValueError) as e:
        logger.error(f"OSRM route request failed: {e}")
        return RouteResult(route_coords=coords, error=str(e) or "Request failed")

    if data.get("code") != "Ok":
        logger.warning(f"OSRM route returned {data.get('code')}: {data.get('message')}")
        return RouteResult(route_coords=coords, error=data.get("message") or data.get("code"))

    routes = data.get("routes") or []
    route = routes[0] if routes else None
    if route is None:
        return RouteResult(route_coords=coords)
    return RouteResult(
        route_coords=_geometry(route) or coords,
        distance_meters=route.get("distance"),
        duration_seconds=route.get("duration"),
    )


def get_optimized_trip(
    coords: Sequence[Point],
    profile: str = "driving",
    roundtrip: bool = True,
) -> TripResult:
    """Best waypoint order found by OSRM plus the road geometry for it.

    The server-side optimizer is a heuristic too; there is no optimality
    guarantee.
    """
    _check_profile(profile)
    coords = [as_point(c) for c in coords]
    if len(coords) < 2:
        return TripResult(route_coords=list(coords), ordered_waypoints=_identity_waypoints(coords))

    cfg = get_routing_config()
    url = f"{cfg['base_url']}/trip/v1/{profile}/{_coord_string(coords)}"
    params = {
        "geometries": "geojson",
        "overview": "full",
        "roundtrip": "true" if roundtrip else "false",
    }
    try:
        data = _request(url, params)
    except (requests.RequestException, ValueError) as e:
        logger.error(f"OSRM trip request failed: {e}")
        return TripResult(
            route_coords=coords,
            ordered_waypoints=_identity_waypoints(coords),
            error=str(e) or "Request failed",
        )

    if data.get("code") != "Ok":
        logger.warning(f"OSRM trip returned {data.get('code')}: {data.get('message')}")
        return TripResult(
            route_coords=coords,
            ordered_waypoints=_identity_waypoints(coords),
            error=data.get("message") or data.get("code"),
        )

    trips = data.get("trips") or []
    trip = trips[0] if trips else {}
    raw_waypoints = data.get("waypoints")
    if raw_waypoints:
        waypoints = sorted(
            (
                Waypoint(
                    location=as_point(w["location"]),
                    waypoint_index=w.get("waypoint_index") or 0,
                    name=w.get("name"),
                    input_index=i,
                )
                for i, w in enumerate(raw_waypoints)
            ),
            key=lambda w: w.waypoint_index,
        )
    else:
        waypoints = _identity_waypoints(coords)

    return TripResult(
        route_coords=_geometry(trip) or coords,
        distance_meters=trip.get("distance"),
        duration_seconds=trip.get("duration"),
        ordered_waypoints=waypoints,
    )


__all__ = ["PROFILES", "get_route_by_road", "get_optimized_trip"]
