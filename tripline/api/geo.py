# tripline/api/geo.py
"""Straight-line geometry on the Earth's surface.

Both helpers are pure and operate on ``(lng, lat)`` points in degrees.
"""

from __future__ import annotations

import math
from typing import Sequence

from tripline.api.models import Point

EARTH_RADIUS_METERS = 6371000.0


def distance_meters(a: Point, b: Point) -> float:
    """Great-circle distance between two (lng, lat) points (meters)."""
    lng1, lat1 = a
    lng2, lat2 = b
    dlat = math.radians(lat2 - lat1)
    dlng = math.radians(lng2 - lng1)
    x = (
        math.sin(dlat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(dlng / 2) ** 2
    )
    # Round-off can push x a hair outside [0, 1] near antipodal points.
    x = min(1.0, max(0.0, x))
    return 2 * EARTH_RADIUS_METERS * math.atan2(math.sqrt(x), math.sqrt(1 - x))


def closest_route_index(route: Sequence[Point], point: Point) -> int:
    """Index of the route vertex nearest to ``point``.

    Ties resolve to the lowest index. An empty route returns 0, which the
    caller must treat as undefined.
    """
    if not route:
        return 0
    best = 0
    best_dist = distance_meters(route[0], point)
    for i in range(1, len(route)):
        d = distance_meters(route[i], point)
        if d < best_dist:
            best_dist = d
            best = i
    return best


__all__ = ["EARTH_RADIUS_METERS", "distance_meters", "closest_route_index"]
