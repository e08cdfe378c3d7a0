# tripline/api/segments.py
"""Split a road polyline into per-day colored pieces aligned to the stops."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from tripline.api.days import DayAssignment, day_for
from tripline.api.geo import closest_route_index
from tripline.api.models import Point, RouteSegment

logger = logging.getLogger(__name__)


def _coords_of(stop) -> Point:
    return stop.coords


def project_stops(route: Sequence[Point], stops: Sequence) -> list[int]:
    """Nearest route vertex for every stop, in stop order."""
    return [closest_route_index(route, _coords_of(s)) for s in stops]


def enforce_monotonic(indices: Sequence[int], last_index: int) -> list[int]:
    """Force projected indices to move forward along the route.

    Any index at or behind the previous one is bumped to one past it, capped
    at ``last_index``. Stops that project onto the same vertex, or a detour
    passing an earlier stop again, would otherwise yield backward or empty
    segments.
    """
    if not indices:
        return []
    enforced = [indices[0]]
    previous = indices[0]
    for idx in indices[1:]:
        if idx <= previous:
            idx = min(previous + 1, last_index)
        enforced.append(idx)
        previous = idx
    if enforced[-1] > last_index:
        enforced[-1] = last_index
    return enforced


def get_route_segments_by_day(
    route: Sequence[Point],
    stops: Sequence,
    stop_days: Optional[DayAssignment] = None,
    stops_per_day: Optional[int] = None,
) -> list[RouteSegment]:
    """Cut ``route`` into one segment per consecutive pair of stops.

    Args:
        route: Road-following polyline of (lng, lat) points
        stops: Ordered stops, each exposing ``.coords``
        stop_days: Day per stop index; missing entries use the default
        stops_per_day: Override for the configured stops-per-day

    Returns:
        Segments in stop order. Pairs that would draw fewer than two points
        are dropped, so the list can be shorter than ``len(stops) - 1``.
    """
    if len(route) < 2 or len(stops) < 2:
        return []

    last_index = len(route) - 1
    indices = enforce_monotonic(project_stops(route, stops), last_index)

    segments = []
    for i in range(len(stops) - 1):
        start, end = indices[i], indices[i + 1]
        if end > start and start < len(route):
            coords = tuple(route[start:end + 1])
            if len(coords) >= 2:
                segments.append(RouteSegment(coords=coords, day=day_for(stop_days, i, stops_per_day)))

    logger.debug(f"Split {len(route)}-point route into {len(segments)} day segments")
    return segments


__all__ = ["project_stops", "enforce_monotonic", "get_route_segments_by_day"]
