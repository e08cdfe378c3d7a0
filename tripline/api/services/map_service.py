# tripline/api/services/map_service.py
"""Service layer for map-related operations."""

import logging
from typing import Any, Dict, Optional, Sequence

from tripline.api.days import DayAssignment
from tripline.api.models import Point
from tripline.api.segments import get_route_segments_by_day

logger = logging.getLogger(__name__)

DAY_COLORS = [
    "#2563eb",  # blue
    "#059669",  # emerald
    "#d97706",  # amber
    "#7c3aed",  # violet
    "#e11d48",  # rose
]

ROUTE_FALLBACK_COLOR = "#2563eb"


class MapService:
    """Prepares route and stop data for the map layer."""

    @staticmethod
    def get_day_color(day: int) -> str:
        """Color for a 1-based day number; cycles through the palette."""
        return DAY_COLORS[(day - 1) % len(DAY_COLORS)]

    @staticmethod
    def validate_coordinates(lat: float, lng: float) -> bool:
        """Validate that coordinates are within valid ranges.

        Args:
            lat: Latitude
            lng: Longitude

        Returns:
            True if valid, False otherwise
        """
        return -90 <= lat <= 90 and -180 <= lng <= 180

    @staticmethod
    def calculate_bounds(points: Sequence[Point]) -> Dict[str, float]:
        """Calculate bounding box for a set of (lng, lat) points.

        Args:
            points: Stop or route coordinates

        Returns:
            Dictionary with north, south, east, west bounds
        """
        if not points:
            return {}

        lngs = [p[0] for p in points]
        lats = [p[1] for p in points]
        return {
            'north': max(lats),
            'south': min(lats),
            'east': max(lngs),
            'west': min(lngs)
        }

    @staticmethod
    def bbox_to_bounds(bbox) -> list:
        """Convert (south, west, north, east) to [[west, south], [east, north]]."""
        south, west, north, east = bbox
        return [[west, south], [east, north]]

    @staticmethod
    def build_route_view(
        route: Sequence[Point],
        stops: Sequence,
        stop_days: Optional[DayAssignment] = None,
        stops_per_day: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Per-day colored route pieces ready to serialize for the map.

        When no segment can be cut (short route, fewer than two stops) the
        whole polyline is returned as ``fallback`` so it can still be drawn
        in a single color.
        """
        segments = get_route_segments_by_day(route, stops, stop_days, stops_per_day)
        view = {
            'segments': [
                dict(seg.to_dict(), color=MapService.get_day_color(seg.day))
                for seg in segments
            ],
            'fallback': None,
            'bounds': MapService.calculate_bounds(list(route) or [s.coords for s in stops]),
        }
        if not segments and len(route) >= 2:
            view['fallback'] = {
                'coords': [list(c) for c in route],
                'color': ROUTE_FALLBACK_COLOR,
            }
        logger.debug(f"Built route view with {len(segments)} segments")
        return view

    @staticmethod
    def format_distance(meters: Optional[float]) -> str:
        """Format a distance for display, e.g. '850 m' or '12.4 km'."""
        if meters is None:
            return ""
        if meters < 1000:
            return f"{round(meters)} m"
        return f"{meters / 1000:.1f} km"

    @staticmethod
    def format_duration(seconds: Optional[float]) -> str:
        """Format a duration for display, e.g. '45 min' or '2 h 5 min'."""
        if seconds is None:
            return ""
        minutes = max(1, round(seconds / 60))
        if minutes < 60:
            return f"{minutes} min"
        hours, rest = divmod(minutes, 60)
        return f"{hours} h {rest} min" if rest else f"{hours} h"


# Export for use in other modules
__all__ = ['MapService', 'DAY_COLORS']
