# tripline/api/services/itinerary_service.py
"""Service layer for itinerary building and session management."""

import logging
from typing import Any, Dict, List, Optional

from flask import session

from tripline.api import days as day_rules
from tripline.api.models import Place, RouteResult
from tripline.api.ordering import order_by_nearest_from_start
from tripline.api.routing import PROFILES, get_optimized_trip, get_route_by_road
from tripline.api.services.map_service import MapService

logger = logging.getLogger(__name__)

ROUTE_MODES = ("road", "optimized")


class ItineraryService:
    """Handles the selected stops, their days and the route through them.

    State lives in the Flask session. Route polylines are not stored there
    (they run to hundreds of points and would overflow the session cookie);
    they are fetched from the routing service when a view is built.
    """

    # ------------------------------------------------------------------ state

    @staticmethod
    def get_places() -> List[Place]:
        return [Place.from_dict(p) for p in session.get('selected_places', [])]

    @staticmethod
    def get_stop_days() -> List[int]:
        return list(session.get('stop_days', []))

    @staticmethod
    def get_profile() -> str:
        return session.get('route_profile', 'driving')

    @staticmethod
    def get_state() -> Dict[str, Any]:
        """Get current itinerary information.

        Returns:
            Dictionary with stops, their days and route settings
        """
        places = ItineraryService.get_places()
        stop_days = day_rules.resize(ItineraryService.get_stop_days(), len(places))
        return {
            'places': [p.to_dict() for p in places],
            'stop_days': stop_days,
            'max_day': day_rules.max_day(stop_days, len(places)),
            'day_summary': day_rules.day_summary(stop_days),
            'route_mode': session.get('route_mode', 'road'),
            'profile': ItineraryService.get_profile(),
            'stats': session.get('route_stats', {}),
        }

    @staticmethod
    def _store(places: List[Place], stop_days: Optional[List[int]] = None) -> None:
        """Store stops in the session, keeping days in step with the stop count.

        Args:
            places: Ordered stops
            stop_days: Explicit days; defaults to the previous days resized
        """
        if stop_days is None:
            stop_days = ItineraryService.get_stop_days()
        session['selected_places'] = [p.to_dict() for p in places]
        session['stop_days'] = day_rules.resize(stop_days, len(places))
        session.modified = True
        logger.debug(f"Stored {len(places)} stops in session")

    # ---------------------------------------------------------------- editing

    @staticmethod
    def add_place(place: Place) -> Dict[str, Any]:
        """Append a place to the itinerary; adding the same id twice is a no-op.

        Raises:
            ValueError: If the place has out-of-range coordinates
        """
        lng, lat = place.coords
        if not MapService.validate_coordinates(lat, lng):
            raise ValueError(f"Invalid coordinates for '{place.name}'")

        places = ItineraryService.get_places()
        if any(p.id == place.id for p in places):
            return ItineraryService.get_state()
        places.append(place)
        ItineraryService._store(places)
        logger.info(f"Added '{place.name}' as stop {len(places)}")
        return ItineraryService.get_state()

    @staticmethod
    def remove_place(place_id: str) -> Dict[str, Any]:
        places = ItineraryService.get_places()
        stop_days = ItineraryService.get_stop_days()
        kept = [(p, d) for p, d in zip(places, day_rules.resize(stop_days, len(places))) if p.id != place_id]
        ItineraryService._store([p for p, _ in kept], [d for _, d in kept])
        if not kept:
            ItineraryService.clear()
        return ItineraryService.get_state()

    @staticmethod
    def clear() -> None:
        """Clear itinerary data from session."""
        keys_to_remove = ['selected_places', 'stop_days', 'route_mode', 'route_stats']
        for key in keys_to_remove:
            session.pop(key, None)
        session.modified = True
        logger.debug("Cleared itinerary from session")

    @staticmethod
    def set_stop_day(index: int, day: int) -> Dict[str, Any]:
        """Manually move the stop at ``index`` to ``day`` (at least day 1)."""
        places = ItineraryService.get_places()
        stop_days = day_rules.resize(ItineraryService.get_stop_days(), len(places))
        ItineraryService._store(places, day_rules.set_day(stop_days, index, day))
        return ItineraryService.get_state()

    @staticmethod
    def auto_assign_days() -> Dict[str, Any]:
        places = ItineraryService.get_places()
        ItineraryService._store(places, day_rules.auto_assign(len(places)))
        return ItineraryService.get_state()

    # ---------------------------------------------------------------- routing

    @staticmethod
    def suggest_route_by_distance() -> Dict[str, Any]:
        """Reorder stops nearest-first from the first stop and reset days."""
        places = ItineraryService.get_places()
        if len(places) < 2:
            return ItineraryService.get_state()
        ordered = order_by_nearest_from_start(places)
        ItineraryService._store(ordered, day_rules.auto_assign(len(ordered)))
        session['route_mode'] = 'road'
        logger.info(f"Suggested distance-based order for {len(ordered)} stops")
        return ItineraryService.get_state()

    @staticmethod
    def _record_route(result: RouteResult, mode: str, profile: str) -> None:
        session['route_mode'] = mode
        session['route_profile'] = profile
        session['route_stats'] = {
            'distance': result.distance_meters,
            'duration': result.duration_seconds,
            'distance_text': MapService.format_distance(result.distance_meters),
            'duration_text': MapService.format_duration(result.duration_seconds),
        }
        session.modified = True

    @staticmethod
    def apply_route(mode: str = 'road', profile: Optional[str] = None) -> Dict[str, Any]:
        """Fetch a route for the current stops and return the map view.

        Args:
            mode: 'road' keeps the stop order, 'optimized' lets the routing
                service reorder stops first
            profile: driving, walking or cycling

        Returns:
            State plus route view; ``error`` is set when routing failed

        Raises:
            ValueError: If mode or profile is invalid
        """
        profile = profile or ItineraryService.get_profile()
        if mode not in ROUTE_MODES:
            raise ValueError(f"Invalid mode. Must be one of: {', '.join(ROUTE_MODES)}")
        if profile not in PROFILES:
            raise ValueError(f"Invalid profile. Must be one of: {', '.join(PROFILES)}")

        places = ItineraryService.get_places()
        coords = [p.coords for p in places]

        if mode == 'optimized':
            result = get_optimized_trip(coords, profile, roundtrip=True)
        else:
            result = get_route_by_road(coords, profile)

        if result.error:
            logger.warning(f"Routing failed ({mode}/{profile}): {result.error}")
            return dict(ItineraryService.get_state(), error=result.error, route=None)

        if mode == 'optimized' and len(result.ordered_waypoints) == len(places):
            places = [places[w.input_index] for w in result.ordered_waypoints]
            ItineraryService._store(places)

        ItineraryService._record_route(result, mode, profile)
        view = MapService.build_route_view(result.route_coords, places, ItineraryService.get_stop_days())
        return dict(ItineraryService.get_state(), error=None, route=view)

    @staticmethod
    def route_view() -> Dict[str, Any]:
        """Road route through the stops in their current order, split by day."""
        places = ItineraryService.get_places()
        if len(places) < 2:
            return dict(ItineraryService.get_state(), error=None, route=None)
        result = get_route_by_road([p.coords for p in places], ItineraryService.get_profile())
        if result.error:
            return dict(ItineraryService.get_state(), error=result.error, route=None)
        view = MapService.build_route_view(result.route_coords, places, ItineraryService.get_stop_days())
        return dict(ItineraryService.get_state(), error=None, route=view)
