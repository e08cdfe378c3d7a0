# tripline/routes/travel.py
"""Travel routes and blueprint configuration."""

import logging

from flask import Blueprint, jsonify, request

from tripline.api.config import get_google_maps_config, get_stops_per_day
from tripline.api.geocoding import search_places_google
from tripline.api.models import Place, Stop, as_point
from tripline.api.ordering import order_by_nearest_from_start
from tripline.api.places import (
    fetch_places_overpass,
    filter_places,
    place_category_tag,
    search_places_nominatim,
)
from tripline.api.regions import (
    DEFAULT_PROVINCE,
    PROVINCE_BBOXES,
    REGIONS,
    get_province_bbox,
    load_provinces_by_region,
)
from tripline.api.services.itinerary_service import ItineraryService
from tripline.api.services.map_service import MapService

logger = logging.getLogger(__name__)


def _bad_request(message):
    return jsonify({"error": message}), 400


def _province_bbox():
    province = request.args.get("province", DEFAULT_PROVINCE)
    bbox = get_province_bbox(province)
    if bbox is None:
        raise ValueError(f"No area defined for province '{province}'")
    return province, bbox


def _json_body():
    """Request body as a JSON object; a missing body counts as empty."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object")
    return data


def _day_number(value):
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValueError(f"Day must be a whole number, got {value!r}")
    return int(value)


def _parse_stop_days(raw):
    """Day per stop index from a JSON list or an object keyed by index."""
    if raw is None:
        return None
    if isinstance(raw, dict):
        # JSON object keys arrive as strings
        return {int(k): _day_number(v) for k, v in raw.items() if v is not None}
    if isinstance(raw, list):
        return [None if v is None else _day_number(v) for v in raw]
    raise ValueError("stop_days must be a list or an object")


def _place_json(place):
    return dict(place.to_dict(), tag=place_category_tag(place))


def create_travel_blueprint():
    """Create and configure the travel blueprint.

    Returns:
        Configured Flask Blueprint
    """
    travel_bp = Blueprint("travel", __name__, url_prefix="/travel")

    @travel_bp.errorhandler(ValueError)
    def handle_value_error(e):
        logger.warning(f"Rejected request to {request.path}: {e}")
        return _bad_request(str(e))

    @travel_bp.route("/health")
    def health():
        """Health check endpoint."""
        return jsonify({"status": "ok", "service": "travel"})

    @travel_bp.route("/api/config")
    def api_config():
        """Return map configuration for the frontend."""
        return jsonify({
            "stops_per_day": get_stops_per_day(),
            "google_geocoding_enabled": bool(get_google_maps_config().get("api_key")),
            "default_province": DEFAULT_PROVINCE,
        })

    @travel_bp.route("/api/provinces")
    def api_provinces():
        """Regions with their provinces and map bounds."""
        return jsonify({
            "regions": REGIONS,
            "provinces_by_region": load_provinces_by_region(),
            "bounds": {name: MapService.bbox_to_bounds(b) for name, b in PROVINCE_BBOXES.items()},
        })

    @travel_bp.route("/api/places")
    def api_places():
        """Best spots in a province, optionally filtered by name and type."""
        province, bbox = _province_bbox()
        places, error = fetch_places_overpass(bbox)
        if error:
            return jsonify({"error": error}), 502
        filtered = filter_places(places, request.args.get("q", ""), request.args.get("type"))
        return jsonify({
            "province": province,
            "places": [_place_json(p) for p in filtered],
        })

    @travel_bp.route("/api/search")
    def api_search():
        """Search a place by name inside a province."""
        province, bbox = _province_bbox()
        query = request.args.get("q", "").strip()
        if not query:
            return _bad_request("Missing search query")

        if request.args.get("source") == "google":
            places, error = search_places_google(query, bbox)
        else:
            places, error = search_places_nominatim(query, bbox)
        if error:
            return jsonify({"error": error}), 502
        if not places:
            return jsonify({
                "places": [],
                "message": f'No results for "{query}" in {province}. Try a different spelling.',
            })
        return jsonify({"places": [_place_json(p) for p in places]})

    @travel_bp.route("/api/itinerary", methods=["GET", "POST", "DELETE"])
    def api_itinerary():
        """Read, extend or clear the itinerary stored in the session."""
        if request.method == "POST":
            data = _json_body()
            try:
                place = Place.from_dict(data)
            except (KeyError, TypeError, ValueError) as e:
                return _bad_request(f"Invalid place: {e}")
            return jsonify(ItineraryService.add_place(place))
        if request.method == "DELETE":
            ItineraryService.clear()
        return jsonify(ItineraryService.get_state())

    @travel_bp.route("/api/itinerary/<path:place_id>", methods=["DELETE"])
    def api_itinerary_remove(place_id):
        return jsonify(ItineraryService.remove_place(place_id))

    @travel_bp.route("/api/itinerary/days", methods=["POST"])
    def api_itinerary_days():
        """Set one stop's day, or re-assign all days with ``{"auto": true}``."""
        data = _json_body()
        if data.get("auto"):
            return jsonify(ItineraryService.auto_assign_days())
        try:
            index = int(data["index"])
            day = int(data["day"])
        except (KeyError, TypeError, ValueError):
            return _bad_request("Expected integer 'index' and 'day'")
        return jsonify(ItineraryService.set_stop_day(index, day))

    @travel_bp.route("/api/itinerary/suggest", methods=["POST"])
    def api_itinerary_suggest():
        """Reorder stops by distance from the first stop."""
        return jsonify(ItineraryService.suggest_route_by_distance())

    @travel_bp.route("/api/route", methods=["GET", "POST"])
    def api_route():
        """Route the current stops and split the path into day segments."""
        if request.method == "GET":
            result = ItineraryService.route_view()
        else:
            data = _json_body()
            result = ItineraryService.apply_route(data.get("mode", "road"), data.get("profile"))
        status = 502 if result.get("error") else 200
        return jsonify(result), status

    @travel_bp.route("/api/segments", methods=["POST"])
    def api_segments():
        """Stateless partition of a given polyline by the given stops."""
        data = _json_body()
        try:
            route = [as_point(c) for c in data.get("route", [])]
            stops = [Stop.from_dict(s) for s in data.get("stops", [])]
            stop_days = _parse_stop_days(data.get("stop_days"))
        except (KeyError, TypeError, ValueError) as e:
            return _bad_request(f"Invalid route, stops or stop_days: {e}")
        return jsonify(MapService.build_route_view(route, stops, stop_days))

    @travel_bp.route("/api/order", methods=["POST"])
    def api_order():
        """Stateless nearest-neighbour ordering of the given stops."""
        data = _json_body()
        try:
            stops = [Stop.from_dict(s) for s in data.get("stops", [])]
        except (KeyError, TypeError, ValueError) as e:
            return _bad_request(f"Invalid stops: {e}")
        ordered = order_by_nearest_from_start(stops)
        return jsonify({"stops": [s.to_dict() for s in ordered]})

    return travel_bp


__all__ = ['create_travel_blueprint']
