"""Shared data structures for itinerary planning.

Coordinates follow the GeoJSON convention used by the routing and map
layers: a point is a ``(lng, lat)`` pair in degrees.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

# A geographic coordinate as (longitude, latitude) in degrees.
Point = tuple[float, float]

# An ordered, road-following path returned by the routing service.
Polyline = list[Point]


def as_point(value) -> Point:
    """Coerce a ``[lng, lat]`` pair (e.g. decoded JSON) into a Point."""
    lng, lat = value
    return float(lng), float(lat)


@dataclass(frozen=True)
class Stop:
    """A single waypoint on a trip itinerary."""

    id: str
    label: str
    coords: Point

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "label": self.label,
            "coords": list(self.coords),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Stop":
        return cls(
            id=str(data.get("id", "")),
            label=data.get("label") or data.get("name") or "",
            coords=as_point(data["coords"]),
        )


@dataclass(frozen=True)
class Place:
    """A named point of interest returned by a place lookup."""

    id: str
    name: str
    coords: Point
    url: str = ""
    address: Optional[str] = None
    category: Optional[str] = None  # "beaches" | "mountains" | "heritage"
    place_type: Optional[str] = None  # raw OSM / Google type, e.g. "restaurant"

    def to_stop(self) -> Stop:
        return Stop(id=self.id, label=self.name, coords=self.coords)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "coords": list(self.coords),
            "url": self.url,
            "address": self.address,
            "category": self.category,
            "placeType": self.place_type,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Place":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            coords=as_point(data["coords"]),
            url=data.get("url", ""),
            address=data.get("address"),
            category=data.get("category"),
            place_type=data.get("placeType"),
        )


@dataclass(frozen=True)
class RouteSegment:
    """A contiguous piece of the route polyline drawn in one day's color."""

    coords: tuple[Point, ...]
    day: int

    def to_dict(self) -> dict:
        return {"coords": [list(c) for c in self.coords], "day": self.day}


@dataclass
class RouteResult:
    """Road-following path through stops in the given order."""

    route_coords: Polyline = field(default_factory=list)
    distance_meters: Optional[float] = None
    duration_seconds: Optional[float] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "routeCoords": [list(c) for c in self.route_coords],
            "distanceMeters": self.distance_meters,
            "durationSeconds": self.duration_seconds,
            "error": self.error,
        }


@dataclass
class Waypoint:
    """Input point snapped by the routing service, with its visit position."""

    location: Point
    waypoint_index: int
    name: Optional[str] = None
    input_index: Optional[int] = None  # position in the request, when known


@dataclass
class TripResult(RouteResult):
    """Optimized trip: reordered waypoints plus the road path through them."""

    ordered_waypoints: list[Waypoint] = field(default_factory=list)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["orderedWaypoints"] = [
            {"location": list(w.location), "waypointIndex": w.waypoint_index,
             "inputIndex": w.input_index, "name": w.name}
            for w in self.ordered_waypoints
        ]
        return data
