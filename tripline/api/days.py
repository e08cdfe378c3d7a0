# tripline/api/days.py
"""Day assignment for itinerary stops.

A day assignment maps stop position (0-based) to a day number (1-based). It
may be shorter than the stop list or have gaps; ``day_for`` fills those in
from the configured stops-per-day so every consumer computes the same
default.
"""

from __future__ import annotations

import math
from typing import Mapping, Optional, Sequence, Union

from tripline.api.config import get_stops_per_day

DayAssignment = Union[Sequence[Optional[int]], Mapping[int, int]]


def _resolve(stops_per_day: Optional[int]) -> int:
    return get_stops_per_day() if stops_per_day is None else stops_per_day


def default_day(index: int, stops_per_day: Optional[int] = None) -> int:
    """Day a stop falls on when nobody assigned one explicitly."""
    return index // _resolve(stops_per_day) + 1


def day_for(
    stop_days: Optional[DayAssignment],
    index: int,
    stops_per_day: Optional[int] = None,
) -> int:
    """Day number for the stop at ``index``, explicit entry first."""
    day = None
    if isinstance(stop_days, Mapping):
        day = stop_days.get(index)
    elif stop_days is not None and 0 <= index < len(stop_days):
        day = stop_days[index]
    if day is None:
        return default_day(index, stops_per_day)
    return day


def auto_assign(count: int, stops_per_day: Optional[int] = None) -> list[int]:
    per_day = _resolve(stops_per_day)
    return [default_day(i, per_day) for i in range(count)]


def resize(
    stop_days: Sequence[int],
    count: int,
    stops_per_day: Optional[int] = None,
) -> list[int]:
    """Grow or shrink a day list to ``count`` stops, keeping manual entries."""
    if count <= len(stop_days):
        return list(stop_days[:count])
    per_day = _resolve(stops_per_day)
    return list(stop_days) + [default_day(i, per_day) for i in range(len(stop_days), count)]


def set_day(stop_days: Sequence[int], index: int, day: int) -> list[int]:
    """Manually assign a day; days below 1 are raised to 1."""
    updated = list(stop_days)
    if 0 <= index < len(updated):
        updated[index] = max(1, int(day))
    return updated


def max_day(
    stop_days: Sequence[int],
    stop_count: int,
    stops_per_day: Optional[int] = None,
) -> int:
    return max(1, *stop_days, math.ceil(stop_count / _resolve(stops_per_day)))


def day_summary(stop_days: Sequence[int]) -> dict[int, int]:
    """Number of stops scheduled on each day."""
    counts: dict[int, int] = {}
    for day in stop_days:
        counts[day] = counts.get(day, 0) + 1
    return counts


__all__ = [
    "DayAssignment",
    "default_day",
    "day_for",
    "auto_assign",
    "resize",
    "set_day",
    "max_day",
    "day_summary",
]
