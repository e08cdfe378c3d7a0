# tripline/api/ordering.py
"""Greedy visit ordering for a set of stops."""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence, TypeVar

from tripline.api.geo import distance_meters
from tripline.api.models import Point

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _coords_of(item) -> Point:
    return item.coords


def order_by_nearest_from_start(
    items: Sequence[T],
    key: Optional[Callable[[T], Point]] = None,
) -> list[T]:
    """Order items by nearest-next from the first item (greedy TSP).

    The first item stays first. Each following item is the closest one not yet
    placed; ties go to the item that came first in the input. This is a
    heuristic and will happily zig-zag when a nearby point strands a far one.

    Args:
        items: Stops, places or anything exposing ``.coords``
        key: Optional callable returning an item's (lng, lat) point

    Returns:
        A new list; the input is left untouched
    """
    if len(items) <= 2:
        return list(items)

    coords_of = key or _coords_of
    start, *remaining = items
    ordered = [start]
    current = coords_of(start)

    while remaining:
        best_idx = 0
        best_dist = distance_meters(current, coords_of(remaining[0]))
        for i in range(1, len(remaining)):
            d = distance_meters(current, coords_of(remaining[i]))
            if d < best_dist:
                best_dist = d
                best_idx = i
        nxt = remaining.pop(best_idx)
        ordered.append(nxt)
        current = coords_of(nxt)

    logger.debug(f"Ordered {len(ordered)} stops by nearest neighbour")
    return ordered


__all__ = ["order_by_nearest_from_start"]
