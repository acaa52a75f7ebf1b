"""Sights to visit along a single day's drive."""

from __future__ import annotations

import logging
from typing import List, Sequence

from ...config import settings
from ...models.domain import TripStop
from ..geospatial import stop_distance, valid_stops

# Largest extra distance, as a share of the direct leg, a detour may add.
MAX_DETOUR_RATIO = 0.2
NEARBY_RADIUS_MILES = 50.0
CATEGORY_PRIORITY = {"attraction": 0, "historic_site": 1}
NEARBY_CATEGORIES = ("attraction", "historic_site", "hidden_gem")


def _candidates(origin: TripStop, destination: TripStop, pool: Sequence[TripStop]) -> List[TripStop]:
    excluded = {origin.id, destination.id}
    return [stop for stop in valid_stops(pool) if stop.id not in excluded and not stop.is_destination_city]


def find_segment_attractions(
    origin: TripStop,
    destination: TripStop,
    pool: Sequence[TripStop],
    limit: int = settings.max_attractions_per_segment,
) -> List[TripStop]:
    """Return sights between ``origin`` and ``destination``, attractions first.

    A stop qualifies when visiting it adds less than 20% to the direct
    distance and it lies closer to each end than the ends are to each other.
    When nothing qualifies, attractions, historic sites and hidden gems
    within 50 miles of ``destination`` are offered instead, nearest first.
    """
    if limit <= 0:
        return []

    candidates = _candidates(origin, destination, pool)
    direct = stop_distance(origin, destination)

    on_route: list[TripStop] = []
    for stop in candidates:
        from_origin = stop_distance(origin, stop)
        to_destination = stop_distance(stop, destination)
        if from_origin + to_destination - direct >= direct * MAX_DETOUR_RATIO:
            continue
        if from_origin < direct and to_destination < direct:
            on_route.append(stop)

    if on_route:
        on_route.sort(key=lambda stop: CATEGORY_PRIORITY.get(stop.category, len(CATEGORY_PRIORITY)))
        return on_route[:limit]

    nearby = [
        stop
        for stop in candidates
        if stop.category in NEARBY_CATEGORIES and stop_distance(stop, destination) <= NEARBY_RADIUS_MILES
    ]
    if nearby:
        logging.info(f"No attractions between {origin.name} and {destination.name}; using {len(nearby)} near the destination")
    nearby.sort(key=lambda stop: stop_distance(stop, destination))
    return nearby[:limit]
