"""Geospatial helper functions."""

from __future__ import annotations

import logging
import math
from typing import Iterable

from ..models.domain import TripStop

EARTH_RADIUS_MILES = 3958.8


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_MILES * c


def bearing_degrees(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate the initial bearing from (lat1, lon1) to (lat2, lon2)."""

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_lambda = math.radians(lon2 - lon1)
    y = math.sin(delta_lambda) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(delta_lambda)
    bearing = math.degrees(math.atan2(y, x))
    return (bearing + 360) % 360


def stop_distance(origin: TripStop, destination: TripStop) -> float:
    return haversine_miles(origin.latitude, origin.longitude, destination.latitude, destination.longitude)


def stop_bearing(origin: TripStop, destination: TripStop) -> float:
    return bearing_degrees(origin.latitude, origin.longitude, destination.latitude, destination.longitude)


def is_valid_coordinate(lat: float | None, lon: float | None) -> bool:
    """Return True for finite, in-range coordinates that are not the (0, 0) placeholder."""

    if lat is None or lon is None:
        return False
    try:
        lat_f = float(lat)
        lon_f = float(lon)
    except (TypeError, ValueError):
        return False
    if not (math.isfinite(lat_f) and math.isfinite(lon_f)):
        return False
    if lat_f == 0.0 and lon_f == 0.0:
        return False
    return -90.0 <= lat_f <= 90.0 and -180.0 <= lon_f <= 180.0


def has_valid_coordinates(stop: TripStop) -> bool:
    return is_valid_coordinate(stop.latitude, stop.longitude)


def valid_stops(stops: Iterable[TripStop]) -> list[TripStop]:
    """Drop stops whose coordinates cannot be used for distance calculations."""

    kept: list[TripStop] = []
    for stop in stops:
        if has_valid_coordinates(stop):
            kept.append(stop)
        else:
            logging.warning(f"Skipping {stop.name} ({stop.id}): invalid coordinates ({stop.latitude}, {stop.longitude})")
    return kept
