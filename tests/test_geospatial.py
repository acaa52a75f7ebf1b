import math

import pytest

from roadtrip.models.domain import TripStop
from roadtrip.services.geospatial import (
    bearing_degrees,
    haversine_miles,
    is_valid_coordinate,
    stop_distance,
    valid_stops,
)


def _stop(sid: str, lat: float, lon: float) -> TripStop:
    return TripStop(id=sid, name=f"Stop {sid}", category="attraction", latitude=lat, longitude=lon)


def test_haversine_chicago_to_st_louis():
    distance = haversine_miles(41.8781, -87.6298, 38.6270, -90.1994)
    assert 255 < distance < 265


def test_haversine_is_symmetric_and_zero_for_same_point():
    assert haversine_miles(35.0, -101.0, 35.0, -101.0) == 0
    there = haversine_miles(35.0, -101.0, 36.0, -105.0)
    back = haversine_miles(36.0, -105.0, 35.0, -101.0)
    assert there == pytest.approx(back)


def test_bearing_due_west_and_north():
    assert bearing_degrees(0.5, 10.0, 0.5, 9.0) == pytest.approx(270, abs=0.1)
    assert bearing_degrees(35.0, -100.0, 36.0, -100.0) == pytest.approx(0, abs=1e-6)


@pytest.mark.parametrize(
    "lat, lon",
    [
        (0.0, 0.0),
        (math.nan, -90.0),
        (35.0, math.inf),
        (91.0, -90.0),
        (35.0, -181.0),
        (None, -90.0),
        ("north", -90.0),
    ],
)
def test_invalid_coordinates_fail_closed(lat, lon):
    assert is_valid_coordinate(lat, lon) is False


def test_valid_coordinates_accepted():
    assert is_valid_coordinate(35.2220, -101.8313)
    assert is_valid_coordinate(0.0, -90.0)


def test_valid_stops_drops_placeholders_without_raising(caplog):
    stops = [_stop("A", 35.0, -100.0), _stop("B", 0.0, 0.0), _stop("C", math.nan, -99.0)]

    kept = valid_stops(stops)

    assert [stop.id for stop in kept] == ["A"]
    assert "invalid coordinates" in caplog.text


def test_stop_distance_matches_haversine():
    a, b = _stop("A", 35.0, -100.0), _stop("B", 35.5, -102.0)
    assert stop_distance(a, b) == haversine_miles(35.0, -100.0, 35.5, -102.0)
