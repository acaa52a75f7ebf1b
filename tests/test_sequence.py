from roadtrip.models.domain import TripStop
from roadtrip.services.sequence import (
    EASTBOUND,
    WESTBOUND,
    filter_in_sequence,
    is_progressing,
    progressive_candidates,
    sequence_order,
    sort_by_sequence,
    trip_direction,
    validate_progression,
    validate_sequence,
)


def _stop(sid: str, lon: float, order: int | None = None, lat: float = 35.0) -> TripStop:
    return TripStop(
        id=sid,
        name=f"Stop {sid}",
        category="destination_city",
        latitude=lat,
        longitude=lon,
        sequence_order=order,
    )


def test_sequence_order_prefers_explicit_value():
    assert sequence_order(_stop("a", -90.0, order=7)) == 7
    assert sequence_order(_stop("b", -87.6298)) == 124
    assert sequence_order(_stop("c", -118.4912)) == -185


def test_trip_direction_follows_order():
    assert trip_direction(_stop("a", -90.0, 1), _stop("b", -110.0, 10)) == WESTBOUND
    assert trip_direction(_stop("a", -110.0, 10), _stop("b", -90.0, 1)) == EASTBOUND


def test_filter_and_sort_by_sequence():
    current = _stop("cur", -95.0, 5)
    candidates = [_stop("x", -97.0, 8), _stop("y", -93.0, 3), _stop("z", -96.0, 6)]

    westbound = filter_in_sequence(current, candidates, WESTBOUND)
    eastbound = filter_in_sequence(current, candidates, EASTBOUND)

    assert [stop.id for stop in westbound] == ["x", "z"]
    assert [stop.id for stop in eastbound] == ["y"]
    assert [stop.id for stop in sort_by_sequence(candidates, WESTBOUND)] == ["y", "z", "x"]
    assert [stop.id for stop in sort_by_sequence(candidates, EASTBOUND)] == ["x", "z", "y"]


def test_validate_progression_reports_backtracking():
    stops = [_stop("a", -90.0, 1), _stop("b", -95.0, 4), _stop("c", -93.0, 2), _stop("d", -110.0, 9)]

    report = validate_progression(stops)

    assert report.direction == WESTBOUND
    assert not report.is_valid
    assert [(v.from_stop, v.to_stop) for v in report.violations] == [("Stop b", "Stop c")]
    assert validate_progression(stops[:1]).is_valid


def test_validate_sequence_rejects_backtrack_and_overshoot():
    current, final = _stop("cur", -95.0, 5), _stop("end", -110.0, 9)

    assert validate_sequence(current, _stop("ok", -100.0, 7), final).is_valid
    backtrack = validate_sequence(current, _stop("bk", -92.0, 3), final)
    overshoot = validate_sequence(current, _stop("os", -115.0, 12), final)

    assert not backtrack.is_valid and backtrack.sequence_gap == 2
    assert not overshoot.is_valid and overshoot.sequence_gap == 3


def test_is_progressing_requires_strictly_closer_stop():
    current, final = _stop("cur", -95.0), _stop("end", -110.0)
    ahead, behind, level = _stop("ahead", -100.0), _stop("behind", -92.0), _stop("level", -95.0)

    assert is_progressing(current, ahead, final)
    assert not is_progressing(current, behind, final)
    assert not is_progressing(current, level, final)
    assert [stop.id for stop in progressive_candidates(current, [behind, ahead, level], final)] == ["ahead"]
