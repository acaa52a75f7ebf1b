import pytest

from roadtrip.models.domain import TripStop
from roadtrip.services.balancing.enforcer import (
    analyze_segment_balance,
    enforce_hard_constraints,
    suggest_days_adjustment,
)
from roadtrip.services.balancing.route_balancer import (
    RouteBalancer,
    has_progressive_flow,
    route_alignment,
    route_metrics,
)
from roadtrip.services.planning.models import BalanceViolation


def _stop(sid: str, lon: float, lat: float = 35.0, category: str = "destination_city") -> TripStop:
    return TripStop(id=sid, name=f"Stop {sid}", category=category, latitude=lat, longitude=lon)


START = _stop("start", -90.0)
END = _stop("end", -111.0)
CHICAGO = _stop("chi", -87.6298, lat=41.8781)
SANTA_MONICA = _stop("sm", -118.4912, lat=34.0195)


def _violation(day: int, kind: str, severity: str) -> BalanceViolation:
    return BalanceViolation(day=day, type=kind, current_value=0.0, recommended_value=0.0, severity=severity)


def test_analyze_segment_balance_clean_route():
    destinations = [_stop("a", -95.25), _stop("b", -100.5), _stop("c", -105.75)]
    assert analyze_segment_balance(START, destinations, END) == []


def test_analyze_segment_balance_classifies_violations():
    destinations = [_stop("same", -90.0), _stop("near", -90.3), _stop("far", -99.0)]

    violations = analyze_segment_balance(START, destinations, END)
    by_day = {violation.day: violation for violation in violations}

    assert by_day[1].type == "zero_distance"
    assert by_day[1].severity == "high"
    assert by_day[2].type == "too_short"
    assert by_day[2].severity == "medium"
    assert by_day[2].recommended_value == 4.0
    assert by_day[3].type == "extreme"
    assert by_day[3].severity == "critical"
    assert by_day[3].recommended_value == 6.0
    assert by_day[4].type == "extreme"


def test_suggest_more_days_for_long_violations():
    violations = [_violation(1, "extreme", "critical"), _violation(2, "too_long", "high")]

    adjustment = suggest_days_adjustment(2000.0, 4, violations)

    assert adjustment is not None
    assert adjustment.adjusted_days == 7
    assert adjustment.original_days == 4


def test_suggest_fewer_days_for_short_violations():
    violations = [_violation(day, "too_short", "medium") for day in (1, 2, 3)]

    adjustment = suggest_days_adjustment(1000.0, 8, violations)

    assert adjustment is not None
    assert adjustment.adjusted_days == 7


def test_no_adjustment_for_isolated_violation():
    assert suggest_days_adjustment(1000.0, 4, [_violation(2, "too_long", "high")]) is None
    assert suggest_days_adjustment(1000.0, 4, []) is None


def test_enforce_hard_constraints():
    too_few = enforce_hard_constraints(CHICAGO, SANTA_MONICA, 2)
    assert not too_few.is_valid
    assert too_few.recommended_days == 6
    assert too_few.min_required_days == 5

    fine = enforce_hard_constraints(CHICAGO, SANTA_MONICA, 6)
    assert fine.is_valid
    assert fine.recommended_days == 6

    too_many = enforce_hard_constraints(CHICAGO, SANTA_MONICA, 20)
    assert not too_many.is_valid
    assert too_many.max_reasonable_days == 14
    assert too_many.recommended_days == 6

    with pytest.raises(ValueError):
        enforce_hard_constraints(CHICAGO, SANTA_MONICA, 0)


def test_route_alignment_and_flow():
    assert route_alignment(START, END, _stop("on", -100.0)) > 0.9
    assert route_alignment(START, END, _stop("off", -91.0, lat=44.0)) < 0.7
    assert has_progressive_flow(START, [_stop("a", -95.0), _stop("b", -100.0)], END)
    assert not has_progressive_flow(START, [_stop("a", -100.0), _stop("b", -95.0)], END)


def test_route_metrics_uses_stddev_of_daily_hours():
    route = route_metrics("test", START, [_stop("mid", -100.5)], END)
    assert len(route.daily_hours) == 2
    assert route.variance == pytest.approx(abs(route.daily_hours[0] - route.daily_hours[1]) / 2)
    assert route.total_drive_hours == pytest.approx(sum(route.daily_hours))


def test_balancer_accepts_evenly_spaced_route():
    candidates = [
        _stop("backtrack", -85.0),
        _stop("attraction", -96.0, category="attraction"),
        _stop("a", -95.25),
        _stop("b", -100.5),
        _stop("c", -105.75),
        TripStop(id="zero", name="Null Island", category="destination_city", latitude=0.0, longitude=0.0),
    ]

    route = RouteBalancer().create_balanced_route(START, END, candidates, 4)

    assert route.strategy == "optimal_distribution"
    assert [stop.id for stop in route.destinations] == ["a", "b", "c"]
    assert route.variance < 0.2
    assert route.has_progressive_flow
    assert route.is_well_balanced


def test_balancer_result_matches_its_own_metrics():
    candidates = [_stop("a", -93.0), _stop("b", -94.0, lat=36.5), _stop("c", -104.0)]

    route = RouteBalancer().create_balanced_route(START, END, candidates, 3)

    assert route.destinations
    assert route.has_progressive_flow
    assert {stop.id for stop in route.destinations} <= {"a", "b", "c"}
    recomputed = route_metrics("recomputed", START, route.destinations, END)
    assert route.variance == pytest.approx(recomputed.variance)


def test_balancer_handles_empty_pool_and_single_day():
    balancer = RouteBalancer()

    empty = balancer.create_balanced_route(START, END, [], 4)
    single = balancer.create_balanced_route(START, END, [_stop("a", -100.0)], 1)

    assert empty.destinations == [] and empty.strategy == "direct"
    assert single.destinations == [] and len(single.daily_hours) == 1


def test_balancer_falls_back_when_strategies_place_nothing():
    backwards_only = [_stop("back", -85.0), _stop("back2", -80.0)]
    route = RouteBalancer().create_balanced_route(START, END, backwards_only, 3)

    assert route.strategy == "fallback"
    assert route.destinations == []


def test_balancer_uses_fallback_when_no_strategy_is_acceptable(monkeypatch: pytest.MonkeyPatch):
    def lopsided(self, start, end, pool, requested_days):
        return [pool[0]]

    for name in ("_optimal_distribution", "_progressive_adjustment", "_even_spacing", "_intermediate_injection"):
        monkeypatch.setattr(RouteBalancer, name, lopsided)
    candidates = [_stop(str(step), -90.0 - step) for step in range(1, 21)]

    route = RouteBalancer().create_balanced_route(START, END, candidates, 3)

    assert route.strategy == "fallback"
    assert [stop.id for stop in route.destinations] == ["7", "14"]
    assert route.has_progressive_flow
    assert route.variance < route_metrics("lopsided", START, [candidates[0]], END).variance
