import pytest

from roadtrip.services.drive_time import (
    DEFAULT_BOUNDS,
    classify,
    create_target,
    distance_for_hours,
    even_distribution,
    hours_for_distance,
    intelligent_distribution,
    is_valid,
    suggest_duration,
    validate,
    validate_trip_balance,
    violation_type,
)


def test_hours_and_distance_use_fifty_mph():
    assert hours_for_distance(250) == pytest.approx(5.0)
    assert distance_for_hours(6) == pytest.approx(300)


def test_is_valid_uses_absolute_bounds():
    assert is_valid(2.5)
    assert is_valid(8.0)
    assert not is_valid(2.4)
    assert not is_valid(8.1)


@pytest.mark.parametrize(
    "hours, expected",
    [(2.0, "too_short"), (5.0, None), (7.6, "too_long"), (9.0, "extreme")],
)
def test_violation_type(hours, expected):
    assert violation_type(hours) == expected


@pytest.mark.parametrize(
    "hours, category",
    [(3.0, "short"), (4.0, "optimal"), (6.0, "optimal"), (7.5, "long"), (8.5, "extreme")],
)
def test_classify(hours, category):
    assert classify(hours).category == category


def test_create_target_inside_optimal_band():
    target = create_target(5.0)
    assert target.is_optimal
    assert target.target_hours == 5.0
    assert target.min_hours == pytest.approx(3.5)
    assert target.max_hours == pytest.approx(6.5)

    near_edge = create_target(6.0)
    assert near_edge.max_hours == DEFAULT_BOUNDS.acceptable_max_hours


@pytest.mark.parametrize("mean", [-1.0, 0.0, 0.5, 1.0, 2.5, 3.0, 3.99, 4.0, 5.5, 6.0, 6.01, 7.5, 8.0, 9.7, 14.0, 40.0])
def test_create_target_window_is_ordered_and_bounded(mean):
    target = create_target(mean)
    assert target.min_hours <= target.target_hours <= target.max_hours
    assert DEFAULT_BOUNDS.absolute_min_hours <= target.min_hours
    assert target.max_hours <= DEFAULT_BOUNDS.absolute_max_hours


def test_create_target_outside_band_uses_relative_window():
    target = create_target(7.0)
    assert not target.is_optimal
    assert target.target_hours == 7.0
    assert target.min_hours == pytest.approx(4.9)
    assert target.max_hours == DEFAULT_BOUNDS.absolute_max_hours


def test_even_distribution():
    targets = even_distribution(20.0, 4)
    assert len(targets) == 4
    assert all(target.target_hours == pytest.approx(5.0) for target in targets)
    assert even_distribution(20.0, 0) == []


def test_intelligent_distribution_keeps_first_day_moderate():
    targets = intelligent_distribution(40.0, 5)
    assert len(targets) == 5
    assert DEFAULT_BOUNDS.optimal_min_hours <= targets[0].target_hours <= DEFAULT_BOUNDS.optimal_max_hours
    for target in targets:
        assert target.min_hours <= target.target_hours <= target.max_hours


def test_suggest_duration_adds_days_for_extreme_average():
    suggestion = suggest_duration(2000, 3)
    assert suggestion.suggested_days == 7
    assert "exceeds" in suggestion.reason
    assert len(suggestion.daily_targets) == 7


def test_suggest_duration_trims_very_short_trips():
    suggestion = suggest_duration(600, 8)
    assert suggestion.suggested_days == 3
    assert suggestion.suggested_days < suggestion.requested_days


def test_suggest_duration_keeps_reasonable_request():
    suggestion = suggest_duration(1000, 4)
    assert suggestion.suggested_days == 4
    assert suggestion.is_balanced
    assert suggestion.average_drive_hours == pytest.approx(5.0)


def test_suggest_duration_rejects_zero_days():
    with pytest.raises(ValueError):
        suggest_duration(1000, 0)


def test_validate_trip_balance_even_days():
    report = validate_trip_balance([5.0, 5.2, 4.8])
    assert report.is_valid
    assert report.grade == "A"
    assert report.variance_hours < 0.2


def test_validate_trip_balance_flags_extremes():
    report = validate_trip_balance([2.0, 10.5, 5.0])
    assert not report.is_valid
    assert any("EXTREME" in issue for issue in report.issues)
    assert any("very short" in issue for issue in report.issues)
    assert report.grade in {"D", "F"}


def test_validate_trip_balance_empty():
    assert validate_trip_balance([]).is_valid


def test_validate_pairs_validity_with_violation():
    assert validate(5.0) == (True, None)
    assert validate(7.8) == (True, "too_long")
    assert validate(8.5) == (False, "extreme")
    assert validate(1.0) == (False, "too_short")
