"""Drive-time constraints, per-day targets and duration suggestions.

All hour bands come from one canonical table:

    optimal     4.0 - 6.0 h
    acceptable  3.0 - 7.5 h
    absolute    2.5 - 8.0 h

Distances are converted to hours at a constant average speed.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from ..config import settings
from ..models.domain import DriveTimeTarget

# Width of the window around an in-band daily mean.
IN_BAND_SPREAD_HOURS = 1.5
# Relative window used when the daily mean falls outside the optimal band.
OUT_OF_BAND_SPREAD_RATIO = 0.3
LARGE_RANGE_HOURS = 4.0


@dataclass(frozen=True, slots=True)
class DriveTimeBounds:
    average_speed_mph: float = settings.average_speed_mph
    optimal_min_hours: float = settings.optimal_min_hours
    optimal_max_hours: float = settings.optimal_max_hours
    acceptable_min_hours: float = settings.acceptable_min_hours
    acceptable_max_hours: float = settings.acceptable_max_hours
    absolute_min_hours: float = settings.absolute_min_hours
    absolute_max_hours: float = settings.absolute_max_hours


DEFAULT_BOUNDS = DriveTimeBounds()


@dataclass(frozen=True, slots=True)
class DriveTimeClassification:
    category: str
    message: str


@dataclass(slots=True)
class DurationSuggestion:
    requested_days: int
    suggested_days: int
    reason: str
    total_distance: float
    total_drive_hours: float
    average_drive_hours: float
    is_balanced: bool
    daily_targets: list[DriveTimeTarget] = field(default_factory=list)


@dataclass(slots=True)
class TripBalanceReport:
    is_valid: bool
    balance_score: float
    grade: str
    variance_hours: float
    issues: list[str]
    suggestions: list[str]


def hours_for_distance(miles: float, bounds: DriveTimeBounds = DEFAULT_BOUNDS) -> float:
    return miles / bounds.average_speed_mph


def distance_for_hours(hours: float, bounds: DriveTimeBounds = DEFAULT_BOUNDS) -> float:
    return hours * bounds.average_speed_mph


def is_valid(hours: float, bounds: DriveTimeBounds = DEFAULT_BOUNDS) -> bool:
    return bounds.absolute_min_hours <= hours <= bounds.absolute_max_hours


def violation_type(hours: float, bounds: DriveTimeBounds = DEFAULT_BOUNDS) -> str | None:
    """Name the constraint a single day's drive breaks, or None when it is comfortable."""
    if hours < bounds.absolute_min_hours:
        return "too_short"
    if hours > bounds.absolute_max_hours:
        return "extreme"
    if hours > bounds.acceptable_max_hours:
        return "too_long"
    return None


def validate(hours: float, bounds: DriveTimeBounds = DEFAULT_BOUNDS) -> tuple[bool, str | None]:
    return is_valid(hours, bounds), violation_type(hours, bounds)


def classify(hours: float, bounds: DriveTimeBounds = DEFAULT_BOUNDS) -> DriveTimeClassification:
    if hours < bounds.optimal_min_hours:
        if hours < bounds.absolute_min_hours:
            message = f"{hours:.1f}h is below the {bounds.absolute_min_hours}h minimum - consider combining with an adjacent day"
        else:
            message = f"{hours:.1f}h is a short drive day with extra time for sightseeing"
        return DriveTimeClassification("short", message)
    if hours <= bounds.optimal_max_hours:
        return DriveTimeClassification("optimal", f"{hours:.1f}h is within the optimal {bounds.optimal_min_hours}-{bounds.optimal_max_hours}h range")
    if hours <= bounds.absolute_max_hours:
        return DriveTimeClassification("long", f"{hours:.1f}h is a long drive day - plan for rest stops")
    return DriveTimeClassification(
        "extreme",
        f"{hours:.1f}h exceeds the {bounds.absolute_max_hours}h maximum - add an intermediate stop",
    )


def create_target(mean_hours: float, bounds: DriveTimeBounds = DEFAULT_BOUNDS) -> DriveTimeTarget:
    """Build a day's drive-time window around ``mean_hours``.

    Means inside the optimal band keep their value and get a window of
    +/- 1.5 h clipped to the acceptable band. Anything else is clamped to the
    absolute band and given a +/- 30% window, still inside absolute bounds.
    """
    if bounds.optimal_min_hours <= mean_hours <= bounds.optimal_max_hours:
        return DriveTimeTarget(
            target_hours=mean_hours,
            min_hours=max(bounds.acceptable_min_hours, mean_hours - IN_BAND_SPREAD_HOURS),
            max_hours=min(bounds.acceptable_max_hours, mean_hours + IN_BAND_SPREAD_HOURS),
            is_optimal=True,
        )

    target = min(bounds.absolute_max_hours, max(bounds.absolute_min_hours, mean_hours))
    spread = abs(mean_hours) * OUT_OF_BAND_SPREAD_RATIO
    min_hours = max(bounds.absolute_min_hours, mean_hours - spread)
    max_hours = min(bounds.absolute_max_hours, mean_hours + spread)
    return DriveTimeTarget(
        target_hours=target,
        min_hours=min(min_hours, target),
        max_hours=max(max_hours, target),
        is_optimal=False,
    )


def even_distribution(total_hours: float, days: int, bounds: DriveTimeBounds = DEFAULT_BOUNDS) -> list[DriveTimeTarget]:
    if days < 1:
        return []
    return [create_target(total_hours / days, bounds) for _ in range(days)]


def intelligent_distribution(total_hours: float, days: int, bounds: DriveTimeBounds = DEFAULT_BOUNDS) -> list[DriveTimeTarget]:
    """Moderate first and last days, longer days allowed in the middle of the trip."""
    targets: list[DriveTimeTarget] = []
    remaining_hours = total_hours
    remaining_days = days
    middle_days = {days // 2, math.ceil(days / 2)}

    for day in range(1, days + 1):
        average = remaining_hours / remaining_days
        if remaining_days == 1:
            hours = remaining_hours
        elif day == 1:
            hours = min(bounds.optimal_max_hours, max(bounds.optimal_min_hours, average))
        elif day in middle_days:
            hours = min(bounds.absolute_max_hours, max(bounds.optimal_min_hours + 1, average))
        else:
            hours = min(bounds.acceptable_max_hours - 0.5, max(bounds.optimal_min_hours, average))

        target = create_target(hours, bounds)
        targets.append(target)
        remaining_hours -= target.target_hours
        remaining_days -= 1

    logging.info(
        "Intelligent distribution: "
        + ", ".join(f"day {i + 1}={t.target_hours:.1f}h ({t.min_hours:.1f}-{t.max_hours:.1f})" for i, t in enumerate(targets))
    )
    return targets


def suggest_duration(
    total_distance: float,
    requested_days: int,
    bounds: DriveTimeBounds = DEFAULT_BOUNDS,
) -> DurationSuggestion:
    if requested_days < 1:
        raise ValueError("requested_days must be >= 1")

    total_hours = hours_for_distance(total_distance, bounds)
    average = total_hours / requested_days
    suggested_days = requested_days
    reason = f"{requested_days} days gives a reasonable {average:.1f}h average drive"

    if average > bounds.absolute_max_hours:
        suggested_days = math.ceil(total_hours / bounds.optimal_max_hours)
        reason = f"Average drive of {average:.1f}h/day exceeds the {bounds.absolute_max_hours}h maximum; {suggested_days} days recommended"
    elif average < bounds.optimal_min_hours and requested_days > 3:
        suggested_days = max(3, math.ceil(total_hours / bounds.optimal_min_hours))
        if suggested_days < requested_days:
            reason = f"Average drive of {average:.1f}h/day is very short; the trip fits in {suggested_days} days"
        else:
            suggested_days = requested_days

    suggested_average = total_hours / suggested_days
    is_balanced = bounds.optimal_min_hours <= suggested_average <= bounds.optimal_max_hours
    if is_balanced:
        daily_targets = even_distribution(total_hours, suggested_days, bounds)
    else:
        daily_targets = intelligent_distribution(total_hours, suggested_days, bounds)

    logging.info(f"Duration suggestion: {total_distance:.0f}mi, requested {requested_days}d -> {suggested_days}d ({reason})")
    return DurationSuggestion(
        requested_days=requested_days,
        suggested_days=suggested_days,
        reason=reason,
        total_distance=total_distance,
        total_drive_hours=total_hours,
        average_drive_hours=suggested_average,
        is_balanced=is_balanced,
        daily_targets=daily_targets,
    )


def _grade(score: float) -> str:
    if score >= 90:
        return "A"
    if score >= 80:
        return "B"
    if score >= 70:
        return "C"
    if score >= 60:
        return "D"
    return "F"


def validate_trip_balance(
    daily_hours: Sequence[float],
    *,
    max_variance: float = settings.max_balance_variance_hours,
    bounds: DriveTimeBounds = DEFAULT_BOUNDS,
) -> TripBalanceReport:
    """Grade how evenly drive time is spread across the days of a trip."""
    if not daily_hours:
        return TripBalanceReport(True, 100.0, "A", 0.0, [], [])

    hours = np.asarray(daily_hours, dtype=float)
    issues: list[str] = []
    suggestions: list[str] = []

    for day, value in enumerate(hours, start=1):
        if value > bounds.absolute_max_hours:
            severity = "EXTREME" if value > bounds.absolute_max_hours + 2 else "LONG"
            issues.append(f"Day {day}: {severity} drive time ({value:.1f}h)")
            suggestions.append(f"Consider adding an intermediate stop on day {day}")
        elif value < bounds.acceptable_min_hours:
            issues.append(f"Day {day}: very short drive time ({value:.1f}h)")
            suggestions.append(f"Consider combining day {day} with an adjacent day")

    variance = float(np.std(hours))
    time_range = float(hours.max() - hours.min())
    if time_range > LARGE_RANGE_HOURS:
        issues.append(f"Large variation in drive times: {hours.min():.1f}h to {hours.max():.1f}h")
        suggestions.append("Consider redistributing destinations for more balanced days")

    score = 100.0
    score -= min(30.0, variance * 15)
    outside = int(np.count_nonzero((hours > bounds.absolute_max_hours) | (hours < bounds.acceptable_min_hours)))
    score -= outside * 8
    score -= min(20.0, time_range * 3)
    ideal = int(np.count_nonzero((hours >= bounds.optimal_min_hours + 1) & (hours <= bounds.optimal_max_hours + 1)))
    score += ideal / len(hours) * 15
    score -= int(np.count_nonzero(hours > bounds.absolute_max_hours + 2)) * 15
    score = max(0.0, min(100.0, score))

    return TripBalanceReport(
        is_valid=not issues and variance <= max_variance,
        balance_score=score,
        grade=_grade(score),
        variance_hours=variance,
        issues=issues,
        suggestions=suggestions,
    )
