"""Segment balance diagnostics and trip-duration constraints."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ...config import settings
from ...models.domain import TripStop
from ..drive_time import DEFAULT_BOUNDS, DriveTimeBounds, hours_for_distance, violation_type
from ..geospatial import stop_distance
from ..planning.models import BalanceAdjustment, BalanceViolation

LONG_TYPES = ("extreme", "too_long")
SHORT_TYPES = ("too_short", "zero_distance")


@dataclass(slots=True)
class HardConstraintResult:
    is_valid: bool
    min_required_days: int
    max_reasonable_days: int
    recommended_days: int
    reason: str


def _severity(distance: float, hours: float, bounds: DriveTimeBounds, min_distance: float) -> str:
    if distance == 0:
        return "high"
    if hours > bounds.absolute_max_hours:
        return "critical"
    if hours > bounds.acceptable_max_hours:
        return "high"
    if hours < bounds.absolute_min_hours or distance < min_distance:
        return "medium"
    return "low"


def _recommended_hours(hours: float, bounds: DriveTimeBounds) -> float:
    if hours < bounds.absolute_min_hours:
        return bounds.optimal_min_hours
    if hours > bounds.acceptable_max_hours:
        return bounds.optimal_max_hours
    return hours


def analyze_segment_balance(
    start: TripStop,
    destinations: Sequence[TripStop],
    end: TripStop,
    *,
    bounds: DriveTimeBounds = DEFAULT_BOUNDS,
    min_distance_miles: float = settings.min_meaningful_distance_miles,
) -> List[BalanceViolation]:
    """Check every day's leg, start -> destinations -> end, against the drive-time bands."""
    violations: list[BalanceViolation] = []
    stops = [start, *destinations, end]
    for day, (origin, target) in enumerate(zip(stops, stops[1:]), start=1):
        distance = stop_distance(origin, target)
        hours = hours_for_distance(distance, bounds)
        kind = violation_type(hours, bounds)
        if kind is None and distance >= min_distance_miles:
            continue
        if distance == 0:
            kind = "zero_distance"
        violations.append(
            BalanceViolation(
                day=day,
                type=kind or "too_short",
                current_value=hours,
                recommended_value=_recommended_hours(hours, bounds),
                severity=_severity(distance, hours, bounds, min_distance_miles),
            )
        )

    if violations:
        logging.warning(
            "Segment balance violations: "
            + ", ".join(f"day {v.day} {v.type} ({v.current_value:.1f}h, {v.severity})" for v in violations)
        )
    return violations


def suggest_days_adjustment(
    total_distance: float,
    current_days: int,
    violations: Sequence[BalanceViolation],
    bounds: DriveTimeBounds = DEFAULT_BOUNDS,
) -> Optional[BalanceAdjustment]:
    total_hours = hours_for_distance(total_distance, bounds)
    long_days = [v for v in violations if v.type in LONG_TYPES or v.severity == "critical"]
    short_days = [v for v in violations if v.type in SHORT_TYPES]

    if len(long_days) >= 2:
        adjusted = max(
            math.ceil(total_hours / bounds.optimal_max_hours),
            math.ceil(total_hours / bounds.acceptable_max_hours),
            current_days + 1,
        )
        return BalanceAdjustment(
            original_days=current_days,
            adjusted_days=adjusted,
            reason=f"{len(long_days)} days exceed safe driving limits",
            expected_improvement=f"Max daily drive time reduced to ~{total_hours / adjusted:.1f}h",
        )

    if len(short_days) >= 3 and current_days > 1 and total_hours / (current_days - 1) <= bounds.acceptable_max_hours:
        adjusted = max(math.ceil(total_hours / bounds.optimal_max_hours), current_days - 1)
        if adjusted < current_days:
            return BalanceAdjustment(
                original_days=current_days,
                adjusted_days=adjusted,
                reason=f"{len(short_days)} days have very short drive times",
                expected_improvement=f"Better balance with average {total_hours / adjusted:.1f}h per day",
            )
    return None


def enforce_hard_constraints(
    start: TripStop,
    end: TripStop,
    requested_days: int,
    bounds: DriveTimeBounds = DEFAULT_BOUNDS,
) -> HardConstraintResult:
    """Reject day counts that force over-long days or too many trivial ones."""
    if requested_days < 1:
        raise ValueError("requested_days must be >= 1")

    total_hours = hours_for_distance(stop_distance(start, end), bounds)
    min_required = math.ceil(total_hours / bounds.absolute_max_hours)
    max_reasonable = math.floor(total_hours / bounds.absolute_min_hours)
    recommended = math.ceil(total_hours / bounds.optimal_max_hours)
    average = total_hours / requested_days

    if average > bounds.absolute_max_hours:
        return HardConstraintResult(
            is_valid=False,
            min_required_days=min_required,
            max_reasonable_days=max_reasonable,
            recommended_days=max(recommended, min_required),
            reason=f"Average {average:.1f}h/day exceeds absolute maximum of {bounds.absolute_max_hours}h",
        )

    if requested_days > max_reasonable and max_reasonable >= 3:
        return HardConstraintResult(
            is_valid=False,
            min_required_days=min_required,
            max_reasonable_days=max_reasonable,
            recommended_days=min(recommended, max_reasonable),
            reason=f"{requested_days} days creates too many very short segments",
        )

    return HardConstraintResult(
        is_valid=True,
        min_required_days=min_required,
        max_reasonable_days=max_reasonable,
        recommended_days=requested_days,
        reason="Trip duration is within acceptable constraints",
    )
