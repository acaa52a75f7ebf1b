"""Candidate scoring for daily destination selection."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType

from ...models.domain import CandidateResult, DriveTimeTarget, TripStop
from ..drive_time import DEFAULT_BOUNDS, DriveTimeBounds, hours_for_distance
from ..geospatial import stop_distance
from .heritage import calculate_heritage_score, normalize_city_name
from .population import weighted_score

IDEAL_DRIVE_HOURS = 6.0
DEFAULT_IMPORTANCE = 40
MAX_OFFICIAL_BONUS = 100

CATEGORY_BONUSES = MappingProxyType(
    {
        "route66_waypoint": 20,
        "attraction": 15,
        "historic_site": 10,
        "hidden_gem": 5,
    }
)

_IMPORTANCE_GROUPS: tuple[tuple[int, tuple[str, ...]], ...] = (
    (100, ("chicago", "st. louis", "tulsa", "oklahoma city", "amarillo", "albuquerque", "flagstaff", "los angeles", "santa monica")),
    (80, ("springfield", "joplin", "santa fe", "kingman", "barstow", "san bernardino")),
    (60, ("peoria", "bloomington", "pontiac", "lebanon", "rolla", "carthage", "sapulpa")),
)
DESTINATION_IMPORTANCE = MappingProxyType(
    {city: score for score, cities in _IMPORTANCE_GROUPS for city in cities}
)


@dataclass(frozen=True, slots=True)
class ScoringConfig:
    """Weights for the optional heritage and population terms of the total score."""

    heritage_weight: float = 0.0
    population_weight: float = 0.0
    bounds: DriveTimeBounds = DEFAULT_BOUNDS


def position_score(distance: float, target_distance: float) -> float:
    return max(0.0, 100.0 - abs(distance - target_distance))


def drive_time_score(hours: float, bounds: DriveTimeBounds = DEFAULT_BOUNDS) -> float:
    """Peak of 30 at six hours; steep penalties outside the acceptable window."""
    if hours < bounds.acceptable_min_hours:
        return max(0.0, 20 - (bounds.acceptable_min_hours - hours) * 10)
    if hours > bounds.absolute_max_hours:
        return max(0.0, 20 - (hours - bounds.absolute_max_hours) * 15)
    return max(0.0, 30 - abs(hours - IDEAL_DRIVE_HOURS) * 10)


def category_bonus(category: str) -> int:
    return CATEGORY_BONUSES.get(category, 0)


def destination_importance(stop: TripStop) -> int:
    for raw_name in (stop.city_name, stop.name):
        score = DESTINATION_IMPORTANCE.get(normalize_city_name(raw_name))
        if score is not None:
            return score
    return DEFAULT_IMPORTANCE


def official_destination_bonus(stop: TripStop) -> int:
    bonus = destination_importance(stop)
    if stop.is_major_stop:
        bonus += 20
    description = (stop.description or "").lower()
    if "historic" in description:
        bonus += 10
    if "route 66" in description:
        bonus += 15
    return min(MAX_OFFICIAL_BONUS, bonus)


def progression_bonus(progress_ratio: float, is_moving_toward: bool) -> float:
    if not is_moving_toward:
        return -30.0
    if 0.0 < progress_ratio < 1.0:
        return 15.0
    return -10.0


def alignment_bonus(hours: float, target: DriveTimeTarget | None) -> float:
    if target is None:
        return 0.0
    return max(0.0, 25 - abs(hours - target.target_hours) * 10)


def score_candidate(
    *,
    start: TripStop,
    current: TripStop,
    end: TripStop,
    candidate: TripStop,
    target_distance_from_start: float,
    is_official: bool | None = None,
    target: DriveTimeTarget | None = None,
    config: ScoringConfig = ScoringConfig(),
) -> CandidateResult:
    """Score one candidate for the next overnight stop."""
    if is_official is None:
        is_official = candidate.is_destination_city

    total_distance = stop_distance(start, end)
    distance_from_start = stop_distance(start, candidate)
    distance_to_end = stop_distance(candidate, end)
    leg_distance = stop_distance(current, candidate)
    hours = hours_for_distance(leg_distance, config.bounds)

    progress_ratio = distance_from_start / total_distance if total_distance > 0 else 0.0
    is_moving_toward = distance_to_end < stop_distance(current, end)

    breakdown = {
        "position": position_score(distance_from_start, target_distance_from_start),
        "drive_time": drive_time_score(hours, config.bounds),
        "official": float(official_destination_bonus(candidate)) if is_official else 0.0,
        "category": 0.0 if is_official else float(category_bonus(candidate.category)),
        "progression": progression_bonus(progress_ratio, is_moving_toward),
        "alignment": alignment_bonus(hours, target),
    }
    if config.heritage_weight:
        breakdown["heritage"] = calculate_heritage_score(candidate).score * config.heritage_weight

    total = sum(breakdown.values())
    if config.population_weight:
        total = weighted_score(total, candidate, config.population_weight)

    return CandidateResult(
        stop=candidate,
        score=total,
        is_official_destination=is_official,
        distance_from_start=distance_from_start,
        distance_to_end=distance_to_end,
        drive_time_from_current=hours,
        breakdown=breakdown,
    )
