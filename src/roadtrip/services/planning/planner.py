"""Daily destination planning between a start and an end stop."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ...config import settings
from ...errors import PlanningContractError
from ...models.domain import TripStop
from ..balancing.enforcer import analyze_segment_balance, enforce_hard_constraints, suggest_days_adjustment
from ..drive_time import classify, create_target, hours_for_distance
from ..geospatial import has_valid_coordinates, stop_distance, valid_stops
from ..scoring.heritage import heritage_statistics
from ..selection import CandidateSelector, SelectionConfig
from ..sequence import validate_progression
from .attractions import find_segment_attractions
from .models import DailySegment, DailySelection, ItineraryPlan


def _check_contract(start: Optional[TripStop], end: Optional[TripStop], requested_days: int) -> None:
    if start is None or end is None:
        raise PlanningContractError("Both a start stop and an end stop are required")
    for label, stop in (("start", start), ("end", end)):
        if not has_valid_coordinates(stop):
            raise PlanningContractError(
                f"The {label} stop {stop.name!r} has invalid coordinates ({stop.latitude}, {stop.longitude})"
            )
    if isinstance(requested_days, bool) or not isinstance(requested_days, int) or requested_days < 1:
        raise PlanningContractError(f"requested_days must be a positive integer, got {requested_days!r}")


def _without(pool: List[TripStop], stop: TripStop) -> List[TripStop]:
    return [item for item in pool if item.id != stop.id]


def select_daily_destinations(
    start: TripStop,
    end: TripStop,
    candidates: Sequence[TripStop],
    requested_days: int,
    *,
    config: SelectionConfig | None = None,
) -> List[DailySelection]:
    """Pick one overnight stop per day except the last, which ends at ``end``.

    Destination cities are always tried before other stops. When a day has no
    acceptable candidate the plan ends early with fewer destinations.
    """
    _check_contract(start, end, requested_days)
    config = config or SelectionConfig()
    bounds = config.bounds
    selector = CandidateSelector(config)

    pool = [stop for stop in valid_stops(candidates) if stop.id not in (start.id, end.id)]
    officials = [stop for stop in pool if stop.is_destination_city]
    others = [stop for stop in pool if not stop.is_destination_city]

    total_distance = stop_distance(start, end)
    target_daily_distance = total_distance / requested_days
    logging.info(
        f"Planning {start.name} -> {end.name}: {total_distance:.0f}mi over {requested_days} days, "
        f"{len(officials)} destination cities and {len(others)} other stops"
    )

    selections: list[DailySelection] = []
    current = start
    for day in range(1, requested_days):
        remaining_days = requested_days - day + 1
        day_distance = stop_distance(current, end) / remaining_days
        target = create_target(hours_for_distance(day_distance, bounds), bounds)
        request = dict(
            current=current,
            end=end,
            target=target,
            start=start,
            target_distance_from_start=target_daily_distance * day,
        )

        result = selector.select(candidates=officials, **request)
        if result.stop is None and others:
            logging.info(f"Day {day}: no destination city qualifies, trying {len(others)} other stops")
            result = selector.select(candidates=others, **request)
        if result.stop is None:
            logging.warning(f"Day {day}: no valid destination from {current.name}; ending plan early")
            break

        chosen = result.stop
        officials = _without(officials, chosen)
        others = _without(others, chosen)
        selections.append(
            DailySelection(
                day=day,
                stop=chosen,
                state=result.state,
                score=result.selection_score,
                heritage_score=result.heritage_score,
                heritage_tier=result.heritage_tier,
                is_compromise=result.is_compromise,
                warnings=list(result.warnings) if result.is_compromise else [],
            )
        )
        current = chosen

    return selections


def plan_itinerary(
    start: TripStop,
    end: TripStop,
    candidates: Sequence[TripStop],
    requested_days: int,
    *,
    trip_style: str | None = None,
    config: SelectionConfig | None = None,
) -> ItineraryPlan:
    """Select daily destinations and build the day-by-day itinerary with diagnostics."""
    _check_contract(start, end, requested_days)
    trip_style = trip_style or settings.default_trip_style
    config = config or SelectionConfig.for_style(trip_style)
    bounds = config.bounds

    warnings: list[str] = []
    constraints = enforce_hard_constraints(start, end, requested_days, bounds)
    if not constraints.is_valid:
        logging.warning(f"Trip duration outside constraints: {constraints.reason}")
        warnings.append(f"{constraints.reason}; {constraints.recommended_days} days recommended")

    selections = select_daily_destinations(start, end, candidates, requested_days, config=config)
    destinations = [selection.stop for selection in selections]
    if len(destinations) < requested_days - 1:
        warnings.append(
            f"Only {len(destinations)} of {requested_days - 1} overnight stops could be placed; "
            "the final drive is longer than planned"
        )

    stops = [start, *destinations, end]
    progression = validate_progression(stops)
    for violation in progression.violations:
        logging.warning(f"Sequence violation {violation.from_stop} -> {violation.to_stop}: {violation.reason}")
        warnings.append(f"Sequence: {violation.reason} ({violation.from_stop} -> {violation.to_stop})")

    placed = {stop.id for stop in stops}
    sights = [stop for stop in valid_stops(candidates) if stop.id not in placed]

    segments: list[DailySegment] = []
    for day, (origin, target) in enumerate(zip(stops, stops[1:]), start=1):
        attractions = find_segment_attractions(origin, target, sights)
        suggested = {stop.id for stop in attractions}
        sights = [stop for stop in sights if stop.id not in suggested]
        distance = stop_distance(origin, target)
        hours = hours_for_distance(distance, bounds)
        selection = selections[day - 1] if day <= len(selections) else None
        segments.append(
            DailySegment(
                day=day,
                start=origin,
                end=target,
                distance_miles=distance,
                drive_time_hours=hours,
                drive_time_category=classify(hours, bounds).category,
                selection_state=selection.state if selection else None,
                heritage_score=selection.heritage_score if selection else None,
                heritage_tier=selection.heritage_tier if selection else None,
                is_compromise=selection.is_compromise if selection else False,
                warnings=list(selection.warnings) if selection else [],
                attractions=attractions,
            )
        )
        if selection:
            warnings.extend(f"Day {day}: {message}" for message in selection.warnings)

    total_distance = sum(segment.distance_miles for segment in segments)
    violations = analyze_segment_balance(start, destinations, end, bounds=bounds)
    adjustment = suggest_days_adjustment(total_distance, len(segments), violations, bounds)

    return ItineraryPlan(
        start=start,
        end=end,
        requested_days=requested_days,
        trip_style=trip_style,
        destinations=destinations,
        segments=segments,
        total_distance_miles=total_distance,
        total_drive_hours=hours_for_distance(total_distance, bounds),
        violations=violations,
        adjustment=adjustment,
        heritage_summary=heritage_statistics(destinations),
        warnings=warnings,
    )
