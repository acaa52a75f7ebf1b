"""Whole-route balancing: pick overnight stops that keep daily drive times even."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

import numpy as np

from ...config import settings
from ...models.domain import TripStop
from ..drive_time import DEFAULT_BOUNDS, DriveTimeBounds, hours_for_distance, violation_type
from ..geospatial import haversine_miles, stop_bearing, stop_distance, valid_stops
from ..sequence import is_progressing

DISTANCE_WINDOW_RATIO = 0.2
DESTINATION_CITY_BONUS_MILES = 50.0
SHORT_DAY_PENALTY = 100.0
LONG_DAY_PENALTY = 200.0
MIN_ROUTE_ALIGNMENT = 0.7
EVEN_SPACING_RADIUS_MILES = 100.0
MAX_REFINEMENT_PASSES = 3


@dataclass(slots=True)
class BalancedRoute:
    strategy: str
    destinations: List[TripStop]
    daily_hours: List[float]
    total_distance: float
    total_drive_hours: float
    average_drive_hours: float
    variance: float
    is_well_balanced: bool
    has_progressive_flow: bool
    has_segment_violations: bool = False
    notes: List[str] = field(default_factory=list)


def route_alignment(start: TripStop, end: TripStop, candidate: TripStop) -> float:
    """Mean cosine between the overall bearing and the legs through ``candidate``."""
    overall = stop_bearing(start, end)
    to_candidate = stop_bearing(start, candidate)
    from_candidate = stop_bearing(candidate, end)
    first = math.cos(math.radians(overall - to_candidate))
    second = math.cos(math.radians(overall - from_candidate))
    return (first + second) / 2


def has_progressive_flow(start: TripStop, destinations: Sequence[TripStop], end: TripStop) -> bool:
    remaining = stop_distance(start, end)
    for stop in destinations:
        distance = stop_distance(stop, end)
        if distance >= remaining:
            return False
        remaining = distance
    return True


def route_metrics(
    strategy: str,
    start: TripStop,
    destinations: Sequence[TripStop],
    end: TripStop,
    *,
    bounds: DriveTimeBounds = DEFAULT_BOUNDS,
    max_variance: float = settings.max_balance_variance_hours,
) -> BalancedRoute:
    stops = [start, *destinations, end]
    distances = np.array([stop_distance(a, b) for a, b in zip(stops, stops[1:])], dtype=float)
    hours = distances / bounds.average_speed_mph
    variance = float(np.std(hours))
    flow = has_progressive_flow(start, destinations, end)
    violations = [violation_type(value, bounds) for value in hours]
    has_violations = any(kind in ("extreme", "too_short") for kind in violations)
    well_balanced = (
        variance <= max_variance
        and bool(np.all((hours >= bounds.optimal_min_hours) & (hours <= bounds.absolute_max_hours)))
    )
    logging.info(
        f"{strategy}: {', '.join(f'{h:.1f}h' for h in hours)} (stddev {variance:.2f}h, balanced={well_balanced})"
    )
    return BalancedRoute(
        strategy=strategy,
        destinations=list(destinations),
        daily_hours=[float(value) for value in hours],
        total_distance=float(distances.sum()),
        total_drive_hours=float(hours.sum()),
        average_drive_hours=float(hours.mean()),
        variance=variance,
        is_well_balanced=well_balanced,
        has_progressive_flow=flow,
        has_segment_violations=has_violations,
    )


class RouteBalancer:
    """Try several stop-placement strategies and keep the most even route."""

    def __init__(
        self,
        *,
        bounds: DriveTimeBounds = DEFAULT_BOUNDS,
        max_variance: float | None = None,
    ) -> None:
        self.bounds = bounds
        self.max_variance = settings.max_balance_variance_hours if max_variance is None else max_variance

    def create_balanced_route(
        self,
        start: TripStop,
        end: TripStop,
        candidates: Sequence[TripStop],
        requested_days: int,
    ) -> BalancedRoute:
        if requested_days < 1:
            raise ValueError("requested_days must be >= 1")

        pool = [stop for stop in valid_stops(candidates) if stop.id not in (start.id, end.id)]
        total_distance = stop_distance(start, end)
        logging.info(
            f"Balancing {start.name} -> {end.name}: {total_distance:.0f}mi, "
            f"{hours_for_distance(total_distance, self.bounds) / requested_days:.1f}h/day over {requested_days} days"
        )
        if requested_days == 1 or not pool:
            return self._metrics("direct", start, [], end)

        strategies: list[tuple[str, Callable[..., List[TripStop]]]] = [
            ("optimal_distribution", self._optimal_distribution),
            ("progressive_adjustment", self._progressive_adjustment),
            ("even_spacing", self._even_spacing),
            ("intermediate_injection", self._intermediate_injection),
        ]

        best: Optional[BalancedRoute] = None
        for name, strategy in strategies:
            destinations = strategy(start, end, pool, requested_days)
            if not destinations:
                logging.info(f"{name}: no destinations placed")
                continue
            route = self._metrics(name, start, destinations, end)
            if best is None or route.variance < best.variance:
                best = route
            if self._is_acceptable(route):
                logging.info(f"{name}: balanced route accepted")
                return best

        logging.warning("No balancing strategy produced an acceptable route; trying even-distance fallback")
        fallback = self._metrics("fallback", start, self._fallback(start, end, pool, requested_days), end)
        if best is None or (fallback.destinations and fallback.variance < best.variance):
            best = fallback
        return best

    def _metrics(self, strategy: str, start: TripStop, destinations: Sequence[TripStop], end: TripStop) -> BalancedRoute:
        return route_metrics(strategy, start, destinations, end, bounds=self.bounds, max_variance=self.max_variance)

    def _is_acceptable(self, route: BalancedRoute) -> bool:
        return route.variance <= self.max_variance and not route.has_segment_violations and route.has_progressive_flow

    def _placement_score(self, current: TripStop, stop: TripStop, target_distance: float) -> float:
        """Lower is better: distance off target, destination cities favoured, bad days penalised."""
        distance = stop_distance(current, stop)
        score = abs(distance - target_distance)
        if stop.is_destination_city:
            score -= DESTINATION_CITY_BONUS_MILES
        hours = hours_for_distance(distance, self.bounds)
        if hours < self.bounds.optimal_min_hours:
            score += SHORT_DAY_PENALTY
        elif hours > self.bounds.absolute_max_hours:
            score += LONG_DAY_PENALTY
        return score

    def _optimal_distribution(self, start, end, pool, requested_days) -> List[TripStop]:
        destinations: list[TripStop] = []
        working = list(pool)
        current = start
        for day in range(1, requested_days):
            target_distance = stop_distance(current, end) / (requested_days - day + 1)
            progressing = [stop for stop in working if is_progressing(current, stop, end)]
            if not progressing:
                break
            low = target_distance * (1 - DISTANCE_WINDOW_RATIO)
            high = target_distance * (1 + DISTANCE_WINDOW_RATIO)
            window = [stop for stop in progressing if low <= stop_distance(current, stop) <= high]
            choice = min(window or progressing, key=lambda stop: self._placement_score(current, stop, target_distance))
            destinations.append(choice)
            working = [stop for stop in working if stop.id != choice.id]
            current = choice
        return destinations

    def _even_spacing(self, start, end, pool, requested_days) -> List[TripStop]:
        total_distance = stop_distance(start, end)
        along_route = sorted(
            (stop for stop in pool if route_alignment(start, end, stop) > MIN_ROUTE_ALIGNMENT),
            key=lambda stop: stop_distance(start, stop),
        )
        destinations: list[TripStop] = []
        current = start
        for day in range(1, requested_days):
            target_from_start = total_distance / requested_days * day
            options = [
                stop
                for stop in along_route
                if stop not in destinations
                and is_progressing(current, stop, end)
                and abs(stop_distance(start, stop) - target_from_start) < EVEN_SPACING_RADIUS_MILES
            ]
            if not options:
                continue
            choice = min(options, key=lambda stop: abs(stop_distance(start, stop) - target_from_start))
            destinations.append(choice)
            current = choice
        return destinations

    def _progressive_adjustment(self, start, end, pool, requested_days) -> List[TripStop]:
        """Start from even spacing, then swap single stops while that lowers the stddev."""
        destinations = self._even_spacing(start, end, pool, requested_days)
        if not destinations:
            return destinations

        def spread(route: Sequence[TripStop]) -> float:
            stops = [start, *route, end]
            return float(np.std([stop_distance(a, b) for a, b in zip(stops, stops[1:])])) / self.bounds.average_speed_mph

        best_spread = spread(destinations)
        for _ in range(MAX_REFINEMENT_PASSES):
            if best_spread <= self.max_variance:
                break
            improved = False
            for index in range(len(destinations)):
                previous = destinations[index - 1] if index else start
                following = destinations[index + 1] if index + 1 < len(destinations) else end
                for stop in pool:
                    if stop in destinations:
                        continue
                    if not is_progressing(previous, stop, end) or not is_progressing(stop, following, end):
                        continue
                    trial = [*destinations[:index], stop, *destinations[index + 1:]]
                    trial_spread = spread(trial)
                    if trial_spread < best_spread:
                        destinations, best_spread, improved = trial, trial_spread, True
            if not improved:
                break
        return destinations

    def _intermediate_injection(self, start, end, pool, requested_days) -> List[TripStop]:
        """Place each day's stop nearest to its ideal point on the start-end line, allowing detours."""
        destinations: list[TripStop] = []
        working = list(pool)
        current = start
        for day in range(1, requested_days):
            fraction = day / requested_days
            ideal_lat = start.latitude + (end.latitude - start.latitude) * fraction
            ideal_lon = start.longitude + (end.longitude - start.longitude) * fraction
            progressing = [stop for stop in working if is_progressing(current, stop, end)]
            if not progressing:
                break
            choice = min(
                progressing,
                key=lambda stop: haversine_miles(ideal_lat, ideal_lon, stop.latitude, stop.longitude),
            )
            destinations.append(choice)
            working = [stop for stop in working if stop.id != choice.id]
            current = choice
        return destinations

    def _fallback(self, start: TripStop, end: TripStop, pool: Sequence[TripStop], requested_days: int) -> List[TripStop]:
        """Nearest stop to each even-distance mark; empty, i.e. the direct route, when nothing progresses."""
        total_distance = stop_distance(start, end)
        destinations: list[TripStop] = []
        current = start
        for day in range(1, requested_days):
            target_from_start = total_distance / requested_days * day
            options = [stop for stop in pool if stop not in destinations and is_progressing(current, stop, end)]
            if not options:
                break
            choice = min(options, key=lambda stop: abs(stop_distance(start, stop) - target_from_start))
            destinations.append(choice)
            current = choice
        return destinations
