"""Heritage-first daily destination selection with layered fallbacks.

For one day the selector walks these states, moving on only when the
current state has no viable candidate:

    heritage-priority  -> heritage-flexible -> population-fallback
                       -> distance-fallback -> no-valid-options

A candidate is viable only if it has usable coordinates, is strictly closer
to the final stop than the current stop, and its drive time from the current
stop falls inside the day's window. Candidates whose sequence order runs
against the trip direction are dropped first unless nothing else remains.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from ..models.domain import CandidateResult, DriveTimeTarget, TripStop
from .drive_time import DEFAULT_BOUNDS, DriveTimeBounds, hours_for_distance
from .geospatial import has_valid_coordinates, stop_distance
from .scoring.engine import ScoringConfig, score_candidate
from .scoring.heritage import calculate_heritage_score
from .scoring.population import calculate_population_score, filter_by_population_threshold
from .sequence import filter_in_sequence, is_progressing, trip_direction

HERITAGE_PRIORITY = "heritage-priority"
HERITAGE_FLEXIBLE = "heritage-flexible"
POPULATION_FALLBACK = "population-fallback"
DISTANCE_FALLBACK = "distance-fallback"
NO_VALID_OPTIONS = "no-valid-options"

COMPAT_IN_RANGE_BONUS = 15.0


@dataclass(frozen=True, slots=True)
class SelectionConfig:
    heritage_weight: float = 0.7
    population_weight: float = 0.6
    minimum_heritage_score: int = 60
    preferred_tiers: tuple[str, ...] = ("iconic", "major", "significant")
    allow_flexible_drive_time: bool = True
    flexibility_buffer_hours: float = 2.0
    population_style: str = "destination-focused"
    strict_population: bool = True
    bounds: DriveTimeBounds = DEFAULT_BOUNDS

    @classmethod
    def destination_focused(cls) -> "SelectionConfig":
        return cls()

    @classmethod
    def balanced(cls) -> "SelectionConfig":
        return cls(
            heritage_weight=0.5,
            minimum_heritage_score=45,
            preferred_tiers=("iconic", "major", "significant", "notable"),
            flexibility_buffer_hours=1.0,
            population_style="balanced",
            strict_population=False,
        )

    @classmethod
    def for_style(cls, style: str) -> "SelectionConfig":
        return cls.balanced() if style == "balanced" else cls.destination_focused()


@dataclass(slots=True)
class SelectionResult:
    state: str
    candidate: Optional[CandidateResult] = None
    selection_score: float = 0.0
    heritage_score: Optional[int] = None
    heritage_tier: Optional[str] = None
    warnings: list[str] = field(default_factory=list)
    is_compromise: bool = False

    @property
    def stop(self) -> Optional[TripStop]:
        return self.candidate.stop if self.candidate else None


def drive_time_compat(hours: float, target: DriveTimeTarget, bounds: DriveTimeBounds = DEFAULT_BOUNDS) -> float:
    """0-115 rating of how well a drive fits the day's window."""
    if not target.contains(hours):
        return 0.0
    tolerance = (target.max_hours - target.min_hours) / 2
    if tolerance <= 0:
        score = 100.0 if hours == target.target_hours else 0.0
    else:
        score = max(0.0, 100 - abs(hours - target.target_hours) / tolerance * 100)
    if bounds.acceptable_min_hours <= hours <= bounds.absolute_max_hours:
        score += COMPAT_IN_RANGE_BONUS
    return score


class CandidateSelector:
    """Choose one day's destination from a candidate pool."""

    def __init__(self, config: SelectionConfig | None = None) -> None:
        self.config = config or SelectionConfig()

    def select(
        self,
        *,
        current: TripStop,
        end: TripStop,
        candidates: Sequence[TripStop],
        target: DriveTimeTarget,
        start: TripStop | None = None,
        target_distance_from_start: float | None = None,
    ) -> SelectionResult:
        start = start or current
        viable = self._viable(current, end, candidates)
        logging.info(
            f"Selecting from {current.name}: {len(viable)}/{len(candidates)} progressing candidates, "
            f"target {target.target_hours:.1f}h ({target.min_hours:.1f}-{target.max_hours:.1f}h)"
        )

        def finish(state: str, choice: tuple[TripStop, float, float], warnings: list[str], compromise: bool) -> SelectionResult:
            stop, hours, combined = choice
            heritage = calculate_heritage_score(stop)
            candidate = score_candidate(
                start=start,
                current=current,
                end=end,
                candidate=stop,
                target_distance_from_start=(
                    target_distance_from_start
                    if target_distance_from_start is not None
                    else stop_distance(start, current) + stop_distance(current, stop)
                ),
                target=target,
                config=ScoringConfig(
                    heritage_weight=self.config.heritage_weight,
                    population_weight=self.config.population_weight,
                    bounds=self.config.bounds,
                ),
            )
            logging.info(f"{state}: selected {stop.name} ({hours:.1f}h, score {combined:.1f})")
            return SelectionResult(
                state=state,
                candidate=candidate,
                selection_score=combined,
                heritage_score=heritage.score,
                heritage_tier=heritage.tier,
                warnings=warnings,
                is_compromise=compromise,
            )

        warnings: list[str] = []
        choice = self._heritage_priority(viable, target)
        if choice:
            return finish(HERITAGE_PRIORITY, choice, warnings, False)
        warnings.append("No heritage cities found within the optimal drive time")

        if self.config.allow_flexible_drive_time:
            flexible = target.widened(self.config.flexibility_buffer_hours)
            choice = self._heritage_priority(viable, flexible)
            if choice:
                warnings.append(f"Extended drive time to {flexible.max_hours:.1f}h for a heritage city")
                return finish(HERITAGE_FLEXIBLE, choice, warnings, True)

        choice = self._population_fallback(viable, target)
        if choice:
            warnings.append("Selected a population center because no heritage city fits")
            return finish(POPULATION_FALLBACK, choice, warnings, True)

        choice = self._distance_fallback(viable, target)
        if choice:
            warnings.append("Selected the closest drive-time match because no other option fits")
            return finish(DISTANCE_FALLBACK, choice, warnings, True)

        warnings.append("No valid destinations found within any criteria")
        logging.warning(f"No valid destination from {current.name} toward {end.name}")
        return SelectionResult(state=NO_VALID_OPTIONS, warnings=warnings, is_compromise=True)

    def _viable(self, current: TripStop, end: TripStop, candidates: Sequence[TripStop]) -> list[tuple[TripStop, float]]:
        usable: list[TripStop] = []
        for stop in candidates:
            if not has_valid_coordinates(stop):
                logging.warning(f"Skipping {stop.name}: invalid coordinates ({stop.latitude}, {stop.longitude})")
                continue
            if stop.id in (current.id, end.id):
                continue
            usable.append(stop)

        in_sequence = filter_in_sequence(current, usable, trip_direction(current, end))
        if usable and not in_sequence:
            logging.info(f"No candidates in sequence after {current.name}; using the unfiltered pool")

        viable: list[tuple[TripStop, float]] = []
        for stop in in_sequence or usable:
            if not is_progressing(current, stop, end):
                continue
            viable.append((stop, hours_for_distance(stop_distance(current, stop), self.config.bounds)))
        return viable

    @staticmethod
    def _best(
        pool: Sequence[tuple[TripStop, float]],
        target: DriveTimeTarget,
        score: Callable[[TripStop, float], float],
    ) -> tuple[TripStop, float, float] | None:
        best: tuple[TripStop, float, float] | None = None
        for stop, hours in pool:
            if not target.contains(hours):
                continue
            value = score(stop, hours)
            if best is None or value > best[2]:
                best = (stop, hours, value)
        return best

    def _heritage_priority(
        self, viable: Sequence[tuple[TripStop, float]], target: DriveTimeTarget
    ) -> tuple[TripStop, float, float] | None:
        config = self.config
        heritage_pool: list[tuple[TripStop, float]] = []
        for stop, hours in viable:
            heritage = calculate_heritage_score(stop)
            if heritage.score >= config.minimum_heritage_score and heritage.tier in config.preferred_tiers:
                heritage_pool.append((stop, hours))

        def combined(stop: TripStop, hours: float) -> float:
            heritage = calculate_heritage_score(stop).score
            compat = drive_time_compat(hours, target, config.bounds)
            return heritage * config.heritage_weight + compat * (1 - config.heritage_weight)

        return self._best(heritage_pool, target, combined)

    def _population_fallback(
        self, viable: Sequence[tuple[TripStop, float]], target: DriveTimeTarget
    ) -> tuple[TripStop, float, float] | None:
        config = self.config
        by_stop = {id(stop): hours for stop, hours in viable}
        filtered = filter_by_population_threshold(
            [stop for stop, _ in viable],
            config.population_style,
            config.strict_population,
        )
        pool = [(stop, by_stop[id(stop)]) for stop in filtered]

        def combined(stop: TripStop, hours: float) -> float:
            population = calculate_population_score(stop).normalized_score
            compat = drive_time_compat(hours, target, config.bounds)
            return population * config.population_weight + compat * (1 - config.population_weight)

        return self._best(pool, target, combined)

    def _distance_fallback(
        self, viable: Sequence[tuple[TripStop, float]], target: DriveTimeTarget
    ) -> tuple[TripStop, float, float] | None:
        return self._best(viable, target, lambda stop, hours: -abs(hours - target.target_hours))
