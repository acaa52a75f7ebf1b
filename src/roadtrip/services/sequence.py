"""Route-direction inference and monotonic progression checks."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from ..models.domain import TripStop
from .geospatial import stop_distance

WESTBOUND = "westbound"
EASTBOUND = "eastbound"


@dataclass(frozen=True, slots=True)
class SequenceViolation:
    from_stop: str
    to_stop: str
    reason: str


@dataclass(slots=True)
class ProgressionReport:
    direction: str
    violations: list[SequenceViolation] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.violations


@dataclass(frozen=True, slots=True)
class SequenceCheck:
    is_valid: bool
    reason: str
    sequence_gap: int | None = None


def sequence_order(stop: TripStop) -> int:
    """Explicit sequence order, or a longitude-derived stand-in for east-west routes."""
    if stop.sequence_order is not None:
        return stop.sequence_order
    return round((stop.longitude + 100) * 10)


def trip_direction(start: TripStop, end: TripStop) -> str:
    return WESTBOUND if sequence_order(end) > sequence_order(start) else EASTBOUND


def _in_order(current_order: int, next_order: int, direction: str) -> bool:
    if direction == WESTBOUND:
        return next_order >= current_order
    return next_order <= current_order


def filter_in_sequence(current: TripStop, candidates: Sequence[TripStop], direction: str) -> list[TripStop]:
    current_order = sequence_order(current)
    return [stop for stop in candidates if _in_order(current_order, sequence_order(stop), direction)]


def sort_by_sequence(stops: Sequence[TripStop], direction: str) -> list[TripStop]:
    return sorted(stops, key=sequence_order, reverse=direction == EASTBOUND)


def validate_progression(stops: Sequence[TripStop]) -> ProgressionReport:
    """Flag consecutive pairs whose order does not move in the trip's direction."""
    if len(stops) < 2:
        return ProgressionReport(direction=WESTBOUND)

    direction = trip_direction(stops[0], stops[-1])
    report = ProgressionReport(direction=direction)
    for current, following in zip(stops, stops[1:]):
        current_order = sequence_order(current)
        next_order = sequence_order(following)
        if not _in_order(current_order, next_order, direction):
            report.violations.append(
                SequenceViolation(
                    from_stop=current.name,
                    to_stop=following.name,
                    reason=f"Invalid {direction} progression: {current_order} -> {next_order}",
                )
            )
    return report


def validate_sequence(current: TripStop, proposed: TripStop, final: TripStop) -> SequenceCheck:
    """Reject a proposed stop that backtracks past ``current`` or overshoots ``final``."""
    current_order = sequence_order(current)
    proposed_order = sequence_order(proposed)
    final_order = sequence_order(final)
    increasing = final_order >= current_order

    if increasing:
        if proposed_order < current_order:
            return SequenceCheck(False, f"Backtracking: {proposed_order} is behind current {current_order}", current_order - proposed_order)
        if proposed_order > final_order:
            return SequenceCheck(False, f"Overshooting: {proposed_order} is past final {final_order}", proposed_order - final_order)
    else:
        if proposed_order > current_order:
            return SequenceCheck(False, f"Backtracking: {proposed_order} is behind current {current_order}", proposed_order - current_order)
        if proposed_order < final_order:
            return SequenceCheck(False, f"Overshooting: {proposed_order} is past final {final_order}", final_order - proposed_order)

    return SequenceCheck(True, f"Valid progression: {current_order} -> {proposed_order}", abs(proposed_order - current_order))


def is_progressing(current: TripStop, candidate: TripStop, final: TripStop) -> bool:
    """Geographic progression: the candidate must be strictly closer to the final stop."""
    progressing = stop_distance(candidate, final) < stop_distance(current, final)
    if not progressing:
        logging.debug(f"{candidate.name} rejected - not progressing toward {final.name}")
    return progressing


def progressive_candidates(current: TripStop, candidates: Sequence[TripStop], final: TripStop) -> list[TripStop]:
    return [stop for stop in candidates if is_progressing(current, stop, final)]
