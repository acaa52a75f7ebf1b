"""Log-scale population scoring and threshold filtering."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Sequence

from ...models.domain import PopulationScore, TripStop

MIN_REFERENCE_POPULATION = 456
MAX_REFERENCE_POPULATION = 4_000_000
RELAXED_THRESHOLD_FLOOR = 500
MIN_FILTERED_CANDIDATES = 3


@dataclass(frozen=True, slots=True)
class PopulationThreshold:
    minimum: int
    preferred: int


POPULATION_THRESHOLDS = MappingProxyType(
    {
        "balanced": PopulationThreshold(minimum=1_000, preferred=10_000),
        "destination-focused": PopulationThreshold(minimum=5_000, preferred=25_000),
    }
)


def _tier_for(population: int) -> tuple[str, float]:
    if population >= 100_000:
        return "major", 2.0
    if population >= 25_000:
        return "medium", 1.5
    if population >= 5_000:
        return "small", 1.0
    return "minor", 0.7


def normalize_population(population: int | None) -> float:
    if not population or population <= 0:
        return 0.0
    low = math.log10(MIN_REFERENCE_POPULATION)
    high = math.log10(MAX_REFERENCE_POPULATION)
    value = 100 * (math.log10(population) - low) / (high - low)
    return max(0.0, min(100.0, value))


def calculate_population_score(stop: TripStop) -> PopulationScore:
    population = stop.population or 0
    tier, weight = _tier_for(population)
    return PopulationScore(
        raw_population=population,
        normalized_score=normalize_population(population),
        tier=tier,
        weight=weight,
    )


def weighted_score(base_score: float, stop: TripStop, population_weight: float) -> float:
    """Blend a base score with the stop's weighted population score."""
    population = calculate_population_score(stop)
    return base_score * (1 - population_weight) + population.normalized_score * population.weight * population_weight


def filter_by_population_threshold(
    stops: Sequence[TripStop],
    style: str = "balanced",
    strict: bool = False,
) -> list[TripStop]:
    """Keep sufficiently populated stops, relaxing the threshold rather than starving the planner.

    The ladder is: full threshold, half threshold (never below 500), stops
    without population data added, and finally the whole pool.
    """
    thresholds = POPULATION_THRESHOLDS.get(style, POPULATION_THRESHOLDS["balanced"])
    threshold = thresholds.preferred if strict else thresholds.minimum

    filtered = [stop for stop in stops if (stop.population or 0) >= threshold]
    if len(filtered) >= MIN_FILTERED_CANDIDATES:
        return filtered

    relaxed = max(RELAXED_THRESHOLD_FLOOR, threshold // 2)
    logging.warning(
        f"Population filter kept {len(filtered)} of {len(stops)} stops at {threshold:,}; relaxing to {relaxed:,}"
    )
    filtered = [stop for stop in stops if (stop.population or 0) >= relaxed]
    if len(filtered) >= MIN_FILTERED_CANDIDATES:
        return filtered

    filtered = [stop for stop in stops if stop.population is None or stop.population >= relaxed]
    if len(filtered) >= MIN_FILTERED_CANDIDATES:
        return filtered

    logging.warning(f"Population data too sparse ({len(filtered)} stops qualify); using all {len(stops)} stops")
    return list(stops)
