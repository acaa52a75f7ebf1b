"""Domain models for trip stops and per-evaluation scores."""

from dataclasses import dataclass, field
from typing import Optional

DESTINATION_CITY = "destination_city"
STOP_CATEGORIES = (
    DESTINATION_CITY,
    "route66_waypoint",
    "attraction",
    "hidden_gem",
    "historic_site",
)


@dataclass(frozen=True, slots=True)
class TripStop:
    """Represents a geocoded point of interest or city along the route."""

    id: str
    name: str
    category: str
    latitude: float
    longitude: float
    population: Optional[int] = None
    is_major_stop: bool = False
    sequence_order: Optional[int] = None
    description: Optional[str] = None
    state: Optional[str] = None
    city_name: Optional[str] = None

    @property
    def is_destination_city(self) -> bool:
        return self.category == DESTINATION_CITY


@dataclass(frozen=True, slots=True)
class DriveTimeTarget:
    """Acceptable hour range for a single day's drive."""

    target_hours: float
    min_hours: float
    max_hours: float
    is_optimal: bool = False

    def contains(self, hours: float) -> bool:
        return self.min_hours <= hours <= self.max_hours

    def widened(self, extra_max_hours: float) -> "DriveTimeTarget":
        return DriveTimeTarget(
            target_hours=self.target_hours,
            min_hours=self.min_hours,
            max_hours=self.max_hours + extra_max_hours,
            is_optimal=False,
        )


@dataclass(frozen=True, slots=True)
class HeritageScore:
    score: int
    tier: str
    reasons: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class PopulationScore:
    raw_population: int
    normalized_score: float
    tier: str
    weight: float


@dataclass(slots=True)
class CandidateResult:
    """A scored candidate for a single day's destination."""

    stop: TripStop
    score: float
    is_official_destination: bool
    distance_from_start: float
    distance_to_end: float
    drive_time_from_current: float
    breakdown: dict[str, float] = field(default_factory=dict)
