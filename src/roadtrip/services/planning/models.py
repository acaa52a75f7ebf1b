"""Planning domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ...models.domain import TripStop


@dataclass(slots=True)
class BalanceViolation:
    day: int
    type: str
    current_value: float
    recommended_value: float
    severity: str


@dataclass(slots=True)
class BalanceAdjustment:
    original_days: int
    adjusted_days: int
    reason: str
    expected_improvement: str


@dataclass(slots=True)
class DailySegment:
    day: int
    start: TripStop
    end: TripStop
    distance_miles: float
    drive_time_hours: float
    drive_time_category: str
    selection_state: Optional[str] = None
    heritage_score: Optional[int] = None
    heritage_tier: Optional[str] = None
    is_compromise: bool = False
    warnings: List[str] = field(default_factory=list)
    attractions: List[TripStop] = field(default_factory=list)


@dataclass(slots=True)
class DailySelection:
    """Outcome of the selector for one day of the trip."""

    day: int
    stop: TripStop
    state: str
    score: float
    heritage_score: Optional[int]
    heritage_tier: Optional[str]
    is_compromise: bool
    warnings: List[str] = field(default_factory=list)


@dataclass(slots=True)
class ItineraryPlan:
    start: TripStop
    end: TripStop
    requested_days: int
    trip_style: str
    destinations: List[TripStop]
    segments: List[DailySegment]
    total_distance_miles: float
    total_drive_hours: float
    violations: List[BalanceViolation] = field(default_factory=list)
    adjustment: Optional[BalanceAdjustment] = None
    heritage_summary: Dict[str, Any] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)

    @property
    def days(self) -> int:
        return len(self.segments)

    @property
    def is_complete(self) -> bool:
        return len(self.destinations) == self.requested_days - 1
