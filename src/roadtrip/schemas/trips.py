"""Trip planning request/response schemas."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

StopCategory = Literal["destination_city", "route66_waypoint", "attraction", "hidden_gem", "historic_site"]
TripStyle = Literal["balanced", "destination-focused"]


class TripStopModel(BaseModel):
    id: str
    name: str
    category: StopCategory = "destination_city"
    latitude: float
    longitude: float
    population: Optional[int] = Field(default=None, ge=0)
    is_major_stop: bool = False
    sequence_order: Optional[int] = None
    description: Optional[str] = None
    state: Optional[str] = None
    city_name: Optional[str] = None


class TripPlanRequest(BaseModel):
    start: TripStopModel
    end: TripStopModel
    candidates: List[TripStopModel] = Field(default_factory=list)
    requested_days: int = Field(..., ge=1, description="Number of travel days, including the final day into the end stop.")
    trip_style: Optional[TripStyle] = Field(default=None, description="Selection preset; defaults to the configured style.")
    include_csv: bool = Field(default=False, description="Attach the day-by-day segments as CSV text.")


class SegmentModel(BaseModel):
    day: int
    start: str
    end: str
    end_stop_id: str
    distance_miles: float
    drive_time_hours: float
    drive_time_category: str
    selection_state: Optional[str] = None
    heritage_score: Optional[int] = None
    heritage_tier: Optional[str] = None
    is_compromise: bool = False
    warnings: List[str] = Field(default_factory=list)
    attractions: List[TripStopModel] = Field(default_factory=list)


class ViolationModel(BaseModel):
    day: int
    type: str
    current_value: float
    recommended_value: float
    severity: str


class AdjustmentModel(BaseModel):
    original_days: int
    adjusted_days: int
    reason: str
    expected_improvement: str


class TripPlanResponse(BaseModel):
    start: TripStopModel
    end: TripStopModel
    requested_days: int
    trip_style: str
    total_distance_miles: float
    total_drive_hours: float
    is_complete: bool
    destinations: List[TripStopModel]
    segments: List[SegmentModel]
    violations: List[ViolationModel]
    adjustment: Optional[AdjustmentModel] = None
    heritage_summary: Dict[str, Any] = Field(default_factory=dict)
    warnings: List[str]
    csv: Optional[str] = None


class BalanceRequest(BaseModel):
    start: TripStopModel
    end: TripStopModel
    candidates: List[TripStopModel] = Field(default_factory=list)
    requested_days: int = Field(..., ge=1)


class BalanceReportModel(BaseModel):
    is_valid: bool
    balance_score: float
    grade: str
    variance_hours: float
    issues: List[str]
    suggestions: List[str]


class BalanceResponse(BaseModel):
    strategy: str
    destinations: List[TripStopModel]
    daily_hours: List[float]
    total_distance: float
    total_drive_hours: float
    average_drive_hours: float
    variance: float
    is_well_balanced: bool
    has_progressive_flow: bool
    report: BalanceReportModel


class DurationRequest(BaseModel):
    start: TripStopModel
    end: TripStopModel
    requested_days: int = Field(..., ge=1)


class DriveTimeTargetModel(BaseModel):
    target_hours: float
    min_hours: float
    max_hours: float
    is_optimal: bool


class HardConstraintModel(BaseModel):
    is_valid: bool
    min_required_days: int
    max_reasonable_days: int
    recommended_days: int
    reason: str


class DurationResponse(BaseModel):
    requested_days: int
    suggested_days: int
    reason: str
    total_distance: float
    total_drive_hours: float
    average_drive_hours: float
    is_balanced: bool
    daily_targets: List[DriveTimeTargetModel]
    constraints: HardConstraintModel
