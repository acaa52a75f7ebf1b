"""Trip planning service entry points used by the API layer."""

from __future__ import annotations

import logging
from dataclasses import asdict

from ...errors import PlanningContractError
from ...models.domain import TripStop
from ...schemas.trips import (
    BalanceReportModel,
    BalanceRequest,
    BalanceResponse,
    DurationRequest,
    DurationResponse,
    TripPlanRequest,
    TripPlanResponse,
    TripStopModel,
)
from ..balancing.enforcer import enforce_hard_constraints
from ..balancing.route_balancer import RouteBalancer
from ..drive_time import suggest_duration, validate_trip_balance
from ..geospatial import has_valid_coordinates, stop_distance
from ..outputs.itinerary_formatter import itinerary_to_csv, itinerary_to_json
from .planner import plan_itinerary


def to_trip_stop(model: TripStopModel) -> TripStop:
    return TripStop(**model.model_dump())


def _endpoints(start_model: TripStopModel, end_model: TripStopModel) -> tuple[TripStop, TripStop]:
    start, end = to_trip_stop(start_model), to_trip_stop(end_model)
    for label, stop in (("start", start), ("end", end)):
        if not has_valid_coordinates(stop):
            raise PlanningContractError(f"The {label} stop {stop.name!r} has invalid coordinates")
    return start, end


def plan_trip(payload: TripPlanRequest) -> TripPlanResponse:
    start, end = _endpoints(payload.start, payload.end)
    candidates = [to_trip_stop(model) for model in payload.candidates]
    plan = plan_itinerary(start, end, candidates, payload.requested_days, trip_style=payload.trip_style)
    logging.info(
        f"Planned {start.name} -> {end.name}: {len(plan.destinations)} overnight stops, "
        f"{len(plan.violations)} violations"
    )
    response = TripPlanResponse.model_validate(itinerary_to_json(plan))
    if payload.include_csv:
        response.csv = itinerary_to_csv(plan)
    return response


def balance_trip(payload: BalanceRequest) -> BalanceResponse:
    start, end = _endpoints(payload.start, payload.end)
    candidates = [to_trip_stop(model) for model in payload.candidates]
    route = RouteBalancer().create_balanced_route(start, end, candidates, payload.requested_days)
    report = validate_trip_balance(route.daily_hours)
    return BalanceResponse(
        strategy=route.strategy,
        destinations=[TripStopModel(**asdict(stop)) for stop in route.destinations],
        daily_hours=route.daily_hours,
        total_distance=route.total_distance,
        total_drive_hours=route.total_drive_hours,
        average_drive_hours=route.average_drive_hours,
        variance=route.variance,
        is_well_balanced=route.is_well_balanced,
        has_progressive_flow=route.has_progressive_flow,
        report=BalanceReportModel(**asdict(report)),
    )


def suggest_trip_duration(payload: DurationRequest) -> DurationResponse:
    start, end = _endpoints(payload.start, payload.end)
    suggestion = suggest_duration(stop_distance(start, end), payload.requested_days)
    constraints = enforce_hard_constraints(start, end, payload.requested_days)
    data = asdict(suggestion)
    data["constraints"] = asdict(constraints)
    return DurationResponse.model_validate(data)
