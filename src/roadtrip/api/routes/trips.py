"""Trip planning endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...errors import PlanningContractError
from ...schemas.trips import (
    BalanceRequest,
    BalanceResponse,
    DurationRequest,
    DurationResponse,
    TripPlanRequest,
    TripPlanResponse,
)
from ...services.planning.service import balance_trip, plan_trip, suggest_trip_duration

router = APIRouter(prefix="/trips", tags=["trips"])


def _run(action: str, handler, payload):
    try:
        return handler(payload)
    except PlanningContractError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error trying to {action}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to {action}: {str(exc)}",
        ) from exc


@router.post("/plan", response_model=TripPlanResponse, status_code=status.HTTP_200_OK)
def plan(payload: TripPlanRequest) -> TripPlanResponse:
    return _run("plan trip", plan_trip, payload)


@router.post("/balance", response_model=BalanceResponse, status_code=status.HTTP_200_OK)
def balance(payload: BalanceRequest) -> BalanceResponse:
    """Place overnight stops with the route balancer and grade the resulting days."""
    return _run("balance trip", balance_trip, payload)


@router.post("/duration", response_model=DurationResponse, status_code=status.HTTP_200_OK)
def duration(payload: DurationRequest) -> DurationResponse:
    return _run("suggest trip duration", suggest_trip_duration, payload)
