"""Serializers for itinerary outputs."""

from __future__ import annotations

import csv
import io
from dataclasses import asdict

from ...models.domain import TripStop
from ..planning.models import ItineraryPlan


def _stop_json(stop: TripStop) -> dict:
    return asdict(stop)


def itinerary_to_json(plan: ItineraryPlan) -> dict:
    return {
        "start": _stop_json(plan.start),
        "end": _stop_json(plan.end),
        "requested_days": plan.requested_days,
        "trip_style": plan.trip_style,
        "total_distance_miles": round(plan.total_distance_miles, 1),
        "total_drive_hours": round(plan.total_drive_hours, 2),
        "is_complete": plan.is_complete,
        "destinations": [_stop_json(stop) for stop in plan.destinations],
        "segments": [
            {
                "day": segment.day,
                "start": segment.start.name,
                "end": segment.end.name,
                "end_stop_id": segment.end.id,
                "distance_miles": round(segment.distance_miles, 1),
                "drive_time_hours": round(segment.drive_time_hours, 2),
                "drive_time_category": segment.drive_time_category,
                "selection_state": segment.selection_state,
                "heritage_score": segment.heritage_score,
                "heritage_tier": segment.heritage_tier,
                "is_compromise": segment.is_compromise,
                "warnings": list(segment.warnings),
                "attractions": [_stop_json(stop) for stop in segment.attractions],
            }
            for segment in plan.segments
        ],
        "violations": [asdict(violation) for violation in plan.violations],
        "adjustment": asdict(plan.adjustment) if plan.adjustment else None,
        "heritage_summary": dict(plan.heritage_summary),
        "warnings": list(plan.warnings),
    }


def itinerary_to_csv(plan: ItineraryPlan) -> str:
    buffer = io.StringIO()
    fieldnames = [
        "day",
        "start",
        "end",
        "distance_miles",
        "drive_time_hours",
        "drive_time_category",
        "selection_state",
        "heritage_tier",
        "is_compromise",
        "attractions",
    ]
    writer = csv.DictWriter(buffer, fieldnames=fieldnames)
    writer.writeheader()
    for segment in plan.segments:
        writer.writerow(
            {
                "day": segment.day,
                "start": segment.start.name,
                "end": segment.end.name,
                "distance_miles": f"{segment.distance_miles:.1f}",
                "drive_time_hours": f"{segment.drive_time_hours:.2f}",
                "drive_time_category": segment.drive_time_category,
                "selection_state": segment.selection_state or "",
                "heritage_tier": segment.heritage_tier or "",
                "is_compromise": segment.is_compromise,
                "attractions": "; ".join(stop.name for stop in segment.attractions),
            }
        )
    return buffer.getvalue()
