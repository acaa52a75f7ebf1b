"""Application configuration and settings management."""

from typing import Annotated, Any, Literal

import json
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="ROADTRIP_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Route 66 Itinerary Planner API"
    api_prefix: str = "/api"
    average_speed_mph: float = Field(default=50.0, gt=0.0, description="Average road speed used to convert miles to hours.")

    # Canonical drive-time table (hours)
    optimal_min_hours: float = Field(default=4.0, gt=0.0)
    optimal_max_hours: float = Field(default=6.0, gt=0.0)
    acceptable_min_hours: float = Field(default=3.0, gt=0.0)
    acceptable_max_hours: float = Field(default=7.5, gt=0.0)
    absolute_min_hours: float = Field(default=2.5, gt=0.0)
    absolute_max_hours: float = Field(default=8.0, gt=0.0)

    default_trip_style: Literal["balanced", "destination-focused"] = Field(
        default="destination-focused",
        description="Selection preset used when a request does not name one.",
    )
    max_balance_variance_hours: float = Field(
        default=1.5,
        ge=0.0,
        description="Standard deviation of daily drive hours accepted as well balanced.",
    )
    min_meaningful_distance_miles: float = Field(default=25.0, ge=0.0)
    max_attractions_per_segment: int = Field(
        default=3,
        ge=0,
        description="Attractions suggested along each day's drive.",
    )
    frontend_allowed_origins: Annotated[tuple[str, ...], NoDecode] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @model_validator(mode="after")
    def _check_bands(self) -> "Settings":
        if not (
            self.absolute_min_hours
            <= self.acceptable_min_hours
            <= self.optimal_min_hours
            <= self.optimal_max_hours
            <= self.acceptable_max_hours
            <= self.absolute_max_hours
        ):
            raise ValueError("drive-time bands must nest: absolute ⊇ acceptable ⊇ optimal")
        return self

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
