"""Pydantic schemas for schedule file validation."""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator


def _to_datetime(v: Any) -> Any:
    """YAML loads bare dates as date objects; treat them as midnight."""
    if isinstance(v, date) and not isinstance(v, datetime):
        return datetime.combine(v, time())
    return v


class EventSchema(BaseModel):
    """Schema for one scheduled event."""

    id: str
    type: str
    title: str = ""
    start: datetime
    end: datetime | None = None
    team_member: str | None = None
    weather_condition: str | None = None
    inspection_completed: bool = False
    project_id: str | None = None
    location: str | None = None
    deleted: bool = False

    @field_validator("id", "type", "team_member", "project_id", mode="before")
    @classmethod
    def coerce_to_string(cls, v: Any) -> Any:
        """Allow numeric ids in YAML."""
        if isinstance(v, int):
            return str(v)
        return v

    @field_validator("start", "end", mode="before")
    @classmethod
    def coerce_date(cls, v: Any) -> Any:
        """Convert date objects to datetimes."""
        return _to_datetime(v)

    @model_validator(mode="after")
    def validate_interval(self) -> EventSchema:
        """Reject events that end before they start."""
        if self.end is not None and self.end < self.start:
            raise ValueError(f"Event '{self.id}' ends before it starts")
        return self


class WeatherSchema(BaseModel):
    """Schema for a weather forecast record."""

    time: datetime
    condition: str

    @field_validator("time", mode="before")
    @classmethod
    def coerce_date(cls, v: Any) -> Any:
        """Convert date objects to datetimes."""
        return _to_datetime(v)


class ScheduleSchema(BaseModel):
    """Schema for the entire schedule file."""

    events: list[EventSchema] = Field(default_factory=list)
    weather: list[WeatherSchema] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_unique_ids(self) -> ScheduleSchema:
        """Event ids must be unique within a schedule."""
        seen: set[str] = set()
        for event in self.events:
            if event.id in seen:
                raise ValueError(f"Duplicate event id '{event.id}'")
            seen.add(event.id)
        return self
