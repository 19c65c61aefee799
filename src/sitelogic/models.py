"""Data models for sitelogic."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .rules import ConflictRule

SECONDS_PER_DAY = 24 * 60 * 60


class ActivityType(str, Enum):
    """Built-in categories of construction work.

    Event types are plain strings; any value outside this enumeration is
    accepted and treated as having no dependencies or restrictions.
    """

    SITE_PREP = "site_prep"
    DEMOLITION = "demolition"
    FOUNDATION = "foundation"
    FRAMING = "framing"
    ROOFING = "roofing"
    ELECTRICAL = "electrical"
    PLUMBING = "plumbing"
    HVAC = "hvac"
    INSULATION = "insulation"
    DRYWALL = "drywall"
    PAINTING = "painting"
    FLOORING = "flooring"
    WINDOWS_DOORS = "windows_doors"
    SIDING = "siding"
    LANDSCAPING = "landscaping"
    CONCRETE = "concrete"
    INSTALLATION = "installation"
    INSPECTION = "inspection"
    WEATHER_ALERT = "weather_alert"


# Event type given to weather feed records when they are paired with work events
WEATHER_EVENT_TYPE = "weather"


class Severity(str, Enum):
    """Conflict severity."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class RuleType(str, Enum):
    """Kind of domain rule a conflict rule enforces."""

    SEQUENCE = "sequence"
    RESOURCE = "resource"
    SPACE = "space"
    WEATHER = "weather"
    INSPECTION = "inspection"
    SAFETY = "safety"


class Perspective(str, Enum):
    """Named filter selecting which conflict rules are active."""

    STRICT = "strict"
    BALANCED = "balanced"
    FLEXIBLE = "flexible"


def _type_key(value: str) -> str:
    """Normalize an activity type (enum member or plain string) to its string value."""
    return value.value if isinstance(value, Enum) else str(value)


def _empty_types() -> frozenset[str]:
    return frozenset()


@dataclass(frozen=True)
class TradeDependency:
    """Sequencing and sensitivity rules for one activity type.

    The lag after (``minimum_days_after``) is the time this type's completion
    imposes on its dependents, e.g. concrete cure time.
    """

    depends_on: frozenset[str] = field(default_factory=_empty_types)
    cannot_overlap_with: frozenset[str] = field(default_factory=_empty_types)
    minimum_days_before: int | None = None
    minimum_days_after: int | None = None
    weather_sensitive: bool = False
    requires_inspection: bool = False

    @classmethod
    def of(
        cls,
        depends_on: list[str] | None = None,
        cannot_overlap_with: list[str] | None = None,
        **kwargs: Any,
    ) -> TradeDependency:
        """Build a dependency from lists of (possibly enum) activity types."""
        return cls(
            depends_on=frozenset(_type_key(t) for t in depends_on or []),
            cannot_overlap_with=frozenset(_type_key(t) for t in cannot_overlap_with or []),
            **kwargs,
        )


@dataclass(frozen=True)
class ScheduledEvent:
    """One planned occurrence of an activity on the timeline.

    Events are immutable; the resolver produces new start/end values instead
    of changing them.
    """

    id: str
    event_type: str
    start_time: datetime
    end_time: datetime | None = None
    title: str = ""
    team_member_id: str | None = None
    weather_condition: str | None = None
    inspection_completed: bool = False
    project_id: str | None = None
    location: str | None = None
    deleted: bool = False

    @property
    def type_key(self) -> str:
        """The event type as a plain string."""
        return _type_key(self.event_type)

    @property
    def end(self) -> datetime:
        """End of the event; point-in-time events end when they start."""
        return self.end_time if self.end_time is not None else self.start_time

    @property
    def label(self) -> str:
        """Human-readable name used in conflict descriptions."""
        return self.title or self.id

    def reschedule(self, start_time: datetime, end_time: datetime) -> ScheduledEvent:
        """Return a copy of this event with new start and end times."""
        return replace(self, start_time=start_time, end_time=end_time)


@dataclass(frozen=True)
class WeatherRecord:
    """A single weather observation or forecast from an external feed."""

    time: datetime
    condition: str

    def as_event(self, index: int) -> ScheduledEvent:
        """Represent this record as a point event for weather rules."""
        return ScheduledEvent(
            id=f"weather-{index}",
            event_type=WEATHER_EVENT_TYPE,
            start_time=self.time,
            title=f"{self.condition} forecast",
            weather_condition=self.condition,
        )


@dataclass(frozen=True)
class Conflict:
    """A pairwise rule violation between two scheduled events."""

    event1: ScheduledEvent
    event2: ScheduledEvent
    rule: ConflictRule
    severity: Severity
    description: str
    resolution: str

    @property
    def conflict_id(self) -> str:
        """Stable identifier used to ignore a specific conflict."""
        return f"{self.event1.id}-{self.event2.id}-{self.rule.id}"


def _default_conflicts() -> list[Conflict]:
    return []


def _default_str_list() -> list[str]:
    return []


@dataclass
class ConflictAnalysis:
    """Detector output: conflicts, suggestions and a 0-100 health score."""

    conflicts: list[Conflict] = field(default_factory=_default_conflicts)
    suggestions: list[str] = field(default_factory=_default_str_list)
    score: int = 100

    def count_by_severity(self, severity: Severity) -> int:
        """Count conflicts with the given severity."""
        return sum(1 for c in self.conflicts if c.severity == severity)

    def count_by_type(self, rule_type: RuleType) -> int:
        """Count conflicts produced by rules of the given type."""
        return sum(1 for c in self.conflicts if c.rule.type == rule_type)


@dataclass(frozen=True)
class ResolutionSuggestion:
    """A proposed new time window for one event."""

    event_id: str
    original_start: datetime
    original_end: datetime
    suggested_start: datetime
    suggested_end: datetime
    reason: str

    @property
    def shift_days(self) -> float:
        """How far the event moves, in fractional days (negative means earlier)."""
        return (self.suggested_start - self.original_start).total_seconds() / SECONDS_PER_DAY


def days_between(earlier: datetime, later: datetime) -> float:
    """Elapsed fractional days from ``earlier`` to ``later``."""
    return (later - earlier).total_seconds() / SECONDS_PER_DAY


def intervals_overlap(a: ScheduledEvent, b: ScheduledEvent) -> bool:
    """Half-open interval intersection test on two events."""
    return a.start_time < b.end and a.end > b.start_time
