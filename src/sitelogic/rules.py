"""Conflict rules: named, typed predicates over a pair of scheduled events.

Each rule is a small strategy object. ``check`` is a pure function of the
trade graph and the two events; ``evaluate`` wraps a positive check into a
:class:`~sitelogic.models.Conflict` carrying the description and the
resolution text for the rule's type.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

from .models import (
    ActivityType,
    Conflict,
    RuleType,
    ScheduledEvent,
    Severity,
    days_between,
    intervals_overlap,
)
from .trades import DEFAULT_TRADE_GRAPH, TradeGraph

DEFAULT_HAZARDOUS_TYPES = frozenset({ActivityType.DEMOLITION.value})
DEFAULT_ADVERSE_CONDITIONS = frozenset({"rain", "snow"})


class ConflictRule(ABC):
    """Base class for conflict rules.

    Subclasses set the descriptive class attributes and implement ``check``.
    Rules marked ``directional`` are asymmetric in their two arguments; the
    detector evaluates them in both orientations.
    """

    id: str
    name: str
    description: str
    severity: Severity
    type: RuleType
    directional: bool = False

    def __init__(self, graph: TradeGraph | None = None):
        self.graph = DEFAULT_TRADE_GRAPH if graph is None else graph

    @abstractmethod
    def check(self, a: ScheduledEvent, b: ScheduledEvent) -> bool:
        """Return True if the ordered pair (a, b) violates this rule."""

    def resolution(self, a: ScheduledEvent, b: ScheduledEvent) -> str:
        """Fixed resolution text for this rule's type."""
        return resolution_for(self.type, a, b)

    def evaluate(self, a: ScheduledEvent, b: ScheduledEvent) -> Conflict | None:
        """Return a conflict record if the pair violates this rule."""
        if not self.check(a, b):
            return None
        return Conflict(
            event1=a,
            event2=b,
            rule=self,
            severity=self.severity,
            description=f"{self.name}: {a.label} conflicts with {b.label}",
            resolution=self.resolution(a, b),
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"


def resolution_for(rule_type: RuleType, a: ScheduledEvent, b: ScheduledEvent) -> str:
    """Resolution template for a conflict of the given rule type."""
    if rule_type == RuleType.SEQUENCE:
        return f"Reschedule {b.label} to start after {a.label} is completed"
    if rule_type == RuleType.SPACE:
        return "Stagger these activities or assign to different areas of the project"
    if rule_type == RuleType.WEATHER:
        return f"Consider moving {a.label} to a day with better weather conditions"
    if rule_type == RuleType.INSPECTION:
        return f"Schedule inspection after {a.label} and before {b.label}"
    if rule_type == RuleType.RESOURCE:
        return "Assign different crews or reschedule to avoid resource conflicts"
    if rule_type == RuleType.SAFETY:
        return "These activities cannot occur simultaneously for safety reasons"
    return "Review and adjust schedule to resolve conflict"


class SequenceViolationRule(ConflictRule):
    """B depends on A but starts before A starts.

    Compares against A's start, so only gross misordering is caught here;
    insufficient lag is the curing rule's job.
    """

    id = "sequence_violation"
    name = "Construction Sequence Violation"
    description = "Work scheduled out of proper construction sequence"
    severity = Severity.CRITICAL
    type = RuleType.SEQUENCE
    directional = True

    def check(self, a: ScheduledEvent, b: ScheduledEvent) -> bool:
        if not self.graph.depends_on(b.type_key, a.type_key):
            return False
        return b.start_time < a.start_time


class OverlapViolationRule(ConflictRule):
    """Mutually exclusive trades scheduled at the same time."""

    id = "overlap_violation"
    name = "Trade Overlap Conflict"
    description = "Trades that cannot work simultaneously are scheduled together"
    severity = Severity.HIGH
    type = RuleType.SPACE

    def check(self, a: ScheduledEvent, b: ScheduledEvent) -> bool:
        if not self.graph.cannot_overlap(a.type_key, b.type_key):
            return False
        return intervals_overlap(a, b)


class CuringTimeRule(ConflictRule):
    """B depends on A and starts before A's cure/dry time has elapsed."""

    id = "curing_time"
    name = "Insufficient Curing/Drying Time"
    description = "Not enough time allocated for materials to cure or dry"
    severity = Severity.HIGH
    type = RuleType.SEQUENCE
    directional = True

    def check(self, a: ScheduledEvent, b: ScheduledEvent) -> bool:
        lag = self.graph.get(a.type_key).minimum_days_after
        if not lag or not self.graph.depends_on(b.type_key, a.type_key):
            return False
        return days_between(a.end, b.start_time) < lag


class InspectionPendingRule(ConflictRule):
    """B depends on A, which needs an inspection that has not been recorded."""

    id = "inspection_pending"
    name = "Inspection Required"
    description = "Work scheduled before required inspection"
    severity = Severity.CRITICAL
    type = RuleType.INSPECTION
    directional = True

    def check(self, a: ScheduledEvent, b: ScheduledEvent) -> bool:
        if not self.graph.get(a.type_key).requires_inspection:
            return False
        if not self.graph.depends_on(b.type_key, a.type_key):
            return False
        return a.type_key != ActivityType.INSPECTION.value and not a.inspection_completed


class WeatherConflictRule(ConflictRule):
    """Weather-sensitive work scheduled during an alert or adverse forecast."""

    id = "weather_conflict"
    name = "Weather-Sensitive Work"
    description = "Weather-sensitive work scheduled during poor conditions"
    severity = Severity.MEDIUM
    type = RuleType.WEATHER
    directional = True

    def __init__(
        self,
        graph: TradeGraph | None = None,
        adverse_conditions: Iterable[str] = DEFAULT_ADVERSE_CONDITIONS,
    ):
        super().__init__(graph)
        self.adverse_conditions = frozenset(c.lower() for c in adverse_conditions)

    def is_adverse(self, event: ScheduledEvent) -> bool:
        """True if the event is a weather alert or carries an adverse condition."""
        if event.type_key == ActivityType.WEATHER_ALERT.value:
            return True
        condition = (event.weather_condition or "").lower()
        return condition in self.adverse_conditions

    def check(self, a: ScheduledEvent, b: ScheduledEvent) -> bool:
        if not self.graph.get(a.type_key).weather_sensitive or not self.is_adverse(b):
            return False
        return a.start_time <= b.start_time <= a.end


class ResourceConflictRule(ConflictRule):
    """The same crew or team member is booked on overlapping events."""

    id = "resource_conflict"
    name = "Resource Overallocation"
    description = "Same crew or equipment scheduled for multiple tasks"
    severity = Severity.HIGH
    type = RuleType.RESOURCE

    def check(self, a: ScheduledEvent, b: ScheduledEvent) -> bool:
        if not a.team_member_id or a.team_member_id != b.team_member_id:
            return False
        return intervals_overlap(a, b)


class SafetyViolationRule(ConflictRule):
    """A hazardous activity overlaps any other event."""

    id = "safety_violation"
    name = "Safety Protocol Violation"
    description = "Unsafe work conditions due to concurrent activities"
    severity = Severity.CRITICAL
    type = RuleType.SAFETY

    def __init__(
        self,
        graph: TradeGraph | None = None,
        hazardous_types: Iterable[str] = DEFAULT_HAZARDOUS_TYPES,
    ):
        super().__init__(graph)
        self.hazardous_types = frozenset(hazardous_types)

    def check(self, a: ScheduledEvent, b: ScheduledEvent) -> bool:
        if a.type_key not in self.hazardous_types and b.type_key not in self.hazardous_types:
            return False
        return a.id != b.id and intervals_overlap(a, b)


def default_rules(
    graph: TradeGraph | None = None,
    *,
    hazardous_types: Iterable[str] = DEFAULT_HAZARDOUS_TYPES,
    adverse_conditions: Iterable[str] = DEFAULT_ADVERSE_CONDITIONS,
) -> list[ConflictRule]:
    """Build the built-in rule set, in evaluation order."""
    graph = DEFAULT_TRADE_GRAPH if graph is None else graph
    return [
        SequenceViolationRule(graph),
        OverlapViolationRule(graph),
        CuringTimeRule(graph),
        InspectionPendingRule(graph),
        WeatherConflictRule(graph, adverse_conditions),
        ResourceConflictRule(graph),
        SafetyViolationRule(graph, hazardous_types),
    ]


DEFAULT_RULES: tuple[ConflictRule, ...] = tuple(default_rules())
