"""Category-specific checks that decide whether a pair of events violates a principle."""

from __future__ import annotations

from typing import Protocol

from sitelogic.models import ScheduledEvent, days_between, intervals_overlap

from .models import ConstructionPrinciple, PrincipleCategory

# Direct predecessors used by sequencing principles, independent of the trade
# dependency graph.
SEQUENCING_DEPENDENCIES: dict[str, frozenset[str]] = {
    "foundation": frozenset({"site_prep", "demolition"}),
    "framing": frozenset({"foundation"}),
    "electrical": frozenset({"framing"}),
    "plumbing": frozenset({"framing"}),
    "insulation": frozenset({"electrical", "plumbing", "hvac"}),
    "drywall": frozenset({"insulation"}),
    "painting": frozenset({"drywall"}),
    "flooring": frozenset({"painting"}),
}

OVERHEAD_ACTIVITY_TYPES = frozenset({"roofing", "framing", "demolition"})

# Days a material needs before following work may start
CURE_DAYS: dict[str, int] = {
    "concrete": 7,
    "foundation": 7,
    "painting": 2,
    "drywall": 2,
}

OVERHEAD_PROTECTION_ID = "saf_001"
CURE_TIME_ID = "qua_003"


class PrincipleCheck(Protocol):
    """Strategy deciding whether an ordered pair of events violates a principle."""

    def applies_to(self, principle: ConstructionPrinciple) -> bool:
        """Whether this check evaluates the given principle."""
        ...

    def evaluate(
        self, principle: ConstructionPrinciple, a: ScheduledEvent, b: ScheduledEvent
    ) -> str | None:
        """Return the violation reason, or None if the pair is fine."""
        ...


class SequencingCheck:
    """B should not start before a direct predecessor A has ended."""

    def __init__(self, dependencies: dict[str, frozenset[str]] | None = None):
        self.dependencies = SEQUENCING_DEPENDENCIES if dependencies is None else dependencies

    def applies_to(self, principle: ConstructionPrinciple) -> bool:
        return principle.category == PrincipleCategory.SEQUENCING

    def evaluate(
        self, principle: ConstructionPrinciple, a: ScheduledEvent, b: ScheduledEvent
    ) -> str | None:
        predecessors = self.dependencies.get(b.type_key)
        if not predecessors or a.type_key not in predecessors:
            return None
        if b.start_time < a.end:
            return f"{b.label} should not occur before {a.label} per {principle.name}"
        return None


class OverheadHazardCheck:
    """Ground-level work overlapping active overhead work."""

    def applies_to(self, principle: ConstructionPrinciple) -> bool:
        return principle.id == OVERHEAD_PROTECTION_ID

    def evaluate(
        self, principle: ConstructionPrinciple, a: ScheduledEvent, b: ScheduledEvent
    ) -> str | None:
        if a.type_key not in OVERHEAD_ACTIVITY_TYPES or b.type_key in OVERHEAD_ACTIVITY_TYPES:
            return None
        if intervals_overlap(a, b):
            return f"Safety violation: {principle.name}"
        return None


class CureTimeCheck:
    """Work following a curing material starts before the cure time has elapsed."""

    def applies_to(self, principle: ConstructionPrinciple) -> bool:
        return principle.id == CURE_TIME_ID

    def evaluate(
        self, principle: ConstructionPrinciple, a: ScheduledEvent, b: ScheduledEvent
    ) -> str | None:
        cure_days = CURE_DAYS.get(a.type_key)
        if not cure_days:
            return None
        if days_between(a.end, b.start_time) < cure_days:
            return f"Quality concern: {principle.name}"
        return None


def default_checks() -> list[PrincipleCheck]:
    """Built-in checks in lookup order; the first applicable check wins."""
    return [OverheadHazardCheck(), CureTimeCheck(), SequencingCheck()]
