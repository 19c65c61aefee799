"""Trade dependency graph: per-activity sequencing and sensitivity lookup."""

from __future__ import annotations

from collections.abc import Iterator, Mapping

from .models import ActivityType as A
from .models import TradeDependency, _type_key

_PERMISSIVE = TradeDependency()

TRADE_DEPENDENCIES: dict[str, TradeDependency] = {
    A.FOUNDATION.value: TradeDependency.of(
        depends_on=[A.DEMOLITION, A.SITE_PREP],
        cannot_overlap_with=[A.FRAMING, A.ELECTRICAL, A.PLUMBING],
        minimum_days_after=7,  # curing
        weather_sensitive=True,
        requires_inspection=True,
    ),
    A.FRAMING.value: TradeDependency.of(
        depends_on=[A.FOUNDATION],
        cannot_overlap_with=[A.ROOFING, A.SIDING],
        minimum_days_before=3,
        weather_sensitive=True,
        requires_inspection=True,
    ),
    A.ROOFING.value: TradeDependency.of(
        depends_on=[A.FRAMING],
        cannot_overlap_with=[A.ELECTRICAL, A.PLUMBING, A.HVAC],
        weather_sensitive=True,
    ),
    A.ELECTRICAL.value: TradeDependency.of(
        depends_on=[A.FRAMING],
        cannot_overlap_with=[A.INSULATION, A.DRYWALL],
        minimum_days_before=2,
        requires_inspection=True,
    ),
    A.PLUMBING.value: TradeDependency.of(
        depends_on=[A.FRAMING],
        cannot_overlap_with=[A.INSULATION, A.DRYWALL],
        minimum_days_before=2,
        requires_inspection=True,
    ),
    A.HVAC.value: TradeDependency.of(
        depends_on=[A.FRAMING, A.ROOFING],
        cannot_overlap_with=[A.INSULATION, A.DRYWALL],
        minimum_days_before=2,
        requires_inspection=True,
    ),
    A.INSULATION.value: TradeDependency.of(
        depends_on=[A.ELECTRICAL, A.PLUMBING, A.HVAC],
        cannot_overlap_with=[A.DRYWALL],
        minimum_days_before=1,
        requires_inspection=True,
    ),
    A.DRYWALL.value: TradeDependency.of(
        depends_on=[A.INSULATION],
        cannot_overlap_with=[A.PAINTING, A.FLOORING],
        minimum_days_after=2,  # drying
    ),
    A.PAINTING.value: TradeDependency.of(
        depends_on=[A.DRYWALL],
        cannot_overlap_with=[A.FLOORING, A.INSTALLATION],
        minimum_days_after=2,  # drying
    ),
    A.FLOORING.value: TradeDependency.of(
        depends_on=[A.PAINTING],
        cannot_overlap_with=[A.INSTALLATION],
    ),
    A.WINDOWS_DOORS.value: TradeDependency.of(
        depends_on=[A.FRAMING],
        cannot_overlap_with=[A.SIDING, A.INSULATION],
        weather_sensitive=True,
    ),
    A.SIDING.value: TradeDependency.of(
        depends_on=[A.WINDOWS_DOORS, A.ROOFING],
        cannot_overlap_with=[A.LANDSCAPING],
        weather_sensitive=True,
    ),
    A.LANDSCAPING.value: TradeDependency.of(
        depends_on=[A.SIDING, A.CONCRETE],
        weather_sensitive=True,
    ),
    A.CONCRETE.value: TradeDependency.of(
        depends_on=[A.FOUNDATION],
        cannot_overlap_with=[A.LANDSCAPING],
        minimum_days_after=7,  # curing
        weather_sensitive=True,
    ),
    A.INSTALLATION.value: TradeDependency.of(
        depends_on=[A.FLOORING, A.PAINTING],
    ),
    A.DEMOLITION.value: TradeDependency.of(
        cannot_overlap_with=[A.FOUNDATION, A.FRAMING],
        requires_inspection=True,
    ),
}


class TradeGraph(Mapping[str, TradeDependency]):
    """Read-only lookup from activity type to its trade dependency.

    Types missing from the table get an empty dependency: no prerequisites,
    no exclusions, no sensitivities.
    """

    def __init__(self, dependencies: Mapping[str, TradeDependency] | None = None):
        table = TRADE_DEPENDENCIES if dependencies is None else dependencies
        self._table: dict[str, TradeDependency] = {_type_key(k): v for k, v in table.items()}

    def __getitem__(self, activity_type: str) -> TradeDependency:
        return self._table[_type_key(activity_type)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def get(self, activity_type: str, default: TradeDependency | None = None) -> TradeDependency:  # type: ignore[override]
        """Look up a type, falling back to the permissive default."""
        return self._table.get(_type_key(activity_type), default or _PERMISSIVE)

    def depends_on(self, dependent: str, prerequisite: str) -> bool:
        """True if ``dependent`` lists ``prerequisite`` among its direct dependencies."""
        return _type_key(prerequisite) in self.get(dependent).depends_on

    def cannot_overlap(self, type_a: str, type_b: str) -> bool:
        """True if either type excludes the other from running concurrently."""
        key_a, key_b = _type_key(type_a), _type_key(type_b)
        return key_b in self.get(key_a).cannot_overlap_with or key_a in self.get(
            key_b
        ).cannot_overlap_with

    def merged(self, overrides: Mapping[str, TradeDependency]) -> TradeGraph:
        """Return a new graph with ``overrides`` replacing or adding entries."""
        table = dict(self._table)
        table.update({_type_key(k): v for k, v in overrides.items()})
        return TradeGraph(table)

    def find_cycle(self) -> list[str] | None:
        """Return one dependency cycle as a path (first node repeated), or None."""
        visited: set[str] = set()

        for start in sorted(self._table):
            path: list[str] = []
            if self._walk(start, visited, path):
                return path
        return None

    def _walk(self, activity_type: str, visited: set[str], path: list[str]) -> bool:
        """Depth-first search along depends_on edges, leaving the cycle in ``path``."""
        if activity_type in path:
            cycle_start = path.index(activity_type)
            path[:] = path[cycle_start:] + [activity_type]
            return True
        if activity_type in visited:
            return False

        visited.add(activity_type)
        path.append(activity_type)
        for prerequisite in sorted(self.get(activity_type).depends_on):
            if self._walk(prerequisite, visited, path):
                return True
        path.pop()
        return False


DEFAULT_TRADE_GRAPH = TradeGraph()
