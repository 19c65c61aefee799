"""Single forward-pass rescheduling that respects dependency order and lag."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta
from functools import cmp_to_key

from .config import CalendarConstraints
from .logger import get_logger
from .models import ResolutionSuggestion, ScheduledEvent
from .trades import DEFAULT_TRADE_GRAPH, TradeGraph

logger = get_logger()

DEFAULT_REASON = "Adjusted to follow construction sequence and dependencies"


class ScheduleResolver:
    """Propose a revised start/end per event without changing its duration.

    This is a single forward pass. The output is not re-checked for overlap
    or resource conflicts; run the detector on the adjusted schedule to
    validate it.
    """

    def __init__(self, graph: TradeGraph | None = None):
        self.graph = DEFAULT_TRADE_GRAPH if graph is None else graph

    def _compare(self, a: ScheduledEvent, b: ScheduledEvent) -> int:
        """Order by direct dependency edges, falling back to original start time."""
        if self.graph.depends_on(b.type_key, a.type_key):
            return -1
        if self.graph.depends_on(a.type_key, b.type_key):
            return 1
        if a.start_time < b.start_time:
            return -1
        if a.start_time > b.start_time:
            return 1
        return 0

    def sort_events(self, events: Sequence[ScheduledEvent]) -> list[ScheduledEvent]:
        """Sort events into dependency order.

        Only pairs joined by a direct dependency edge are ordered by it; this
        is not a full topological sort.
        """
        return sorted(events, key=cmp_to_key(self._compare))

    def suggest_schedule(
        self,
        events: Sequence[ScheduledEvent],
        constraints: CalendarConstraints | None = None,
        *,
        current_time: datetime | None = None,
    ) -> list[ResolutionSuggestion]:
        """Suggest new start/end times for events that need to move.

        Args:
            events: Events to reschedule
            constraints: Optional calendar constraints (work days, work hours, deadline)
            current_time: Starting point of the pass (defaults to now)

        Returns:
            One suggestion per event whose start changed
        """
        if not events:
            return []

        ordered = self.sort_events(events)
        last_end = current_time or datetime.now(tz=ordered[0].start_time.tzinfo)
        adjusted_end: dict[str, datetime] = {}
        suggestions: list[ResolutionSuggestion] = []

        for event in ordered:
            original_start = event.start_time
            original_end = event.end
            suggested_start = self._earliest_start(event, ordered, adjusted_end, last_end)

            if constraints:
                suggested_start = apply_calendar(suggested_start, constraints)

            suggested_end = suggested_start + (original_end - original_start)
            adjusted_end[event.id] = suggested_end

            if suggested_start != original_start:
                reason = DEFAULT_REASON
                deadline = constraints.project_deadline if constraints else None
                if deadline is not None and suggested_end > deadline:
                    reason += f" (finishes after project deadline {deadline.isoformat()})"
                    logger.warning(
                        f"Event '{event.id}' would finish {suggested_end.isoformat()}, "
                        f"after project deadline {deadline.isoformat()}"
                    )
                logger.changes(
                    f"Reschedule {event.id}: {original_start.isoformat()} -> "
                    f"{suggested_start.isoformat()}"
                )
                suggestions.append(
                    ResolutionSuggestion(
                        event_id=event.id,
                        original_start=original_start,
                        original_end=original_end,
                        suggested_start=suggested_start,
                        suggested_end=suggested_end,
                        reason=reason,
                    )
                )

            last_end = suggested_end

        return suggestions

    def _earliest_start(
        self,
        event: ScheduledEvent,
        ordered: Sequence[ScheduledEvent],
        adjusted_end: dict[str, datetime],
        last_end: datetime,
    ) -> datetime:
        """Candidate start for an event given its already-placed dependencies."""
        prerequisites = [
            other
            for other in ordered
            if other.id != event.id and self.graph.depends_on(event.type_key, other.type_key)
        ]
        if not prerequisites:
            return event.start_time

        latest_end = max(adjusted_end.get(p.id, p.end) for p in prerequisites)
        lagged_ends = [
            adjusted_end.get(p.id, p.end) + timedelta(days=lag)
            for p in prerequisites
            if (lag := self.graph.get(p.type_key).minimum_days_after)
        ]
        logger.debug(
            f"  {event.id}: {len(prerequisites)} prerequisites, latest end {latest_end.isoformat()}"
        )
        if lagged_ends:
            return max([latest_end, *lagged_ends])
        return max(latest_end, last_end)


def apply_calendar(start: datetime, constraints: CalendarConstraints) -> datetime:
    """Move a candidate start forward onto an allowed work day and hour."""
    if constraints.work_hours_end is not None and start.hour >= constraints.work_hours_end:
        start = (start + timedelta(days=1)).replace(
            hour=constraints.work_hours_start or 0, minute=0, second=0, microsecond=0
        )

    if constraints.preferred_work_days:
        while start.isoweekday() not in constraints.preferred_work_days:
            start += timedelta(days=1)

    if constraints.work_hours_start is not None and start.hour < constraints.work_hours_start:
        start = start.replace(hour=constraints.work_hours_start)

    return start


def apply_suggestions(
    events: Sequence[ScheduledEvent], suggestions: Sequence[ResolutionSuggestion]
) -> list[ScheduledEvent]:
    """Return new events with suggested times applied; inputs are left untouched."""
    by_id = {s.event_id: s for s in suggestions}
    result: list[ScheduledEvent] = []
    for event in events:
        suggestion = by_id.get(event.id)
        if suggestion:
            result.append(event.reschedule(suggestion.suggested_start, suggestion.suggested_end))
        else:
            result.append(event)
    return result


def suggest_schedule(
    events: Sequence[ScheduledEvent],
    constraints: CalendarConstraints | None = None,
    *,
    current_time: datetime | None = None,
) -> list[ResolutionSuggestion]:
    """Suggest a revised schedule using the built-in trade graph."""
    return ScheduleResolver().suggest_schedule(events, constraints, current_time=current_time)
