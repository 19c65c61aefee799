"""Tests for the schedule resolver."""

from collections.abc import Callable
from datetime import datetime
from io import StringIO

import pytest

from sitelogic.config import CalendarConstraints
from sitelogic.detector import analyze_schedule
from sitelogic.logger import reset_logger, setup_logger
from sitelogic.models import ScheduledEvent
from sitelogic.resolver import (
    DEFAULT_REASON,
    ScheduleResolver,
    apply_calendar,
    apply_suggestions,
    suggest_schedule,
)
from sitelogic.trades import TradeGraph
from tests.conftest import day

EventFactory = Callable[..., ScheduledEvent]


class TestSuggestSchedule:
    """Test the forward pass."""

    def test_respects_curing_lag(self, make_event: EventFactory) -> None:
        """Framing after a foundation ending Day 0 moves to Day 7 or later."""
        foundation = make_event("A", "foundation", -1, 0)
        framing = make_event("B", "framing", 1, 2)

        suggestions = suggest_schedule([foundation, framing], current_time=day(-5))

        assert len(suggestions) == 1
        s = suggestions[0]
        assert s.event_id == "B"
        assert s.suggested_start >= day(7)
        assert s.suggested_start == day(7)
        assert s.suggested_end == day(8)
        assert s.original_start == day(1)
        assert s.reason == DEFAULT_REASON
        assert s.shift_days == pytest.approx(6.0)

    def test_input_order_irrelevant(self, make_event: EventFactory) -> None:
        foundation = make_event("A", "foundation", -1, 0)
        framing = make_event("B", "framing", 1, 2)

        forward = suggest_schedule([foundation, framing], current_time=day(-5))
        backward = suggest_schedule([framing, foundation], current_time=day(-5))

        assert forward == backward

    def test_preserves_duration(self, make_event: EventFactory) -> None:
        drywall = make_event("d", "drywall", 0, 3)
        painting = make_event("p", "painting", 1, 2.5)

        suggestions = suggest_schedule([painting, drywall], current_time=day(-1))

        (s,) = suggestions
        assert s.event_id == "p"
        assert s.suggested_start == day(5)  # drywall end + 2 days drying
        assert s.suggested_end - s.suggested_start == day(2.5) - day(1)

    def test_lagged_dependency_never_precedes_other_prerequisite_end(
        self, make_event: EventFactory
    ) -> None:
        """Landscaping waits for siding even when the concrete lag expires first."""
        concrete = make_event("c", "concrete", -2, 0)
        siding = make_event("s", "siding", 10, 20)
        landscaping = make_event("l", "landscaping", 21, 22)

        suggestions = suggest_schedule([concrete, siding, landscaping], current_time=day(-30))

        (s,) = suggestions
        assert s.event_id == "l"
        assert s.suggested_start >= siding.end_time
        assert s.suggested_start == day(20)

    def test_dependency_without_lag_follows_previous_end(self, make_event: EventFactory) -> None:
        framing = make_event("f", "framing", 0, 2)
        roofing = make_event("r", "roofing", 1, 3)

        suggestions = suggest_schedule([roofing, framing], current_time=day(-10))

        (s,) = suggestions
        assert s.event_id == "r"
        assert s.suggested_start == day(2)
        assert s.suggested_end == day(4)

    def test_independent_events_not_moved(self, make_event: EventFactory) -> None:
        events = [
            make_event("a", "painting", 0, 1),
            make_event("b", "landscaping", 5, 6),
        ]
        assert suggest_schedule(events, current_time=day(-1)) == []

    def test_empty_schedule(self) -> None:
        assert suggest_schedule([]) == []

    def test_inputs_not_mutated(self, make_event: EventFactory) -> None:
        foundation = make_event("A", "foundation", -1, 0)
        framing = make_event("B", "framing", 1, 2)

        suggest_schedule([foundation, framing], current_time=day(-5))

        assert framing.start_time == day(1)

    def test_resolved_schedule_clears_sequence_conflicts(self, make_event: EventFactory) -> None:
        foundation = make_event("A", "foundation", -1, 0, inspection_completed=True)
        framing = make_event("B", "framing", 1, 2)
        events = [foundation, framing]
        assert analyze_schedule(events, "strict").conflicts

        adjusted = apply_suggestions(events, suggest_schedule(events, current_time=day(-5)))

        assert analyze_schedule(adjusted, "strict").conflicts == []


class TestSortEvents:
    """Test dependency-aware ordering."""

    def test_empty_graph_orders_by_start(self, make_event: EventFactory) -> None:
        framing = make_event("B", "framing", 0)
        foundation = make_event("A", "foundation", 1)

        ordered = ScheduleResolver(TradeGraph({})).sort_events([foundation, framing])

        assert [e.id for e in ordered] == ["B", "A"]

    def test_prerequisite_first(self, make_event: EventFactory) -> None:
        framing = make_event("f", "framing", 0, 1)
        foundation = make_event("fd", "foundation", 3, 4)
        ordered = ScheduleResolver().sort_events([framing, foundation])
        assert [e.id for e in ordered] == ["fd", "f"]

    def test_unrelated_by_start(self, make_event: EventFactory) -> None:
        a = make_event("a", "painting", 3, 4)
        b = make_event("b", "landscaping", 1, 2)
        ordered = ScheduleResolver().sort_events([a, b])
        assert [e.id for e in ordered] == ["b", "a"]


class TestCalendarConstraints:
    """Test work day and work hour adjustments."""

    def test_skips_non_work_days(self, make_event: EventFactory) -> None:
        """Day 7 is a Monday; without Monday the start moves to Tuesday."""
        foundation = make_event("A", "foundation", -1, 0)
        framing = make_event("B", "framing", 1, 2)
        constraints = CalendarConstraints(preferred_work_days=[2, 3, 4, 5])

        (s,) = suggest_schedule([foundation, framing], constraints, current_time=day(-5))

        assert s.suggested_start == day(8)
        assert s.suggested_start.isoweekday() == 2

    def test_clamps_to_work_start(self, make_event: EventFactory) -> None:
        foundation = make_event("A", "foundation", -1, 0)
        framing = make_event("B", "framing", 1, 2)
        constraints = CalendarConstraints(work_hours_start=9)

        (s,) = suggest_schedule([foundation, framing], constraints, current_time=day(-5))

        assert s.suggested_start == datetime(2025, 3, 10, 9, 0)
        assert s.suggested_end == datetime(2025, 3, 11, 9, 0)

    def test_end_of_day_rolls_over(self) -> None:
        """Friday 18:00 after a 17:00 end rolls to Monday morning."""
        constraints = CalendarConstraints(
            preferred_work_days=[1, 2, 3, 4, 5], work_hours_start=8, work_hours_end=17
        )
        assert apply_calendar(datetime(2025, 3, 7, 18, 0), constraints) == datetime(
            2025, 3, 10, 8, 0
        )

    def test_allowed_time_unchanged(self) -> None:
        constraints = CalendarConstraints(
            preferred_work_days=[1, 2, 3, 4, 5], work_hours_start=8, work_hours_end=17
        )
        start = datetime(2025, 3, 5, 10, 30)
        assert apply_calendar(start, constraints) == start

    def test_deadline_annotated(self, make_event: EventFactory) -> None:
        foundation = make_event("A", "foundation", -1, 0)
        framing = make_event("B", "framing", 1, 2)
        constraints = CalendarConstraints(project_deadline=day(5))

        output_stream = StringIO()
        setup_logger(1, stream=output_stream)
        try:
            (s,) = suggest_schedule([foundation, framing], constraints, current_time=day(-5))
            output = output_stream.getvalue()
        finally:
            reset_logger()

        assert s.reason.startswith(DEFAULT_REASON)
        assert "after project deadline" in s.reason
        assert "after project deadline" in output
        assert "Reschedule B" in output


class TestApplySuggestions:
    """Test applying suggestions to events."""

    def test_returns_new_events(self, make_event: EventFactory) -> None:
        foundation = make_event("A", "foundation", -1, 0)
        framing = make_event("B", "framing", 1, 2)
        events = [foundation, framing]

        adjusted = apply_suggestions(events, suggest_schedule(events, current_time=day(-5)))

        assert adjusted[0] is foundation
        assert adjusted[1].id == "B"
        assert adjusted[1].start_time == day(7)
        assert adjusted[1].end_time == day(8)
        assert framing.start_time == day(1)
