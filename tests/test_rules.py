"""Tests for individual conflict rules."""

from collections.abc import Callable

from sitelogic.models import RuleType, ScheduledEvent, Severity
from sitelogic.rules import (
    CuringTimeRule,
    InspectionPendingRule,
    OverlapViolationRule,
    ResourceConflictRule,
    SafetyViolationRule,
    SequenceViolationRule,
    WeatherConflictRule,
    default_rules,
)

EventFactory = Callable[..., ScheduledEvent]


def test_default_rule_order() -> None:
    """Rules are evaluated in a fixed order."""
    assert [r.id for r in default_rules()] == [
        "sequence_violation",
        "overlap_violation",
        "curing_time",
        "inspection_pending",
        "weather_conflict",
        "resource_conflict",
        "safety_violation",
    ]


class TestSequenceViolation:
    """Test the sequence rule, which compares start times."""

    def test_dependent_starting_before_prerequisite(self, make_event: EventFactory) -> None:
        foundation = make_event("f", "foundation", 2, 3)
        framing = make_event("fr", "framing", 1, 2)
        assert SequenceViolationRule().check(foundation, framing)

    def test_dependent_starting_after_prerequisite_start(self, make_event: EventFactory) -> None:
        """Starting during the prerequisite is not a sequence violation."""
        foundation = make_event("f", "foundation", 0, 3)
        framing = make_event("fr", "framing", 1, 2)
        assert not SequenceViolationRule().check(foundation, framing)

    def test_reverse_orientation_does_not_match(self, make_event: EventFactory) -> None:
        foundation = make_event("f", "foundation", 2, 3)
        framing = make_event("fr", "framing", 1, 2)
        assert not SequenceViolationRule().check(framing, foundation)


class TestOverlapViolation:
    """Test mutually exclusive trades."""

    def test_overlapping_exclusive_trades(self, make_event: EventFactory) -> None:
        drywall = make_event("d", "drywall", 0, 2)
        painting = make_event("p", "painting", 1, 3)
        rule = OverlapViolationRule()
        assert rule.check(drywall, painting)
        assert rule.check(painting, drywall)

    def test_touching_intervals_do_not_overlap(self, make_event: EventFactory) -> None:
        """Half-open intervals: end == start is not an overlap."""
        drywall = make_event("d", "drywall", 0, 2)
        painting = make_event("p", "painting", 2, 3)
        assert not OverlapViolationRule().check(drywall, painting)

    def test_compatible_trades(self, make_event: EventFactory) -> None:
        electrical = make_event("e", "electrical", 0, 2)
        plumbing = make_event("p", "plumbing", 0, 2)
        assert not OverlapViolationRule().check(electrical, plumbing)


class TestCuringTime:
    """Test lag between a curing prerequisite and its dependent."""

    def test_insufficient_cure(self, make_event: EventFactory) -> None:
        foundation = make_event("f", "foundation", 0, 1)
        framing = make_event("fr", "framing", 5, 6)
        conflict = CuringTimeRule().evaluate(foundation, framing)
        assert conflict is not None
        assert conflict.severity == Severity.HIGH
        assert conflict.rule.type == RuleType.SEQUENCE

    def test_sufficient_cure(self, make_event: EventFactory) -> None:
        foundation = make_event("f", "foundation", 0, 1)
        framing = make_event("fr", "framing", 8, 9)
        assert CuringTimeRule().evaluate(foundation, framing) is None

    def test_no_lag_defined(self, make_event: EventFactory) -> None:
        """Framing defines no lag after, so roofing right after framing is fine."""
        framing = make_event("fr", "framing", 0, 1)
        roofing = make_event("r", "roofing", 1, 2)
        assert not CuringTimeRule().check(framing, roofing)


class TestInspectionPending:
    """Test the inspection requirement."""

    def test_missing_inspection(self, make_event: EventFactory) -> None:
        framing = make_event("fr", "framing", 0, 2)
        electrical = make_event("e", "electrical", 5, 6)
        assert InspectionPendingRule().check(framing, electrical)

    def test_completed_inspection(self, make_event: EventFactory) -> None:
        framing = make_event("fr", "framing", 0, 2, inspection_completed=True)
        electrical = make_event("e", "electrical", 5, 6)
        assert not InspectionPendingRule().check(framing, electrical)

    def test_type_without_inspection_requirement(self, make_event: EventFactory) -> None:
        drywall = make_event("d", "drywall", 0, 2)
        painting = make_event("p", "painting", 5, 6)
        assert not InspectionPendingRule().check(drywall, painting)


class TestWeatherConflict:
    """Test weather-sensitive work against alerts and adverse conditions."""

    def test_alert_during_sensitive_work(self, make_event: EventFactory) -> None:
        roofing = make_event("r", "roofing", 0, 2)
        alert = make_event("w", "weather_alert", 1)
        assert WeatherConflictRule().check(roofing, alert)

    def test_adverse_condition_is_case_insensitive(self, make_event: EventFactory) -> None:
        roofing = make_event("r", "roofing", 0, 2)
        storm = make_event("w", "weather", 1, weather_condition="Rain")
        assert WeatherConflictRule().check(roofing, storm)

    def test_condition_outside_interval(self, make_event: EventFactory) -> None:
        roofing = make_event("r", "roofing", 0, 2)
        storm = make_event("w", "weather", 3, weather_condition="rain")
        assert not WeatherConflictRule().check(roofing, storm)

    def test_insensitive_work(self, make_event: EventFactory) -> None:
        painting = make_event("p", "painting", 0, 2)
        alert = make_event("w", "weather_alert", 1)
        assert not WeatherConflictRule().check(painting, alert)

    def test_custom_adverse_conditions(self, make_event: EventFactory) -> None:
        roofing = make_event("r", "roofing", 0, 2)
        wind = make_event("w", "weather", 1, weather_condition="high_wind")
        assert not WeatherConflictRule().check(roofing, wind)
        assert WeatherConflictRule(adverse_conditions=["high_wind"]).check(roofing, wind)


class TestResourceConflict:
    """Test double-booked crews."""

    def test_same_member_overlapping(self, make_event: EventFactory) -> None:
        a = make_event("a", "painting", 0, 2, team_member_id="crew-1")
        b = make_event("b", "landscaping", 1, 3, team_member_id="crew-1")
        assert ResourceConflictRule().check(a, b)

    def test_different_members(self, make_event: EventFactory) -> None:
        a = make_event("a", "painting", 0, 2, team_member_id="crew-1")
        b = make_event("b", "landscaping", 1, 3, team_member_id="crew-2")
        assert not ResourceConflictRule().check(a, b)

    def test_unassigned_events(self, make_event: EventFactory) -> None:
        a = make_event("a", "painting", 0, 2)
        b = make_event("b", "landscaping", 1, 3)
        assert not ResourceConflictRule().check(a, b)


class TestSafetyViolation:
    """Test hazardous activities overlapping other work."""

    def test_demolition_overlapping_anything(self, make_event: EventFactory) -> None:
        demolition = make_event("d", "demolition", 0, 2)
        painting = make_event("p", "painting", 1, 3)
        rule = SafetyViolationRule()
        assert rule.check(demolition, painting)
        assert rule.check(painting, demolition)

    def test_non_hazardous_overlap(self, make_event: EventFactory) -> None:
        a = make_event("a", "painting", 0, 2)
        b = make_event("b", "landscaping", 1, 3)
        assert not SafetyViolationRule().check(a, b)

    def test_custom_hazardous_types(self, make_event: EventFactory) -> None:
        a = make_event("a", "roofing", 0, 2)
        b = make_event("b", "landscaping", 1, 3)
        assert SafetyViolationRule(hazardous_types={"roofing"}).check(a, b)


class TestConflictRecord:
    """Test the conflict produced by evaluate()."""

    def test_description_and_resolution(self, make_event: EventFactory) -> None:
        foundation = make_event("f", "foundation", 2, 3, title="Pour foundation")
        framing = make_event("fr", "framing", 1, 2, title="Frame walls")
        conflict = SequenceViolationRule().evaluate(foundation, framing)

        assert conflict is not None
        assert conflict.description == (
            "Construction Sequence Violation: Pour foundation conflicts with Frame walls"
        )
        assert conflict.resolution == "Reschedule Frame walls to start after Pour foundation is completed"
        assert conflict.conflict_id == "f-fr-sequence_violation"

    def test_label_falls_back_to_id(self, make_event: EventFactory) -> None:
        demolition = make_event("d1", "demolition", 0, 2)
        painting = make_event("p1", "painting", 1, 3)
        conflict = SafetyViolationRule().evaluate(demolition, painting)
        assert conflict is not None
        assert "d1 conflicts with p1" in conflict.description
