"""Conflict detection over a candidate schedule."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .config import DetectionConfig
from .logger import get_logger
from .models import (
    Conflict,
    ConflictAnalysis,
    Perspective,
    RuleType,
    ScheduledEvent,
    Severity,
    WeatherRecord,
)
from .rules import ConflictRule, default_rules
from .trades import DEFAULT_TRADE_GRAPH, TradeGraph

logger = get_logger()

MAX_SCORE = 100

# Score thresholds for score_label()
EXCELLENT_SCORE = 80
GOOD_SCORE = 60
FAIR_SCORE = 40


def rule_is_active(rule: ConflictRule, perspective: Perspective) -> bool:
    """Whether a rule participates in analysis under the given perspective."""
    if perspective == Perspective.STRICT:
        return True
    if perspective == Perspective.FLEXIBLE:
        return rule.severity == Severity.CRITICAL
    # Balanced: everything but low-severity weather rules
    return not (rule.type == RuleType.WEATHER and rule.severity == Severity.LOW)


def select_events(
    events: Iterable[ScheduledEvent], project_id: str | None = None
) -> list[ScheduledEvent]:
    """Drop deleted events and, if given, events belonging to other projects."""
    selected = [e for e in events if not e.deleted]
    if project_id is not None:
        selected = [e for e in selected if e.project_id == project_id]
    return selected


def score_label(score: int) -> str:
    """Human-readable rating of a schedule health score."""
    if score >= EXCELLENT_SCORE:
        return "Excellent"
    if score >= GOOD_SCORE:
        return "Good"
    if score >= FAIR_SCORE:
        return "Fair"
    return "Needs Improvement"


class ConflictDetector:
    """Scan all pairs of events in a schedule against the active rule set.

    The detector holds only read-only configuration, so one instance can be
    shared freely between threads.
    """

    def __init__(
        self,
        graph: TradeGraph | None = None,
        rules: Sequence[ConflictRule] | None = None,
        config: DetectionConfig | None = None,
    ):
        """Initialize the detector.

        Args:
            graph: Trade dependency graph (defaults to the built-in table)
            rules: Rule set to apply; built from ``config`` when omitted
            config: Detection configuration (perspective, penalties, rule toggles)
        """
        self.graph = DEFAULT_TRADE_GRAPH if graph is None else graph
        self.config = config or DetectionConfig()
        if rules is None:
            rules = default_rules(
                self.graph,
                hazardous_types=self.config.hazardous_activity_types,
                adverse_conditions=self.config.adverse_weather_conditions,
            )
        self.rules: tuple[ConflictRule, ...] = tuple(rules)

    def active_rules(self, perspective: Perspective | str) -> list[ConflictRule]:
        """Rules enabled under a perspective, minus rule types switched off in config."""
        perspective = Perspective(perspective)
        disabled = set(self.config.disabled_rule_types)
        return [
            rule
            for rule in self.rules
            if rule_is_active(rule, perspective) and rule.type not in disabled
        ]

    def analyze_schedule(
        self,
        events: Sequence[ScheduledEvent],
        perspective: Perspective | str | None = None,
        weather: Sequence[WeatherRecord] | None = None,
        *,
        ignored: Iterable[str] | None = None,
    ) -> ConflictAnalysis:
        """Detect conflicts, then score the schedule and generate suggestions.

        Args:
            events: Full candidate set of events for one project (order irrelevant)
            perspective: strict, balanced or flexible (defaults to the configured one)
            weather: Optional weather records checked against weather-sensitive work
            ignored: Conflict ids the user chose to ignore

        Returns:
            ConflictAnalysis with conflicts, suggestions and score
        """
        perspective = Perspective(perspective or self.config.perspective)
        rules = self.active_rules(perspective)
        logger.debug(
            f"Analyzing {len(events)} events with {len(rules)} active rules "
            f"({perspective.value} perspective)"
        )

        conflicts = self._scan_pairs(events, rules)
        if weather:
            weather_rules = [r for r in rules if r.type == RuleType.WEATHER]
            conflicts.extend(self._scan_weather(events, weather, weather_rules))

        if ignored:
            ignored_ids = set(ignored)
            conflicts = [c for c in conflicts if c.conflict_id not in ignored_ids]

        score = self.compute_score(conflicts)
        suggestions = generate_suggestions(conflicts)
        logger.checks(f"Found {len(conflicts)} conflicts, score {score}")
        return ConflictAnalysis(conflicts=conflicts, suggestions=suggestions, score=score)

    def _scan_pairs(
        self, events: Sequence[ScheduledEvent], rules: Sequence[ConflictRule]
    ) -> list[Conflict]:
        """Apply every rule to every unordered pair of distinct events."""
        conflicts: list[Conflict] = []
        for i, first in enumerate(events):
            for second in events[i + 1 :]:
                for rule in rules:
                    conflicts.extend(self._evaluate(rule, first, second))
        return conflicts

    def _scan_weather(
        self,
        events: Sequence[ScheduledEvent],
        weather: Sequence[WeatherRecord],
        rules: Sequence[ConflictRule],
    ) -> list[Conflict]:
        """Pair each event with each weather record, weather rules only."""
        weather_events = [record.as_event(index) for index, record in enumerate(weather)]
        conflicts: list[Conflict] = []
        for event in events:
            for weather_event in weather_events:
                for rule in rules:
                    conflict = rule.evaluate(event, weather_event)
                    if conflict:
                        logger.checks(f"  {rule.id}: {event.id} vs {weather_event.id}")
                        conflicts.append(conflict)
        return conflicts

    def _evaluate(
        self, rule: ConflictRule, first: ScheduledEvent, second: ScheduledEvent
    ) -> list[Conflict]:
        """Evaluate one rule on a pair, in both orientations if it is directional."""
        orientations = [(first, second)]
        if rule.directional:
            orientations.append((second, first))

        found: list[Conflict] = []
        for a, b in orientations:
            conflict = rule.evaluate(a, b)
            if conflict:
                logger.checks(f"  {rule.id}: {a.id} vs {b.id} ({rule.severity.value})")
                found.append(conflict)
        return found

    def compute_score(self, conflicts: Iterable[Conflict]) -> int:
        """Start at 100 and subtract a penalty per conflict by severity, clamped to [0, 100]."""
        penalties = self.config.severity_penalties
        score = MAX_SCORE
        for conflict in conflicts:
            score -= penalties.get(conflict.severity, 0)
        return max(0, min(MAX_SCORE, score))


def generate_suggestions(conflicts: Sequence[Conflict]) -> list[str]:
    """Free-text suggestions derived from aggregate conflict counts."""
    if not conflicts:
        return ["Schedule looks good! No conflicts detected."]

    suggestions: list[str] = []
    critical_count = sum(1 for c in conflicts if c.severity == Severity.CRITICAL)
    high_count = sum(1 for c in conflicts if c.severity == Severity.HIGH)

    if critical_count > 0:
        suggestions.append(f"{critical_count} critical conflicts require immediate attention")
        suggestions.append("Consider rescheduling work to follow proper construction sequence")

    if high_count > 0:
        suggestions.append(f"{high_count} high-priority conflicts may cause delays")
        suggestions.append("Review trade dependencies and adjust schedule accordingly")

    if any(c.rule.type == RuleType.SEQUENCE for c in conflicts):
        suggestions.append("Reorder tasks to follow construction best practices")

    if any(c.rule.type == RuleType.WEATHER for c in conflicts):
        suggestions.append("Consider weather forecasts when scheduling outdoor work")

    return suggestions


def analyze_schedule(
    events: Sequence[ScheduledEvent],
    perspective: Perspective | str = Perspective.BALANCED,
    weather: Sequence[WeatherRecord] | None = None,
    *,
    ignored: Iterable[str] | None = None,
) -> ConflictAnalysis:
    """Analyze a schedule with the built-in trade graph and rule set."""
    return ConflictDetector().analyze_schedule(events, perspective, weather, ignored=ignored)
