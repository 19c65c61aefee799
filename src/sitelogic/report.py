"""Plain-text and JSON-ready rendering of analysis results."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from .detector import score_label
from .models import Conflict, ConflictAnalysis, ResolutionSuggestion, ScheduledEvent, Severity
from .principles import ConstructionPrinciple, PrincipleResult

SEVERITY_ORDER = [Severity.CRITICAL, Severity.HIGH, Severity.MEDIUM, Severity.LOW]


def conflict_to_dict(conflict: Conflict) -> dict[str, Any]:
    return {
        "id": conflict.conflict_id,
        "rule": conflict.rule.id,
        "type": conflict.rule.type.value,
        "severity": conflict.severity.value,
        "event1": conflict.event1.id,
        "event2": conflict.event2.id,
        "description": conflict.description,
        "resolution": conflict.resolution,
    }


def analysis_to_dict(analysis: ConflictAnalysis) -> dict[str, Any]:
    """JSON-ready form of a conflict analysis."""
    return {
        "score": analysis.score,
        "rating": score_label(analysis.score),
        "severity_counts": {s.value: analysis.count_by_severity(s) for s in SEVERITY_ORDER},
        "conflicts": [conflict_to_dict(c) for c in analysis.conflicts],
        "suggestions": list(analysis.suggestions),
    }


def format_analysis(analysis: ConflictAnalysis) -> str:
    """Render an analysis as a text report."""
    lines = [
        "Schedule Analysis",
        "=" * 80,
        f"Score: {analysis.score}/100 ({score_label(analysis.score)})",
        "Conflicts: "
        + ", ".join(f"{analysis.count_by_severity(s)} {s.value}" for s in SEVERITY_ORDER),
        "",
    ]

    if analysis.conflicts:
        for conflict in analysis.conflicts:
            lines.append(f"[{conflict.severity.value.upper()}] {conflict.description}")
            lines.append(f"  Resolution: {conflict.resolution}")
            lines.append(f"  Id: {conflict.conflict_id}")
        lines.append("")

    lines.append("Suggestions:")
    lines.extend(f"  - {s}" for s in analysis.suggestions)
    return "\n".join(lines)


def format_suggestions(
    suggestions: Sequence[ResolutionSuggestion], events: Sequence[ScheduledEvent] = ()
) -> str:
    """Render proposed reschedules as a text table."""
    if not suggestions:
        return "No schedule changes needed."

    labels = {e.id: e.label for e in events}
    lines = ["Suggested Schedule Changes", "=" * 80]
    for s in suggestions:
        lines.append(f"{labels.get(s.event_id, s.event_id)} ({s.event_id})")
        lines.append(f"  Original:  {s.original_start.isoformat()} -> {s.original_end.isoformat()}")
        lines.append(
            f"  Suggested: {s.suggested_start.isoformat()} -> {s.suggested_end.isoformat()}"
        )
        lines.append(f"  Shift:     {s.shift_days:+.1f} days")
        lines.append(f"  Reason:    {s.reason}")
    return "\n".join(lines)


def format_principles(principles: Sequence[ConstructionPrinciple]) -> str:
    """Render principles, one block each."""
    if not principles:
        return "No principles found."

    lines: list[str] = []
    for p in principles:
        marker = " (learned)" if p.learned else ""
        lines.append(
            f"{p.id} [{p.category.value}] {p.name}{marker} - "
            f"importance {p.importance}, confidence {p.confidence:.2f}"
        )
        lines.append(f"  {p.description}")
        lines.extend(f"    * {condition}" for condition in p.conditions)
    return "\n".join(lines)


def format_principle_results(
    results: Sequence[tuple[ScheduledEvent, ScheduledEvent, PrincipleResult]],
) -> str:
    """Render principle violations found across a schedule."""
    if not results:
        return "No principle violations found."

    lines = ["Principle Violations", "=" * 80]
    for a, b, result in results:
        lines.append(
            f"{result.principle.id} ({a.id} -> {b.id}, confidence {result.confidence:.2f}): "
            f"{result.reason}"
        )
    return "\n".join(lines)
