"""Confidence-weighted construction principles with feedback-driven learning."""

from __future__ import annotations

import asyncio
import json
import threading
from collections.abc import Iterable, Sequence
from datetime import datetime

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from sitelogic.config import LearningConfig
from sitelogic.logger import get_logger
from sitelogic.models import Conflict, ScheduledEvent, _type_key

from .catalog import PRINCIPLE_CATALOG
from .checks import PrincipleCheck, default_checks
from .learning import LearningBackend, LearningRequest, LearningResponse
from .models import (
    ConstructionPrinciple,
    PrincipleCategory,
    PrincipleFeedback,
    PrincipleResult,
    UserAction,
    season_for,
)

logger = get_logger()

_PRINCIPLE_LIST = TypeAdapter(list[ConstructionPrinciple])

# Feedback examples copied into a learned principle
LEARNED_EXAMPLE_COUNT = 3


class PrinciplesEngine:
    """Holds the principle set and feedback history for one caller.

    Principle state is guarded by a re-entrant lock: feedback, backend merges
    and imports mutate under it, evaluation reads a snapshot taken under it.
    """

    def __init__(
        self,
        principles: Iterable[ConstructionPrinciple] | None = None,
        *,
        backend: LearningBackend | None = None,
        config: LearningConfig | None = None,
        checks: Sequence[PrincipleCheck] | None = None,
    ):
        """Initialize the engine.

        Args:
            principles: Starting principle set (defaults to the built-in catalog)
            backend: Optional learning backend notified after each feedback
            config: Confidence model parameters
            checks: Principle checks in lookup order (defaults to the built-ins)
        """
        self.config = config or LearningConfig()
        self.backend = backend
        self.checks: tuple[PrincipleCheck, ...] = tuple(
            default_checks() if checks is None else checks
        )
        source = PRINCIPLE_CATALOG if principles is None else principles
        self._principles: dict[str, ConstructionPrinciple] = {p.id: p for p in source}
        self._history: list[PrincipleFeedback] = []
        self._lock = threading.RLock()
        # Strong references so running submissions are not garbage collected
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def principles(self) -> list[ConstructionPrinciple]:
        with self._lock:
            return list(self._principles.values())

    @property
    def learned_principles(self) -> list[ConstructionPrinciple]:
        with self._lock:
            return [p for p in self._principles.values() if p.learned]

    @property
    def feedback_history(self) -> list[PrincipleFeedback]:
        with self._lock:
            return list(self._history)

    def get_principle(self, principle_id: str) -> ConstructionPrinciple | None:
        with self._lock:
            return self._principles.get(principle_id)

    def _check_for(self, principle: ConstructionPrinciple) -> PrincipleCheck | None:
        for check in self.checks:
            if check.applies_to(principle):
                return check
        return None

    def apply_principles(self, a: ScheduledEvent, b: ScheduledEvent) -> list[PrincipleResult]:
        """Return the principles violated by the ordered pair (a, b).

        Results are sorted by importance x confidence, highest first.
        """
        snapshot = self.principles
        results: list[PrincipleResult] = []
        for principle in snapshot:
            check = self._check_for(principle)
            if check is None:
                continue
            reason = check.evaluate(principle, a, b)
            if reason:
                logger.checks(f"  {principle.id}: {a.id} -> {b.id} violated")
                results.append(
                    PrincipleResult(
                        principle=principle,
                        violated=True,
                        confidence=principle.confidence,
                        reason=reason,
                    )
                )
        results.sort(key=lambda r: r.principle.weight, reverse=True)
        return results

    def evaluate_schedule(
        self, events: Sequence[ScheduledEvent]
    ) -> list[tuple[ScheduledEvent, ScheduledEvent, PrincipleResult]]:
        """Apply principles to every ordered pair of distinct events."""
        found: list[tuple[ScheduledEvent, ScheduledEvent, PrincipleResult]] = []
        for a in events:
            for b in events:
                if a is b:
                    continue
                found.extend((a, b, result) for result in self.apply_principles(a, b))
        return found

    async def record_feedback(self, feedback: PrincipleFeedback) -> asyncio.Task[None] | None:
        """Record a user decision, update confidence and look for rejection patterns.

        Local updates complete before this returns. If a backend is configured
        the submission runs as a detached task, which is returned so callers
        may await it; its failure is logged and never raised.
        """
        with self._lock:
            self._history.append(feedback)
            self._update_confidence(feedback)
            self._learn_from_patterns()
            if self.backend is None:
                return None
            request = LearningRequest(
                feedback=feedback,
                principles=list(self._principles.values()),
                history=self._history[-self.config.history_limit :],
            )

        task = asyncio.get_running_loop().create_task(self._submit(request))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    def _update_confidence(self, feedback: PrincipleFeedback) -> None:
        principle = self._principles.get(feedback.principle_id)
        if principle is None:
            logger.debug(f"Feedback for unknown principle '{feedback.principle_id}'")
            return

        cfg = self.config
        if feedback.user_action == UserAction.ACCEPTED:
            confidence = min(cfg.max_confidence, principle.confidence + cfg.accept_step)
        elif feedback.user_action == UserAction.REJECTED:
            confidence = max(cfg.min_confidence, principle.confidence - cfg.reject_step)
        else:
            return

        if confidence != principle.confidence:
            logger.changes(
                f"Principle {principle.id} confidence {principle.confidence:.2f} -> {confidence:.2f}"
            )
        self._principles[principle.id] = principle.model_copy(update={"confidence": confidence})

    def _learn_from_patterns(self) -> None:
        """Synthesize a learned principle for pairs the user keeps rejecting."""
        cfg = self.config
        groups: dict[tuple[str, str], list[PrincipleFeedback]] = {}
        for entry in self._history[-cfg.pattern_window :]:
            groups.setdefault(entry.pair, []).append(entry)

        known_pairs = {p.event_types for p in self._principles.values() if p.event_types}
        for pair, entries in groups.items():
            if len(entries) < cfg.min_pattern_size or pair in known_pairs:
                continue
            rejected = sum(1 for e in entries if e.user_action == UserAction.REJECTED)
            rate = rejected / len(entries)
            if rate > cfg.rejection_threshold:
                principle = self._learned_principle(pair, entries, rate)
                self._principles[principle.id] = principle
                logger.changes(f"Learned principle {principle.id}: {principle.name}")

    def _learned_principle(
        self, pair: tuple[str, str], entries: Sequence[PrincipleFeedback], rate: float
    ) -> ConstructionPrinciple:
        first, second = pair
        return ConstructionPrinciple(
            id=f"learned_{first}__{second}",
            category=PrincipleCategory.SEQUENCING,
            name=f"Learned: {first} and {second} compatibility",
            description=f"User preference: {first} and {second} scheduling relationship",
            importance=self.config.learned_importance,
            confidence=self.config.learned_confidence,
            conditions=[
                f"Based on {len(entries)} user decisions",
                f"{round(rate * 100)}% rejection rate",
            ],
            examples=[
                f"{e.event_type1} -> {e.event_type2}: {e.user_action.value}"
                for e in entries[:LEARNED_EXAMPLE_COUNT]
            ],
            learned=True,
            event_types=pair,
        )

    async def _submit(self, request: LearningRequest) -> None:
        assert self.backend is not None
        try:
            response = await self.backend.submit(request)
        except Exception as e:  # noqa: BLE001 - a backend failure must not reach the caller
            logger.warning(f"Learning backend submission failed: {e}")
            return
        if response is not None:
            self.merge_response(response)

    def merge_response(self, response: LearningResponse) -> None:
        """Apply principles returned by the learning backend."""
        with self._lock:
            for principle in response.updated_principles:
                self._principles[principle.id] = principle
            for principle in response.new_principles:
                self._principles[principle.id] = principle.model_copy(update={"learned": True})
        if response.updated_principles or response.new_principles:
            logger.changes(
                f"Backend updated {len(response.updated_principles)} principles, "
                f"added {len(response.new_principles)}"
            )
        for recommendation in response.recommendations:
            logger.changes(f"  Backend recommendation: {recommendation}")

    def get_recommendations(self, event_type: str) -> list[ConstructionPrinciple]:
        """Principles whose conditions mention the activity type, most important first."""
        needle = _type_key(event_type).replace("_", " ").lower()
        matches = [
            p
            for p in self.principles
            if any(needle in condition.lower() for condition in p.conditions)
        ]
        return sorted(matches, key=lambda p: p.importance, reverse=True)

    def export_learned_principles(self) -> str:
        """Serialize learned principles as a JSON list."""
        return json.dumps(
            [p.model_dump(mode="json") for p in self.learned_principles],
            indent=2,
        )

    def import_principles(self, data: str) -> int:
        """Import principles exported from another engine at reduced confidence.

        Malformed input is logged and nothing is imported.

        Returns:
            Number of principles imported
        """
        try:
            incoming = _PRINCIPLE_LIST.validate_json(data)
        except PydanticValidationError as e:
            logger.warning(f"Ignoring principle import: {e}")
            return 0

        discount = self.config.import_discount
        with self._lock:
            for principle in incoming:
                self._principles[principle.id] = principle.model_copy(
                    update={"confidence": principle.confidence * discount}
                )
        logger.changes(f"Imported {len(incoming)} principles")
        return len(incoming)


def feedback_from_conflict(
    conflict: Conflict,
    action: UserAction | str,
    *,
    weather: str | None = None,
    reason: str | None = None,
    now: datetime | None = None,
) -> PrincipleFeedback:
    """Build feedback for a user decision about a detected conflict."""
    timestamp = now or datetime.now()
    context = {"season": season_for(timestamp.date()), "project_type": "construction"}
    if conflict.event1.location:
        context["location"] = conflict.event1.location
    if weather:
        context["weather"] = weather
    if reason:
        context["user_reason"] = reason
    return PrincipleFeedback(
        principle_id=conflict.rule.id,
        event_type1=conflict.event1.type_key,
        event_type2=conflict.event2.type_key,
        user_action=UserAction(action),
        context=context,
        timestamp=timestamp,
    )
