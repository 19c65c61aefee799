"""Interface to an optional external learning backend."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from pydantic import BaseModel, Field

from .models import ConstructionPrinciple, PrincipleFeedback

REQUEST_TYPE = "construction_principle"


@dataclass(frozen=True)
class LearningRequest:
    """Payload submitted after each piece of feedback."""

    feedback: PrincipleFeedback
    principles: Sequence[ConstructionPrinciple]
    history: Sequence[PrincipleFeedback]

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": REQUEST_TYPE,
            "feedback": self.feedback.to_dict(),
            "context": {
                "principles": [p.model_dump(mode="json") for p in self.principles],
                "history": [f.to_dict() for f in self.history],
            },
        }


class LearningResponse(BaseModel):
    """What a backend may send back: refreshed and newly proposed principles."""

    updated_principles: list[ConstructionPrinciple] = Field(default_factory=list)
    new_principles: list[ConstructionPrinciple] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class LearningBackend(Protocol):
    """Remote service that refines principles from accumulated feedback."""

    async def submit(self, request: LearningRequest) -> LearningResponse | None: ...


class NullLearningBackend:
    """Backend that accepts every request and never responds."""

    async def submit(self, request: LearningRequest) -> LearningResponse | None:  # noqa: ARG002
        return None
