"""Principle and feedback models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

# Months (1-12) that start each meteorological season
SPRING_START = 3
SUMMER_START = 6
FALL_START = 9
WINTER_START = 12


class PrincipleCategory(str, Enum):
    """Category of a construction principle."""

    SEQUENCING = "sequencing"
    SAFETY = "safety"
    QUALITY = "quality"
    EFFICIENCY = "efficiency"
    COMPLIANCE = "compliance"
    RESOURCE = "resource"
    ENVIRONMENTAL = "environmental"


class UserAction(str, Enum):
    """What the user did with a detected violation or suggested principle."""

    ACCEPTED = "accepted"
    REJECTED = "rejected"
    MODIFIED = "modified"


class ConstructionPrinciple(BaseModel):
    """A confidence-weighted rule of thumb used for advisory recommendations.

    ``importance`` is fixed when the principle is authored; ``confidence`` is
    the only field the engine changes afterwards.
    """

    id: str
    category: PrincipleCategory
    name: str
    description: str
    importance: int = Field(ge=1, le=10)
    confidence: float = Field(ge=0.0, le=1.0)
    conditions: list[str] = Field(default_factory=list)
    exceptions: list[str] = Field(default_factory=list)
    examples: list[str] = Field(default_factory=list)
    learned: bool = False
    event_types: tuple[str, str] | None = None  # Pair a learned principle was synthesized from

    @property
    def weight(self) -> float:
        """Ranking weight: importance scaled by current confidence."""
        return self.importance * self.confidence


def _default_context() -> dict[str, str]:
    return {}


@dataclass(frozen=True)
class PrincipleFeedback:
    """One user decision about a principle or detected conflict. Append-only."""

    principle_id: str
    event_type1: str
    event_type2: str
    user_action: UserAction
    context: dict[str, str] = field(default_factory=_default_context)
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def pair(self) -> tuple[str, str]:
        """The (event_type1, event_type2) pair this feedback is about."""
        return (self.event_type1, self.event_type2)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation for the learning backend."""
        return {
            "principleId": self.principle_id,
            "eventType1": self.event_type1,
            "eventType2": self.event_type2,
            "userAction": self.user_action.value,
            "context": dict(self.context),
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class PrincipleResult:
    """A principle found to be violated by a pair of events."""

    principle: ConstructionPrinciple
    violated: bool
    confidence: float
    reason: str


def season_for(day: date) -> str:
    """Meteorological season (northern hemisphere) for a date."""
    month = day.month
    if SPRING_START <= month < SUMMER_START:
        return "spring"
    if SUMMER_START <= month < FALL_START:
        return "summer"
    if FALL_START <= month < WINTER_START:
        return "fall"
    return "winter"
