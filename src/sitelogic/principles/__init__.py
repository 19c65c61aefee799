"""Construction principles: catalog, checks and the learning engine."""

from .catalog import PRINCIPLE_CATALOG
from .checks import CureTimeCheck, OverheadHazardCheck, PrincipleCheck, SequencingCheck
from .engine import PrinciplesEngine, feedback_from_conflict
from .learning import LearningBackend, LearningRequest, LearningResponse, NullLearningBackend
from .models import (
    ConstructionPrinciple,
    PrincipleCategory,
    PrincipleFeedback,
    PrincipleResult,
    UserAction,
    season_for,
)

__all__ = [
    "PRINCIPLE_CATALOG",
    "ConstructionPrinciple",
    "CureTimeCheck",
    "LearningBackend",
    "LearningRequest",
    "LearningResponse",
    "NullLearningBackend",
    "OverheadHazardCheck",
    "PrincipleCategory",
    "PrincipleCheck",
    "PrincipleFeedback",
    "PrincipleResult",
    "PrinciplesEngine",
    "SequencingCheck",
    "UserAction",
    "feedback_from_conflict",
    "season_for",
]
