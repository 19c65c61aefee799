"""Configuration loading for detection, calendar, learning and trade settings.

A single configuration file (sitelogic_config.yaml) holds every section;
all sections are optional and fall back to the built-in defaults.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from .exceptions import CircularDependencyError, ConfigError
from .models import Perspective, RuleType, Severity, TradeDependency
from .rules import DEFAULT_ADVERSE_CONDITIONS, DEFAULT_HAZARDOUS_TYPES
from .trades import DEFAULT_TRADE_GRAPH, TradeGraph

CONFIG_FILENAME = "sitelogic_config.yaml"

DAYS_PER_WEEK = 7


def _default_penalties() -> dict[Severity, int]:
    return {
        Severity.CRITICAL: 25,
        Severity.HIGH: 15,
        Severity.MEDIUM: 8,
        Severity.LOW: 3,
    }


class DetectionConfig(BaseModel):
    """Configuration for the conflict detector."""

    perspective: Perspective = Perspective.BALANCED
    hazardous_activity_types: list[str] = Field(
        default_factory=lambda: sorted(DEFAULT_HAZARDOUS_TYPES)
    )
    adverse_weather_conditions: list[str] = Field(
        default_factory=lambda: sorted(DEFAULT_ADVERSE_CONDITIONS)
    )
    disabled_rule_types: list[RuleType] = Field(default_factory=list)
    severity_penalties: dict[Severity, int] = Field(default_factory=_default_penalties)

    @field_validator("severity_penalties")
    @classmethod
    def fill_missing_penalties(cls, v: dict[Severity, int]) -> dict[Severity, int]:
        """Keep default penalties for severities not overridden."""
        merged = _default_penalties()
        merged.update(v)
        return merged


class CalendarConstraints(BaseModel):
    """Calendar constraints honored by the schedule resolver.

    Work days use ISO numbering: 1=Monday ... 7=Sunday.
    """

    preferred_work_days: list[int] | None = None
    work_hours_start: int | None = Field(default=None, ge=0, le=23)
    work_hours_end: int | None = Field(default=None, ge=1, le=24)
    project_deadline: datetime | None = None

    @field_validator("preferred_work_days")
    @classmethod
    def validate_work_days(cls, v: list[int] | None) -> list[int] | None:
        """Work days must be non-empty ISO weekday numbers."""
        if v is None:
            return None
        if not v:
            raise ValueError("preferred_work_days must not be empty")
        for day in v:
            if not 1 <= day <= DAYS_PER_WEEK:
                raise ValueError(f"Invalid ISO weekday {day}; expected 1 (Monday) to 7 (Sunday)")
        return sorted(set(v))

    @model_validator(mode="after")
    def validate_work_hours(self) -> CalendarConstraints:
        """Ensure the work-hour window is not empty."""
        if (
            self.work_hours_start is not None
            and self.work_hours_end is not None
            and self.work_hours_end <= self.work_hours_start
        ):
            raise ValueError("work_hours_end must be after work_hours_start")
        return self


class LearningConfig(BaseModel):
    """Parameters of the principles engine's confidence model."""

    accept_step: float = 0.05
    reject_step: float = 0.10
    max_confidence: float = 1.0
    min_confidence: float = 0.3
    pattern_window: int = 50  # Trailing feedback entries inspected for patterns
    min_pattern_size: int = 5
    rejection_threshold: float = 0.7
    learned_importance: int = 5
    learned_confidence: float = 0.6
    import_discount: float = 0.8
    history_limit: int = 100  # Feedback entries sent to the learning backend


class TradeDependencySchema(BaseModel):
    """Schema for a trade dependency entry in the config file."""

    depends_on: list[str] = Field(default_factory=list)
    cannot_overlap_with: list[str] = Field(default_factory=list)
    minimum_days_before: int | None = None
    minimum_days_after: int | None = None
    weather_sensitive: bool = False
    requires_inspection: bool = False

    def to_dependency(self) -> TradeDependency:
        """Convert to the immutable domain model."""
        return TradeDependency.of(
            depends_on=self.depends_on,
            cannot_overlap_with=self.cannot_overlap_with,
            minimum_days_before=self.minimum_days_before,
            minimum_days_after=self.minimum_days_after,
            weather_sensitive=self.weather_sensitive,
            requires_inspection=self.requires_inspection,
        )


class UnifiedConfig(BaseModel):
    """Complete sitelogic configuration."""

    detection: DetectionConfig = DetectionConfig()
    calendar: CalendarConstraints | None = None
    learning: LearningConfig = LearningConfig()
    trades: dict[str, TradeDependencySchema] = Field(default_factory=dict)

    def trade_graph(self) -> TradeGraph:
        """Built-in trade graph with this config's overrides applied."""
        if not self.trades:
            return DEFAULT_TRADE_GRAPH
        overrides = {name: entry.to_dependency() for name, entry in self.trades.items()}
        return DEFAULT_TRADE_GRAPH.merged(overrides)


def validate_trade_graph(graph: TradeGraph) -> None:
    """Reject trade tables whose depends_on relation contains a cycle."""
    cycle = graph.find_cycle()
    if cycle:
        raise CircularDependencyError(f"Circular trade dependency detected: {' -> '.join(cycle)}")


def load_config(config_path: Path | str) -> UnifiedConfig:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to sitelogic_config.yaml

    Returns:
        Validated UnifiedConfig

    Raises:
        ConfigError: If the file is missing, unreadable or invalid
        CircularDependencyError: If trade overrides introduce a dependency cycle
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with config_path.open(encoding="utf-8") as f:
            data: Any = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse config YAML: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("Config must contain a mapping at the root level")

    try:
        config = UnifiedConfig.model_validate(data)
    except PydanticValidationError as e:
        raise ConfigError(f"Invalid configuration in {config_path}: {e}") from e

    validate_trade_graph(config.trade_graph())
    return config
