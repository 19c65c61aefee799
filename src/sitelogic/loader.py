"""Schedule file loading and writing."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError
from ruamel.yaml import YAML

from . import context
from .config import CONFIG_FILENAME, UnifiedConfig, load_config
from .exceptions import ParseError, ValidationError
from .logger import get_logger
from .models import ResolutionSuggestion, ScheduledEvent, WeatherRecord
from .schemas import ScheduleSchema

logger = get_logger()


def _no_events() -> list[ScheduledEvent]:
    return []


def _no_weather() -> list[WeatherRecord]:
    return []


@dataclass
class Schedule:
    """Events and weather records loaded from a schedule file."""

    events: list[ScheduledEvent] = field(default_factory=_no_events)
    weather: list[WeatherRecord] = field(default_factory=_no_weather)


def discover_config(
    schedule_path: Path | None = None,
    config_path: Path | None = None,
) -> UnifiedConfig:
    """Find and load configuration, falling back to the defaults.

    Search order:
    1. Explicit config_path argument
    2. Global context (set via CLI --config)
    3. Schedule directory / sitelogic_config.yaml
    4. Current directory / sitelogic_config.yaml
    """
    # 1. Explicit argument
    if config_path:
        return load_config(config_path)

    # 2. Global context
    ctx_config = context.get_config_path()
    if ctx_config:
        return load_config(ctx_config)

    # 3. Schedule directory
    if schedule_path is not None:
        dir_config = Path(schedule_path).parent / CONFIG_FILENAME
        if dir_config.exists():
            return load_config(dir_config)

    # 4. Current directory
    cwd_config = Path(CONFIG_FILENAME)
    if cwd_config.exists():
        return load_config(cwd_config)

    return UnifiedConfig()


def load_schedule(path: Path | str) -> Schedule:
    """Load a schedule file (YAML, or JSON which is valid YAML).

    Raises:
        ParseError: If the file is missing or not a YAML mapping
        ValidationError: If events or weather records are malformed
    """
    path = Path(path)
    if not path.exists():
        raise ParseError(f"File not found: {path}")

    try:
        with path.open(encoding="utf-8") as f:
            data: Any = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ParseError(f"Failed to parse YAML: {e}") from e

    if not isinstance(data, dict):
        raise ParseError("Schedule must contain a dictionary at the root level")

    try:
        schema = ScheduleSchema.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid schedule structure: {e}") from e

    events = [
        ScheduledEvent(
            id=item.id,
            event_type=item.type,
            start_time=item.start,
            end_time=item.end,
            title=item.title,
            team_member_id=item.team_member,
            weather_condition=item.weather_condition,
            inspection_completed=item.inspection_completed,
            project_id=item.project_id,
            location=item.location,
            deleted=item.deleted,
        )
        for item in schema.events
    ]
    weather = [WeatherRecord(time=w.time, condition=w.condition) for w in schema.weather]
    logger.debug(f"Loaded {len(events)} events and {len(weather)} weather records from {path}")
    return Schedule(events=events, weather=weather)


def write_adjusted_schedule(path: Path | str, suggestions: Sequence[ResolutionSuggestion]) -> int:
    """Rewrite start/end of suggested events in place, preserving file formatting.

    Returns:
        Number of events updated
    """
    path = Path(path)
    yaml_rt = YAML()
    yaml_rt.preserve_quotes = True  # type: ignore[assignment]

    with path.open(encoding="utf-8") as f:
        data: Any = yaml_rt.load(f)  # type: ignore[no-untyped-call]

    if not isinstance(data, dict) or "events" not in data:
        raise ParseError(f"No events section found in {path}")

    by_id = {s.event_id: s for s in suggestions}
    updated = 0
    for item in data["events"]:
        suggestion = by_id.get(str(item.get("id")))
        if suggestion is None:
            continue
        item["start"] = suggestion.suggested_start
        item["end"] = suggestion.suggested_end
        updated += 1

    missing = set(by_id) - {str(item.get("id")) for item in data["events"]}
    for event_id in sorted(missing):
        logger.warning(f"Event '{event_id}' not found in {path}")

    with path.open("w", encoding="utf-8") as f:
        yaml_rt.dump(data, f)  # type: ignore[no-untyped-call]

    logger.changes(f"Updated {updated} events in {path}")
    return updated
