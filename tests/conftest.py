"""Pytest configuration and fixtures for sitelogic tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from datetime import datetime, timedelta
from typing import Any

import pytest

from sitelogic import context
from sitelogic.logger import reset_logger
from sitelogic.models import ScheduledEvent

# Monday 08:00; day offsets in tests are relative to this
BASE_TIME = datetime(2025, 3, 3, 8, 0)


def day(offset: float) -> datetime:
    """Datetime ``offset`` (fractional) days after BASE_TIME."""
    return BASE_TIME + timedelta(days=offset)


@pytest.fixture
def base_time() -> datetime:
    return BASE_TIME


@pytest.fixture
def make_event() -> Callable[..., ScheduledEvent]:
    """Factory for events positioned by day offsets from BASE_TIME."""

    def _make(
        event_id: str,
        event_type: str,
        start: float,
        end: float | None = None,
        **kwargs: Any,
    ) -> ScheduledEvent:
        return ScheduledEvent(
            id=event_id,
            event_type=event_type,
            start_time=day(start),
            end_time=day(end) if end is not None else None,
            **kwargs,
        )

    return _make


@pytest.fixture(autouse=True)
def clean_global_state() -> Iterator[None]:
    """Reset logger and CLI context between tests."""
    yield
    reset_logger()
    context.set_config_path(None)
