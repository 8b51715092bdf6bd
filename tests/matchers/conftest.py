"""
Matcher Test Fixtures.

Schedule diagnostics render local time, so expected messages are built
from the frozen instant through the same formatter.
"""

from datetime import timedelta
from typing import Callable

import pytest

from queuesim.matchers import format_timestamp
from queuesim.pytest_plugin import FROZEN_AT


@pytest.fixture(autouse=True)
def frozen(frozen_clock):
    """All matcher tests run at 2022-08-10 00:00:00."""
    return frozen_clock


@pytest.fixture
def stamp() -> Callable[..., str]:
    """Rendered timestamp `minutes`/`seconds` after the frozen instant."""

    def _stamp(minutes: int = 0, seconds: int = 0) -> str:
        moment = FROZEN_AT + timedelta(minutes=minutes, seconds=seconds)
        return format_timestamp(moment.timestamp())

    return _stamp
