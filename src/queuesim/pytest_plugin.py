"""
pytest fixtures for projects testing job submissions with queuesim.

Installing queuesim registers this module as a pytest plugin (the
"queuesim" pytest11 entry point), so the fixtures are available without
any conftest.py import.

`queuesim_reset` is autouse: every test starts and ends with empty queues,
no batches, no open batch context and real time. Logging is left alone so
caplog sees queuesim records; call setup_logging() for console output.
"""

from datetime import datetime

import pytest

from .batch import batches
from .callbacks import callbacks
from .clock import Clock, clock
from .context import BatchContext
from .queues import queues

# Fixed instant for deterministic schedule tests (local time)
FROZEN_AT = datetime(2022, 8, 10, 0, 0, 0)


def reset_state() -> None:
    queues.clear_all()
    batches.clear_all()
    BatchContext.reset()
    clock.reset()


@pytest.fixture(autouse=True)
def queuesim_reset():
    """Clear queues, batches, batch context and clock around each test."""
    reset_state()
    yield
    reset_state()


@pytest.fixture
def frozen_clock() -> Clock:
    """The queuesim clock frozen at 2022-08-10 00:00:00 local time."""
    clock.freeze(FROZEN_AT)
    yield clock
    clock.reset()


@pytest.fixture
def callback_registry():
    """Callback registry emptied after the test."""
    yield callbacks
    callbacks.clear()
