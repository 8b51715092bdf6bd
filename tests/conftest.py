"""
Pytest configuration and shared fixtures.

Every test starts with empty queues, an empty batch registry, no open
batch and real time (queuesim_reset is autouse).
"""

import pytest

from queuesim import Worker
from queuesim.pytest_plugin import callback_registry, frozen_clock, queuesim_reset  # noqa: F401


@pytest.fixture
def sample_job():
    """A fresh worker class named SampleJob."""

    class SampleJob(Worker):
        def perform(self, *args):
            pass

    return SampleJob


@pytest.fixture
def sample_job2():
    """A second, unrelated worker class named SampleJob2."""

    class SampleJob2(Worker):
        def perform(self, *args):
            pass

    return SampleJob2


@pytest.fixture
def mailer_job():
    """A worker bound to a non-default queue."""

    class MailerJob(Worker):
        queue = "mailers"

        def perform(self, *args):
            pass

    return MailerJob
