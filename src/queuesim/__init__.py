"""
queuesim: in-memory job queue and batch simulator for tests.

- Worker classes record submissions instead of sending them to a backend
- Batch groups submissions, supports nesting, invalidation and callbacks
- Job matchers assert what was (or would be) enqueued
"""

from .backends import (
    BatchBackend,
    SimulatedBatchBackend,
    UnavailableBatchBackend,
    select_backend,
)
from .batch import Batch, Batches, CallbackFailure, Status, batches
from .callbacks import CallbackRegistry, callback_handler, callbacks
from .clock import Clock, clock
from .config import Settings, configure, get_settings, reset_settings
from .context import BatchContext
from .entities import BatchRecord, JobRecord, normalize_arguments, normalize_expected
from .errors import (
    BackendUnavailableError,
    BatchNotFoundError,
    CallbackNotRegisteredError,
    ConfigurationError,
    DuplicateBatchError,
    NotSupportedError,
    QueueSimError,
)
from .expectations import ExpectationNotMetError, expect
from .logging_config import reset_logging, setup_logging
from .matchers import (
    ANY_BATCH,
    enqueue_job,
    enqueue_jobs,
    have_enqueued_job,
    have_enqueued_jobs,
)
from .matching import have_attributes, satisfies, values_match
from .queues import JobQueues, queues
from .registry import BatchRegistry, registry
from .worker import Worker

__version__ = "0.1.0"

__all__ = [
    # Entities
    "JobRecord",
    "BatchRecord",
    "normalize_arguments",
    "normalize_expected",
    # Errors
    "QueueSimError",
    "ConfigurationError",
    "BatchNotFoundError",
    "DuplicateBatchError",
    "CallbackNotRegisteredError",
    "NotSupportedError",
    "BackendUnavailableError",
    # Storage
    "JobQueues",
    "queues",
    "BatchRegistry",
    "registry",
    # Batches
    "Batch",
    "Batches",
    "batches",
    "Status",
    "CallbackFailure",
    "BatchContext",
    "BatchBackend",
    "SimulatedBatchBackend",
    "UnavailableBatchBackend",
    "select_backend",
    "CallbackRegistry",
    "callbacks",
    "callback_handler",
    # Workers
    "Worker",
    # Matchers
    "ANY_BATCH",
    "enqueue_job",
    "enqueue_jobs",
    "have_enqueued_job",
    "have_enqueued_jobs",
    "expect",
    "ExpectationNotMetError",
    "values_match",
    "have_attributes",
    "satisfies",
    # Ambient
    "Clock",
    "clock",
    "Settings",
    "configure",
    "get_settings",
    "reset_settings",
    "setup_logging",
    "reset_logging",
]
