"""
Worker submission API.

Application code declares workers by subclassing Worker and submits jobs
through the class methods. Nothing is executed: each submission becomes a
JobRecord in the job queues and, when a batch is open in the current
context, is attributed to that batch.

    class SampleJob(Worker):
        queue = "mailers"

        def perform(self, user_id):
            ...

    SampleJob.perform_async(42)
    SampleJob.perform_in(timedelta(minutes=5), 42)
"""

import logging
from typing import Iterable, Optional

from .clock import Instant, Interval, clock, to_epoch, to_seconds
from .config import get_settings
from .context import BatchContext
from .entities import JobRecord, generate_jid, normalize_arguments
from .errors import ConfigurationError
from .queues import JobQueues, queues as default_queues

logger = logging.getLogger(__name__)


class Worker:
    """Base class for job workers."""

    # Queue name; None falls back to QUEUESIM_DEFAULT_QUEUE
    queue: Optional[str] = None

    job_queues: JobQueues = default_queues

    def perform(self, *args):
        raise NotImplementedError(f"{type(self).__name__} must implement perform()")

    # =========================================================================
    # Identity
    # =========================================================================

    @classmethod
    def worker_key(cls) -> str:
        """Logical identity of the worker in the job log."""
        return f"{cls.__module__}.{cls.__qualname__}"

    @classmethod
    def queue_name(cls) -> str:
        return cls.queue or get_settings().default_queue

    # =========================================================================
    # Submission
    # =========================================================================

    @classmethod
    def perform_async(cls, *args) -> str:
        """Enqueue a job to run as soon as possible. Returns the jid."""
        return cls._push(args).jid

    @classmethod
    def perform_in(cls, interval: Interval, *args) -> str:
        """Enqueue a job to run after `interval` (timedelta or seconds)."""
        return cls._push(args, at=clock.now() + to_seconds(interval)).jid

    @classmethod
    def perform_at(cls, timestamp: Instant, *args) -> str:
        """Enqueue a job to run at `timestamp` (datetime or epoch seconds)."""
        return cls._push(args, at=to_epoch(timestamp)).jid

    @classmethod
    def perform_bulk(cls, args_list: Iterable) -> list[str]:
        """
        Enqueue one job per entry of `args_list`.

        Raises:
            ConfigurationError: If an entry is not a list/tuple of arguments
        """
        batch_args = list(args_list)
        for args in batch_args:
            if not isinstance(args, (list, tuple)):
                raise ConfigurationError(
                    f"perform_bulk expects a list of argument lists, got {args!r}"
                )
        jids = [cls._push(args).jid for args in batch_args]
        logger.debug(f"Bulk enqueued {len(jids)} {cls.__name__} job(s)")
        return jids

    @classmethod
    def _push(cls, args, at: Optional[float] = None) -> JobRecord:
        now = clock.now()
        batch = BatchContext.current()

        record = JobRecord(
            jid=generate_jid(),
            worker=cls.worker_key(),
            args=normalize_arguments(args),
            queue=cls.queue_name(),
            # A time that is not in the future means "now"
            scheduled_at=at if at is not None and at > now else None,
            bid=batch.bid if batch is not None else None,
            created_at=now,
            enqueued_at=now,
        )

        cls.job_queues.append(record)
        if batch is not None:
            batch.register(record.jid)
        return record

    # =========================================================================
    # Inspection
    # =========================================================================

    @classmethod
    def jobs(cls) -> list[JobRecord]:
        """Jobs submitted for this worker so far, in submission order."""
        return cls.job_queues.jobs(cls.worker_key())

    @classmethod
    def clear(cls) -> None:
        cls.job_queues.clear(cls.worker_key())
