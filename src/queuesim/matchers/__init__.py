"""
Job matchers.

Block style (jobs enqueued while a callable runs):

    expect(lambda: AwesomeWorker.perform_async()).to(enqueue_job(AwesomeWorker))
    expect(lambda: AwesomeWorker.perform_async(42, "David")).to(
        enqueue_job(AwesomeWorker).with_arguments(42, "David")
    )
    expect(lambda: AwesomeWorker.perform_in(timedelta(minutes=5))).to(
        enqueue_job(AwesomeWorker).schedule_in(timedelta(minutes=5))
    )

Value style (jobs accumulated so far):

    AwesomeWorker.perform_async(42, "David")
    expect(AwesomeWorker).to(have_enqueued_job().with_arguments(42, "David"))
"""

from .enqueue_jobs import EnqueueJobs
from .evaluator import MatchEvaluator
from .formatting import ANY_BATCH, format_instant, format_interval, format_timestamp
from .have_enqueued_jobs import HaveEnqueuedJobs
from .job_matcher import JobMatcher
from .spec import MatcherSpec


def have_enqueued_job() -> HaveEnqueuedJobs:
    """Exactly one matching job accumulated."""
    return HaveEnqueuedJobs().once()


def have_enqueued_jobs() -> HaveEnqueuedJobs:
    return HaveEnqueuedJobs()


def enqueue_job(worker) -> EnqueueJobs:
    """Exactly one matching job enqueued by the block."""
    return EnqueueJobs(worker).once()


def enqueue_jobs(worker) -> EnqueueJobs:
    return EnqueueJobs(worker)


__all__ = [
    "ANY_BATCH",
    "EnqueueJobs",
    "HaveEnqueuedJobs",
    "JobMatcher",
    "MatchEvaluator",
    "MatcherSpec",
    "enqueue_job",
    "enqueue_jobs",
    "format_instant",
    "format_interval",
    "format_timestamp",
    "have_enqueued_job",
    "have_enqueued_jobs",
]
