"""
Block-style matcher: jobs enqueued while running a callable.

    expect(lambda: SampleJob.perform_async(1, 2, 3)).to(
        enqueue_jobs(SampleJob).with_arguments(1, 2, 3)
    )
"""

from typing import Callable

from ..entities import JobRecord
from .job_matcher import JobMatcher


class EnqueueJobs(JobMatcher):
    def __init__(self, worker):
        super().__init__(worker)

    def supports_block_expectations(self) -> bool:
        return True

    def supports_value_expectations(self) -> bool:
        return False

    def matches(self, block: Callable) -> bool:
        return self._matches_jobs(self.capture_actual_jobs(block))

    def does_not_match(self, block: Callable) -> bool:
        return self._does_not_match_jobs(self.capture_actual_jobs(block))

    def description(self) -> str:
        return f"enqueue {self.expected_job_description()}"

    def failure_message(self) -> str:
        return f"expected to enqueue {self.worker_name} job\n{self.failure_message_diff()}"

    def failure_message_when_negated(self) -> str:
        return f"expected not to enqueue {self.worker_name} job\n{self.failure_message_diff()}"

    def capture_actual_jobs(self, block: Callable) -> list[JobRecord]:
        """Run `block` and return the worker's jobs pushed meanwhile."""
        job_queues = self.worker.job_queues
        worker_key = self.worker.worker_key()

        before = job_queues.snapshot(worker_key)
        result = block()
        self.spec.resolve_arguments(result)

        return job_queues.jobs_since(worker_key, before)
