"""
Value-style matcher: jobs a worker has accumulated so far.

    SampleJob.perform_async(1)
    expect(SampleJob).to(have_enqueued_job().with_arguments(1))
"""

from .job_matcher import JobMatcher


class HaveEnqueuedJobs(JobMatcher):
    def supports_block_expectations(self) -> bool:
        return False

    def supports_value_expectations(self) -> bool:
        return True

    def matches(self, worker) -> bool:
        self.worker = worker
        return self._matches_jobs(worker.jobs())

    def does_not_match(self, worker) -> bool:
        self.worker = worker
        return self._does_not_match_jobs(worker.jobs())

    def description(self) -> str:
        return f"have enqueued {self.expected_job_description()}"

    def failure_message(self) -> str:
        return f"expected to have enqueued {self.worker_name} job\n{self.failure_message_diff()}"

    def failure_message_when_negated(self) -> str:
        return f"expected not to have enqueued {self.worker_name} job\n{self.failure_message_diff()}"
