"""
JobMatcher: fluent assertion object shared by the block-style and
value-style job matchers.

Configuration calls mutate the matcher's own MatcherSpec and return the
matcher, so a matcher must not be reused across assertions.
"""

from typing import Any, Callable, Optional

from ..clock import Instant, Interval
from ..entities import JobRecord
from .evaluator import MatchEvaluator
from .formatting import ANY_BATCH, render_value
from .spec import MatcherSpec


class JobMatcher:
    """Common configuration surface, verdicts and messages."""

    def __init__(self, worker=None):
        self.worker = worker
        self.spec = MatcherSpec(allows_result_resolver=self.supports_block_expectations())
        self.evaluator = MatchEvaluator(self.spec)
        self.actual_jobs: list[JobRecord] = []

    def supports_block_expectations(self) -> bool:
        raise NotImplementedError

    def supports_value_expectations(self) -> bool:
        raise NotImplementedError

    # =========================================================================
    # Fluent configuration
    # =========================================================================

    def with_arguments(self, *arguments, from_result: Optional[Callable[[Any], Any]] = None) -> "JobMatcher":
        self.spec.with_arguments(*arguments, from_result=from_result)
        return self

    def schedule_in(self, interval: Interval) -> "JobMatcher":
        self.spec.schedule_in(interval)
        return self

    def schedule_at(self, timestamp: Instant) -> "JobMatcher":
        self.spec.schedule_at(timestamp)
        return self

    def exactly(self, times: int) -> "JobMatcher":
        self.spec.exactly(times)
        return self

    def once(self) -> "JobMatcher":
        return self.exactly(1)

    def twice(self) -> "JobMatcher":
        return self.exactly(2)

    def times(self) -> "JobMatcher":
        return self

    time = times

    def without_batch(self) -> "JobMatcher":
        self.spec.without_batch()
        return self

    def within_batch(self, expectation: Any = ANY_BATCH) -> "JobMatcher":
        self.spec.within_batch(expectation)
        return self

    # =========================================================================
    # Evaluation over captured jobs
    # =========================================================================

    def _matches_jobs(self, jobs: list[JobRecord]) -> bool:
        self.actual_jobs = list(jobs)
        return self.evaluator.matches(self.actual_jobs)

    def _does_not_match_jobs(self, jobs: list[JobRecord]) -> bool:
        self.actual_jobs = list(jobs)
        return self.evaluator.does_not_match(self.actual_jobs)

    # =========================================================================
    # Messages
    # =========================================================================

    @property
    def worker_name(self) -> str:
        if self.worker is None:
            return "job"
        return getattr(self.worker, "__name__", str(self.worker))

    def expected_job_description(self) -> str:
        description = f"{self.worker_name} job"
        count = self.spec.expected_count

        if count == 1:
            description += " once"
        elif count == 2:
            description += " twice"
        elif count is not None:
            description += f" {count} times"

        if self.spec.has_argument_resolver:
            description += " with some arguments"
        elif self.spec.expected_arguments is not None:
            description += f" with arguments {render_value(self.spec.expected_arguments)}"

        return description

    def failure_message_diff(self) -> str:
        return self.evaluator.render_diff(self.actual_jobs, self.worker_name)
