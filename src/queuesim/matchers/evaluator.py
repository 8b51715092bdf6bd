"""
MatchEvaluator: applies a MatcherSpec to captured job records.

Filtering is conjunctive; each clause is active only when its MatcherSpec field
is set:
1. arguments  - structural match of the normalized args
2. schedule   - same whole second (records without a schedule never pass)
3. no batch   - the record carries no bid
4. in batch   - the record carries a bid matching the batch expectation
"""

from typing import Callable, Optional

from ..batch import Batch
from ..entities import JobRecord
from ..matching import values_match
from .formatting import ANY_BATCH, format_instant, format_interval, format_timestamp, render_batch, render_value
from .spec import MatcherSpec


class MatchEvaluator:
    """Filters, scores and explains a set of candidate jobs."""

    def __init__(self, spec: MatcherSpec, batch_loader: Optional[Callable[[str], Batch]] = None):
        self.spec = spec
        self.batch_loader = batch_loader or Batch

    # =========================================================================
    # Filtering
    # =========================================================================

    def filter(self, jobs: list[JobRecord]) -> list[JobRecord]:
        return [job for job in jobs if self.accepts(job)]

    def accepts(self, job: JobRecord) -> bool:
        spec = self.spec

        if spec.expected_arguments is not None and not values_match(spec.expected_arguments, job.args):
            return False
        if spec.expected_schedule is not None:
            if job.scheduled_at is None or int(job.scheduled_at) != spec.expected_schedule:
                return False
        if spec.expected_without_batch and job.bid is not None:
            return False
        if spec.expected_batch is not None and not self.batch_match(spec.expected_batch, job.bid):
            return False
        return True

    def batch_match(self, expected, bid: Optional[str]) -> bool:
        if expected is ANY_BATCH:
            return bid is not None
        if isinstance(expected, str):
            return expected == bid
        if isinstance(expected, Batch):
            return expected.bid == bid
        if bid is None:
            return False
        return values_match(expected, self.batch_loader(bid))

    # =========================================================================
    # Verdicts
    # =========================================================================

    def matches(self, jobs: list[JobRecord]) -> bool:
        filtered = self.filter(jobs)
        if self.spec.expected_count is not None:
            return len(filtered) == self.spec.expected_count
        return len(filtered) > 0

    def does_not_match(self, jobs: list[JobRecord]) -> bool:
        filtered = self.filter(jobs)
        if self.spec.expected_count is not None:
            return len(filtered) != self.spec.expected_count
        return len(filtered) == 0

    # =========================================================================
    # Diagnostics
    # =========================================================================

    def expectation_lines(self) -> list[str]:
        """Active clauses in fixed order: count, arguments, in, at, batch."""
        spec = self.spec
        lines = []

        if spec.expected_count is not None:
            lines.append(f"  exactly:   {spec.expected_count} time(s)")
        if spec.expected_arguments is not None:
            lines.append(f"  arguments: {self._render_expected_arguments()}")
        if spec.expected_interval is not None:
            lines.append(
                f"  in:        {format_interval(spec.expected_interval)} "
                f"({format_timestamp(spec.expected_schedule)})"
            )
        if spec.expected_timestamp is not None:
            lines.append(f"  at:        {format_instant(spec.expected_timestamp)}")
        if spec.expected_batch is not None:
            lines.append(f"  batch:     {render_batch(spec.expected_batch)}")
        if spec.expected_without_batch:
            lines.append("  batch:     no batch")
        return lines

    def _render_expected_arguments(self) -> str:
        if self.spec.has_argument_resolver:
            return "<resolved from the block result>"
        return render_value(self.spec.expected_arguments)

    def job_lines(self, job: JobRecord) -> list[str]:
        """Fields of one record relevant to the active clauses."""
        spec = self.spec
        lines = []

        if spec.expected_arguments is not None:
            lines.append(f"arguments: {render_value(job.args)}")
        if spec.expected_schedule is not None:
            if job.scheduled_at is not None:
                lines.append(f"at:        {format_timestamp(job.scheduled_at)}")
            else:
                lines.append("at:        no schedule")
        if spec.checks_batch:
            if job.bid is not None:
                lines.append(f"batch:     {render_batch(job.bid)}")
            else:
                lines.append("batch:     no batch")
        return lines

    def render_diff(self, jobs: list[JobRecord], worker_name: str) -> str:
        diff = self.expectation_lines()
        if diff:
            diff.append("")

        if not jobs:
            diff.append(f"no {worker_name} found")
        elif not self.spec.has_filters:
            diff.append(f"found {len(jobs)} {worker_name}")
        else:
            diff.append(f"found {len(jobs)} {worker_name}:")
            single = len(jobs) == 1
            for job in jobs:
                for index, line in enumerate(self.job_lines(job)):
                    if single:
                        diff.append(f"  {line}")
                    elif index == 0:
                        diff.append(f"  - {line}")
                    else:
                        diff.append(f"    {line}")

        return "\n".join(diff)
