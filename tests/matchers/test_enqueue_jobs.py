"""
Block-style matcher tests: jobs enqueued while a callable runs.
"""

from datetime import timedelta
from enum import Enum

import pytest

from queuesim import (
    Batch,
    ConfigurationError,
    ExpectationNotMetError,
    clock,
    enqueue_job,
    enqueue_jobs,
    expect,
    have_attributes,
)


class Flavor(Enum):
    FOO = "foo"


def repeat(worker, times, *args):
    def block():
        for _ in range(times):
            worker.perform_async(*args)

    return block


def each(worker, *values):
    def block():
        for value in values:
            worker.perform_async(value)

    return block


class TestEnqueue:
    def test_jobs_enqueued(self, sample_job):
        expect(repeat(sample_job, 2)).to(enqueue_jobs(sample_job))

    def test_only_one_job_enqueued(self, sample_job):
        expect(repeat(sample_job, 1)).to(enqueue_job(sample_job))

    def test_jobs_enqueued_before_the_block_are_ignored(self, sample_job):
        sample_job.perform_async()
        expect(repeat(sample_job, 1)).to(enqueue_job(sample_job))

    def test_fails_when_no_jobs_match(self, sample_job, sample_job2):
        with pytest.raises(ExpectationNotMetError) as exc_info:
            expect(repeat(sample_job2, 2)).to(enqueue_jobs(sample_job))

        assert str(exc_info.value) == (
            "expected to enqueue SampleJob job\n"
            "no SampleJob found"
        )

    def test_fails_when_not_only_one_job_matches(self, sample_job):
        with pytest.raises(ExpectationNotMetError) as exc_info:
            expect(repeat(sample_job, 2)).to(enqueue_job(sample_job))

        assert str(exc_info.value) == (
            "expected to enqueue SampleJob job\n"
            "  exactly:   1 time(s)\n"
            "\n"
            "found 2 SampleJob"
        )

    def test_requires_a_callable(self, sample_job):
        with pytest.raises(ConfigurationError):
            expect(sample_job.perform_async()).to(enqueue_jobs(sample_job))


class TestNegated:
    def test_no_jobs_enqueued(self, sample_job, sample_job2):
        expect(repeat(sample_job2, 2)).not_to(enqueue_jobs(sample_job))

    def test_not_only_one_job_enqueued(self, sample_job, sample_job2):
        expect(repeat(sample_job2, 2)).not_to(enqueue_job(sample_job))

    def test_fails_when_some_jobs_match(self, sample_job):
        with pytest.raises(ExpectationNotMetError) as exc_info:
            expect(repeat(sample_job, 2)).not_to(enqueue_jobs(sample_job))

        assert str(exc_info.value) == (
            "expected not to enqueue SampleJob job\n"
            "found 2 SampleJob"
        )


class TestArguments:
    def test_arguments_match(self, sample_job):
        expect(lambda: sample_job.perform_async(1, 2, 3)).to(
            enqueue_jobs(sample_job).with_arguments(1, 2, 3)
        )

    def test_normalized_arguments_match(self, sample_job):
        expect(lambda: sample_job.perform_async("foo")).to(
            enqueue_jobs(sample_job).with_arguments(Flavor.FOO)
        )

    def test_arguments_match_against_multiple_jobs(self, sample_job):
        expect(each(sample_job, 1, 2, 3)).to(enqueue_jobs(sample_job).with_arguments(3))

    def test_fails_when_job_does_not_match(self, sample_job):
        with pytest.raises(ExpectationNotMetError) as exc_info:
            expect(lambda: sample_job.perform_async(1, 2, 3)).to(
                enqueue_jobs(sample_job).with_arguments(1)
            )

        assert str(exc_info.value) == (
            "expected to enqueue SampleJob job\n"
            "  arguments: [1]\n"
            "\n"
            "found 1 SampleJob:\n"
            "  arguments: [1, 2, 3]"
        )

    def test_fails_when_no_job_matches(self, sample_job):
        with pytest.raises(ExpectationNotMetError) as exc_info:
            expect(each(sample_job, 1, 2, 3)).to(enqueue_jobs(sample_job).with_arguments(4))

        assert str(exc_info.value) == (
            "expected to enqueue SampleJob job\n"
            "  arguments: [4]\n"
            "\n"
            "found 3 SampleJob:\n"
            "  - arguments: [1]\n"
            "  - arguments: [2]\n"
            "  - arguments: [3]"
        )

    def test_negated_no_job_matches(self, sample_job):
        expect(each(sample_job, 1, 2, 3)).not_to(enqueue_jobs(sample_job).with_arguments(4))

    def test_negated_fails_when_some_arguments_match(self, sample_job):
        with pytest.raises(ExpectationNotMetError) as exc_info:
            expect(each(sample_job, 1, 2, 3)).not_to(enqueue_jobs(sample_job).with_arguments(3))

        assert str(exc_info.value) == (
            "expected not to enqueue SampleJob job\n"
            "  arguments: [3]\n"
            "\n"
            "found 3 SampleJob:\n"
            "  - arguments: [1]\n"
            "  - arguments: [2]\n"
            "  - arguments: [3]"
        )


class TestArgumentsFromResult:
    @pytest.fixture
    def create_and_return_arguments(self, sample_job):
        def block():
            sample_job.perform_async(1, 2, 3)
            return [1, 2, 3]

        return block

    def test_arguments_resolved_from_block_result(self, sample_job, create_and_return_arguments):
        expect(create_and_return_arguments).to(
            enqueue_jobs(sample_job).with_arguments(from_result=lambda value: value)
        )

    def test_fails_when_resolved_arguments_do_not_match(self, sample_job, create_and_return_arguments):
        with pytest.raises(ExpectationNotMetError) as exc_info:
            expect(create_and_return_arguments).to(
                enqueue_jobs(sample_job).with_arguments(from_result=lambda value: ["A"])
            )

        assert str(exc_info.value) == (
            "expected to enqueue SampleJob job\n"
            '  arguments: ["A"]\n'
            "\n"
            "found 1 SampleJob:\n"
            "  arguments: [1, 2, 3]"
        )

    def test_resolver_must_return_a_list(self, sample_job, create_and_return_arguments):
        with pytest.raises(ConfigurationError, match="expected to be a list"):
            expect(create_and_return_arguments).to(
                enqueue_jobs(sample_job).with_arguments(from_result=lambda value: "A")
            )

    def test_description_before_resolution(self, sample_job):
        matcher = enqueue_jobs(sample_job).with_arguments(from_result=lambda value: value)
        assert matcher.description() == "enqueue SampleJob job with some arguments"


class TestSchedule:
    def test_enqueued_in_an_interval(self, sample_job):
        expect(lambda: sample_job.perform_in(timedelta(minutes=5))).to(
            enqueue_jobs(sample_job).schedule_in(timedelta(minutes=5))
        )

    def test_enqueued_at_a_given_time(self, sample_job):
        expect(lambda: sample_job.perform_in(timedelta(minutes=5))).to(
            enqueue_jobs(sample_job).schedule_at(clock.from_now(timedelta(minutes=5)))
        )

    def test_interval_in_seconds(self, sample_job):
        expect(lambda: sample_job.perform_in(300)).to(enqueue_jobs(sample_job).schedule_in(300))

    def test_fails_when_not_enqueued_in_interval(self, sample_job, stamp):
        with pytest.raises(ExpectationNotMetError) as exc_info:
            expect(lambda: sample_job.perform_in(timedelta(minutes=5))).to(
                enqueue_jobs(sample_job).schedule_in(timedelta(minutes=10))
            )

        assert str(exc_info.value) == (
            "expected to enqueue SampleJob job\n"
            f"  in:        10 minutes ({stamp(10)})\n"
            "\n"
            "found 1 SampleJob:\n"
            f"  at:        {stamp(5)}"
        )

    def test_fails_when_not_enqueued_at_time(self, sample_job, stamp):
        with pytest.raises(ExpectationNotMetError) as exc_info:
            expect(lambda: sample_job.perform_in(timedelta(minutes=5))).to(
                enqueue_jobs(sample_job).schedule_at(clock.from_now(timedelta(minutes=10)))
            )

        assert str(exc_info.value) == (
            "expected to enqueue SampleJob job\n"
            f"  at:        {stamp(10)}\n"
            "\n"
            "found 1 SampleJob:\n"
            f"  at:        {stamp(5)}"
        )

    def test_immediate_job_has_no_schedule(self, sample_job, stamp):
        with pytest.raises(ExpectationNotMetError) as exc_info:
            expect(lambda: sample_job.perform_async()).to(
                enqueue_jobs(sample_job).schedule_in(timedelta(minutes=5))
            )

        assert str(exc_info.value).endswith(
            "found 1 SampleJob:\n"
            "  at:        no schedule"
        )

    def test_negated_interval(self, sample_job):
        expect(lambda: sample_job.perform_in(timedelta(minutes=5))).not_to(
            enqueue_jobs(sample_job).schedule_in(timedelta(minutes=10))
        )

    def test_negated_time(self, sample_job):
        expect(lambda: sample_job.perform_in(timedelta(minutes=5))).not_to(
            enqueue_jobs(sample_job).schedule_at(clock.from_now(timedelta(minutes=10)))
        )

    def test_negated_fails_when_enqueued_in_interval(self, sample_job, stamp):
        with pytest.raises(ExpectationNotMetError) as exc_info:
            expect(lambda: sample_job.perform_in(timedelta(minutes=5))).not_to(
                enqueue_jobs(sample_job).schedule_in(timedelta(minutes=5))
            )

        assert str(exc_info.value) == (
            "expected not to enqueue SampleJob job\n"
            f"  in:        5 minutes ({stamp(5)})\n"
            "\n"
            "found 1 SampleJob:\n"
            f"  at:        {stamp(5)}"
        )

    def test_negated_fails_when_enqueued_at_time(self, sample_job, stamp):
        with pytest.raises(ExpectationNotMetError) as exc_info:
            expect(lambda: sample_job.perform_in(timedelta(minutes=5))).not_to(
                enqueue_jobs(sample_job).schedule_at(clock.from_now(timedelta(minutes=5)))
            )

        assert str(exc_info.value) == (
            "expected not to enqueue SampleJob job\n"
            f"  at:        {stamp(5)}\n"
            "\n"
            "found 1 SampleJob:\n"
            f"  at:        {stamp(5)}"
        )


class TestCounting:
    def test_once(self, sample_job):
        expect(repeat(sample_job, 1)).to(enqueue_jobs(sample_job).once())

    def test_twice(self, sample_job):
        expect(repeat(sample_job, 2)).to(enqueue_jobs(sample_job).twice())

    def test_exactly(self, sample_job):
        expect(repeat(sample_job, 2)).to(enqueue_jobs(sample_job).exactly(2).times())

    def test_exactly_zero(self, sample_job, sample_job2):
        expect(repeat(sample_job2, 1)).to(enqueue_jobs(sample_job).exactly(0).times())

    def test_fails_expecting_once(self, sample_job):
        with pytest.raises(ExpectationNotMetError) as exc_info:
            expect(repeat(sample_job, 2)).to(enqueue_jobs(sample_job).once())

        assert str(exc_info.value) == (
            "expected to enqueue SampleJob job\n"
            "  exactly:   1 time(s)\n"
            "\n"
            "found 2 SampleJob"
        )

    def test_fails_expecting_twice(self, sample_job):
        with pytest.raises(ExpectationNotMetError) as exc_info:
            expect(repeat(sample_job, 1)).to(enqueue_jobs(sample_job).twice())

        assert str(exc_info.value) == (
            "expected to enqueue SampleJob job\n"
            "  exactly:   2 time(s)\n"
            "\n"
            "found 1 SampleJob"
        )

    def test_fails_expecting_exact_number(self, sample_job):
        with pytest.raises(ExpectationNotMetError) as exc_info:
            expect(repeat(sample_job, 2)).to(enqueue_jobs(sample_job).exactly(3).times())

        assert str(exc_info.value) == (
            "expected to enqueue SampleJob job\n"
            "  exactly:   3 time(s)\n"
            "\n"
            "found 2 SampleJob"
        )


class TestCombined:
    def test_counts_with_arguments(self, sample_job):
        def block():
            sample_job.perform_bulk([[1], [2], [2], [2], [3], [3]])
            sample_job.perform_in(timedelta(minutes=10), 4)

        expect(block).to(enqueue_jobs(sample_job).exactly(7).times())
        expect(block).to(enqueue_jobs(sample_job).once().with_arguments(1))
        expect(block).to(enqueue_jobs(sample_job).exactly(3).times().with_arguments(2))
        expect(block).to(enqueue_jobs(sample_job).twice().with_arguments(3))
        expect(block).to(
            enqueue_jobs(sample_job).once().with_arguments(4).schedule_in(timedelta(minutes=10))
        )

    def test_fails_when_no_job_matches_everything(self, sample_job, stamp):
        def block():
            sample_job.perform_in(timedelta(minutes=15), 2)
            sample_job.perform_in(timedelta(minutes=15), 1)
            sample_job.perform_in(timedelta(minutes=15), 1)
            sample_job.perform_in(timedelta(minutes=10), 1)

        matcher = (
            enqueue_jobs(sample_job)
            .exactly(3).times()
            .with_arguments(1)
            .schedule_in(timedelta(minutes=15))
        )

        with pytest.raises(ExpectationNotMetError) as exc_info:
            expect(block).to(matcher)

        assert str(exc_info.value) == (
            "expected to enqueue SampleJob job\n"
            "  exactly:   3 time(s)\n"
            "  arguments: [1]\n"
            f"  in:        15 minutes ({stamp(15)})\n"
            "\n"
            "found 4 SampleJob:\n"
            "  - arguments: [2]\n"
            f"    at:        {stamp(15)}\n"
            "  - arguments: [1]\n"
            f"    at:        {stamp(15)}\n"
            "  - arguments: [1]\n"
            f"    at:        {stamp(15)}\n"
            "  - arguments: [1]\n"
            f"    at:        {stamp(10)}"
        )


class TestBatches:
    def test_not_included_in_a_batch(self, sample_job):
        expect(lambda: sample_job.perform_async()).to(enqueue_jobs(sample_job).without_batch())

    def test_included_in_a_batch(self, sample_job):
        batch = Batch()
        expect(lambda: batch.jobs(lambda: sample_job.perform_async())).to(
            enqueue_jobs(sample_job).within_batch()
        )

    def test_included_in_expected_batch(self, sample_job):
        batch = Batch()
        expect(lambda: batch.jobs(lambda: sample_job.perform_async())).to(
            enqueue_jobs(sample_job).within_batch(batch)
        )

    def test_included_in_batch_with_bid(self, sample_job):
        batch = Batch()
        expect(lambda: batch.jobs(lambda: sample_job.perform_async())).to(
            enqueue_jobs(sample_job).within_batch(batch.bid)
        )

    def test_included_in_batch_matching_pattern(self, sample_job):
        batch = Batch()
        expect(lambda: batch.jobs(lambda: sample_job.perform_async())).to(
            enqueue_jobs(sample_job).within_batch(have_attributes(bid=batch.bid))
        )

    def test_pattern_sees_reconstructed_batch(self, sample_job):
        batch = Batch()
        batch.description = "import"
        expect(lambda: batch.jobs(lambda: sample_job.perform_async())).to(
            enqueue_jobs(sample_job).within_batch(have_attributes(description="import"))
        )

    def test_fails_when_included_in_a_batch(self, sample_job):
        batch = Batch()

        with pytest.raises(ExpectationNotMetError) as exc_info:
            expect(lambda: batch.jobs(lambda: sample_job.perform_async())).to(
                enqueue_jobs(sample_job).without_batch()
            )

        assert str(exc_info.value) == (
            "expected to enqueue SampleJob job\n"
            "  batch:     no batch\n"
            "\n"
            "found 1 SampleJob:\n"
            f'  batch:     <Batch bid: "{batch.bid}">'
        )

    def test_fails_when_not_included_in_a_batch(self, sample_job):
        with pytest.raises(ExpectationNotMetError) as exc_info:
            expect(lambda: sample_job.perform_async()).to(enqueue_jobs(sample_job).within_batch())

        assert str(exc_info.value) == (
            "expected to enqueue SampleJob job\n"
            "  batch:     to be present\n"
            "\n"
            "found 1 SampleJob:\n"
            "  batch:     no batch"
        )

    def test_fails_expecting_another_batch(self, sample_job):
        batch1, batch2 = Batch(), Batch()

        with pytest.raises(ExpectationNotMetError) as exc_info:
            expect(lambda: batch1.jobs(lambda: sample_job.perform_async())).to(
                enqueue_jobs(sample_job).within_batch(batch2)
            )

        assert str(exc_info.value) == (
            "expected to enqueue SampleJob job\n"
            f'  batch:     <Batch bid: "{batch2.bid}">\n'
            "\n"
            "found 1 SampleJob:\n"
            f'  batch:     <Batch bid: "{batch1.bid}">'
        )

    def test_fails_expecting_another_bid(self, sample_job):
        batch = Batch()

        with pytest.raises(ExpectationNotMetError) as exc_info:
            expect(lambda: batch.jobs(lambda: sample_job.perform_async())).to(
                enqueue_jobs(sample_job).within_batch("U2wgz8cxxTUdqg")
            )

        assert str(exc_info.value) == (
            "expected to enqueue SampleJob job\n"
            '  batch:     <Batch bid: "U2wgz8cxxTUdqg">\n'
            "\n"
            "found 1 SampleJob:\n"
            f'  batch:     <Batch bid: "{batch.bid}">'
        )

    def test_fails_expecting_batch_matching_pattern(self, sample_job):
        batch = Batch()

        def block():
            sample_job.perform_async()
            sample_job.perform_async()

        with pytest.raises(ExpectationNotMetError) as exc_info:
            expect(lambda: batch.jobs(block)).to(
                enqueue_jobs(sample_job).within_batch(have_attributes(bid="U2wgz8cxxTUdqg"))
            )

        assert str(exc_info.value) == (
            "expected to enqueue SampleJob job\n"
            "  batch:     have attributes (bid='U2wgz8cxxTUdqg')\n"
            "\n"
            "found 2 SampleJob:\n"
            f'  - batch:     <Batch bid: "{batch.bid}">\n'
            f'  - batch:     <Batch bid: "{batch.bid}">'
        )
