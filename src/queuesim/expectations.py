"""
Minimal expectation glue for using job matchers from plain pytest tests.

    expect(lambda: SampleJob.perform_async(1)).to(enqueue_job(SampleJob))
    expect(SampleJob).not_to(have_enqueued_jobs().with_arguments(2))

A failed expectation raises ExpectationNotMetError (an AssertionError),
so pytest reports it as a regular test failure with the matcher's
diagnostic as message.
"""

from typing import Any

from .errors import ConfigurationError


class ExpectationNotMetError(AssertionError):
    """An expectation did not hold."""
    pass


class Expectation:
    def __init__(self, actual: Any):
        self.actual = actual

    def _check_target(self, matcher) -> None:
        if matcher.supports_block_expectations() and not callable(self.actual):
            raise ConfigurationError(
                f"{type(matcher).__name__} expects a callable block, got {self.actual!r}"
            )

    def to(self, matcher) -> Any:
        self._check_target(matcher)
        if not matcher.matches(self.actual):
            raise ExpectationNotMetError(matcher.failure_message())
        return matcher

    def not_to(self, matcher) -> Any:
        self._check_target(matcher)
        if not matcher.does_not_match(self.actual):
            raise ExpectationNotMetError(matcher.failure_message_when_negated())
        return matcher

    to_not = not_to


def expect(actual: Any) -> Expectation:
    return Expectation(actual)
