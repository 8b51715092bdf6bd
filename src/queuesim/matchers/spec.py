"""
MatcherSpec: the validated set of expectations of one assertion.

Every setter validates mutual exclusivity immediately, so an inconsistent
expectation fails where it is written rather than when it is evaluated.
A spec belongs to one assertion; matcher factories build a new one per
call.
"""

from typing import Any, Callable, Optional

from ..clock import Instant, Interval, clock, to_epoch, to_seconds
from ..entities import normalize_expected
from ..errors import ConfigurationError
from ..matching import Satisfies, ValueMatcher
from .formatting import ANY_BATCH


class MatcherSpec:
    """Expectation fields; all start unset."""

    def __init__(self, allows_result_resolver: bool = False):
        self.allows_result_resolver = allows_result_resolver

        self.expected_arguments: Optional[Any] = None
        self.expected_interval: Optional[Interval] = None
        self.expected_timestamp: Optional[Instant] = None
        self.expected_schedule: Optional[int] = None
        self.expected_count: Optional[int] = None
        self.expected_without_batch = False
        self.expected_batch: Optional[Any] = None

    # =========================================================================
    # Arguments
    # =========================================================================

    def with_arguments(self, *arguments, from_result: Optional[Callable[[Any], Any]] = None) -> None:
        if from_result is not None:
            if not self.allows_result_resolver:
                raise ConfigurationError(
                    "setting a result resolver on `with_arguments` is not supported for this matcher"
                )
            if arguments:
                raise ConfigurationError(
                    "setting arguments and a result resolver together in `with_arguments` is not supported"
                )
            if not callable(from_result):
                raise ConfigurationError("`from_result` must be callable")
            self.expected_arguments = from_result
        else:
            self.expected_arguments = normalize_expected(arguments)

    @property
    def has_argument_resolver(self) -> bool:
        return callable(self.expected_arguments)

    def resolve_arguments(self, result: Any) -> None:
        """
        Replace a result resolver by the arguments it derives from `result`.

        Raises:
            ConfigurationError: If the resolver does not return a list/tuple
        """
        if not self.has_argument_resolver:
            return
        arguments = self.expected_arguments(result)
        if not isinstance(arguments, (list, tuple)):
            raise ConfigurationError("arguments returned from a resolver are expected to be a list")
        self.expected_arguments = normalize_expected(arguments)

    # =========================================================================
    # Schedule
    # =========================================================================

    def schedule_in(self, interval: Interval) -> None:
        if self.expected_timestamp is not None:
            raise ConfigurationError(
                "setting expectations with both `schedule_at` and `schedule_in` is not supported"
            )
        self.expected_interval = interval
        self.expected_schedule = int(clock.now() + to_seconds(interval))

    def schedule_at(self, timestamp: Instant) -> None:
        if self.expected_interval is not None:
            raise ConfigurationError(
                "setting expectations with both `schedule_at` and `schedule_in` is not supported"
            )
        self.expected_timestamp = timestamp
        self.expected_schedule = int(to_epoch(timestamp))

    # =========================================================================
    # Count
    # =========================================================================

    def exactly(self, times: int) -> None:
        if isinstance(times, bool) or not isinstance(times, int) or times < 0:
            raise ConfigurationError(f"expected count must be a non-negative integer, got {times!r}")
        self.expected_count = times

    # =========================================================================
    # Batch
    # =========================================================================

    def without_batch(self) -> None:
        if self.expected_batch is not None:
            raise ConfigurationError(
                "setting expectations with both `without_batch` and `within_batch` is not supported"
            )
        self.expected_without_batch = True

    def within_batch(self, expectation: Any = ANY_BATCH) -> None:
        if self.expected_without_batch:
            raise ConfigurationError(
                "setting expectations with both `without_batch` and `within_batch` is not supported"
            )
        if expectation is None:
            raise ConfigurationError(
                "`within_batch` expects a bid, a Batch or a pattern; use `without_batch` to expect no batch"
            )
        # A bare callable is a predicate over the reconstructed Batch
        if callable(expectation) and not isinstance(expectation, (type, ValueMatcher)):
            expectation = Satisfies(expectation)
        self.expected_batch = expectation

    # =========================================================================
    # Introspection
    # =========================================================================

    @property
    def checks_batch(self) -> bool:
        return self.expected_without_batch or self.expected_batch is not None

    @property
    def has_filters(self) -> bool:
        """True when any clause beyond the count is active."""
        return (
            self.expected_arguments is not None
            or self.expected_schedule is not None
            or self.checks_batch
        )
