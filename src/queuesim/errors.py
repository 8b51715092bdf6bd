"""
queuesim exceptions.

Two families:
- Configuration errors: raised immediately while an expectation or a batch
  is being set up (never deferred to evaluation).
- Registry errors: raised by the in-memory batch store.

Assertion failures are not exceptions of this module; they are reported
through expectations.ExpectationNotMetError.
"""


class QueueSimError(Exception):
    """Base exception for all queuesim errors."""
    pass


class ConfigurationError(QueueSimError, ValueError):
    """
    Raised when a matcher or a batch is configured inconsistently.

    Examples:
    - Setting both `schedule_in` and `schedule_at`
    - Setting both `without_batch` and `within_batch`
    - Calling `Batch.jobs()` without a body
    - A result resolver returning something other than a list
    """
    pass


class BatchNotFoundError(QueueSimError, KeyError):
    """Raised when a requested batch does not exist in the registry."""

    def __init__(self, bid: str):
        self.bid = bid
        super().__init__(f"Batch not found: {bid}")

    def __str__(self) -> str:
        return self.args[0]


class DuplicateBatchError(QueueSimError):
    """Raised when inserting a batch whose bid is already registered."""

    def __init__(self, bid: str):
        self.bid = bid
        super().__init__(f"Batch already registered: {bid}")


class CallbackNotRegisteredError(QueueSimError):
    """Raised when a callback target names an unknown handler key."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"No callback handler registered for key: {key}")


class NotSupportedError(QueueSimError):
    """Raised for operations the simulated backend does not implement."""
    pass


class BackendUnavailableError(QueueSimError):
    """
    Raised when a batch operation needs a backend that is not available.

    Happens when simulation is disabled (QUEUESIM_TESTING_MODE=disabled)
    and no real batch backend was supplied.
    """
    pass
