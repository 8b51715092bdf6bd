"""
Simulated job batches.

Lifecycle:
    NEW     constructed, mutable, nothing persisted
    OPEN    jobs() body executing, submissions are attributed to the batch
    CLOSED  body returned or raised; the batch is immutable from then on

A Batch is either fresh (new bid) or reconstructed from an existing bid.
Reconstructing a bid the backend does not know yields defaults and a
mutable batch, the same as a fresh one.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional, Union

from .backends import BatchBackend, SimulatedBatchBackend, select_backend
from .callbacks import CallbackRegistry, callbacks as default_callbacks, split_target
from .clock import clock
from .config import get_settings
from .context import BatchContext
from .entities import BatchRecord, generate_bid, generate_jid
from .errors import ConfigurationError
from .registry import BatchRegistry, registry as default_registry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CallbackFailure:
    """A callback that raised while a batch event was being triggered."""

    event: str
    target: str
    error: BaseException


class Batch:
    """A group of submitted jobs sharing callbacks and an optional parent."""

    def __init__(self, bid: Optional[str] = None, backend: Optional[BatchBackend] = None):
        self.backend = backend if backend is not None else select_backend()
        self.bid = bid or generate_bid()

        record = self.backend.load(self.bid) if bid else None

        if record is None:
            self.created_at = clock.now()
            self._description: Optional[str] = None
            self.parent_bid: Optional[str] = None
            self.callbacks: dict[str, list[dict]] = {}
            self._jids: list[str] = []
            self.mutable = True
        else:
            self.created_at = record.created_at
            self._description = record.description
            self.parent_bid = record.parent_bid
            self.callbacks = {event: list(targets) for event, targets in record.callbacks.items()}
            self._jids = list(record.jids)
            self.mutable = False

    def __repr__(self) -> str:
        return f"<Batch bid: {self.bid!r}>"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Batch):
            return self.bid == other.bid
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.bid)

    # =========================================================================
    # Configuration (before the first scope)
    # =========================================================================

    @property
    def description(self) -> Optional[str]:
        return self._description

    @description.setter
    def description(self, value: Optional[str]) -> None:
        self._ensure_mutable("description")
        self._description = value

    def on(self, event: str, target, options: Optional[dict] = None) -> "Batch":
        """
        Register a callback for `event` ("success", "complete", ...).

        Args:
            event: Event name
            target: Handler key, "Key#method" or a handler class
            options: Static options passed to the handler
        """
        self._ensure_mutable("callbacks")
        target_key = default_callbacks.target_for(target)
        self.callbacks.setdefault(str(event), []).append({target_key: options})
        return self

    def _ensure_mutable(self, what: str) -> None:
        if not self.mutable:
            raise ConfigurationError(
                f"Cannot change {what} of batch {self.bid}: its jobs scope already ran"
            )

    # =========================================================================
    # Scope execution
    # =========================================================================

    def jobs(self, body: Optional[Callable[[], Any]] = None) -> Any:
        """
        Run `body` with this batch open; jobs submitted inside join the batch.

        The first call persists the batch. Job ids registered by the body are
        persisted afterwards, including when the body raises.

        Returns:
            Whatever `body` returns

        Raises:
            ConfigurationError: If no callable body is given
        """
        if body is None or not callable(body):
            raise ConfigurationError("Batch.jobs() requires a callable body")

        if self.mutable:
            self.parent_bid = BatchContext.current_id()
            self.backend.create(
                BatchRecord(
                    bid=self.bid,
                    created_at=self.created_at,
                    description=self._description,
                    parent_bid=self.parent_bid,
                    callbacks={event: list(targets) for event, targets in self.callbacks.items()},
                    jids=list(self._jids),
                )
            )
            logger.debug(f"Opened batch {self.bid} (parent: {self.parent_bid})")

        self.mutable = False

        try:
            with BatchContext.scope(self):
                return body()
        finally:
            self.backend.save_jids(self.bid, self._jids)

    def register(self, jid: str) -> None:
        self._jids.append(jid)

    @property
    def jids(self) -> list[str]:
        return list(self._jids)

    def include(self, jid: str) -> bool:
        return jid in self._jids

    def __contains__(self, jid: str) -> bool:
        return self.include(jid)

    # =========================================================================
    # Invalidation
    # =========================================================================

    def invalidate_all(self) -> None:
        """Cancel the batch: flag it and drop its jobs from every queue."""
        self.backend.invalidate_all(self.bid, self._jids)

    def invalidate_jids(self, *jids: str) -> None:
        self.backend.invalidate_jids(self.bid, jids)

    def is_invalidated(self) -> bool:
        return self.backend.is_invalidated(self.bid)

    # =========================================================================
    # Callbacks
    # =========================================================================

    def status(self) -> "Status":
        return Status(self.bid, backend=self.backend)

    def trigger_callback(
        self,
        event: str,
        handlers: Optional[CallbackRegistry] = None,
    ) -> list[CallbackFailure]:
        """
        Invoke every callback registered for `event`, in registration order.

        Each callback runs independently: a failure is logged and collected
        and the remaining callbacks still run. With strict callbacks enabled
        the first failure is re-raised once all callbacks ran.

        Returns:
            Failures, empty when every callback succeeded
        """
        event = str(event)
        handlers = handlers or default_callbacks
        failures: list[CallbackFailure] = []
        status = self.status()

        for callback in self.callbacks.get(event, []):
            for target, options in callback.items():
                try:
                    self._invoke_callback(handlers, event, target, status, options)
                except Exception as e:
                    logger.exception(f"Error in {event} callback {target} of batch {self.bid}")
                    failures.append(CallbackFailure(event=event, target=target, error=e))

        if failures and get_settings().strict_callbacks:
            raise failures[0].error
        return failures

    def _invoke_callback(self, handlers, event, target, status, options) -> None:
        key, method = split_target(target)
        instance = handlers.resolve(key)()
        if hasattr(instance, "jid"):
            instance.jid = generate_jid()
        getattr(instance, method or f"on_{event}")(status, options)


class Status:
    """
    Read-only snapshot of a batch, taken from persisted state.

    Nothing executes in the simulator, so pending and failures are always 0.
    """

    def __init__(self, bid: str, backend: Optional[BatchBackend] = None):
        backend = backend if backend is not None else select_backend()
        record = backend.load(bid)

        self.bid = bid
        self.pending = 0
        self.failures = 0
        self.total = len(record.jids) if record else 0
        self.jids = list(record.jids) if record else []
        self.parent_bid = record.parent_bid if record else None
        self.created_at = record.created_at if record else None
        self.description = record.description if record else None

    def is_complete(self) -> bool:
        return self.pending == self.failures

    def __repr__(self) -> str:
        return f"<Batch::Status bid: {self.bid!r} total: {self.total}>"


class Batches:
    """Registry view that yields Batch objects instead of raw properties."""

    def __init__(self, batch_registry: Optional[BatchRegistry] = None):
        self.registry = batch_registry if batch_registry is not None else default_registry
        self.backend = SimulatedBatchBackend(self.registry)

    def _batch(self, record: Optional[BatchRecord]) -> Optional[Batch]:
        return Batch(record.bid, backend=self.backend) if record is not None else None

    def __getitem__(self, key: Union[int, str]) -> Batch:
        return self._batch(self.registry[key])

    def __iter__(self) -> Iterator[Batch]:
        for record in self.registry.to_list():
            yield self._batch(record)

    def __len__(self) -> int:
        return len(self.registry)

    def __contains__(self, bid: str) -> bool:
        return bid in self.registry

    def size(self) -> int:
        return len(self.registry)

    def is_empty(self) -> bool:
        return self.registry.is_empty()

    def any(self) -> bool:
        return self.registry.any()

    def first(self) -> Optional[Batch]:
        return self._batch(self.registry.first())

    def last(self) -> Optional[Batch]:
        return self._batch(self.registry.last())

    def delete(self, bid: str) -> None:
        self.registry.delete(bid)

    def clear_all(self) -> None:
        self.registry.clear()


batches = Batches()
