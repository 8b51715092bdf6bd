"""
Batch storage backends.

Batch delegates every storage operation to a BatchBackend chosen once,
when the Batch is constructed:
- SimulatedBatchBackend: the in-memory registry and job queues
- UnavailableBatchBackend: simulation disabled and no real backend given

A real backend (e.g. a client for the production queue) implements the
same interface and is passed to select_backend().
"""

import logging
from abc import ABC, abstractmethod
from typing import Iterable, Optional

from .config import Settings, get_settings
from .entities import BatchRecord
from .errors import BackendUnavailableError, NotSupportedError
from .queues import JobQueues, queues as default_queues
from .registry import BatchRegistry, registry as default_registry

logger = logging.getLogger(__name__)


class BatchBackend(ABC):
    """Storage operations a Batch needs."""

    @abstractmethod
    def load(self, bid: str) -> Optional[BatchRecord]:
        """Persisted properties of `bid`, or None for a not-yet-persisted batch."""
        ...

    @abstractmethod
    def create(self, record: BatchRecord) -> BatchRecord:
        """Persist a new batch; the batch becomes externally observable."""
        ...

    @abstractmethod
    def save_jids(self, bid: str, jids: list) -> None:
        ...

    @abstractmethod
    def invalidate_all(self, bid: str, jids: Iterable[str]) -> None:
        ...

    @abstractmethod
    def invalidate_jids(self, bid: str, jids: Iterable[str]) -> None:
        ...

    @abstractmethod
    def is_invalidated(self, bid: str) -> bool:
        ...


class SimulatedBatchBackend(BatchBackend):
    """Registry-backed backend used while testing."""

    def __init__(
        self,
        batch_registry: Optional[BatchRegistry] = None,
        job_queues: Optional[JobQueues] = None,
    ):
        self.registry = batch_registry if batch_registry is not None else default_registry
        self.queues = job_queues if job_queues is not None else default_queues

    def load(self, bid: str) -> Optional[BatchRecord]:
        return self.registry.get(bid)

    def create(self, record: BatchRecord) -> BatchRecord:
        return self.registry.insert(record.bid, record)

    def save_jids(self, bid: str, jids: list) -> None:
        self.registry.update(bid, jids=list(jids))

    def invalidate_all(self, bid: str, jids: Iterable[str]) -> None:
        self.registry.update(bid, invalidated=True)
        removed = self.queues.delete_jids(jids)
        logger.info(f"Invalidated batch {bid}, cancelled {removed} job(s)")

    def invalidate_jids(self, bid: str, jids: Iterable[str]) -> None:
        # TODO: track per-jid invalidation once partial cancellation semantics are agreed
        raise NotSupportedError(
            "Invalidating a subset of batch jobs is not supported by the simulated backend"
        )

    def is_invalidated(self, bid: str) -> bool:
        record = self.registry.get(bid)
        return bool(record and record.invalidated)


class UnavailableBatchBackend(BatchBackend):
    """Backend used when simulation is disabled and nothing real is configured."""

    def _unavailable(self, *args, **kwargs):
        raise BackendUnavailableError(
            "Batch storage is unavailable: simulation is disabled "
            "(QUEUESIM_TESTING_MODE=disabled) and no real backend was supplied"
        )

    load = _unavailable
    create = _unavailable
    save_jids = _unavailable
    invalidate_all = _unavailable
    invalidate_jids = _unavailable
    is_invalidated = _unavailable


def select_backend(
    settings: Optional[Settings] = None,
    real_backend: Optional[BatchBackend] = None,
) -> BatchBackend:
    """
    Pick the backend for the configured testing mode.

    Args:
        settings: Settings to use (default: process settings)
        real_backend: Backend used when simulation is disabled

    Returns:
        BatchBackend instance
    """
    settings = settings or get_settings()
    if settings.is_fake:
        return SimulatedBatchBackend()
    if real_backend is not None:
        return real_backend
    return UnavailableBatchBackend()
