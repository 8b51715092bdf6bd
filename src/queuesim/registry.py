"""
Batch registry.

Process-wide store of BatchRecord property sets, kept twice:
- an insertion-ordered list (first/last/nth/iteration)
- a dict keyed by bid

Both structures are always mutated together under one lock so readers
never observe them diverging. The registry lives for a test run and is
reset between tests.
"""

import logging
import threading
from typing import Iterator, Optional, Union

from .entities import BatchRecord
from .errors import BatchNotFoundError, DuplicateBatchError

logger = logging.getLogger(__name__)

_MISSING = object()


class BatchRegistry:
    """Ordered + keyed store of batch properties."""

    def __init__(self):
        self._lock = threading.RLock()
        self._ordered: list[BatchRecord] = []
        self._by_bid: dict[str, BatchRecord] = {}

    # =========================================================================
    # Mutations
    # =========================================================================

    def insert(self, bid: str, record: BatchRecord) -> BatchRecord:
        """
        Register a batch under `bid`.

        Raises:
            DuplicateBatchError: If the bid is already registered
        """
        with self._lock:
            if bid in self._by_bid:
                raise DuplicateBatchError(bid)
            record.bid = bid
            self._ordered.append(record)
            self._by_bid[bid] = record

        logger.debug(f"Registered batch {bid}")
        return record

    def update(self, bid: str, /, **fields) -> BatchRecord:
        """
        Update persisted fields of an existing batch.

        Raises:
            BatchNotFoundError: If the batch is unknown
            AttributeError: If a field does not exist on BatchRecord
        """
        with self._lock:
            record = self.fetch(bid)
            for name, value in fields.items():
                if name == "bid" or not hasattr(record, name):
                    raise AttributeError(f"BatchRecord has no updatable field {name!r}")
                setattr(record, name, value)
            return record

    def delete(self, bid: str) -> Optional[BatchRecord]:
        """Remove a batch from both structures; no-op when absent."""
        with self._lock:
            record = self._by_bid.pop(bid, None)
            if record is not None:
                self._ordered.remove(record)
        return record

    def clear(self) -> None:
        with self._lock:
            self._ordered.clear()
            self._by_bid.clear()

    # =========================================================================
    # Lookups
    # =========================================================================

    def fetch(self, bid: str, default=_MISSING) -> BatchRecord:
        """
        Get a batch by bid.

        Raises:
            BatchNotFoundError: If absent and no default is given
        """
        with self._lock:
            record = self._by_bid.get(bid)
        if record is None:
            if default is _MISSING:
                raise BatchNotFoundError(bid)
            return default
        return record

    def get(self, bid: Optional[str], default: Optional[BatchRecord] = None) -> Optional[BatchRecord]:
        if bid is None:
            return default
        return self.fetch(bid, default)

    def __getitem__(self, key: Union[int, str]) -> BatchRecord:
        """Integer keys address insertion order, anything else the bid index."""
        with self._lock:
            if isinstance(key, int):
                return self._ordered[key]
        return self.fetch(key)

    def __contains__(self, bid: str) -> bool:
        with self._lock:
            return bid in self._by_bid

    def __iter__(self) -> Iterator[BatchRecord]:
        return iter(self.to_list())

    def __len__(self) -> int:
        with self._lock:
            return len(self._ordered)

    def size(self) -> int:
        return len(self)

    def is_empty(self) -> bool:
        return len(self) == 0

    def any(self) -> bool:
        return not self.is_empty()

    def first(self) -> Optional[BatchRecord]:
        with self._lock:
            return self._ordered[0] if self._ordered else None

    def last(self) -> Optional[BatchRecord]:
        with self._lock:
            return self._ordered[-1] if self._ordered else None

    def to_list(self) -> list[BatchRecord]:
        with self._lock:
            return list(self._ordered)

    def to_dict(self) -> dict[str, BatchRecord]:
        with self._lock:
            return dict(self._by_bid)


registry = BatchRegistry()
