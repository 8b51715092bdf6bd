"""
Batch context: which batch is open for the current thread or asyncio task.

The stack lives in a ContextVar, never in the registry, so concurrent
scopes (threads, tasks) each see their own "current batch". The stack value
is an immutable tuple; enter/leave replace it rather than mutate it.
"""

from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Iterator, Optional

if TYPE_CHECKING:
    from .batch import Batch

_OPEN_BATCHES: ContextVar[tuple] = ContextVar("queuesim_open_batches", default=())


class BatchContext:
    """Stack of open batches for the current execution unit."""

    @staticmethod
    def enter(batch: "Batch") -> None:
        _OPEN_BATCHES.set(_OPEN_BATCHES.get() + (batch,))

    @staticmethod
    def leave() -> None:
        stack = _OPEN_BATCHES.get()
        if not stack:
            raise RuntimeError("BatchContext.leave() called with no open batch")
        _OPEN_BATCHES.set(stack[:-1])

    @staticmethod
    def current() -> Optional["Batch"]:
        stack = _OPEN_BATCHES.get()
        return stack[-1] if stack else None

    @staticmethod
    def current_id() -> Optional[str]:
        batch = BatchContext.current()
        return batch.bid if batch is not None else None

    @staticmethod
    def depth() -> int:
        return len(_OPEN_BATCHES.get())

    @staticmethod
    @contextmanager
    def scope(batch: "Batch") -> Iterator["Batch"]:
        """Open `batch` for the duration of the block; always closed on exit."""
        BatchContext.enter(batch)
        try:
            yield batch
        finally:
            BatchContext.leave()

    @staticmethod
    def reset() -> None:
        _OPEN_BATCHES.set(())
