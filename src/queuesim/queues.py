"""
In-memory job queues.

Stands in for the worker backend's storage during tests:
- Every submission is appended to two ordered partitions, one keyed by
  worker key and one by queue name
- Snapshots capture which jids exist so a later call can return only the
  jobs pushed since (block-style expectations)
- Removal by jid touches every partition (batch invalidation)

What JobQueues MUST NOT do:
- Execute jobs
- Know about batches beyond the `bid` stamped on a record
"""

import logging
import threading
from typing import Iterable, Optional

from .entities import JobRecord

logger = logging.getLogger(__name__)


class QueueSnapshot:
    """Opaque marker returned by JobQueues.snapshot()."""

    __slots__ = ("worker", "jids")

    def __init__(self, worker: str, jids: Iterable[str]):
        self.worker = worker
        self.jids = frozenset(jids)

    def __contains__(self, jid: str) -> bool:
        return jid in self.jids

    def __len__(self) -> int:
        return len(self.jids)


class JobQueues:
    """Process-wide ordered job log partitioned by worker and by queue."""

    def __init__(self):
        self._lock = threading.RLock()
        self._by_worker: dict[str, list[JobRecord]] = {}
        self._by_queue: dict[str, list[JobRecord]] = {}

    # =========================================================================
    # Writes
    # =========================================================================

    def append(self, record: JobRecord) -> JobRecord:
        """Append a record to its worker and queue partitions."""
        with self._lock:
            self._by_worker.setdefault(record.worker, []).append(record)
            self._by_queue.setdefault(record.queue, []).append(record)

        logger.debug(
            f"Pushed {record.worker} job {record.jid} to queue {record.queue}"
            + (f" in batch {record.bid}" if record.bid else "")
        )
        return record

    def delete_jids(self, jids: Iterable[str]) -> int:
        """
        Remove every job whose jid is in `jids` from all partitions.

        Returns:
            Number of records removed from the worker partitions
        """
        targets = set(jids)
        if not targets:
            return 0

        removed = 0
        with self._lock:
            for worker, records in self._by_worker.items():
                kept = [r for r in records if r.jid not in targets]
                removed += len(records) - len(kept)
                self._by_worker[worker] = kept
            for queue, records in self._by_queue.items():
                self._by_queue[queue] = [r for r in records if r.jid not in targets]

        logger.debug(f"Removed {removed} job(s) from queues")
        return removed

    def clear(self, worker: str) -> None:
        """Drop all jobs of one worker from every partition."""
        with self._lock:
            records = self._by_worker.pop(worker, [])
            jids = {r.jid for r in records}
            for queue, queued in self._by_queue.items():
                self._by_queue[queue] = [r for r in queued if r.jid not in jids]

    def clear_all(self) -> None:
        with self._lock:
            self._by_worker.clear()
            self._by_queue.clear()

    # =========================================================================
    # Reads
    # =========================================================================

    def jobs(self, worker: str) -> list[JobRecord]:
        """Ordered copy of a worker's jobs."""
        with self._lock:
            return list(self._by_worker.get(worker, []))

    def jobs_in_queue(self, queue: str) -> list[JobRecord]:
        with self._lock:
            return list(self._by_queue.get(queue, []))

    def all_jobs(self) -> list[JobRecord]:
        with self._lock:
            return [r for records in self._by_worker.values() for r in records]

    def find(self, jid: str) -> Optional[JobRecord]:
        with self._lock:
            for records in self._by_worker.values():
                for record in records:
                    if record.jid == jid:
                        return record
        return None

    def workers(self) -> list[str]:
        with self._lock:
            return [w for w, records in self._by_worker.items() if records]

    def queue_names(self) -> list[str]:
        with self._lock:
            return [q for q, records in self._by_queue.items() if records]

    def size(self, worker: Optional[str] = None) -> int:
        with self._lock:
            if worker is not None:
                return len(self._by_worker.get(worker, []))
            return sum(len(records) for records in self._by_worker.values())

    # =========================================================================
    # Before/after diffing
    # =========================================================================

    def snapshot(self, worker: str) -> QueueSnapshot:
        """Capture the jids currently queued for `worker`."""
        with self._lock:
            return QueueSnapshot(worker, (r.jid for r in self._by_worker.get(worker, [])))

    def jobs_since(self, worker: str, marker: QueueSnapshot) -> list[JobRecord]:
        """Jobs of `worker` pushed after `marker` was taken, in log order."""
        return [r for r in self.jobs(worker) if r.jid not in marker]


queues = JobQueues()
