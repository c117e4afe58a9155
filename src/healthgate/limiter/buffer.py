"""
Per-key aggregation of health observations.

The buffer maps a (subject, metric name) key to the aggregate state of the
observations seen for it. Entries are created on first observation and are
never evicted.
"""

import logging
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Callable, Dict, Iterator, Optional, Tuple

from healthgate.health.models import HealthStatus

logger = logging.getLogger(__name__)

Key = Tuple[str, str]
Clock = Callable[[], int]


def current_millis() -> int:
    """Wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


@dataclass
class AggregateValue:
    """Aggregate state of one key within the current window."""

    count: int
    first_seen_millis: int
    last_seen_millis: int
    score: float
    status: HealthStatus


@dataclass
class _Entry:
    lock: threading.Lock
    value: Optional[AggregateValue] = None


class AggregationBuffer:
    """
    Concurrency-safe map from (subject, metric name) to AggregateValue.

    A global lock guards the key map and is held only long enough to find or
    create a key's entry; each entry then has its own lock, so inserts for
    different keys do not serialize on each other.

    Usage:
        buffer = AggregationBuffer()
        snapshot = buffer.insert("host1", "latency", HealthStatus.NORMAL, 5.0)

        # Read and reset in the same critical section:
        with buffer.update("host1", "latency", HealthStatus.NORMAL, 9.0) as val:
            if val.count > 10:
                val.count = 0
    """

    def __init__(self, clock: Optional[Clock] = None):
        """
        Initialize the buffer.

        Args:
            clock: Callable returning the current time in epoch milliseconds
        """
        self._clock = clock or current_millis
        self._entries: Dict[Key, _Entry] = {}
        self._mu = threading.Lock()

    @staticmethod
    def _key(subject: str, metric_name: str) -> Key:
        if not subject:
            raise ValueError("subject must be a non-empty string")
        if not metric_name:
            raise ValueError("metric_name must be a non-empty string")
        return (subject, metric_name)

    def _entry(self, key: Key) -> _Entry:
        with self._mu:
            entry = self._entries.get(key)
            if entry is None:
                entry = _Entry(lock=threading.Lock())
                self._entries[key] = entry
            return entry

    @contextmanager
    def update(
        self,
        subject: str,
        metric_name: str,
        status: HealthStatus,
        score: float,
    ) -> Iterator[AggregateValue]:
        """
        Insert an observation and yield the live aggregate under the key's lock.

        The yielded value may be mutated in place until the block exits; no
        other insert for the same key can interleave with it.

        Args:
            subject: Entity the observation is about
            metric_name: Name of the observed metric
            status: Observed health status
            score: Observed score

        Yields:
            The key's AggregateValue after this insert

        Raises:
            ValueError: If subject or metric_name is missing
        """
        key = self._key(subject, metric_name)
        entry = self._entry(key)
        with entry.lock:
            now = self._clock()
            val = entry.value
            if val is None:
                val = AggregateValue(
                    count=1,
                    first_seen_millis=now,
                    last_seen_millis=now,
                    score=score,
                    status=status,
                )
                entry.value = val
                logger.debug(f"Created aggregate for [{subject}:{metric_name}]")
            else:
                val.count += 1
                val.last_seen_millis = now
                val.status = status
                val.score = score
            yield val

    def insert(
        self,
        subject: str,
        metric_name: str,
        status: HealthStatus,
        score: float,
    ) -> AggregateValue:
        """
        Insert an observation and return a snapshot of the resulting aggregate.

        The snapshot is a copy; changing it does not affect the buffer.
        """
        with self.update(subject, metric_name, status, score) as val:
            return replace(val)

    def get(self, subject: str, metric_name: str) -> Optional[AggregateValue]:
        """Snapshot of a key's aggregate, or None if the key was never seen."""
        key = self._key(subject, metric_name)
        with self._mu:
            entry = self._entries.get(key)
        if entry is None:
            return None
        with entry.lock:
            return replace(entry.value) if entry.value is not None else None

    def snapshot(self) -> Dict[Key, AggregateValue]:
        """Copy of every aggregate currently held, keyed by (subject, metric name)."""
        with self._mu:
            entries = list(self._entries.items())
        result: Dict[Key, AggregateValue] = {}
        for key, entry in entries:
            with entry.lock:
                if entry.value is not None:
                    result[key] = replace(entry.value)
        return result

    def __len__(self) -> int:
        with self._mu:
            return len(self._entries)
