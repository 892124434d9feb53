"""Aggregation store — per-interval counter and timer state behind a single lock."""

import logging
import threading
import time
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CounterEntry:
    total: float
    sample_count: int


@dataclass(frozen=True)
class Snapshot:
    """Immutable capture of one interval, handed to the report task."""

    counters: Mapping[str, CounterEntry]
    timers: Mapping[str, tuple]
    flush_interval_ms: int
    timestamp: int

    @property
    def empty(self) -> bool:
        return not self.counters and not self.timers


class AggregationStore:
    def __init__(self):
        self._lock = threading.Lock()
        self._counters: dict[str, CounterEntry] = {}
        self._timers: dict[str, list] = {}
        self._closed = False

    def increment(self, key: str, delta: float, sample_rate: float = 1.0) -> bool:
        """Add a sample-rate-corrected delta to a counter.

        Returns False (and changes nothing) when the sample rate is outside
        (0, 1] or the store has been closed.
        """
        if not 0 < sample_rate <= 1:
            logger.debug("Dropping increment for %r: sample rate %r", key, sample_rate)
            return False
        corrected = delta / sample_rate
        with self._lock:
            if self._closed:
                return False
            entry = self._counters.get(key)
            if entry is None:
                self._counters[key] = CounterEntry(corrected, 1)
            else:
                self._counters[key] = CounterEntry(entry.total + corrected, entry.sample_count + 1)
        return True

    def timing(self, key: str, duration: float) -> bool:
        """Record one duration sample for a timer."""
        with self._lock:
            if self._closed:
                return False
            self._timers.setdefault(key, []).append(duration)
        return True

    def snapshot_and_reset(self, flush_interval_ms: int, timestamp: int | None = None) -> Snapshot:
        """Swap in empty containers and return the previous contents as a Snapshot."""
        with self._lock:
            counters, timers = self._counters, self._timers
            self._counters, self._timers = {}, {}

        # The old containers are unreachable from the store now.
        return Snapshot(
            counters=MappingProxyType(counters),
            timers=MappingProxyType({k: tuple(v) for k, v in timers.items()}),
            flush_interval_ms=flush_interval_ms,
            timestamp=int(time.time()) if timestamp is None else timestamp,
        )

    def pending(self) -> dict:
        """Key counts accumulated so far in the current interval."""
        with self._lock:
            return {"counters": len(self._counters), "timers": len(self._timers)}

    def counter(self, key: str) -> CounterEntry | None:
        with self._lock:
            return self._counters.get(key)

    def timer(self, key: str) -> list | None:
        with self._lock:
            values = self._timers.get(key)
            return list(values) if values is not None else None

    def close(self):
        """Stop accepting events and drop whatever is still pending."""
        with self._lock:
            self._closed = True
            self._counters, self._timers = {}, {}
        logger.info("Aggregation store closed")

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed
