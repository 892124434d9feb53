"""Flush scheduler — periodic snapshot-and-reset with a background report per flush."""

import logging
import threading
import time

from statsagg.metrics import Metrics
from statsagg.report import build_report
from statsagg.reporter import GraphiteReporter
from statsagg.store import AggregationStore, Snapshot

logger = logging.getLogger(__name__)


class FlushScheduler:
    """Ticks every ``flush_interval_ms`` and hands each snapshot to its own thread.

    Report threads are never joined on the tick path. A slow report can
    overlap with the next one; that is accepted.
    """

    def __init__(self, store: AggregationStore, reporter: GraphiteReporter,
                 flush_interval_ms: int, metrics: Metrics | None = None):
        self._store = store
        self._reporter = reporter
        self._flush_interval_ms = flush_interval_ms
        self._metrics = metrics or Metrics()
        self._stop_event = threading.Event()
        self._timer_thread: threading.Thread | None = None
        self._report_threads: list[threading.Thread] = []
        self._threads_lock = threading.Lock()

    def start(self):
        self._stop_event.clear()
        self._timer_thread = threading.Thread(target=self._flush_timer, name="flush-timer", daemon=True)
        self._timer_thread.start()
        logger.info("Flushing stats to %s every %dms", self._reporter.destination, self._flush_interval_ms)

    def flush(self) -> threading.Thread:
        """Snapshot and reset the store now; returns the dispatched report thread."""
        snapshot = self._store.snapshot_and_reset(self._flush_interval_ms)
        self._metrics.record_flush(snapshot.empty)

        thread = threading.Thread(target=self._report, args=(snapshot,), name="report", daemon=True)
        with self._threads_lock:
            self._report_threads = [t for t in self._report_threads if t.is_alive()]
            self._report_threads.append(thread)
        thread.start()
        return thread

    def stop(self, timeout: float = 5.0):
        """Stop ticking, flush what is left, and wait briefly for reports in flight."""
        self._stop_event.set()
        if self._timer_thread:
            self._timer_thread.join(timeout=timeout)
            self._timer_thread = None
        self.flush()

        with self._threads_lock:
            pending = list(self._report_threads)
            self._report_threads = []
        for thread in pending:
            thread.join(timeout=timeout)
        logger.info("Flush scheduler stopped")

    def _flush_timer(self):
        """Background thread that flushes at a fixed rate, one interval apart."""
        interval = self._flush_interval_ms / 1000
        deadline = time.monotonic() + interval
        while not self._stop_event.wait(timeout=max(deadline - time.monotonic(), 0)):
            self.flush()
            deadline += interval
            now = time.monotonic()
            if deadline <= now:
                # Fell a whole interval behind; skip missed ticks rather than burst.
                deadline = now + interval

    def _report(self, snapshot: Snapshot):
        try:
            payload = build_report(snapshot)
            if not payload:
                logger.debug("Nothing to report")
                return
            lines = payload.count("\n")
            success = self._reporter.send(payload)
            self._metrics.record_report(success, lines)
            if success:
                logger.debug("Reported %d lines for ts=%d", lines, snapshot.timestamp)
        except Exception:
            logger.exception("Report task failed")
            self._metrics.record_report(False, 0)
