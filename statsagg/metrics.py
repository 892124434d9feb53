"""Thread-safe counters describing the daemon's own activity."""

import threading
import time


class Metrics:
    def __init__(self):
        self._lock = threading.Lock()
        self._packets_received = 0
        self._events_ingested = 0
        self._invalid_lines = 0
        self._dropped_samples = 0
        self._apply_errors = 0
        self._flushes = 0
        self._empty_flushes = 0
        self._reports_sent = 0
        self._report_failures = 0
        self._last_report_lines = 0
        self._start_time = time.monotonic()

    def record_packet(self):
        with self._lock:
            self._packets_received += 1

    def record_event(self):
        with self._lock:
            self._events_ingested += 1

    def record_invalid(self, count: int = 1):
        with self._lock:
            self._invalid_lines += count

    def record_dropped(self):
        with self._lock:
            self._dropped_samples += 1

    def record_error(self):
        with self._lock:
            self._apply_errors += 1

    def record_flush(self, empty: bool):
        with self._lock:
            self._flushes += 1
            if empty:
                self._empty_flushes += 1

    def record_report(self, success: bool, lines: int):
        """Record the outcome of one report delivery attempt."""
        with self._lock:
            if success:
                self._reports_sent += 1
            else:
                self._report_failures += 1
            self._last_report_lines = lines

    @property
    def events_ingested(self) -> int:
        with self._lock:
            return self._events_ingested

    def snapshot(self) -> dict:
        """Return a point-in-time snapshot of all metrics."""
        with self._lock:
            elapsed = time.monotonic() - self._start_time
            events = self._events_ingested
            snap = {
                "packets_received": self._packets_received,
                "events_ingested": events,
                "invalid_lines": self._invalid_lines,
                "dropped_samples": self._dropped_samples,
                "apply_errors": self._apply_errors,
                "flushes": self._flushes,
                "empty_flushes": self._empty_flushes,
                "reports_sent": self._reports_sent,
                "report_failures": self._report_failures,
                "last_report_lines": self._last_report_lines,
            }

        snap["elapsed_seconds"] = round(elapsed, 2)
        snap["events_per_second"] = round(events / elapsed, 2) if elapsed > 0 else 0.0
        return snap
