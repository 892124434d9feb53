"""Report builder — renders a Snapshot as Graphite plaintext lines."""

import logging

from statsagg.keys import sanitize_key
from statsagg.stats import compute_timer_stats
from statsagg.store import Snapshot

logger = logging.getLogger(__name__)

TIMER_FIELDS = ("mean", "upper", "upper_{pct}", "lower", "count")


def format_value(value) -> str:
    """Integers print bare, floats in their shortest round-tripping form."""
    if isinstance(value, float):
        return repr(value)
    return str(value)


def _line(path: str, value, ts: str) -> str:
    return f"{path} {format_value(value)} {ts}\n"


def build_counter_lines(snapshot: Snapshot, ts: str) -> list[str]:
    interval_sec = snapshot.flush_interval_ms / 1000
    lines = []
    for key, entry in snapshot.counters.items():
        name = sanitize_key(key)
        lines.append(_line(f"stats.{name}", entry.total / interval_sec, ts))
        lines.append(_line(f"stats_counts.{name}", entry.sample_count, ts))
    return lines


def build_timer_lines(snapshot: Snapshot, ts: str) -> list[str]:
    lines = []
    for key, durations in snapshot.timers.items():
        name = sanitize_key(key)
        try:
            stats = compute_timer_stats(durations)
        except ArithmeticError as exc:
            logger.warning("Skipping timer %r: %s", key, exc)
            continue
        values = (stats.mean, stats.upper, stats.upper_pct, stats.lower, stats.count)
        for template, value in zip(TIMER_FIELDS, values):
            suffix = template.format(pct=stats.pct_threshold)
            lines.append(_line(f"stats.timers.{name}.{suffix}", value, ts))
    return lines


def build_report(snapshot: Snapshot) -> str:
    """Build the full payload for one flush, or "" when there is nothing to report.

    ``statsd.numStats`` counts counter keys plus timer *lines*, five per
    timer key.
    """
    ts = str(snapshot.timestamp)
    counter_lines = build_counter_lines(snapshot, ts)
    timer_lines = build_timer_lines(snapshot, ts)

    num_stats = len(snapshot.counters) + len(timer_lines)
    if num_stats == 0:
        return ""

    return "".join(counter_lines + timer_lines) + _line("statsd.numStats", num_stats, ts)
