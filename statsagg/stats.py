"""Timer statistics — count, bounds, and mean/upper value within a percentile band."""

import math
from dataclasses import dataclass
from typing import Iterable

PCT_THRESHOLD = 90


@dataclass(frozen=True)
class TimerStats:
    count: int
    lower: float
    upper: float
    mean: float
    upper_pct: float
    pct_threshold: int = PCT_THRESHOLD


def _round_half_up(x: float) -> int:
    # round() in Python rounds half to even; 0.5 must go to 1 here.
    return math.floor(x + 0.5)


def compute_timer_stats(durations: Iterable[float], pct_threshold: int = PCT_THRESHOLD) -> TimerStats:
    """Summarize one key's durations for the current interval.

    The top ``100 - pct_threshold`` percent of samples (rounded half up) are
    excluded from the mean, and ``upper_pct`` is the largest sample still
    inside the band.
    """
    values = sorted(durations)
    count = len(values)
    if count == 0:
        raise ValueError("cannot compute timer stats for an empty sample list")

    threshold_index = _round_half_up(((100 - pct_threshold) / 100) * count)
    num_in_threshold = count - threshold_index
    within = values[:num_in_threshold]

    return TimerStats(
        count=count,
        lower=values[0],
        upper=values[-1],
        mean=sum(within) / num_in_threshold,
        upper_pct=values[num_in_threshold - 1],
        pct_threshold=pct_threshold,
    )
