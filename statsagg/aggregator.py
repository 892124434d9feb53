"""Ingestion API — applies the configured key prefix/postfix and feeds the store."""

import logging

from statsagg.config import Config
from statsagg.keys import make_postfix, make_prefix
from statsagg.metrics import Metrics
from statsagg.store import AggregationStore

logger = logging.getLogger(__name__)


class Aggregator:
    def __init__(self, store: AggregationStore, config: Config, metrics: Metrics | None = None):
        self._store = store
        self._prefix = make_prefix(config)
        self._postfix = make_postfix(config)
        self._metrics = metrics or Metrics()

    def full_key(self, key) -> str:
        if isinstance(key, bytes):
            key = key.decode("utf-8", errors="replace")
        return f"{self._prefix}{key}{self._postfix}"

    def increment(self, key, delta: float = 1, sample_rate: float = 1.0) -> bool:
        accepted = self._store.increment(self.full_key(key), delta, sample_rate)
        self._record(accepted)
        return accepted

    def decrement(self, key, delta: float = 1, sample_rate: float = 1.0) -> bool:
        return self.increment(key, -delta, sample_rate)

    def timing(self, key, duration: float) -> bool:
        accepted = self._store.timing(self.full_key(key), duration)
        self._record(accepted)
        return accepted

    def _record(self, accepted: bool):
        if accepted:
            self._metrics.record_event()
        else:
            self._metrics.record_dropped()

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def postfix(self) -> str:
        return self._postfix
