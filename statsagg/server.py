"""statsd UDP server — receives metric packets and feeds the aggregation engine."""

import logging
import socket
import threading

from statsagg.aggregator import Aggregator
from statsagg.config import Config
from statsagg.metrics import Metrics
from statsagg.protocol import COUNTER, Event, parse_packet
from statsagg.reporter import GraphiteReporter
from statsagg.scheduler import FlushScheduler
from statsagg.store import AggregationStore

logger = logging.getLogger(__name__)


class StatsServer:
    def __init__(self, config: Config, shutdown_event: threading.Event,
                 reporter: GraphiteReporter | None = None):
        self._config = config
        self._shutdown = shutdown_event
        self._sock = None
        self.server_address = None
        self.metrics = Metrics()
        self.store = AggregationStore()
        self.aggregator = Aggregator(self.store, config, self.metrics)
        self.reporter = reporter or GraphiteReporter(
            config.graphite_host, config.graphite_port, config.graphite_timeout_sec,
        )
        self.scheduler = FlushScheduler(
            self.store, self.reporter, config.flush_interval_ms, self.metrics,
        )

    def start(self):
        """Bind the UDP socket, start the flush scheduler, and run the receive loop."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        sock.settimeout(1.0)
        sock.bind((self._config.host, self._config.port))
        self._sock = sock
        self.scheduler.start()

        self.server_address = sock.getsockname()
        logger.info(
            "statsd server listening on %s:%d",
            self.server_address[0], self.server_address[1],
        )
        logger.info("Key prefix %r, postfix %r", self.aggregator.prefix, self.aggregator.postfix)

        while not self._shutdown.is_set():
            try:
                data, addr = sock.recvfrom(self._config.buffer_size)
            except socket.timeout:
                continue
            except OSError:
                if self._shutdown.is_set():
                    break
                raise

            self.metrics.record_packet()
            events, invalid = parse_packet(data)
            if invalid:
                self.metrics.record_invalid(invalid)
            for event in events:
                try:
                    self.apply(event)
                except Exception:
                    logger.exception("Failed to apply %r from %s", event, addr)
                    self.metrics.record_error()

    def apply(self, event: Event) -> bool:
        """Route one parsed event to the ingestion API."""
        if event.metric_type == COUNTER:
            return self.aggregator.increment(event.key, event.value, event.sample_rate)
        return self.aggregator.timing(event.key, event.value)

    def stop(self):
        """Stop receiving, flush the last interval, and close the store. Idempotent."""
        if self.store.closed:
            return
        self._shutdown.set()
        if self._sock:
            self._sock.close()
            self._sock = None
        self.scheduler.stop()
        self.store.close()
        logger.info("statsd server stopped. Stats: %s", self.metrics.snapshot())
