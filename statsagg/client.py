"""statsd UDP client — sends counter and timing packets to a statsagg server."""

import logging
import random
import socket
import time

from statsagg.protocol import format_counter, format_timing

logger = logging.getLogger(__name__)

SAMPLE_KEYS = [
    "api.requests",
    "api.errors",
    "db.queries",
    "cache.hits",
    "cache.misses",
]
SAMPLE_TIMERS = [
    "api.latency",
    "db.query_time",
    "render.time",
]


class StatsClient:
    def __init__(self, server_host: str, server_port: int):
        self._server_host = server_host
        self._server_port = server_port
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)

    def increment(self, key: str, delta=1, sample_rate: float = 1.0):
        """Send a counter delta. With sample_rate < 1 only that fraction is sent."""
        if sample_rate < 1 and random.random() > sample_rate:
            return
        self._send(format_counter(key, delta, sample_rate))

    def decrement(self, key: str, delta=1, sample_rate: float = 1.0):
        self.increment(key, -delta, sample_rate)

    def timing(self, key: str, duration):
        self._send(format_timing(key, duration))

    def send_raw(self, data: bytes):
        self._sock.sendto(data, (self._server_host, self._server_port))

    def generate_sample_metrics(self, count: int, interval: float = 0.1):
        """Send N random counter/timer packets."""
        for i in range(count):
            if random.random() < 0.5:
                self.increment(random.choice(SAMPLE_KEYS))
            else:
                self.timing(random.choice(SAMPLE_TIMERS), random.randint(1, 500))
            if interval > 0 and i < count - 1:
                time.sleep(interval)
        logger.info("Sent %d sample metrics", count)

    def close(self):
        self._sock.close()

    def _send(self, line: str):
        self.send_raw(line.encode("utf-8"))
        logger.debug("Sent %s", line)
