"""Graphite transport — one short-lived TCP connection per report."""

import logging
import socket

logger = logging.getLogger(__name__)


class GraphiteReporter:
    """Delivers a payload with open/write/close. No retries, no queuing."""

    def __init__(self, host: str | None, port: int = 2003, timeout: float = 5.0):
        self._host = host
        self._port = port
        self._timeout = timeout

    @property
    def enabled(self) -> bool:
        return self._host is not None

    @property
    def destination(self) -> str:
        return f"{self._host}:{self._port}" if self.enabled else "<disabled>"

    def send(self, payload: str) -> bool:
        """Send a payload. Returns True on success or when reporting is disabled."""
        if not self.enabled:
            logger.debug("No graphite destination configured, skipping report")
            return True

        try:
            with socket.create_connection((self._host, self._port), timeout=self._timeout) as sock:
                sock.sendall(payload.encode("utf-8"))
        except OSError as e:
            logger.error("Failed to send report to %s: %s", self.destination, e)
            return False

        logger.debug("Sent %d bytes to %s", len(payload), self.destination)
        return True
