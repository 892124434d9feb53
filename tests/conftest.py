import socket
import threading
import time

import pytest


class GraphiteReceiver:
    """Loopback TCP listener that records every payload it is sent."""

    def __init__(self):
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._sock.bind(("127.0.0.1", 0))
        self._sock.listen(5)
        self._sock.settimeout(0.2)
        self.host, self.port = self._sock.getsockname()
        self._payloads: list[str] = []
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._accept_loop, daemon=True)
        self._thread.start()

    @property
    def payloads(self) -> list[str]:
        with self._lock:
            return list(self._payloads)

    def wait_for(self, count: int = 1, timeout: float = 5.0) -> bool:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if len(self.payloads) >= count:
                return True
            time.sleep(0.05)
        return len(self.payloads) >= count

    def close(self):
        self._stop.set()
        self._thread.join(timeout=2)
        self._sock.close()

    def _accept_loop(self):
        while not self._stop.is_set():
            try:
                conn, _ = self._sock.accept()
            except socket.timeout:
                continue
            except OSError:
                break
            with conn:
                conn.settimeout(2.0)
                chunks = []
                while True:
                    data = conn.recv(65536)
                    if not data:
                        break
                    chunks.append(data)
            with self._lock:
                self._payloads.append(b"".join(chunks).decode("utf-8"))


@pytest.fixture
def graphite():
    receiver = GraphiteReceiver()
    yield receiver
    receiver.close()


@pytest.fixture
def closed_port() -> int:
    """Return a loopback port with nothing listening on it."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port
