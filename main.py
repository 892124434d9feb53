"""Entry point for the statsagg server."""

import argparse
import logging
import os
import signal
import sys
import threading

from statsagg.config import load_config, load_yaml_config
from statsagg.dashboard import create_dashboard_app, run_dashboard
from statsagg.server import StatsServer


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
        stream=sys.stderr,
    )

    parser = argparse.ArgumentParser(description="statsd-compatible metrics aggregation server")
    parser.add_argument("--config", default=os.environ.get("CONFIG_PATH"), help="YAML config file")
    args = parser.parse_args()

    config = load_config(load_yaml_config(args.config))
    shutdown_event = threading.Event()

    def signal_handler(signum, frame):
        logging.getLogger(__name__).info("Received signal %d, shutting down...", signum)
        shutdown_event.set()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    server = StatsServer(config, shutdown_event)

    if config.dashboard_enabled:
        app = create_dashboard_app(server.metrics, server.store)
        dash_thread = threading.Thread(target=run_dashboard, args=(app, config.dashboard_port), daemon=True)
        dash_thread.start()
        logging.getLogger(__name__).info("Dashboard running on port %d", config.dashboard_port)

    try:
        server.start()
    finally:
        server.stop()


if __name__ == "__main__":
    main()
