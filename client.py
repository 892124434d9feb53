"""CLI entry point for the statsd client."""

import argparse
import logging
import sys

from statsagg.client import StatsClient

logger = logging.getLogger(__name__)


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
        stream=sys.stderr,
    )

    parser = argparse.ArgumentParser(description="statsd client")
    parser.add_argument("--server", default="localhost", help="Server host")
    parser.add_argument("--port", type=int, default=8125, help="Server port")
    parser.add_argument("--count", type=int, default=20, help="Number of metrics to send")
    parser.add_argument("--interval", type=float, default=0.1, help="Seconds between metrics")
    parser.add_argument("--increment", metavar="KEY", help="Send one counter increment and exit")
    parser.add_argument("--timing", nargs=2, metavar=("KEY", "MS"), help="Send one timing and exit")
    parser.add_argument("--sample-rate", type=float, default=1.0, help="Sample rate for --increment")
    args = parser.parse_args()

    client = StatsClient(args.server, args.port)
    try:
        if args.increment:
            client.increment(args.increment, 1, args.sample_rate)
        elif args.timing:
            key, duration = args.timing
            client.timing(key, duration)
        else:
            client.generate_sample_metrics(args.count, args.interval)
    finally:
        client.close()


if __name__ == "__main__":
    main()
