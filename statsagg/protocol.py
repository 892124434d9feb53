"""statsd line protocol — ``<key>:<value>|<type>[|@<rate>]``, newline separated."""

import logging
import math
from dataclasses import dataclass

logger = logging.getLogger(__name__)

COUNTER = "c"
TIMER = "ms"
METRIC_TYPES = (COUNTER, TIMER)


@dataclass(frozen=True)
class Event:
    key: str
    value: float
    metric_type: str
    sample_rate: float = 1.0


def _parse_number(text: str):
    """Parse a finite value; integral text stays int unless a float can't hold it."""
    try:
        value = int(text)
    except ValueError:
        value = float(text)
    try:
        finite = math.isfinite(float(value))
    except OverflowError:
        finite = False
    if not finite:
        raise ValueError(f"value out of range: {text[:32]!r}")
    return value


def parse_sample(key: str, sample: str) -> Event:
    """Parse one ``<value>|<type>[|@<rate>]`` fragment for *key*."""
    fields = sample.split("|")
    if len(fields) not in (2, 3):
        raise ValueError(f"expected value|type[|@rate], got {sample!r}")

    value_text, metric_type = fields[0].strip(), fields[1].strip()
    if metric_type not in METRIC_TYPES:
        raise ValueError(f"unsupported metric type {metric_type!r}")
    value = _parse_number(value_text)

    sample_rate = 1.0
    if len(fields) == 3:
        rate_text = fields[2].strip()
        if not rate_text.startswith("@"):
            raise ValueError(f"bad sample rate field {rate_text!r}")
        sample_rate = float(rate_text[1:])

    return Event(key=key, value=value, metric_type=metric_type, sample_rate=sample_rate)


def parse_line(line: str) -> list[Event]:
    """Parse one line; a key may carry several samples, as in ``a:1|c:2|c``."""
    key, sep, rest = line.partition(":")
    if not sep or not key:
        raise ValueError(f"missing key or value in {line!r}")
    return [parse_sample(key, sample) for sample in rest.split(":")]


def parse_packet(data: bytes) -> tuple[list[Event], int]:
    """Parse a datagram into events. Returns (events, invalid_line_count).

    Bad lines, including ones that are not valid UTF-8, are skipped so one
    malformed metric never costs the rest of the packet.
    """
    events: list[Event] = []
    invalid = 0
    for raw in data.splitlines():
        raw = raw.strip()
        if not raw:
            continue
        try:
            events.extend(parse_line(raw.decode("utf-8")))
        except ValueError as exc:
            # UnicodeDecodeError is a ValueError too.
            logger.warning("Invalid metric line %r: %s", raw[:200], exc)
            invalid += 1
    return events, invalid


def format_counter(key: str, delta=1, sample_rate: float = 1.0) -> str:
    if sample_rate < 1:
        return f"{key}:{delta}|c|@{sample_rate}"
    return f"{key}:{delta}|c"


def format_timing(key: str, duration) -> str:
    return f"{key}:{duration}|ms"
