"""Configuration module — frozen dataclass loaded from YAML and environment variables."""

import logging
import os
import socket
from dataclasses import dataclass, field, fields

import yaml

logger = logging.getLogger(__name__)


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


def _default_node_name() -> str:
    return f"statsagg@{socket.gethostname()}"


@dataclass(frozen=True)
class Config:
    host: str = "0.0.0.0"
    port: int = 8125
    buffer_size: int = 65536
    flush_interval_ms: int = 10000
    graphite_host: str | None = None
    graphite_port: int = 2003
    graphite_timeout_sec: float = 5.0
    key_env: str = ""
    key_app: str = ""
    key_team: str = ""
    append_node: bool = False
    node_name: str = field(default_factory=_default_node_name)
    dashboard_enabled: bool = True
    dashboard_port: int = 8080


# env var -> (field, converter)
_ENV_VARS = {
    "STATSD_HOST": ("host", str),
    "STATSD_PORT": ("port", int),
    "BUFFER_SIZE": ("buffer_size", int),
    "FLUSH_INTERVAL_MS": ("flush_interval_ms", int),
    "GRAPHITE_HOST": ("graphite_host", str),
    "GRAPHITE_PORT": ("graphite_port", int),
    "GRAPHITE_TIMEOUT_SEC": ("graphite_timeout_sec", float),
    "KEY_ENV": ("key_env", str),
    "KEY_APP": ("key_app", str),
    "KEY_TEAM": ("key_team", str),
    "APPEND_NODE": ("append_node", _parse_bool),
    "NODE_NAME": ("node_name", str),
    "DASHBOARD_ENABLED": ("dashboard_enabled", _parse_bool),
    "DASHBOARD_PORT": ("dashboard_port", int),
}


def load_yaml_config(path: str | None) -> dict:
    """Load settings from a YAML file. Returns empty dict if no path."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        logger.info("Loaded YAML config from %s", path)
        return data
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}


def load_config(yaml_data: dict | None = None) -> Config:
    """Build Config from defaults <- YAML data <- env vars (highest priority)."""
    known = {f.name for f in fields(Config)}
    converters = {name: conv for name, conv in _ENV_VARS.values()}
    kwargs: dict = {}

    for key, value in (yaml_data or {}).items():
        if key not in known:
            logger.warning("Ignoring unknown config key %r", key)
            continue
        kwargs[key] = converters[key](value) if value is not None else None

    for env_name, (name, conv) in _ENV_VARS.items():
        raw = os.environ.get(env_name)
        if raw is not None:
            kwargs[name] = conv(raw)

    # An empty destination host disables reporting.
    if not kwargs.get("graphite_host"):
        kwargs["graphite_host"] = None

    config = Config(**kwargs)
    _validate(config)
    return config


def _validate(config: Config):
    if config.flush_interval_ms <= 0:
        raise ValueError(f"flush_interval_ms must be positive, got {config.flush_interval_ms}")
    if config.graphite_timeout_sec <= 0:
        raise ValueError(f"graphite_timeout_sec must be positive, got {config.graphite_timeout_sec}")
    for name in ("port", "graphite_port", "dashboard_port"):
        value = getattr(config, name)
        if not 0 <= value <= 65535:
            raise ValueError(f"{name} out of range: {value}")
