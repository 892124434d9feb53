"""Metric key handling — graphite-safe sanitizing and configured prefix/postfix."""

import re

from statsagg.config import Config

_WHITESPACE = re.compile(r"\s+", re.ASCII)
_SLASH = re.compile(r"/")
_UNSAFE = re.compile(r"[^a-zA-Z_\-0-9\.]")


def sanitize_key(key) -> str:
    """Turn an arbitrary producer key into a graphite path component.

    Whitespace runs become ``_`` and slashes become ``-`` before anything
    outside ``[A-Za-z0-9_.-]`` is stripped, so substituted characters survive.
    """
    if isinstance(key, bytes):
        key = key.decode("utf-8", errors="replace")
    s = _WHITESPACE.sub("_", str(key))
    s = _SLASH.sub("-", s)
    return _UNSAFE.sub("", s)


def _append_dot(segment: str) -> str:
    return f"{segment}." if segment else ""


def _prepend_dot(segment: str) -> str:
    return f".{segment}" if segment else ""


def node_key(node_name: str) -> str:
    """``name@host.domain`` -> ``name.host``."""
    name, _, host = node_name.partition("@")
    short_host, _, _ = host.partition(".")
    return f"{name}.{short_host}"


def make_prefix(config: Config) -> str:
    return "".join(_append_dot(s) for s in (config.key_env, config.key_app, config.key_team))


def make_postfix(config: Config) -> str:
    if not config.append_node:
        return ""
    return _prepend_dot(node_key(config.node_name))
