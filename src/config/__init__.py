"""Configuration module exports (env names and defaults only)."""

from .websocket import DEFAULT_LANGUAGE, WS_ENDPOINT_PATH
from .limits import DEFAULT_MAX_CONCURRENT_CONNECTIONS

__all__ = [
    "DEFAULT_LANGUAGE",
    "DEFAULT_MAX_CONCURRENT_CONNECTIONS",
    "WS_ENDPOINT_PATH",
]
