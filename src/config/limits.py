"""Admission control and rate limit configuration."""

from __future__ import annotations

ENV_MAX_CONCURRENT_CONNECTIONS = "MAX_CONCURRENT_CONNECTIONS"
ENV_WS_MESSAGE_WINDOW_SECONDS = "WS_MESSAGE_WINDOW_SECONDS"
ENV_WS_MAX_MESSAGES_PER_WINDOW = "WS_MAX_MESSAGES_PER_WINDOW"

DEFAULT_MAX_CONCURRENT_CONNECTIONS = 100
DEFAULT_WS_MESSAGE_WINDOW_SECONDS = 60.0
# Audio is message-heavy. 20ms chunks are ~3000 messages/minute; leave headroom.
DEFAULT_WS_MAX_MESSAGES_PER_WINDOW = 5000

__all__ = [
    "DEFAULT_MAX_CONCURRENT_CONNECTIONS",
    "DEFAULT_WS_MAX_MESSAGES_PER_WINDOW",
    "DEFAULT_WS_MESSAGE_WINDOW_SECONDS",
    "ENV_MAX_CONCURRENT_CONNECTIONS",
    "ENV_WS_MAX_MESSAGES_PER_WINDOW",
    "ENV_WS_MESSAGE_WINDOW_SECONDS",
]
