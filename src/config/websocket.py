"""WebSocket protocol configuration and constants."""

from __future__ import annotations

WS_ENDPOINT_PATH = "/"

# Envelope keys
WS_KEY_TYPE = "type"
WS_KEY_MESSAGE = "message"
WS_KEY_DATA = "data"

# Client message types
WS_MSG_START = "start"
WS_MSG_AUDIO = "audio"
WS_MSG_STOP = "stop"

# Server message types
WS_MSG_STATUS = "status"
WS_MSG_TRANSCRIPT = "transcript"
WS_MSG_ERROR = "error"
WS_MSG_UTTERANCE_END = "utterance_end"
WS_MSG_SPEECH_STARTED = "speech_started"
WS_MSG_METADATA = "metadata"

# status.status values
WS_STATUS_CONNECTED = "connected"
WS_STATUS_CLOSED = "closed"
WS_STATUS_STOPPED = "stopped"

DEFAULT_LANGUAGE = "en-US"

# Close codes
WS_CLOSE_IDLE_CODE = 4000
WS_CLOSE_BUSY_CODE = 4002
WS_CLOSE_MAX_DURATION_CODE = 4003

WS_CLOSE_IDLE_REASON = "idle timeout"
WS_CLOSE_MAX_DURATION_REASON = "max connection duration reached"

ENV_WS_IDLE_TIMEOUT_S = "WS_IDLE_TIMEOUT_S"
ENV_WS_WATCHDOG_TICK_S = "WS_WATCHDOG_TICK_S"
ENV_WS_MAX_CONNECTION_DURATION_S = "WS_MAX_CONNECTION_DURATION_S"

DEFAULT_WS_IDLE_TIMEOUT_S = 150.0
DEFAULT_WS_WATCHDOG_TICK_S = 5.0
DEFAULT_WS_MAX_CONNECTION_DURATION_S = 0.0

# error.errorType values for errors raised by this server
WS_ERROR_INVALID_MESSAGE = "invalid_message"
WS_ERROR_INVALID_PAYLOAD = "invalid_payload"
WS_ERROR_RATE_LIMITED = "rate_limited"
WS_ERROR_SERVER_AT_CAPACITY = "server_at_capacity"
WS_ERROR_UPSTREAM_UNAVAILABLE = "upstream_unavailable"
WS_ERROR_INTERNAL = "internal_error"

__all__ = [
    "DEFAULT_LANGUAGE",
    "DEFAULT_WS_IDLE_TIMEOUT_S",
    "DEFAULT_WS_MAX_CONNECTION_DURATION_S",
    "DEFAULT_WS_WATCHDOG_TICK_S",
    "ENV_WS_IDLE_TIMEOUT_S",
    "ENV_WS_MAX_CONNECTION_DURATION_S",
    "ENV_WS_WATCHDOG_TICK_S",
    "WS_CLOSE_BUSY_CODE",
    "WS_CLOSE_IDLE_CODE",
    "WS_CLOSE_IDLE_REASON",
    "WS_CLOSE_MAX_DURATION_CODE",
    "WS_CLOSE_MAX_DURATION_REASON",
    "WS_ENDPOINT_PATH",
    "WS_ERROR_INTERNAL",
    "WS_ERROR_INVALID_MESSAGE",
    "WS_ERROR_INVALID_PAYLOAD",
    "WS_ERROR_RATE_LIMITED",
    "WS_ERROR_SERVER_AT_CAPACITY",
    "WS_ERROR_UPSTREAM_UNAVAILABLE",
    "WS_KEY_DATA",
    "WS_KEY_MESSAGE",
    "WS_KEY_TYPE",
    "WS_MSG_AUDIO",
    "WS_MSG_ERROR",
    "WS_MSG_METADATA",
    "WS_MSG_SPEECH_STARTED",
    "WS_MSG_START",
    "WS_MSG_STATUS",
    "WS_MSG_STOP",
    "WS_MSG_TRANSCRIPT",
    "WS_MSG_UTTERANCE_END",
    "WS_STATUS_CLOSED",
    "WS_STATUS_CONNECTED",
    "WS_STATUS_STOPPED",
]
