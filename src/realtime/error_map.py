"""Upstream error taxonomy: provider codes to client-facing messages."""

from __future__ import annotations

from typing import Any

from src.state import UpstreamError

from .envelope import build_error

MSG_INVALID_API_KEY = "Invalid API key - Please check your Deepgram API key"
MSG_RATE_LIMITED = "Rate limit exceeded - Too many requests"
MSG_NO_AUDIO_TIMEOUT = "Connection timeout - No audio received for 10 seconds"
MSG_GENERIC = "Deepgram error occurred"

_UNAUTHORIZED_TYPES = {"INVALID_AUTH", "INSUFFICIENT_PERMISSIONS"}
_RATE_LIMITED_TYPES = {"TOO_MANY_REQUESTS"}
_NO_AUDIO_TIMEOUT_TYPE = "NET-0001"


def map_error_message(error: UpstreamError) -> str:
    if error.status_code == 401 or error.error_type in _UNAUTHORIZED_TYPES:
        return MSG_INVALID_API_KEY
    if error.status_code == 429 or error.error_type in _RATE_LIMITED_TYPES:
        return MSG_RATE_LIMITED
    if error.error_type == _NO_AUDIO_TIMEOUT_TYPE:
        return MSG_NO_AUDIO_TIMEOUT
    if error.message:
        return error.message
    return MSG_GENERIC


def build_upstream_error(error: UpstreamError) -> dict[str, Any]:
    return build_error(map_error_message(error), code=error.status_code, error_type=error.error_type)


__all__ = [
    "MSG_GENERIC",
    "MSG_INVALID_API_KEY",
    "MSG_NO_AUDIO_TIMEOUT",
    "MSG_RATE_LIMITED",
    "build_upstream_error",
    "map_error_message",
]
