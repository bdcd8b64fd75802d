"""Shared error types for the Deepgram relay server."""

from __future__ import annotations

from dataclasses import dataclass

from src.config.websocket import WS_ERROR_INVALID_MESSAGE


@dataclass(frozen=True, slots=True)
class RateLimitError(Exception):
    """Raised when a sliding-window rate limiter is saturated."""

    retry_in: float
    limit: int
    window_seconds: float


class ClientProtocolError(ValueError):
    """Raised when an inbound client frame cannot be turned into a known envelope."""

    def __init__(self, message: str, *, error_type: str = WS_ERROR_INVALID_MESSAGE) -> None:
        super().__init__(message)
        self.error_type = error_type


__all__ = ["ClientProtocolError", "RateLimitError"]
