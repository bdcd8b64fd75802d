"""Session lifecycle states."""

from __future__ import annotations

from enum import Enum


class SessionState(str, Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    STREAMING = "streaming"
    STOPPING = "stopping"
    CLOSED = "closed"


__all__ = ["SessionState"]
