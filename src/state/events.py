"""Events reported by an upstream stream."""

from __future__ import annotations

from enum import Enum
from typing import Any
from dataclasses import field, dataclass


class UpstreamEventKind(str, Enum):
    OPENED = "opened"
    TRANSCRIPT = "transcript"
    UTTERANCE_END = "utterance_end"
    SPEECH_STARTED = "speech_started"
    METADATA = "metadata"
    ERROR = "error"
    CLOSED = "closed"


@dataclass(frozen=True, slots=True)
class UpstreamError:
    message: str | None = None
    status_code: int | None = None
    error_type: str | None = None
    request_id: str | None = None


@dataclass(frozen=True, slots=True)
class UpstreamEvent:
    kind: UpstreamEventKind
    payload: dict[str, Any] = field(default_factory=dict)
    error: UpstreamError | None = None
    close_code: int | None = None


__all__ = ["UpstreamError", "UpstreamEvent", "UpstreamEventKind"]
