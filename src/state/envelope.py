"""Client envelope shapes after validation (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class StartMessage:
    api_key: str = field(repr=False)
    language: str


@dataclass(frozen=True, slots=True)
class AudioMessage:
    # Transport encoding (base64); decoded by the session only when it can forward.
    audio: str


@dataclass(frozen=True, slots=True)
class StopMessage:
    pass


ClientMessage = StartMessage | AudioMessage | StopMessage

__all__ = ["AudioMessage", "ClientMessage", "StartMessage", "StopMessage"]
