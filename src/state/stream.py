"""Upstream stream configuration and connection readiness."""

from __future__ import annotations

from enum import Enum
from dataclasses import field, dataclass


class ReadyState(str, Enum):
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSING = "closing"
    CLOSED = "closed"


@dataclass(frozen=True, slots=True)
class StreamConfig:
    """Immutable per-``start`` configuration of one upstream streaming session."""

    api_key: str = field(repr=False)
    model: str
    model_version: str
    language: str
    encoding: str
    sample_rate: int
    channels: int
    interim_results: bool
    smart_format: bool
    punctuate: bool
    endpointing_ms: int
    utterance_end_ms: int
    vad_events: bool
    filler_words: bool
    profanity_filter: bool
    paragraphs: bool
    utterances: bool


__all__ = ["ReadyState", "StreamConfig"]
