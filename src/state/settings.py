"""Runtime settings (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class LimitsSettings:
    max_concurrent_connections: int
    ws_message_window_seconds: float
    ws_max_messages_per_window: int


@dataclass(frozen=True, slots=True)
class WebSocketSettings:
    idle_timeout_s: float
    watchdog_tick_s: float
    max_connection_duration_s: float


@dataclass(frozen=True, slots=True)
class DeepgramSettings:
    url: str
    model: str
    model_version: str
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
    keepalive_interval_s: float
    open_timeout_s: float
    finish_grace_s: float


@dataclass(frozen=True, slots=True)
class ServiceSettings:
    name: str
    version: str


@dataclass(frozen=True, slots=True)
class AppSettings:
    limits: LimitsSettings
    websocket: WebSocketSettings
    deepgram: DeepgramSettings
    service: ServiceSettings


__all__ = [
    "AppSettings",
    "DeepgramSettings",
    "LimitsSettings",
    "ServiceSettings",
    "WebSocketSettings",
]
