"""Deepgram live-listen adapter: validates a stream config and opens a handle."""

from __future__ import annotations

from src.state import StreamConfig

from .handle import EventSink
from .errors import UpstreamConnectError
from .deepgram_messages import build_query
from .deepgram_stream import DeepgramStreamHandle


def _validate(config: StreamConfig) -> None:
    if not config.api_key.strip():
        raise UpstreamConnectError("API key is required")
    if not config.model.strip():
        raise UpstreamConnectError("model is required")
    if not config.language.strip():
        raise UpstreamConnectError("language is required")
    if config.sample_rate <= 0:
        raise UpstreamConnectError(f"invalid sample rate: {config.sample_rate}")
    if config.channels <= 0:
        raise UpstreamConnectError(f"invalid channel count: {config.channels}")


class DeepgramAdapter:
    def __init__(self, *, url: str, open_timeout_s: float, finish_grace_s: float) -> None:
        self._url = url
        self._open_timeout_s = open_timeout_s
        self._finish_grace_s = finish_grace_s

    def open(self, config: StreamConfig, on_event: EventSink) -> DeepgramStreamHandle:
        _validate(config)
        handle = DeepgramStreamHandle(
            url=f"{self._url}?{build_query(config)}",
            api_key=config.api_key,
            on_event=on_event,
            open_timeout_s=self._open_timeout_s,
            finish_grace_s=self._finish_grace_s,
        )
        handle.start()
        return handle


__all__ = ["DeepgramAdapter"]
