"""Provider-independent entry point for streaming speech-to-text upstreams."""

from __future__ import annotations

from typing import Protocol

from src.state import StreamConfig

from .handle import EventSink, UpstreamHandle


class UpstreamAdapter(Protocol):
    def open(self, config: StreamConfig, on_event: EventSink) -> UpstreamHandle:
        """Start a streaming session. Raises UpstreamConnectError if ``config`` is rejected."""
        ...


__all__ = ["UpstreamAdapter"]
