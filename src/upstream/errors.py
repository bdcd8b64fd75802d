"""Upstream adapter error types."""

from __future__ import annotations


class UpstreamConnectError(RuntimeError):
    """Raised by an upstream adapter when a stream configuration is rejected up front."""


__all__ = ["UpstreamConnectError"]
