"""Handle to one live upstream streaming session.

A handle's lifecycle is reported through ``ReadyState`` and through a single
ordered stream of ``UpstreamEvent`` values delivered to the ``on_event`` sink
given to ``UpstreamAdapter.open()``. Events from one handle are delivered one at
a time; the sink is awaited before the next event is read.

Handle methods never raise for lifecycle reasons:

- ``send()`` and ``keepalive()`` are no-ops unless the handle is ``OPEN``.
- ``send()`` ignores zero-length payloads.
- ``finish()`` is idempotent and returns without waiting for the provider to
  confirm the close.
"""

from __future__ import annotations

from typing import Protocol
from collections.abc import Callable, Awaitable

from src.state import ReadyState, UpstreamEvent


class UpstreamHandle(Protocol):
    def ready_state(self) -> ReadyState: ...

    async def send(self, audio: bytes) -> None: ...

    async def keepalive(self) -> None: ...

    async def finish(self) -> None: ...


EventSink = Callable[[UpstreamHandle, UpstreamEvent], Awaitable[None]]

__all__ = ["EventSink", "UpstreamHandle"]
