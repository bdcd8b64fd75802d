"""Inbound message rate limiting for one WebSocket connection."""

from __future__ import annotations

import math
import time
import collections
from collections.abc import Callable

from fastapi import WebSocket

from src.errors import RateLimitError
from src.config.websocket import WS_ERROR_RATE_LIMITED

from .errors import send_error

TimeFn = Callable[[], float]


class InboundRateLimiter:
    """Cap inbound frames over a rolling window; disabled if limit or window is <= 0.

    Only admitted frames count toward the window, so a client that keeps
    sending while saturated does not extend its own penalty.
    """

    def __init__(self, *, limit: int, window_seconds: float, now_fn: TimeFn | None = None) -> None:
        self.limit = max(0, int(limit))
        self.window_seconds = max(0.0, float(window_seconds))
        self._now = now_fn or time.monotonic
        self._admitted: collections.deque[float] = collections.deque(maxlen=self.limit or None)

    @property
    def enabled(self) -> bool:
        return self.limit > 0 and self.window_seconds > 0

    def retry_after(self, now: float) -> float:
        """Seconds until another frame fits in the window (0.0 when one fits now)."""
        if len(self._admitted) < self.limit:
            return 0.0
        return max(0.0, self._admitted[0] + self.window_seconds - now)

    def check(self) -> None:
        if not self.enabled:
            return
        now = self._now()
        wait = self.retry_after(now)
        if wait > 0:
            raise RateLimitError(retry_in=wait, limit=self.limit, window_seconds=self.window_seconds)
        # A full deque drops its oldest entry, which has already left the window.
        self._admitted.append(now)

    async def admit(self, ws: WebSocket) -> bool:
        """Count one frame; on saturation tell the client and return False."""
        try:
            self.check()
        except RateLimitError as exc:
            retry_in_s = max(1, math.ceil(exc.retry_in))
            await send_error(
                ws,
                f"message rate limit: at most {exc.limit} per {int(exc.window_seconds)} seconds; "
                f"retry in {retry_in_s} seconds",
                error_type=WS_ERROR_RATE_LIMITED,
            )
            return False
        return True


__all__ = ["InboundRateLimiter"]
