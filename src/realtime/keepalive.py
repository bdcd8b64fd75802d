"""Recurring keep-alive trigger for an upstream stream."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Awaitable

logger = logging.getLogger(__name__)

TickFn = Callable[[], Awaitable[bool]]


class KeepAliveTimer:
    """Call ``tick`` every ``interval_s`` until it returns False or the timer is cancelled."""

    def __init__(self, interval_s: float, tick: TickFn) -> None:
        self._interval_s = max(0.01, float(interval_s))
        self._tick = tick
        self._task: asyncio.Task | None = None

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._loop())

    def cancel(self) -> None:
        # Does not wait for the loop to exit.
        if self._task is not None:
            self._task.cancel()

    async def _loop(self) -> None:
        try:
            while True:
                await asyncio.sleep(self._interval_s)
                if not await self._tick():
                    return
        except asyncio.CancelledError:
            return
        except Exception:
            logger.debug("keep-alive loop exiting due to unexpected error", exc_info=True)


__all__ = ["KeepAliveTimer"]
