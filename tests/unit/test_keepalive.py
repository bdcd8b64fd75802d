from __future__ import annotations

import asyncio

import pytest

from src.realtime import KeepAliveTimer


@pytest.mark.asyncio
async def test_timer_ticks_until_cancelled() -> None:
    ticks = 0

    async def tick() -> bool:
        nonlocal ticks
        ticks += 1
        return True

    timer = KeepAliveTimer(0.01, tick)
    timer.start()
    timer.start()
    await asyncio.sleep(0.06)
    assert timer.active is True
    assert ticks >= 2

    timer.cancel()
    await asyncio.sleep(0.02)
    seen = ticks
    await asyncio.sleep(0.04)
    assert ticks == seen
    assert timer.active is False


@pytest.mark.asyncio
async def test_timer_stops_when_tick_declines() -> None:
    ticks = 0

    async def tick() -> bool:
        nonlocal ticks
        ticks += 1
        return False

    timer = KeepAliveTimer(0.01, tick)
    timer.start()
    await asyncio.sleep(0.06)

    assert ticks == 1
    assert timer.active is False


@pytest.mark.asyncio
async def test_timer_survives_tick_failure_by_stopping() -> None:
    async def tick() -> bool:
        raise RuntimeError("socket gone")

    timer = KeepAliveTimer(0.01, tick)
    timer.start()
    await asyncio.sleep(0.04)

    assert timer.active is False


def test_cancel_before_start_is_noop() -> None:
    async def tick() -> bool:
        return True

    timer = KeepAliveTimer(1.0, tick)
    timer.cancel()
    assert timer.active is False
