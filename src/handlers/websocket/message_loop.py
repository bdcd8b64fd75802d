"""WebSocket receive loop: frames in, session dispatch."""

from __future__ import annotations

import asyncio
import logging

from fastapi import WebSocket, WebSocketDisconnect

from src.realtime import Session
from src.errors import ClientProtocolError

from .limits import InboundRateLimiter
from .parser import parse_client_message
from .lifecycle import WebSocketLifecycle

logger = logging.getLogger(__name__)


def _frame_text(message: dict) -> str | None:
    if message.get("type") == "websocket.disconnect":
        raise WebSocketDisconnect(code=message.get("code", 1000), reason=message.get("reason"))
    text = message.get("text")
    if text is not None:
        return text
    data = message.get("bytes")
    if data is not None:
        return data.decode("utf-8", errors="replace")
    return None


async def _recv_with_watchdog(ws: WebSocket, lifecycle: WebSocketLifecycle) -> tuple[str | None, bool]:
    try:
        message = await asyncio.wait_for(ws.receive(), timeout=lifecycle.tick_s * 2)
    except TimeoutError:
        return None, lifecycle.should_close()
    return _frame_text(message), False


async def run_message_loop(
    ws: WebSocket,
    session: Session,
    lifecycle: WebSocketLifecycle,
    message_limiter: InboundRateLimiter,
) -> None:
    try:
        while True:
            raw, should_exit = await _recv_with_watchdog(ws, lifecycle)
            if should_exit:
                return
            if raw is None:
                continue

            lifecycle.touch()

            if not await message_limiter.admit(ws):
                continue

            try:
                message = parse_client_message(raw)
            except ClientProtocolError as exc:
                await session.report_protocol_error(exc)
                continue

            await session.handle(message)
    except WebSocketDisconnect as exc:
        logger.info("session=%s client disconnected (code: %s)", session.id, exc.code)
    except RuntimeError:
        # Starlette raises RuntimeError when receiving on a socket that already closed.
        logger.debug("session=%s receive after close", session.id, exc_info=True)


__all__ = ["run_message_loop"]
