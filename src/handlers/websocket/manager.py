"""Primary WebSocket connection handler orchestration."""

from __future__ import annotations

import logging
import contextlib
from functools import partial

from fastapi import WebSocket

from src.realtime import Session
from src.state import RuntimeDeps
from src.config.websocket import WS_CLOSE_BUSY_CODE, WS_ERROR_SERVER_AT_CAPACITY

from .limits import InboundRateLimiter
from .lifecycle import WebSocketLifecycle
from .message_loop import run_message_loop
from .errors import reject_connection, safe_send_envelope

logger = logging.getLogger(__name__)


def _create_rate_limiter(runtime_deps: RuntimeDeps) -> InboundRateLimiter:
    return InboundRateLimiter(
        limit=runtime_deps.settings.limits.ws_max_messages_per_window,
        window_seconds=runtime_deps.settings.limits.ws_message_window_seconds,
    )


async def _admit(ws: WebSocket, runtime_deps: RuntimeDeps) -> int | None:
    session_id = await runtime_deps.connections.connect()
    if session_id is None:
        await reject_connection(
            ws,
            error_type=WS_ERROR_SERVER_AT_CAPACITY,
            message="Server cannot accept new connections. Please try again later.",
            close_code=WS_CLOSE_BUSY_CODE,
        )
        return None

    try:
        await ws.accept()
    except Exception:
        with contextlib.suppress(Exception):
            await runtime_deps.connections.disconnect(session_id)
        raise
    return session_id


async def handle_websocket_connection(ws: WebSocket, runtime_deps: RuntimeDeps) -> None:
    session_id = await _admit(ws, runtime_deps)
    if session_id is None:
        return

    session = Session(
        session_id,
        send=partial(safe_send_envelope, ws),
        upstream=runtime_deps.upstream,
        settings=runtime_deps.settings.deepgram,
    )
    lifecycle: WebSocketLifecycle | None = None
    try:
        await runtime_deps.connections.register(session)
        logger.info(
            "session=%s connected. Active: %s",
            session_id,
            runtime_deps.connections.get_connection_count(),
        )

        ws_settings = runtime_deps.settings.websocket
        lifecycle = WebSocketLifecycle(
            ws,
            idle_timeout_s=ws_settings.idle_timeout_s,
            watchdog_tick_s=ws_settings.watchdog_tick_s,
            max_connection_duration_s=ws_settings.max_connection_duration_s,
            is_busy_fn=session.is_streaming,
        )
        lifecycle.start()

        await run_message_loop(ws, session, lifecycle, _create_rate_limiter(runtime_deps))
    finally:
        if lifecycle is not None:
            with contextlib.suppress(Exception):
                await lifecycle.stop()

        with contextlib.suppress(Exception):
            await session.close()
        with contextlib.suppress(Exception):
            await runtime_deps.connections.disconnect(session_id)
        logger.info(
            "session=%s disconnected. Active: %s",
            session_id,
            runtime_deps.connections.get_connection_count(),
        )


__all__ = ["handle_websocket_connection"]
