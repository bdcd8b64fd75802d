"""Send helpers for the WebSocket JSON envelope."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import WebSocket, WebSocketDisconnect

from src.realtime.envelope import dumps, build_error

logger = logging.getLogger(__name__)


async def safe_send_text(ws: WebSocket, text: str) -> bool:
    try:
        await ws.send_text(text)
    except WebSocketDisconnect:
        return False
    except Exception:
        logger.debug("WebSocket send failed", exc_info=True)
        return False
    return True


async def safe_send_envelope(ws: WebSocket, envelope: dict[str, Any]) -> bool:
    return await safe_send_text(ws, dumps(envelope))


async def send_error(
    ws: WebSocket,
    message: str,
    *,
    error_type: str | None = None,
    code: int | None = None,
) -> bool:
    return await safe_send_envelope(ws, build_error(message, code=code, error_type=error_type))


async def reject_connection(
    ws: WebSocket,
    *,
    error_type: str,
    message: str,
    close_code: int,
) -> None:
    # Accept so we can send a structured error, then close.
    try:
        await ws.accept()
    except Exception:
        return
    await send_error(ws, message, error_type=error_type)
    try:
        await ws.close(code=close_code, reason=message)
    except Exception:
        return


__all__ = [
    "reject_connection",
    "safe_send_envelope",
    "safe_send_text",
    "send_error",
]
