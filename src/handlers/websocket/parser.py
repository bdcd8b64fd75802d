"""Client message parsing/validation for the relay envelope."""

from __future__ import annotations

import json
from typing import Any
from collections.abc import Callable

from src.errors import ClientProtocolError
from src.state import AudioMessage, StopMessage, StartMessage, ClientMessage
from src.config.websocket import (
    WS_KEY_TYPE,
    WS_MSG_STOP,
    WS_MSG_AUDIO,
    WS_MSG_START,
    DEFAULT_LANGUAGE,
)


def _optional_str(msg: dict[str, Any], key: str) -> str | None:
    value = msg.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ClientProtocolError(f"'{key}' must be a string")
    return value.strip()


def _parse_start(msg: dict[str, Any]) -> StartMessage:
    # A missing key is not a protocol error; the session answers it with "API Key required".
    api_key = _optional_str(msg, "apiKey") or ""
    language = _optional_str(msg, "language") or DEFAULT_LANGUAGE
    return StartMessage(api_key=api_key, language=language)


def _parse_audio(msg: dict[str, Any]) -> AudioMessage:
    audio = msg.get("audio")
    if not isinstance(audio, str):
        raise ClientProtocolError("'audio' (base64 string) is required")
    return AudioMessage(audio=audio)


def _parse_stop(_msg: dict[str, Any]) -> StopMessage:
    return StopMessage()


_PARSERS: dict[str, Callable[[dict[str, Any]], ClientMessage]] = {
    WS_MSG_START: _parse_start,
    WS_MSG_AUDIO: _parse_audio,
    WS_MSG_STOP: _parse_stop,
}


def parse_client_message(raw: str) -> ClientMessage:
    try:
        msg = json.loads(raw)
    except Exception as exc:
        raise ClientProtocolError(f"invalid JSON: {exc}") from exc

    if not isinstance(msg, dict):
        raise ClientProtocolError("message must be a JSON object")

    msg_type = msg.get(WS_KEY_TYPE)
    if not isinstance(msg_type, str) or not msg_type.strip():
        raise ClientProtocolError("message missing non-empty 'type'")

    parser = _PARSERS.get(msg_type.strip())
    if parser is None:
        raise ClientProtocolError(f"Unknown message type: {msg_type.strip()}")
    return parser(msg)


__all__ = ["parse_client_message"]
