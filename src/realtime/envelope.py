"""Server-to-client envelope builders.

Each builder returns exactly the fields its message type declares; provider
payloads are never passed through as-is.
"""

from __future__ import annotations

import time
from typing import Any

import orjson

from src.config.websocket import (
    WS_KEY_DATA,
    WS_KEY_TYPE,
    WS_MSG_ERROR,
    WS_KEY_MESSAGE,
    WS_MSG_STATUS,
    WS_MSG_METADATA,
    WS_MSG_TRANSCRIPT,
    WS_MSG_UTTERANCE_END,
    WS_MSG_SPEECH_STARTED,
)


def now_ms() -> int:
    return int(time.time() * 1000)


def dumps(envelope: dict[str, Any]) -> str:
    return orjson.dumps(envelope).decode("utf-8")


def build_status(status: str, message: str) -> dict[str, Any]:
    return {WS_KEY_TYPE: WS_MSG_STATUS, WS_KEY_MESSAGE: message, "status": status}


def build_error(message: str, *, code: int | None = None, error_type: str | None = None) -> dict[str, Any]:
    envelope: dict[str, Any] = {WS_KEY_TYPE: WS_MSG_ERROR, WS_KEY_MESSAGE: message}
    if code is not None:
        envelope["code"] = code
    if error_type is not None:
        envelope["errorType"] = error_type
    return envelope


def _build_word(word: dict[str, Any]) -> dict[str, Any]:
    text = word.get("word")
    return {
        "word": text,
        "start": word.get("start"),
        "end": word.get("end"),
        "confidence": word.get("confidence"),
        "punctuated_word": word.get("punctuated_word", text),
    }


def top_alternative(payload: dict[str, Any]) -> dict[str, Any] | None:
    channel = payload.get("channel")
    if not isinstance(channel, dict):
        return None
    alternatives = channel.get("alternatives")
    if not isinstance(alternatives, list) or not alternatives:
        return None
    top = alternatives[0]
    return top if isinstance(top, dict) else None


def build_transcript(payload: dict[str, Any], *, timestamp: int | None = None) -> dict[str, Any] | None:
    """Build a transcript envelope, or None when there is no text worth sending."""
    top = top_alternative(payload)
    if top is None:
        return None
    text = top.get("transcript")
    if not isinstance(text, str) or not text.strip():
        return None

    words = top.get("words")
    if not isinstance(words, list):
        words = []

    return {
        WS_KEY_TYPE: WS_MSG_TRANSCRIPT,
        WS_KEY_DATA: {
            "text": text,
            "isFinal": bool(payload.get("is_final", False)),
            "speechFinal": bool(payload.get("speech_final", False)),
            "words": [_build_word(w) for w in words if isinstance(w, dict)],
            "timestamp": now_ms() if timestamp is None else timestamp,
            "duration": payload.get("duration"),
            "start": payload.get("start"),
        },
    }


def build_utterance_end(*, timestamp: int | None = None) -> dict[str, Any]:
    return {WS_KEY_TYPE: WS_MSG_UTTERANCE_END, "timestamp": now_ms() if timestamp is None else timestamp}


def build_speech_started(*, timestamp: int | None = None) -> dict[str, Any]:
    return {WS_KEY_TYPE: WS_MSG_SPEECH_STARTED, "timestamp": now_ms() if timestamp is None else timestamp}


def _model_info(payload: dict[str, Any]) -> dict[str, Any]:
    info = payload.get("model_info")
    if not isinstance(info, dict):
        return {}
    if "name" in info or "version" in info:
        return info

    # Deepgram keys model_info by model uuid; prefer the first model listed.
    models = payload.get("models")
    if isinstance(models, list) and models and isinstance(info.get(models[0]), dict):
        return info[models[0]]
    for value in info.values():
        if isinstance(value, dict):
            return value
    return {}


def build_metadata(payload: dict[str, Any]) -> dict[str, Any]:
    info = _model_info(payload)
    return {
        WS_KEY_TYPE: WS_MSG_METADATA,
        WS_KEY_DATA: {
            "request_id": payload.get("request_id"),
            "model": info.get("name"),
            "version": info.get("version"),
        },
    }


__all__ = [
    "build_error",
    "build_metadata",
    "build_speech_started",
    "build_status",
    "build_transcript",
    "build_utterance_end",
    "dumps",
    "now_ms",
    "top_alternative",
]
