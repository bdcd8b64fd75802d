"""Translation between Deepgram's live-listen wire format and upstream events."""

from __future__ import annotations

import re
from typing import Any
from urllib.parse import urlencode

import orjson

from src.config.deepgram import DEEPGRAM_HEADER_ERROR, DEEPGRAM_HEADER_REQUEST_ID
from src.state import StreamConfig, UpstreamError, UpstreamEvent, UpstreamEventKind

_EVENT_KINDS: dict[str, UpstreamEventKind] = {
    "Results": UpstreamEventKind.TRANSCRIPT,
    "UtteranceEnd": UpstreamEventKind.UTTERANCE_END,
    "SpeechStarted": UpstreamEventKind.SPEECH_STARTED,
    "Metadata": UpstreamEventKind.METADATA,
}

_NORMAL_CLOSE_CODES = {1000}

# Close reasons lead with a symbolic code such as "NET-0001" or "DATA-0000".
_CLOSE_REASON_TYPE = re.compile(r"^\s*([A-Z]+-\d{4})\b")


def _flag(value: bool) -> str:
    return "true" if value else "false"


def build_query(config: StreamConfig) -> str:
    return urlencode(
        {
            "model": config.model,
            "version": config.model_version,
            "language": config.language,
            "encoding": config.encoding,
            "sample_rate": str(config.sample_rate),
            "channels": str(config.channels),
            "interim_results": _flag(config.interim_results),
            "smart_format": _flag(config.smart_format),
            "punctuate": _flag(config.punctuate),
            "endpointing": str(config.endpointing_ms),
            "utterance_end_ms": str(config.utterance_end_ms),
            "vad_events": _flag(config.vad_events),
            "filler_words": _flag(config.filler_words),
            "profanity_filter": _flag(config.profanity_filter),
            "paragraphs": _flag(config.paragraphs),
            "utterances": _flag(config.utterances),
        }
    )


def _str_or_none(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


def decode_message(raw: str) -> UpstreamEvent | None:
    """Map one provider text frame to an event, or None if it carries nothing we relay."""
    try:
        data = orjson.loads(raw)
    except orjson.JSONDecodeError:
        return None
    if not isinstance(data, dict):
        return None

    msg_type = data.get("type")
    if msg_type == "Error":
        return UpstreamEvent(
            kind=UpstreamEventKind.ERROR,
            payload=data,
            error=UpstreamError(
                message=_str_or_none(data.get("description")) or _str_or_none(data.get("message")),
                error_type=_str_or_none(data.get("err_code")) or _str_or_none(data.get("variant")),
                request_id=_str_or_none(data.get("request_id")),
            ),
        )

    kind = _EVENT_KINDS.get(msg_type) if isinstance(msg_type, str) else None
    if kind is None:
        return None
    return UpstreamEvent(kind=kind, payload=data)


def error_from_close(code: int | None, reason: str | None) -> UpstreamError | None:
    if code is None or code in _NORMAL_CLOSE_CODES:
        return None
    reason = (reason or "").strip()
    match = _CLOSE_REASON_TYPE.match(reason)
    return UpstreamError(
        message=reason or f"Deepgram connection closed unexpectedly (code {code})",
        error_type=match.group(1) if match else None,
    )


def error_from_handshake(status_code: int, headers: Any, body: bytes | None) -> UpstreamError:
    """Build an error from a rejected HTTP upgrade (e.g. 401 bad key, 429 throttled)."""
    message = None
    error_type = None
    request_id = None
    if headers is not None:
        message = _str_or_none(headers.get(DEEPGRAM_HEADER_ERROR))
        request_id = _str_or_none(headers.get(DEEPGRAM_HEADER_REQUEST_ID))

    if body:
        try:
            parsed = orjson.loads(body)
        except orjson.JSONDecodeError:
            parsed = None
        if isinstance(parsed, dict):
            message = message or _str_or_none(parsed.get("err_msg"))
            error_type = _str_or_none(parsed.get("err_code"))
            request_id = request_id or _str_or_none(parsed.get("request_id"))

    return UpstreamError(
        message=message or f"Deepgram rejected the connection (HTTP {status_code})",
        status_code=status_code,
        error_type=error_type,
        request_id=request_id,
    )


__all__ = ["build_query", "decode_message", "error_from_close", "error_from_handshake"]
