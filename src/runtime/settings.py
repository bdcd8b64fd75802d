"""Environment parsing for runtime settings.

Env names and defaults live in `src/config/*`; this module resolves them once
into the frozen dataclasses from `src/state/settings.py`.
"""

from __future__ import annotations

import os

from src.config.service import SERVICE_NAME, SERVICE_VERSION
from src.state.settings import (
    AppSettings,
    LimitsSettings,
    ServiceSettings,
    DeepgramSettings,
    WebSocketSettings,
)
from src.config.limits import (
    ENV_WS_MESSAGE_WINDOW_SECONDS,
    ENV_MAX_CONCURRENT_CONNECTIONS,
    ENV_WS_MAX_MESSAGES_PER_WINDOW,
    DEFAULT_WS_MESSAGE_WINDOW_SECONDS,
    DEFAULT_MAX_CONCURRENT_CONNECTIONS,
    DEFAULT_WS_MAX_MESSAGES_PER_WINDOW,
)
from src.config.websocket import (
    ENV_WS_IDLE_TIMEOUT_S,
    ENV_WS_WATCHDOG_TICK_S,
    DEFAULT_WS_IDLE_TIMEOUT_S,
    DEFAULT_WS_WATCHDOG_TICK_S,
    ENV_WS_MAX_CONNECTION_DURATION_S,
    DEFAULT_WS_MAX_CONNECTION_DURATION_S,
)
from src.config.deepgram import (
    ENV_DEEPGRAM_URL,
    ENV_DEEPGRAM_MODEL,
    DEFAULT_DEEPGRAM_URL,
    ENV_DEEPGRAM_CHANNELS,
    ENV_DEEPGRAM_ENCODING,
    ENV_DEEPGRAM_PUNCTUATE,
    DEFAULT_DEEPGRAM_MODEL,
    ENV_DEEPGRAM_PARAGRAPHS,
    ENV_DEEPGRAM_UTTERANCES,
    ENV_DEEPGRAM_VAD_EVENTS,
    ENV_DEEPGRAM_SAMPLE_RATE,
    DEFAULT_DEEPGRAM_CHANNELS,
    DEFAULT_DEEPGRAM_ENCODING,
    DEFAULT_DEEPGRAM_PUNCTUATE,
    ENV_DEEPGRAM_FILLER_WORDS,
    ENV_DEEPGRAM_SMART_FORMAT,
    DEFAULT_DEEPGRAM_PARAGRAPHS,
    DEFAULT_DEEPGRAM_UTTERANCES,
    DEFAULT_DEEPGRAM_VAD_EVENTS,
    ENV_DEEPGRAM_FINISH_GRACE_S,
    ENV_DEEPGRAM_MODEL_VERSION,
    ENV_DEEPGRAM_OPEN_TIMEOUT_S,
    DEFAULT_DEEPGRAM_SAMPLE_RATE,
    ENV_DEEPGRAM_ENDPOINTING_MS,
    DEFAULT_DEEPGRAM_FILLER_WORDS,
    DEFAULT_DEEPGRAM_SMART_FORMAT,
    ENV_DEEPGRAM_INTERIM_RESULTS,
    DEFAULT_DEEPGRAM_FINISH_GRACE_S,
    DEFAULT_DEEPGRAM_MODEL_VERSION,
    DEFAULT_DEEPGRAM_OPEN_TIMEOUT_S,
    ENV_DEEPGRAM_PROFANITY_FILTER,
    ENV_DEEPGRAM_UTTERANCE_END_MS,
    DEFAULT_DEEPGRAM_ENDPOINTING_MS,
    DEFAULT_DEEPGRAM_INTERIM_RESULTS,
    DEFAULT_DEEPGRAM_PROFANITY_FILTER,
    DEFAULT_DEEPGRAM_UTTERANCE_END_MS,
    ENV_DEEPGRAM_KEEPALIVE_INTERVAL_S,
    DEFAULT_DEEPGRAM_KEEPALIVE_INTERVAL_S,
)

_FALSE_VALUES = {"0", "false", "no", "n", "off", "disabled", "disable", "none", "null"}
_TRUE_VALUES = {"1", "true", "yes", "y", "on"}


def _str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except Exception:
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except Exception:
        return default


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    v = raw.strip().lower()
    if v in _TRUE_VALUES:
        return True
    if v in _FALSE_VALUES:
        return False
    return default


def _load_limits_settings() -> LimitsSettings:
    max_connections = _int_env(ENV_MAX_CONCURRENT_CONNECTIONS, DEFAULT_MAX_CONCURRENT_CONNECTIONS)
    msg_window = _float_env(ENV_WS_MESSAGE_WINDOW_SECONDS, DEFAULT_WS_MESSAGE_WINDOW_SECONDS)
    if msg_window <= 0:
        msg_window = DEFAULT_WS_MESSAGE_WINDOW_SECONDS
    msg_limit = _int_env(ENV_WS_MAX_MESSAGES_PER_WINDOW, DEFAULT_WS_MAX_MESSAGES_PER_WINDOW)

    return LimitsSettings(
        max_concurrent_connections=max(1, max_connections),
        ws_message_window_seconds=msg_window,
        ws_max_messages_per_window=max(0, msg_limit),
    )


def _load_websocket_settings() -> WebSocketSettings:
    watchdog_tick = _float_env(ENV_WS_WATCHDOG_TICK_S, DEFAULT_WS_WATCHDOG_TICK_S)
    if watchdog_tick <= 0:
        watchdog_tick = DEFAULT_WS_WATCHDOG_TICK_S

    return WebSocketSettings(
        idle_timeout_s=max(0.0, _float_env(ENV_WS_IDLE_TIMEOUT_S, DEFAULT_WS_IDLE_TIMEOUT_S)),
        watchdog_tick_s=watchdog_tick,
        max_connection_duration_s=max(
            0.0, _float_env(ENV_WS_MAX_CONNECTION_DURATION_S, DEFAULT_WS_MAX_CONNECTION_DURATION_S)
        ),
    )


def _load_deepgram_settings() -> DeepgramSettings:
    keepalive_s = _float_env(ENV_DEEPGRAM_KEEPALIVE_INTERVAL_S, DEFAULT_DEEPGRAM_KEEPALIVE_INTERVAL_S)
    if keepalive_s <= 0:
        keepalive_s = DEFAULT_DEEPGRAM_KEEPALIVE_INTERVAL_S

    return DeepgramSettings(
        url=_str_env(ENV_DEEPGRAM_URL, DEFAULT_DEEPGRAM_URL),
        model=_str_env(ENV_DEEPGRAM_MODEL, DEFAULT_DEEPGRAM_MODEL),
        model_version=_str_env(ENV_DEEPGRAM_MODEL_VERSION, DEFAULT_DEEPGRAM_MODEL_VERSION),
        encoding=_str_env(ENV_DEEPGRAM_ENCODING, DEFAULT_DEEPGRAM_ENCODING),
        sample_rate=_int_env(ENV_DEEPGRAM_SAMPLE_RATE, DEFAULT_DEEPGRAM_SAMPLE_RATE),
        channels=_int_env(ENV_DEEPGRAM_CHANNELS, DEFAULT_DEEPGRAM_CHANNELS),
        interim_results=_bool_env(ENV_DEEPGRAM_INTERIM_RESULTS, DEFAULT_DEEPGRAM_INTERIM_RESULTS),
        smart_format=_bool_env(ENV_DEEPGRAM_SMART_FORMAT, DEFAULT_DEEPGRAM_SMART_FORMAT),
        punctuate=_bool_env(ENV_DEEPGRAM_PUNCTUATE, DEFAULT_DEEPGRAM_PUNCTUATE),
        endpointing_ms=_int_env(ENV_DEEPGRAM_ENDPOINTING_MS, DEFAULT_DEEPGRAM_ENDPOINTING_MS),
        utterance_end_ms=_int_env(ENV_DEEPGRAM_UTTERANCE_END_MS, DEFAULT_DEEPGRAM_UTTERANCE_END_MS),
        vad_events=_bool_env(ENV_DEEPGRAM_VAD_EVENTS, DEFAULT_DEEPGRAM_VAD_EVENTS),
        filler_words=_bool_env(ENV_DEEPGRAM_FILLER_WORDS, DEFAULT_DEEPGRAM_FILLER_WORDS),
        profanity_filter=_bool_env(ENV_DEEPGRAM_PROFANITY_FILTER, DEFAULT_DEEPGRAM_PROFANITY_FILTER),
        paragraphs=_bool_env(ENV_DEEPGRAM_PARAGRAPHS, DEFAULT_DEEPGRAM_PARAGRAPHS),
        utterances=_bool_env(ENV_DEEPGRAM_UTTERANCES, DEFAULT_DEEPGRAM_UTTERANCES),
        keepalive_interval_s=keepalive_s,
        open_timeout_s=_float_env(ENV_DEEPGRAM_OPEN_TIMEOUT_S, DEFAULT_DEEPGRAM_OPEN_TIMEOUT_S),
        finish_grace_s=_float_env(ENV_DEEPGRAM_FINISH_GRACE_S, DEFAULT_DEEPGRAM_FINISH_GRACE_S),
    )


def load_settings() -> AppSettings:
    return AppSettings(
        limits=_load_limits_settings(),
        websocket=_load_websocket_settings(),
        deepgram=_load_deepgram_settings(),
        service=ServiceSettings(name=SERVICE_NAME, version=SERVICE_VERSION),
    )


__all__ = ["load_settings"]
