from __future__ import annotations

import pytest

from src.runtime.settings import load_settings

_ENV_NAMES = [
    "DEEPGRAM_URL",
    "DEEPGRAM_MODEL",
    "DEEPGRAM_MODEL_VERSION",
    "DEEPGRAM_SAMPLE_RATE",
    "DEEPGRAM_INTERIM_RESULTS",
    "DEEPGRAM_FILLER_WORDS",
    "DEEPGRAM_KEEPALIVE_INTERVAL_S",
    "MAX_CONCURRENT_CONNECTIONS",
    "WS_MESSAGE_WINDOW_SECONDS",
    "WS_MAX_MESSAGES_PER_WINDOW",
    "WS_IDLE_TIMEOUT_S",
    "WS_WATCHDOG_TICK_S",
    "WS_MAX_CONNECTION_DURATION_S",
]


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env: pytest.MonkeyPatch) -> None:
    settings = load_settings()

    assert settings.deepgram.url == "wss://api.deepgram.com/v1/listen"
    assert settings.deepgram.model == "nova-3"
    assert settings.deepgram.model_version == "latest"
    assert settings.deepgram.encoding == "linear16"
    assert settings.deepgram.sample_rate == 16000
    assert settings.deepgram.channels == 1
    assert settings.deepgram.interim_results is True
    assert settings.deepgram.filler_words is False
    assert settings.deepgram.endpointing_ms == 300
    assert settings.deepgram.utterance_end_ms == 1500
    assert settings.deepgram.keepalive_interval_s == 3.0
    assert settings.limits.max_concurrent_connections == 100
    assert settings.websocket.max_connection_duration_s == 0.0
    assert settings.service.name == "Deepgram Real-time Transcription Server"


def test_env_overrides(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("DEEPGRAM_MODEL", "nova-2")
    clean_env.setenv("DEEPGRAM_SAMPLE_RATE", "48000")
    clean_env.setenv("DEEPGRAM_INTERIM_RESULTS", "off")
    clean_env.setenv("DEEPGRAM_FILLER_WORDS", "YES")
    clean_env.setenv("MAX_CONCURRENT_CONNECTIONS", "4")
    clean_env.setenv("WS_IDLE_TIMEOUT_S", "30")

    settings = load_settings()

    assert settings.deepgram.model == "nova-2"
    assert settings.deepgram.sample_rate == 48000
    assert settings.deepgram.interim_results is False
    assert settings.deepgram.filler_words is True
    assert settings.limits.max_concurrent_connections == 4
    assert settings.websocket.idle_timeout_s == 30.0


def test_invalid_values_fall_back(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("DEEPGRAM_MODEL", "   ")
    clean_env.setenv("DEEPGRAM_SAMPLE_RATE", "fast")
    clean_env.setenv("DEEPGRAM_INTERIM_RESULTS", "maybe")
    clean_env.setenv("DEEPGRAM_KEEPALIVE_INTERVAL_S", "-1")
    clean_env.setenv("MAX_CONCURRENT_CONNECTIONS", "0")
    clean_env.setenv("WS_MESSAGE_WINDOW_SECONDS", "0")
    clean_env.setenv("WS_MAX_MESSAGES_PER_WINDOW", "-5")
    clean_env.setenv("WS_WATCHDOG_TICK_S", "0")

    settings = load_settings()

    assert settings.deepgram.model == "nova-3"
    assert settings.deepgram.sample_rate == 16000
    assert settings.deepgram.interim_results is True
    assert settings.deepgram.keepalive_interval_s == 3.0
    assert settings.limits.max_concurrent_connections == 1
    assert settings.limits.ws_message_window_seconds == 60.0
    assert settings.limits.ws_max_messages_per_window == 0
    assert settings.websocket.watchdog_tick_s == 5.0
