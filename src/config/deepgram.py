"""Deepgram live transcription configuration."""

from __future__ import annotations

ENV_DEEPGRAM_URL = "DEEPGRAM_URL"
ENV_DEEPGRAM_MODEL = "DEEPGRAM_MODEL"
ENV_DEEPGRAM_MODEL_VERSION = "DEEPGRAM_MODEL_VERSION"
ENV_DEEPGRAM_ENCODING = "DEEPGRAM_ENCODING"
ENV_DEEPGRAM_SAMPLE_RATE = "DEEPGRAM_SAMPLE_RATE"
ENV_DEEPGRAM_CHANNELS = "DEEPGRAM_CHANNELS"
ENV_DEEPGRAM_INTERIM_RESULTS = "DEEPGRAM_INTERIM_RESULTS"
ENV_DEEPGRAM_SMART_FORMAT = "DEEPGRAM_SMART_FORMAT"
ENV_DEEPGRAM_PUNCTUATE = "DEEPGRAM_PUNCTUATE"
ENV_DEEPGRAM_ENDPOINTING_MS = "DEEPGRAM_ENDPOINTING_MS"
ENV_DEEPGRAM_UTTERANCE_END_MS = "DEEPGRAM_UTTERANCE_END_MS"
ENV_DEEPGRAM_VAD_EVENTS = "DEEPGRAM_VAD_EVENTS"
ENV_DEEPGRAM_FILLER_WORDS = "DEEPGRAM_FILLER_WORDS"
ENV_DEEPGRAM_PROFANITY_FILTER = "DEEPGRAM_PROFANITY_FILTER"
ENV_DEEPGRAM_PARAGRAPHS = "DEEPGRAM_PARAGRAPHS"
ENV_DEEPGRAM_UTTERANCES = "DEEPGRAM_UTTERANCES"
ENV_DEEPGRAM_KEEPALIVE_INTERVAL_S = "DEEPGRAM_KEEPALIVE_INTERVAL_S"
ENV_DEEPGRAM_OPEN_TIMEOUT_S = "DEEPGRAM_OPEN_TIMEOUT_S"
ENV_DEEPGRAM_FINISH_GRACE_S = "DEEPGRAM_FINISH_GRACE_S"

DEFAULT_DEEPGRAM_URL = "wss://api.deepgram.com/v1/listen"
DEFAULT_DEEPGRAM_MODEL = "nova-3"
DEFAULT_DEEPGRAM_MODEL_VERSION = "latest"

# Raw PCM16 mono at 16kHz.
DEFAULT_DEEPGRAM_ENCODING = "linear16"
DEFAULT_DEEPGRAM_SAMPLE_RATE = 16000
DEFAULT_DEEPGRAM_CHANNELS = 1

DEFAULT_DEEPGRAM_INTERIM_RESULTS = True
DEFAULT_DEEPGRAM_SMART_FORMAT = True
DEFAULT_DEEPGRAM_PUNCTUATE = True

# 300ms of silence finalizes a transcript; 1.5s ends the utterance.
DEFAULT_DEEPGRAM_ENDPOINTING_MS = 300
DEFAULT_DEEPGRAM_UTTERANCE_END_MS = 1500
DEFAULT_DEEPGRAM_VAD_EVENTS = True

DEFAULT_DEEPGRAM_FILLER_WORDS = False
DEFAULT_DEEPGRAM_PROFANITY_FILTER = False
DEFAULT_DEEPGRAM_PARAGRAPHS = False
DEFAULT_DEEPGRAM_UTTERANCES = False

# Deepgram closes idle streams after ~10s without audio; 3-5s keep-alives are recommended.
DEFAULT_DEEPGRAM_KEEPALIVE_INTERVAL_S = 3.0
DEFAULT_DEEPGRAM_OPEN_TIMEOUT_S = 10.0
DEFAULT_DEEPGRAM_FINISH_GRACE_S = 5.0

# Provider control messages
DEEPGRAM_MSG_KEEPALIVE = '{"type":"KeepAlive"}'
DEEPGRAM_MSG_CLOSE_STREAM = '{"type":"CloseStream"}'

# Provider response headers on a rejected handshake
DEEPGRAM_HEADER_ERROR = "dg-error"
DEEPGRAM_HEADER_REQUEST_ID = "dg-request-id"

__all__ = [
    "DEEPGRAM_HEADER_ERROR",
    "DEEPGRAM_HEADER_REQUEST_ID",
    "DEEPGRAM_MSG_CLOSE_STREAM",
    "DEEPGRAM_MSG_KEEPALIVE",
    "DEFAULT_DEEPGRAM_CHANNELS",
    "DEFAULT_DEEPGRAM_ENCODING",
    "DEFAULT_DEEPGRAM_ENDPOINTING_MS",
    "DEFAULT_DEEPGRAM_FILLER_WORDS",
    "DEFAULT_DEEPGRAM_FINISH_GRACE_S",
    "DEFAULT_DEEPGRAM_INTERIM_RESULTS",
    "DEFAULT_DEEPGRAM_KEEPALIVE_INTERVAL_S",
    "DEFAULT_DEEPGRAM_MODEL",
    "DEFAULT_DEEPGRAM_MODEL_VERSION",
    "DEFAULT_DEEPGRAM_OPEN_TIMEOUT_S",
    "DEFAULT_DEEPGRAM_PARAGRAPHS",
    "DEFAULT_DEEPGRAM_PROFANITY_FILTER",
    "DEFAULT_DEEPGRAM_PUNCTUATE",
    "DEFAULT_DEEPGRAM_SAMPLE_RATE",
    "DEFAULT_DEEPGRAM_SMART_FORMAT",
    "DEFAULT_DEEPGRAM_URL",
    "DEFAULT_DEEPGRAM_UTTERANCES",
    "DEFAULT_DEEPGRAM_UTTERANCE_END_MS",
    "DEFAULT_DEEPGRAM_VAD_EVENTS",
    "ENV_DEEPGRAM_CHANNELS",
    "ENV_DEEPGRAM_ENCODING",
    "ENV_DEEPGRAM_ENDPOINTING_MS",
    "ENV_DEEPGRAM_FILLER_WORDS",
    "ENV_DEEPGRAM_FINISH_GRACE_S",
    "ENV_DEEPGRAM_INTERIM_RESULTS",
    "ENV_DEEPGRAM_KEEPALIVE_INTERVAL_S",
    "ENV_DEEPGRAM_MODEL",
    "ENV_DEEPGRAM_MODEL_VERSION",
    "ENV_DEEPGRAM_OPEN_TIMEOUT_S",
    "ENV_DEEPGRAM_PARAGRAPHS",
    "ENV_DEEPGRAM_PROFANITY_FILTER",
    "ENV_DEEPGRAM_PUNCTUATE",
    "ENV_DEEPGRAM_SAMPLE_RATE",
    "ENV_DEEPGRAM_SMART_FORMAT",
    "ENV_DEEPGRAM_URL",
    "ENV_DEEPGRAM_UTTERANCES",
    "ENV_DEEPGRAM_UTTERANCE_END_MS",
    "ENV_DEEPGRAM_VAD_EVENTS",
]
