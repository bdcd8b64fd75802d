from __future__ import annotations

import asyncio
import base64
from typing import Any

import pytest

from src.realtime import Session
from src.upstream import UpstreamConnectError
from src.state.settings import DeepgramSettings
from src.state import AudioMessage, StopMessage, SessionState, StartMessage
from src.state import ReadyState, StreamConfig, UpstreamError, UpstreamEvent, UpstreamEventKind


def _settings(**overrides: Any) -> DeepgramSettings:
    values: dict[str, Any] = {
        "url": "wss://example.invalid/v1/listen",
        "model": "nova-3",
        "model_version": "latest",
        "encoding": "linear16",
        "sample_rate": 16000,
        "channels": 1,
        "interim_results": True,
        "smart_format": True,
        "punctuate": True,
        "endpointing_ms": 300,
        "utterance_end_ms": 1500,
        "vad_events": True,
        "filler_words": False,
        "profanity_filter": False,
        "paragraphs": False,
        "utterances": False,
        "keepalive_interval_s": 3.0,
        "open_timeout_s": 10.0,
        "finish_grace_s": 5.0,
    }
    values.update(overrides)
    return DeepgramSettings(**values)


class _FakeHandle:
    def __init__(self) -> None:
        self.state = ReadyState.CONNECTING
        self.sent: list[bytes] = []
        self.keepalives = 0
        self.finish_calls = 0
        self.fail_send = False

    def ready_state(self) -> ReadyState:
        return self.state

    async def send(self, audio: bytes) -> None:
        if self.fail_send:
            raise RuntimeError("socket exploded")
        self.sent.append(audio)

    async def keepalive(self) -> None:
        self.keepalives += 1

    async def finish(self) -> None:
        self.finish_calls += 1
        self.state = ReadyState.CLOSING


class _FakeAdapter:
    def __init__(self, *, reject: str | None = None) -> None:
        self.reject = reject
        self.handles: list[_FakeHandle] = []
        self.configs: list[StreamConfig] = []

    def open(self, config: StreamConfig, on_event: Any) -> _FakeHandle:
        if self.reject is not None:
            raise UpstreamConnectError(self.reject)
        handle = _FakeHandle()
        self.configs.append(config)
        self.handles.append(handle)
        return handle


class _Outbox:
    def __init__(self) -> None:
        self.envelopes: list[dict[str, Any]] = []

    async def __call__(self, envelope: dict[str, Any]) -> bool:
        self.envelopes.append(envelope)
        return True

    def of_type(self, msg_type: str) -> list[dict[str, Any]]:
        return [e for e in self.envelopes if e["type"] == msg_type]


def _make_session(**settings: Any) -> tuple[Session, _FakeAdapter, _Outbox]:
    adapter = _FakeAdapter()
    outbox = _Outbox()
    session = Session(7, send=outbox, upstream=adapter, settings=_settings(**settings))
    return session, adapter, outbox


async def _streaming_session(**settings: Any) -> tuple[Session, _FakeAdapter, _Outbox, _FakeHandle]:
    session, adapter, outbox = _make_session(**settings)
    await session.handle(StartMessage(api_key="dg-key", language="en-US"))
    handle = adapter.handles[-1]
    handle.state = ReadyState.OPEN
    await session.on_upstream_event(handle, UpstreamEvent(kind=UpstreamEventKind.OPENED))
    return session, adapter, outbox, handle


def _audio(data: bytes) -> AudioMessage:
    return AudioMessage(audio=base64.b64encode(data).decode("ascii"))


def _results(text: str, **extra: Any) -> UpstreamEvent:
    payload: dict[str, Any] = {
        "type": "Results",
        "is_final": True,
        "speech_final": False,
        "duration": 1.2,
        "start": 0.5,
        "channel": {
            "alternatives": [
                {
                    "transcript": text,
                    "words": [
                        {"word": "hello", "start": 0.5, "end": 0.9, "confidence": 0.98, "punctuated_word": "Hello"},
                    ],
                }
            ]
        },
    }
    payload.update(extra)
    return UpstreamEvent(kind=UpstreamEventKind.TRANSCRIPT, payload=payload)


@pytest.mark.asyncio
async def test_start_without_api_key_reports_error_and_stays_idle() -> None:
    session, adapter, outbox = _make_session()

    await session.handle(StartMessage(api_key="", language="en-US"))

    assert outbox.envelopes == [{"type": "error", "message": "API Key required", "errorType": "invalid_payload"}]
    assert adapter.handles == []
    assert session.state is SessionState.IDLE
    assert session.upstream_handle is None


@pytest.mark.asyncio
async def test_start_opens_upstream_with_requested_language() -> None:
    session, adapter, outbox = _make_session()

    await session.handle(StartMessage(api_key="dg-key", language="fr"))

    assert session.state is SessionState.CONNECTING
    assert len(adapter.handles) == 1
    config = adapter.configs[0]
    assert config.language == "fr"
    assert config.model == "nova-3"
    assert config.api_key == "dg-key"
    assert outbox.envelopes == []


@pytest.mark.asyncio
async def test_opened_reports_connected_and_starts_keepalive() -> None:
    session, _adapter, outbox, _handle = await _streaming_session()

    assert session.state is SessionState.STREAMING
    assert outbox.of_type("status") == [
        {"type": "status", "message": "Connected to Deepgram nova-3", "status": "connected"}
    ]
    assert session.keepalive_active is True
    await session.close()


@pytest.mark.asyncio
async def test_rejected_configuration_reports_error() -> None:
    outbox = _Outbox()
    session = Session(1, send=outbox, upstream=_FakeAdapter(reject="invalid sample rate: 0"), settings=_settings())

    await session.handle(StartMessage(api_key="dg-key", language="en-US"))

    assert outbox.envelopes == [
        {"type": "error", "message": "invalid sample rate: 0", "errorType": "upstream_unavailable"}
    ]
    assert session.upstream_handle is None
    assert session.state is SessionState.CLOSED


@pytest.mark.asyncio
async def test_audio_before_start_is_dropped() -> None:
    session, adapter, outbox = _make_session()

    await session.handle(_audio(b"\x01\x02"))

    assert adapter.handles == []
    assert outbox.envelopes == []
    assert session.audio_chunk_count == 0


@pytest.mark.asyncio
async def test_audio_while_connecting_is_dropped() -> None:
    session, adapter, outbox = _make_session()
    await session.handle(StartMessage(api_key="dg-key", language="en-US"))
    handle = adapter.handles[0]

    await session.handle(_audio(b"\x01\x02"))
    handle.state = ReadyState.OPEN
    await session.handle(_audio(b"\x01\x02"))

    # Still CONNECTING until the opened event arrives.
    assert handle.sent == []
    assert outbox.envelopes == []


@pytest.mark.asyncio
async def test_audio_dropped_when_upstream_not_open() -> None:
    session, _adapter, _outbox, handle = await _streaming_session()
    handle.state = ReadyState.CLOSING

    await session.handle(_audio(b"\x01\x02"))

    assert handle.sent == []
    assert session.audio_chunk_count == 0
    await session.close()


@pytest.mark.asyncio
async def test_audio_forwarded_while_streaming() -> None:
    session, _adapter, _outbox, handle = await _streaming_session()

    await session.handle(_audio(b"\x01\x02\x03\x04"))
    await session.handle(_audio(b"\x05\x06"))

    assert handle.sent == [b"\x01\x02\x03\x04", b"\x05\x06"]
    assert session.audio_chunk_count == 2
    await session.close()


@pytest.mark.asyncio
async def test_zero_length_audio_is_never_sent() -> None:
    session, _adapter, outbox, handle = await _streaming_session()

    await session.handle(AudioMessage(audio=""))

    assert handle.sent == []
    assert session.audio_chunk_count == 0
    assert outbox.of_type("error") == []
    await session.close()


@pytest.mark.asyncio
@pytest.mark.parametrize("audio", ["abc", "!!!!", "QUJD*RA=="])
async def test_invalid_base64_reports_error_and_keeps_streaming(audio: str) -> None:
    session, _adapter, outbox, handle = await _streaming_session()

    await session.handle(AudioMessage(audio=audio))

    errors = outbox.of_type("error")
    assert len(errors) == 1
    assert errors[0]["errorType"] == "invalid_message"
    assert handle.sent == []
    assert session.state is SessionState.STREAMING
    await session.close()


@pytest.mark.asyncio
async def test_unexpected_failure_is_reported_as_server_error() -> None:
    session, _adapter, outbox, handle = await _streaming_session()
    handle.fail_send = True

    await session.handle(_audio(b"\x01"))

    errors = outbox.of_type("error")
    assert errors == [{"type": "error", "message": "Server error: socket exploded", "errorType": "internal_error"}]
    await session.close()


@pytest.mark.asyncio
async def test_stop_finishes_upstream_once_and_reports_stopped() -> None:
    session, _adapter, outbox, handle = await _streaming_session()
    await session.handle(_audio(b"\x01\x02"))

    await session.handle(StopMessage())

    assert handle.finish_calls == 1
    assert session.keepalive_active is False
    assert session.audio_chunk_count == 0
    assert session.upstream_handle is None
    assert session.state is SessionState.CLOSED
    assert outbox.envelopes[-1] == {"type": "status", "message": "Stopped", "status": "stopped"}


@pytest.mark.asyncio
async def test_stop_is_idempotent() -> None:
    session, _adapter, outbox, handle = await _streaming_session()

    await session.handle(StopMessage())
    await session.handle(StopMessage())
    await session.close()
    await session.close()

    assert handle.finish_calls == 1
    stopped = [e for e in outbox.of_type("status") if e["status"] == "stopped"]
    assert len(stopped) == 1


@pytest.mark.asyncio
async def test_stop_without_upstream_is_silent() -> None:
    session, _adapter, outbox = _make_session()

    await session.handle(StopMessage())

    assert outbox.envelopes == []
    assert session.state is SessionState.IDLE


@pytest.mark.asyncio
async def test_events_after_stop_are_discarded() -> None:
    session, _adapter, outbox, handle = await _streaming_session()
    await session.handle(StopMessage())
    sent_before = list(outbox.envelopes)

    await session.on_upstream_event(handle, _results("late words"))
    await session.on_upstream_event(handle, UpstreamEvent(kind=UpstreamEventKind.CLOSED, close_code=1000))

    assert outbox.envelopes == sent_before


@pytest.mark.asyncio
async def test_transcript_forwarded_with_words() -> None:
    session, _adapter, outbox, handle = await _streaming_session()

    await session.on_upstream_event(handle, _results("Hello"))

    transcripts = outbox.of_type("transcript")
    assert len(transcripts) == 1
    data = transcripts[0]["data"]
    assert data["text"] == "Hello"
    assert data["isFinal"] is True
    assert data["speechFinal"] is False
    assert data["duration"] == 1.2
    assert data["start"] == 0.5
    assert isinstance(data["timestamp"], int)
    assert data["words"] == [
        {"word": "hello", "start": 0.5, "end": 0.9, "confidence": 0.98, "punctuated_word": "Hello"}
    ]
    await session.close()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"type": "Results", "channel": {"alternatives": []}},
        {"type": "Results"},
        {"type": "Results", "channel": {"alternatives": [{"transcript": "   "}]}},
        {"type": "Results", "channel": {"alternatives": [{"transcript": ""}]}},
    ],
)
async def test_empty_transcripts_are_not_forwarded(payload: dict[str, Any]) -> None:
    session, _adapter, outbox, handle = await _streaming_session()

    await session.on_upstream_event(handle, UpstreamEvent(kind=UpstreamEventKind.TRANSCRIPT, payload=payload))

    assert outbox.of_type("transcript") == []
    await session.close()


@pytest.mark.asyncio
async def test_vad_and_metadata_events_map_to_own_envelopes() -> None:
    session, _adapter, outbox, handle = await _streaming_session()

    await session.on_upstream_event(handle, UpstreamEvent(kind=UpstreamEventKind.SPEECH_STARTED, payload={"x": 1}))
    await session.on_upstream_event(handle, UpstreamEvent(kind=UpstreamEventKind.UTTERANCE_END, payload={"x": 1}))
    await session.on_upstream_event(
        handle,
        UpstreamEvent(
            kind=UpstreamEventKind.METADATA,
            payload={"request_id": "req-1", "model_info": {"name": "general-nova-3", "version": "2025-01-01"}},
        ),
    )

    assert set(outbox.of_type("speech_started")[0]) == {"type", "timestamp"}
    assert set(outbox.of_type("utterance_end")[0]) == {"type", "timestamp"}
    assert outbox.of_type("metadata") == [
        {"type": "metadata", "data": {"request_id": "req-1", "model": "general-nova-3", "version": "2025-01-01"}}
    ]
    await session.close()


@pytest.mark.asyncio
async def test_unauthorized_error_maps_to_invalid_api_key() -> None:
    session, adapter, outbox = _make_session()
    await session.handle(StartMessage(api_key="bad-key", language="en-US"))
    handle = adapter.handles[0]

    await session.on_upstream_event(
        handle,
        UpstreamEvent(kind=UpstreamEventKind.ERROR, error=UpstreamError(message="Unauthorized", status_code=401)),
    )

    errors = outbox.of_type("error")
    assert len(errors) == 1
    assert errors[0]["message"].startswith("Invalid API key")
    assert errors[0]["code"] == 401
    assert session.upstream_handle is None
    assert session.keepalive_active is False
    assert session.state is SessionState.CLOSED


@pytest.mark.asyncio
async def test_stream_error_discards_handle_and_allows_restart() -> None:
    session, adapter, outbox, handle = await _streaming_session()

    await session.on_upstream_event(
        handle,
        UpstreamEvent(kind=UpstreamEventKind.ERROR, error=UpstreamError(message="timeout", error_type="NET-0001")),
    )
    await session.on_upstream_event(handle, UpstreamEvent(kind=UpstreamEventKind.CLOSED, close_code=1011))

    assert outbox.of_type("error") == [
        {"type": "error", "message": "Connection timeout - No audio received for 10 seconds", "errorType": "NET-0001"}
    ]
    assert outbox.of_type("status")[-1]["status"] == "connected"
    assert handle.finish_calls == 1
    assert session.keepalive_active is False

    await session.handle(StartMessage(api_key="dg-key", language="en-US"))
    assert len(adapter.handles) == 2
    assert session.state is SessionState.CONNECTING


@pytest.mark.asyncio
async def test_upstream_close_reports_closed_status() -> None:
    session, _adapter, outbox, handle = await _streaming_session()

    await session.on_upstream_event(handle, UpstreamEvent(kind=UpstreamEventKind.CLOSED, close_code=1000))

    assert outbox.envelopes[-1] == {"type": "status", "message": "Deepgram connection closed", "status": "closed"}
    assert session.state is SessionState.CLOSED
    assert session.keepalive_active is False
    assert session.upstream_handle is None


@pytest.mark.asyncio
async def test_restart_tears_down_previous_upstream() -> None:
    session, adapter, outbox, first = await _streaming_session()

    await session.handle(StartMessage(api_key="dg-key", language="de"))

    assert first.finish_calls == 1
    assert len(adapter.handles) == 2
    assert session.upstream_handle is adapter.handles[1]
    assert session.keepalive_active is False
    assert session.state is SessionState.CONNECTING

    # Old stream events no longer reach the client.
    await session.on_upstream_event(first, _results("stale"))
    assert outbox.of_type("transcript") == []


@pytest.mark.asyncio
async def test_transport_close_tears_down_without_status() -> None:
    session, adapter, outbox, handle = await _streaming_session()
    sent_before = list(outbox.envelopes)

    await session.close()
    await session.handle(StartMessage(api_key="dg-key", language="en-US"))

    assert handle.finish_calls == 1
    assert outbox.envelopes == sent_before
    assert len(adapter.handles) == 1
    assert session.keepalive_active is False


@pytest.mark.asyncio
async def test_keepalive_only_while_streaming() -> None:
    session, _adapter, _outbox, handle = await _streaming_session(keepalive_interval_s=0.01)

    await asyncio.sleep(0.08)
    assert handle.keepalives >= 1

    await session.handle(StopMessage())
    after_stop = handle.keepalives
    await asyncio.sleep(0.05)
    assert handle.keepalives == after_stop


@pytest.mark.asyncio
async def test_keepalive_skipped_when_upstream_not_open() -> None:
    session, _adapter, _outbox, handle = await _streaming_session(keepalive_interval_s=0.01)
    handle.state = ReadyState.CLOSING

    await asyncio.sleep(0.05)

    assert handle.keepalives == 0
    await session.close()
