"""Per-connection session: client envelopes in, upstream events out.

All state changes go through one ``asyncio.Lock``. Client messages and upstream
events are handled one at a time, and an event from a handle that is no longer
current (stopped, replaced, or failed) is dropped.
"""

from __future__ import annotations

import base64
import asyncio
import logging
import binascii
from typing import Any
from collections.abc import Callable, Awaitable

from src.state.settings import DeepgramSettings
from src.errors import ClientProtocolError
from src.state import (
    ReadyState,
    AudioMessage,
    StopMessage,
    SessionState,
    StartMessage,
    StreamConfig,
    ClientMessage,
    UpstreamEvent,
    UpstreamEventKind,
)
from src.upstream import UpstreamHandle, UpstreamAdapter, UpstreamConnectError
from src.config.websocket import (
    WS_STATUS_CLOSED,
    WS_ERROR_INTERNAL,
    WS_STATUS_STOPPED,
    WS_STATUS_CONNECTED,
    WS_ERROR_INVALID_PAYLOAD,
    WS_ERROR_UPSTREAM_UNAVAILABLE,
)

from .keepalive import KeepAliveTimer
from .error_map import build_upstream_error
from .envelope import (
    build_error,
    build_status,
    build_metadata,
    build_transcript,
    build_utterance_end,
    build_speech_started,
)

logger = logging.getLogger(__name__)

SendFn = Callable[[dict[str, Any]], Awaitable[bool]]

_AUDIO_LOG_EVERY = 100


def decode_audio(audio: str) -> bytes:
    try:
        return base64.b64decode(audio, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ClientProtocolError(f"invalid base64 audio: {exc}") from exc


class Session:
    def __init__(
        self,
        session_id: int,
        *,
        send: SendFn,
        upstream: UpstreamAdapter,
        settings: DeepgramSettings,
    ) -> None:
        self.id = session_id
        self._send = send
        self._upstream = upstream
        self._settings = settings

        self._lock = asyncio.Lock()
        self._state = SessionState.IDLE
        self._handle: UpstreamHandle | None = None
        self._keepalive: KeepAliveTimer | None = None
        self._audio_chunk_count = 0
        self._drop_warned = False
        self._disposed = False

        self._message_handlers: dict[type, Callable[[Any], Awaitable[None]]] = {
            StartMessage: self._on_start,
            AudioMessage: self._on_audio,
            StopMessage: self._on_stop,
        }
        self._event_handlers: dict[UpstreamEventKind, Callable[[UpstreamHandle, UpstreamEvent], Awaitable[None]]] = {
            UpstreamEventKind.OPENED: self._on_opened,
            UpstreamEventKind.TRANSCRIPT: self._on_transcript,
            UpstreamEventKind.UTTERANCE_END: self._on_utterance_end,
            UpstreamEventKind.SPEECH_STARTED: self._on_speech_started,
            UpstreamEventKind.METADATA: self._on_metadata,
            UpstreamEventKind.ERROR: self._on_error,
            UpstreamEventKind.CLOSED: self._on_closed,
        }

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def audio_chunk_count(self) -> int:
        return self._audio_chunk_count

    @property
    def upstream_handle(self) -> UpstreamHandle | None:
        return self._handle

    @property
    def keepalive_active(self) -> bool:
        return self._keepalive is not None and self._keepalive.active

    def is_streaming(self) -> bool:
        return self._state is SessionState.STREAMING

    # Client side

    async def report_protocol_error(self, exc: ClientProtocolError) -> None:
        logger.warning("session=%s rejected message: %s", self.id, exc)
        await self._send(build_error(str(exc), error_type=exc.error_type))

    async def handle(self, message: ClientMessage) -> None:
        async with self._lock:
            if self._disposed:
                return
            handler = self._message_handlers[type(message)]
            try:
                await handler(message)
            except ClientProtocolError as exc:
                await self.report_protocol_error(exc)
            except Exception as exc:
                logger.exception("session=%s message handling error", self.id)
                await self._send(build_error(f"Server error: {exc}", error_type=WS_ERROR_INTERNAL))

    async def close(self) -> None:
        """Tear down after the client transport went away. Nothing is sent to the client."""
        async with self._lock:
            if self._disposed:
                return
            self._disposed = True
            await self._teardown()
        logger.info("session=%s disposed", self.id)

    def _stream_config(self, message: StartMessage) -> StreamConfig:
        s = self._settings
        return StreamConfig(
            api_key=message.api_key,
            model=s.model,
            model_version=s.model_version,
            language=message.language,
            encoding=s.encoding,
            sample_rate=s.sample_rate,
            channels=s.channels,
            interim_results=s.interim_results,
            smart_format=s.smart_format,
            punctuate=s.punctuate,
            endpointing_ms=s.endpointing_ms,
            utterance_end_ms=s.utterance_end_ms,
            vad_events=s.vad_events,
            filler_words=s.filler_words,
            profanity_filter=s.profanity_filter,
            paragraphs=s.paragraphs,
            utterances=s.utterances,
        )

    async def _on_start(self, message: StartMessage) -> None:
        if not message.api_key:
            await self._send(build_error("API Key required", error_type=WS_ERROR_INVALID_PAYLOAD))
            return

        # At most one live upstream per session.
        await self._teardown()

        logger.info(
            "session=%s starting Deepgram stream model=%s language=%s",
            self.id,
            self._settings.model,
            message.language,
        )
        try:
            handle = self._upstream.open(self._stream_config(message), self.on_upstream_event)
        except UpstreamConnectError as exc:
            logger.warning("session=%s upstream rejected configuration: %s", self.id, exc)
            self._state = SessionState.CLOSED
            await self._send(build_error(str(exc), error_type=WS_ERROR_UPSTREAM_UNAVAILABLE))
            return

        self._handle = handle
        self._audio_chunk_count = 0
        self._drop_warned = False
        self._state = SessionState.CONNECTING

    async def _on_audio(self, message: AudioMessage) -> None:
        handle = self._handle
        if handle is None:
            return
        if self._state is not SessionState.STREAMING or handle.ready_state() is not ReadyState.OPEN:
            if not self._drop_warned:
                logger.warning(
                    "session=%s Deepgram not ready (state: %s); dropping audio",
                    self.id,
                    handle.ready_state().value,
                )
                self._drop_warned = True
            return

        audio = decode_audio(message.audio)
        if not audio:
            logger.warning("session=%s skipping zero-byte audio chunk", self.id)
            return

        await handle.send(audio)
        self._audio_chunk_count += 1
        self._drop_warned = False
        if self._audio_chunk_count % _AUDIO_LOG_EVERY == 1:
            logger.info(
                "session=%s audio streaming (chunk #%d, %d bytes)",
                self.id,
                self._audio_chunk_count,
                len(audio),
            )

    async def _on_stop(self, _message: StopMessage) -> None:
        logger.info("session=%s stopping transcription", self.id)
        if await self._teardown():
            await self._send(build_status(WS_STATUS_STOPPED, "Stopped"))

    async def _teardown(self) -> bool:
        """Finish the live upstream (if any). Returns True if there was one."""
        handle = self._handle
        self._cancel_keepalive()
        self._audio_chunk_count = 0
        if handle is None:
            return False

        self._state = SessionState.STOPPING
        self._handle = None
        try:
            await handle.finish()
        except Exception:
            logger.debug("session=%s upstream finish failed", self.id, exc_info=True)
        self._state = SessionState.CLOSED
        return True

    def _cancel_keepalive(self) -> None:
        if self._keepalive is not None:
            self._keepalive.cancel()
            self._keepalive = None

    # Upstream side

    async def on_upstream_event(self, handle: UpstreamHandle, event: UpstreamEvent) -> None:
        async with self._lock:
            if handle is not self._handle:
                logger.debug("session=%s dropping %s from stale upstream", self.id, event.kind.value)
                return
            try:
                await self._event_handlers[event.kind](handle, event)
            except Exception:
                logger.exception("session=%s upstream event handling error (%s)", self.id, event.kind.value)

    async def _keepalive_tick(self, handle: UpstreamHandle) -> bool:
        if handle is not self._handle or self._state is not SessionState.STREAMING:
            return False
        if handle.ready_state() is ReadyState.OPEN:
            await handle.keepalive()
            logger.debug("session=%s keep-alive sent", self.id)
        return True

    async def _on_opened(self, handle: UpstreamHandle, _event: UpstreamEvent) -> None:
        if self._state is not SessionState.CONNECTING:
            return
        self._state = SessionState.STREAMING
        logger.info("session=%s Deepgram connection established", self.id)
        await self._send(build_status(WS_STATUS_CONNECTED, f"Connected to Deepgram {self._settings.model}"))

        self._cancel_keepalive()
        self._keepalive = KeepAliveTimer(self._settings.keepalive_interval_s, lambda: self._keepalive_tick(handle))
        self._keepalive.start()

    async def _on_transcript(self, _handle: UpstreamHandle, event: UpstreamEvent) -> None:
        envelope = build_transcript(event.payload)
        if envelope is None:
            return
        data = envelope["data"]
        logger.info(
            "session=%s %s (%d words): %r",
            self.id,
            "FINAL" if data["isFinal"] else "INTERIM",
            len(data["text"].split()),
            data["text"],
        )
        await self._send(envelope)

    async def _on_utterance_end(self, _handle: UpstreamHandle, _event: UpstreamEvent) -> None:
        logger.info("session=%s utterance ended", self.id)
        await self._send(build_utterance_end())

    async def _on_speech_started(self, _handle: UpstreamHandle, _event: UpstreamEvent) -> None:
        logger.info("session=%s speech detected", self.id)
        await self._send(build_speech_started())

    async def _on_metadata(self, _handle: UpstreamHandle, event: UpstreamEvent) -> None:
        envelope = build_metadata(event.payload)
        logger.info("session=%s metadata: %s", self.id, envelope["data"])
        await self._send(envelope)

    async def _on_error(self, handle: UpstreamHandle, event: UpstreamEvent) -> None:
        error = event.error
        if error is None:
            return
        logger.error(
            "session=%s Deepgram error: message=%s status=%s type=%s request_id=%s",
            self.id,
            error.message,
            error.status_code,
            error.error_type,
            error.request_id,
        )
        self._cancel_keepalive()
        self._handle = None
        self._audio_chunk_count = 0
        self._state = SessionState.CLOSED
        await self._send(build_upstream_error(error))

        if handle.ready_state() is ReadyState.OPEN:
            try:
                await handle.finish()
            except Exception:
                logger.debug("session=%s upstream finish after error failed", self.id, exc_info=True)

    async def _on_closed(self, _handle: UpstreamHandle, event: UpstreamEvent) -> None:
        logger.info("session=%s Deepgram connection closed (code: %s)", self.id, event.close_code)
        self._cancel_keepalive()
        self._handle = None
        self._audio_chunk_count = 0
        self._state = SessionState.CLOSED
        await self._send(build_status(WS_STATUS_CLOSED, "Deepgram connection closed"))


__all__ = ["Session", "decode_audio"]
