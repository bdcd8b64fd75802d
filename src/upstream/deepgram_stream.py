"""One Deepgram live-listen stream over a client WebSocket."""

from __future__ import annotations

import asyncio
import logging
import contextlib

from websockets import connect
from websockets.protocol import State
from websockets.asyncio.client import ClientConnection
from websockets.exceptions import InvalidStatus, ConnectionClosed, InvalidHandshake

from src.state import ReadyState, UpstreamError, UpstreamEvent, UpstreamEventKind
from src.config.deepgram import DEEPGRAM_MSG_KEEPALIVE, DEEPGRAM_MSG_CLOSE_STREAM

from .handle import EventSink
from .deepgram_messages import decode_message, error_from_close, error_from_handshake

logger = logging.getLogger(__name__)

_WS_READY_STATES: dict[State, ReadyState] = {
    State.CONNECTING: ReadyState.CONNECTING,
    State.OPEN: ReadyState.OPEN,
    State.CLOSING: ReadyState.CLOSING,
    State.CLOSED: ReadyState.CLOSED,
}


class DeepgramStreamHandle:
    """One live-listen stream. Owns the provider socket and its receive task."""

    def __init__(
        self,
        *,
        url: str,
        api_key: str,
        on_event: EventSink,
        open_timeout_s: float,
        finish_grace_s: float,
    ) -> None:
        self._url = url
        self._headers = {"Authorization": f"token {api_key}"}
        self._on_event = on_event
        self._open_timeout_s = float(open_timeout_s)
        self._finish_grace_s = float(finish_grace_s)

        self._ws: ClientConnection | None = None
        self._task: asyncio.Task | None = None
        self._close_task: asyncio.Task | None = None
        self._finishing = False
        self._closed = False

    def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._run())

    def ready_state(self) -> ReadyState:
        if self._closed:
            return ReadyState.CLOSED
        if self._ws is None:
            return ReadyState.CLOSING if self._finishing else ReadyState.CONNECTING
        state = _WS_READY_STATES.get(self._ws.state, ReadyState.CLOSED)
        if self._finishing and state is ReadyState.OPEN:
            return ReadyState.CLOSING
        return state

    async def send(self, audio: bytes) -> None:
        if not audio or self.ready_state() is not ReadyState.OPEN:
            return
        await self._send(audio)

    async def keepalive(self) -> None:
        if self.ready_state() is not ReadyState.OPEN:
            return
        await self._send(DEEPGRAM_MSG_KEEPALIVE)

    async def finish(self) -> None:
        """Ask Deepgram to flush and close; force the close after a grace period."""
        if self._finishing or self._closed:
            return
        self._finishing = True

        if self._ws is None:
            # Still handshaking; nothing to flush.
            if self._task is not None:
                self._task.cancel()
            return

        await self._send(DEEPGRAM_MSG_CLOSE_STREAM)
        self._close_task = asyncio.create_task(self._close_after_grace())

    async def _send(self, data: bytes | str) -> None:
        ws = self._ws
        if ws is None:
            return
        try:
            await ws.send(data)
        except ConnectionClosed:
            logger.debug("Deepgram send after close ignored")

    async def _close_after_grace(self) -> None:
        await asyncio.sleep(self._finish_grace_s)
        if self._ws is not None and not self._closed:
            logger.debug("Deepgram did not close within %.1fs of CloseStream; closing", self._finish_grace_s)
            with contextlib.suppress(Exception):
                await self._ws.close()

    async def _emit(self, event: UpstreamEvent) -> None:
        try:
            await self._on_event(self, event)
        except Exception:
            logger.exception("upstream event sink failed for %s", event.kind.value)

    async def _connect(self) -> ClientConnection | None:
        try:
            return await connect(
                self._url,
                additional_headers=self._headers,
                open_timeout=self._open_timeout_s,
                ping_interval=10,
                ping_timeout=10,
                close_timeout=5,
                max_queue=32,
            )
        except InvalidStatus as exc:
            response = exc.response
            error = error_from_handshake(response.status_code, response.headers, response.body)
        except (InvalidHandshake, OSError, TimeoutError) as exc:
            error = UpstreamError(message=f"Could not connect to Deepgram: {exc}")
        await self._emit(UpstreamEvent(kind=UpstreamEventKind.ERROR, error=error))
        return None

    async def _receive(self, ws: ClientConnection) -> int | None:
        try:
            async for raw in ws:
                if isinstance(raw, (bytes, bytearray)):
                    continue
                event = decode_message(raw)
                if event is not None:
                    await self._emit(event)
        except ConnectionClosed:
            pass

        error = error_from_close(ws.close_code, ws.close_reason)
        if error is not None:
            await self._emit(UpstreamEvent(kind=UpstreamEventKind.ERROR, error=error))
        return ws.close_code

    async def _run(self) -> None:
        close_code: int | None = None
        try:
            ws = await self._connect()
            if ws is not None:
                self._ws = ws
                await self._emit(UpstreamEvent(kind=UpstreamEventKind.OPENED))
                close_code = await self._receive(ws)
        except asyncio.CancelledError:
            self._closed = True
            await self._shutdown_socket()
            raise
        except Exception:
            logger.exception("Deepgram receiver crashed")

        self._closed = True
        await self._shutdown_socket()
        await self._emit(UpstreamEvent(kind=UpstreamEventKind.CLOSED, close_code=close_code))

    async def _shutdown_socket(self) -> None:
        if self._close_task is not None and not self._close_task.done():
            self._close_task.cancel()
        if self._ws is not None:
            with contextlib.suppress(Exception):
                await self._ws.close()


__all__ = ["DeepgramStreamHandle"]
