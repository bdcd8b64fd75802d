"""WebSocket connection admission control and session registry."""

from __future__ import annotations

import asyncio
import logging
import itertools
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.realtime import Session

logger = logging.getLogger(__name__)


class ConnectionManager:
    def __init__(self, *, max_connections: int) -> None:
        self._max = max(1, int(max_connections))
        self._lock = asyncio.Lock()
        self._ids = itertools.count(1)
        self._sessions: dict[int, Session | None] = {}

    async def connect(self) -> int | None:
        """Reserve a slot and allocate a session id, or return None at capacity."""
        async with self._lock:
            if len(self._sessions) >= self._max:
                return None
            session_id = next(self._ids)
            self._sessions[session_id] = None
            return session_id

    async def register(self, session: Session) -> None:
        async with self._lock:
            self._sessions[session.id] = session

    async def disconnect(self, session_id: int) -> None:
        async with self._lock:
            self._sessions.pop(session_id, None)

    def get_connection_count(self) -> int:
        return len(self._sessions)

    async def close_all(self) -> None:
        async with self._lock:
            sessions = [s for s in self._sessions.values() if s is not None]
        for session in sessions:
            try:
                await session.close()
            except Exception:
                logger.exception("session=%s close failed during shutdown", session.id)


__all__ = ["ConnectionManager"]
