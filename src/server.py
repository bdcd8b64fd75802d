"""Main FastAPI server for the Deepgram real-time transcription relay."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from contextlib import asynccontextmanager
from collections.abc import Callable

from fastapi import FastAPI, WebSocket
from fastapi.responses import ORJSONResponse

from src.state import RuntimeDeps
from src.config.websocket import WS_ENDPOINT_PATH
from src.runtime.logging import configure_logging
from src.runtime.dependencies import build_runtime_deps
from src.handlers.websocket.manager import handle_websocket_connection

logger = logging.getLogger(__name__)

DepsFactory = Callable[[], RuntimeDeps]


def create_app(deps_factory: DepsFactory = build_runtime_deps) -> FastAPI:
    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        runtime_deps = deps_factory()
        app.state.runtime_deps = runtime_deps
        logger.info("runtime: ready on %s", WS_ENDPOINT_PATH)
        try:
            yield
        finally:
            logger.info("runtime: shutting down")
            await runtime_deps.shutdown()

    app = FastAPI(default_response_class=ORJSONResponse, lifespan=_lifespan)

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/health")
    async def health() -> dict[str, str]:
        settings = app.state.runtime_deps.settings
        return {
            "status": "ok",
            "service": settings.service.name,
            "version": settings.service.version,
            "model": settings.deepgram.model,
            "modelVersion": settings.deepgram.model_version,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.get("/")
    async def root() -> dict[str, str]:
        return {"status": "ok"}

    @app.websocket(WS_ENDPOINT_PATH)
    async def websocket_endpoint(websocket: WebSocket) -> None:
        runtime_deps = getattr(app.state, "runtime_deps", None)
        if runtime_deps is None:
            raise RuntimeError("Runtime dependencies are not initialized")
        await handle_websocket_connection(websocket, runtime_deps)

    return app


configure_logging()

app = create_app()
