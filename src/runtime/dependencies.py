"""Runtime dependency construction (upstream adapter + admission control)."""

from __future__ import annotations

import logging

from src.state import RuntimeDeps
from src.upstream import DeepgramAdapter
from src.state.settings import AppSettings
from src.handlers.connections import ConnectionManager

from .settings import load_settings

logger = logging.getLogger(__name__)


def build_runtime_deps(settings: AppSettings | None = None) -> RuntimeDeps:
    settings = settings or load_settings()

    upstream = DeepgramAdapter(
        url=settings.deepgram.url,
        open_timeout_s=settings.deepgram.open_timeout_s,
        finish_grace_s=settings.deepgram.finish_grace_s,
    )
    connections = ConnectionManager(max_connections=settings.limits.max_concurrent_connections)

    logger.info(
        "runtime: model=%s version=%s max_connections=%s",
        settings.deepgram.model,
        settings.deepgram.model_version,
        settings.limits.max_concurrent_connections,
    )
    return RuntimeDeps(connections=connections, upstream=upstream, settings=settings)


__all__ = ["RuntimeDeps", "build_runtime_deps"]
