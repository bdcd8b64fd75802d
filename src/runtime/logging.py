"""Logging initialization."""

from __future__ import annotations

import os
import logging

from src.config.logging import LOG_LEVEL, LOG_FORMAT, ENV_SHOW_WEBSOCKETS_LOGS


def configure_logging() -> None:
    # The websockets client logs every frame at DEBUG. Keep it tame unless explicitly enabled.
    if (os.getenv(ENV_SHOW_WEBSOCKETS_LOGS) or "").strip().lower() not in {"1", "true", "yes"}:
        logging.getLogger("websockets").setLevel(logging.WARNING)
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)


__all__ = ["configure_logging"]
