"""Service identity reported by the health endpoint."""

from __future__ import annotations

SERVICE_NAME = "Deepgram Real-time Transcription Server"
SERVICE_VERSION = "2.0.0"

__all__ = ["SERVICE_NAME", "SERVICE_VERSION"]
