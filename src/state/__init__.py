from .runtime import RuntimeDeps
from .session import SessionState
from .settings import AppSettings
from .stream import ReadyState, StreamConfig
from .events import UpstreamError, UpstreamEvent, UpstreamEventKind
from .envelope import AudioMessage, StopMessage, StartMessage, ClientMessage

__all__ = [
    "AppSettings",
    "AudioMessage",
    "ClientMessage",
    "ReadyState",
    "RuntimeDeps",
    "SessionState",
    "StartMessage",
    "StopMessage",
    "StreamConfig",
    "UpstreamError",
    "UpstreamEvent",
    "UpstreamEventKind",
]
