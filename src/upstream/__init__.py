from .adapter import UpstreamAdapter
from .deepgram import DeepgramAdapter
from .errors import UpstreamConnectError
from .handle import EventSink, UpstreamHandle
from .deepgram_stream import DeepgramStreamHandle

__all__ = [
    "DeepgramAdapter",
    "DeepgramStreamHandle",
    "EventSink",
    "UpstreamAdapter",
    "UpstreamConnectError",
    "UpstreamHandle",
]
