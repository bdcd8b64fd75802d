from .session import Session
from .keepalive import KeepAliveTimer

__all__ = ["KeepAliveTimer", "Session"]
