"""HTTP layer: the listener and its middleware."""

from .server import AppServer, ListenerState, ReadyInfo

__all__ = ["AppServer", "ListenerState", "ReadyInfo"]
