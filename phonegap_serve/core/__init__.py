"""Core building blocks: events, configuration, network and logging helpers."""

from .config_manager import ServerConfiguration, resolve_config
from .events import FORWARDED_EVENTS, EventEmitter, forward_events
from .exceptions import ListenerStateError, PipelineError, ServeError, UnhandledErrorEvent
from .network import get_local_ip

__all__ = [
    "FORWARDED_EVENTS",
    "EventEmitter",
    "ListenerStateError",
    "PipelineError",
    "ServeError",
    "ServerConfiguration",
    "UnhandledErrorEvent",
    "forward_events",
    "get_local_ip",
    "resolve_config",
]
