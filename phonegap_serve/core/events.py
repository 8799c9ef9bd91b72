"""Named-event emitter and event forwarding.

Usage:
    emitter = EventEmitter()

    def on_log(*args):
        print("log:", args)

    emitter.on("log", on_log)
    emitter.emit("log", 200, "/index.html")

Subscribers are called synchronously, in registration order. A subscriber
that returns an awaitable has it scheduled on the running event loop.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping
from types import MappingProxyType
from typing import Any

from .exceptions import UnhandledErrorEvent

logger = logging.getLogger(__name__)

Listener = Callable[..., Any]

# Pipeline event name -> server event name
FORWARDED_EVENTS: Mapping[str, str] = MappingProxyType({"error": "error", "log": "log"})


class EventEmitter:
    """Ordered publish/subscribe by event name.

    Emitting ``error`` with no ``error`` subscriber raises
    :class:`UnhandledErrorEvent`. Exceptions raised by subscribers are logged
    and do not reach the emitter or the remaining subscribers.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}
        self._pending: set[asyncio.Future[Any]] = set()

    def on(self, event: str, callback: Listener) -> EventEmitter:
        """Subscribe ``callback`` to ``event``.

        Args:
            event: Event name (e.g. "log")
            callback: Called with the emitted positional arguments

        Returns:
            self, so subscriptions can be chained
        """
        self._listeners.setdefault(event, []).append(callback)
        logger.debug("Subscribed %s to %r", getattr(callback, "__qualname__", callback), event)
        return self

    def once(self, event: str, callback: Listener) -> EventEmitter:
        """Subscribe ``callback`` for the next emission of ``event`` only."""

        def _once(*args: Any) -> Any:
            self.off(event, _once)
            return callback(*args)

        _once.listener = callback  # type: ignore[attr-defined]
        return self.on(event, _once)

    def off(self, event: str, callback: Listener) -> EventEmitter:
        """Remove the most recently added subscription of ``callback``.

        Subscriptions made with :meth:`once` can be removed by passing the
        original callback.
        """
        handlers = self._listeners.get(event)
        if not handlers:
            return self
        for index in range(len(handlers) - 1, -1, -1):
            handler = handlers[index]
            if handler is callback or getattr(handler, "listener", None) is callback:
                del handlers[index]
                break
        if not handlers:
            del self._listeners[event]
        return self

    def remove_all_listeners(self, event: str | None = None) -> EventEmitter:
        if event is None:
            self._listeners.clear()
        else:
            self._listeners.pop(event, None)
        return self

    def listeners(self, event: str) -> list[Listener]:
        return list(self._listeners.get(event, ()))

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, ()))

    def event_names(self) -> list[str]:
        return list(self._listeners)

    def emit(self, event: str, *args: Any) -> bool:
        """Call every subscriber of ``event`` with ``args``.

        Args:
            event: Event name
            *args: Positional payload, passed through untouched

        Returns:
            True if the event had subscribers, False otherwise

        Raises:
            UnhandledErrorEvent: ``event`` is "error" and nobody subscribed
        """
        handlers = list(self._listeners.get(event, ()))
        if not handlers:
            if event == "error":
                payload = args[0] if args else None
                cause = payload if isinstance(payload, BaseException) else None
                raise UnhandledErrorEvent(payload) from cause
            return False

        for handler in handlers:
            try:
                result = handler(*args)
            except Exception:
                logger.exception(
                    "Subscriber %s failed while handling %r",
                    getattr(handler, "__qualname__", handler),
                    event,
                )
                continue
            if inspect.isawaitable(result):
                self._schedule(event, result)
        return True

    def _schedule(self, event: str, awaitable: Awaitable[Any]) -> None:
        try:
            future = asyncio.ensure_future(awaitable, loop=asyncio.get_running_loop())
        except RuntimeError:
            logger.warning("No running event loop; dropping async subscriber for %r", event)
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            return

        self._pending.add(future)

        def _done(fut: asyncio.Future[Any]) -> None:
            self._pending.discard(fut)
            if fut.cancelled():
                return
            exc = fut.exception()
            if exc is not None:
                logger.error("Async subscriber failed while handling %r", event, exc_info=exc)

        future.add_done_callback(_done)


def forward_events(
    source: EventEmitter,
    target: EventEmitter,
    table: Mapping[str, str] | None = None,
) -> list[tuple[str, Listener]]:
    """Re-emit events from ``source`` on ``target``.

    Each entry of ``table`` maps a source event name to a target event name.
    Arguments are passed through with the same count, order and identity.

    Args:
        source: Emitter whose events are mirrored (e.g. the pipeline)
        target: Emitter that re-emits them (e.g. the server)
        table: Forwarding table, FORWARDED_EVENTS by default

    Returns:
        (source event, relay) pairs, usable with ``source.off`` to unwire
    """
    if table is None:
        table = FORWARDED_EVENTS

    wired: list[tuple[str, Listener]] = []
    for source_event, target_event in table.items():
        relay = _make_relay(target, target_event)
        source.on(source_event, relay)
        wired.append((source_event, relay))
    logger.debug("Forwarding %s", ", ".join(f"{s}->{t}" for s, t in table.items()))
    return wired


def _make_relay(target: EventEmitter, target_event: str) -> Listener:
    def relay(*args: Any) -> None:
        target.emit(target_event, *args)

    relay.__qualname__ = f"relay[{target_event}]"
    return relay
