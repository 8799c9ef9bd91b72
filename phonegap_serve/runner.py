"""Run a server in the foreground until SIGINT/SIGTERM."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
from collections.abc import Mapping
from typing import Any, Optional

from phonegap_serve.api.server import AppServer, ListenerState, ReadyInfo
from phonegap_serve.serve import listen

logger = logging.getLogger(__name__)

# Bus "log" events are written here
cli_logger = logging.getLogger("phonegap_serve.cli")


def attach_console(server: AppServer, stop_event: asyncio.Event) -> None:
    """Write the server's events to the log and stop on startup failure."""

    def on_log(*args: Any) -> None:
        cli_logger.info(" ".join(str(arg) for arg in args))

    def on_error(exc: Any) -> None:
        cli_logger.error("%s", exc)
        if server.state is ListenerState.FAULTED:
            stop_event.set()

    def on_complete(info: ReadyInfo) -> None:
        cli_logger.info("Open %s on your device", info.url)

    server.on("log", on_log)
    server.on("error", on_error)
    server.on("complete", on_complete)


async def serve_until_stopped(
    options: Mapping[str, Any],
    stop_event: Optional[asyncio.Event] = None,
) -> int:
    """Serve until ``stop_event`` is set (by a signal if we own it).

    Args:
        options: Options for :func:`phonegap_serve.listen`
        stop_event: Optional external stop event. If provided, signal
            handlers are not registered (caller owns signal handling).

    Returns:
        Process exit code: 0 on a clean stop, 1 if the server faulted
    """
    own_signals = stop_event is None
    stop_event = stop_event or asyncio.Event()

    server = listen(options)
    attach_console(server, stop_event)

    if own_signals:
        loop = asyncio.get_running_loop()

        def _on_signal() -> None:
            logger.info("Shutdown signal received")
            stop_event.set()

        for sig in (signal.SIGINT, signal.SIGTERM):
            with contextlib.suppress(NotImplementedError):
                loop.add_signal_handler(sig, _on_signal)

    await stop_event.wait()
    faulted = server.state is ListenerState.FAULTED
    await server.close()
    return 1 if faulted else 0
