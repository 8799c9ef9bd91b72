"""phonegap_serve.api.server: the HTTP listener that is also the event bus.

``AppServer`` wraps an aiohttp ``AppRunner``/``TCPSite`` pair around a single
request pipeline. It is an :class:`EventEmitter`; callers subscribe to it
directly and the bootstrapper mirrors pipeline events onto it.

Lifecycle (``ListenerState``): CREATED -> STARTING -> LISTENING -> CLOSED,
with any state able to end in FAULTED on a transport error.

Native events emitted here:
- ``listening``: the socket is bound
- ``request`` (request, response): after every dispatch to the pipeline
- ``error`` (exc): transport fault, or exception escaping the pipeline
- ``close``: after :meth:`AppServer.close`

The server itself never registers an ``error`` subscriber; see
``phonegap_serve.serve.listen`` for the wiring that makes errors harmless.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from aiohttp import web

from phonegap_serve.api.middleware import request_id_middleware
from phonegap_serve.core.config_manager import DEFAULT_HOST
from phonegap_serve.core.events import EventEmitter
from phonegap_serve.core.exceptions import ListenerStateError
from phonegap_serve.core.network import format_url

logger = logging.getLogger(__name__)

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


class ListenerState(str, Enum):
    """Lifecycle states of an AppServer."""

    CREATED = "created"
    STARTING = "starting"
    LISTENING = "listening"
    CLOSED = "closed"
    FAULTED = "faulted"


@dataclass(frozen=True)
class ReadyInfo:
    """Payload of the ``complete`` event.

    Attributes:
        address: Local network address devices should connect to
        port: Port the server was asked to bind
        server: The running server
    """

    address: str
    port: int
    server: AppServer = field(repr=False, compare=False)

    @property
    def url(self) -> str:
        return format_url(self.address, self.port)


class AppServer(EventEmitter):
    """HTTP listener dispatching every request to one pipeline."""

    def __init__(self, pipeline: Handler, *, host: str = DEFAULT_HOST) -> None:
        """Create the listener; nothing is bound until :meth:`listen`.

        Args:
            pipeline: Awaitable request handler, ``await pipeline(request)``
            host: Interface to bind
        """
        super().__init__()
        self.pipeline = pipeline
        self.host = host
        self.port: Optional[int] = None
        self.state = ListenerState.CREATED
        self.app = self._make_app()
        self._runner: Optional[web.AppRunner] = None
        self._start_task: Optional[asyncio.Task[None]] = None

    def _make_app(self) -> web.Application:
        @web.middleware
        async def request_hook(request: web.Request, handler: Handler) -> web.StreamResponse:
            try:
                response = await handler(request)
            except web.HTTPException as exc:
                self.emit("request", request, exc)
                raise
            self.emit("request", request, response)
            return response

        app = web.Application(middlewares=[request_id_middleware, request_hook])
        app.router.add_route("*", "/{tail:.*}", self._dispatch)
        return app

    async def _dispatch(self, request: web.Request) -> web.StreamResponse:
        try:
            return await self.pipeline(request)
        except web.HTTPException:
            raise
        except Exception as exc:
            logger.debug("Pipeline raised while handling %s %s", request.method, request.path)
            self.emit("error", exc)
            raise web.HTTPInternalServerError() from exc

    @property
    def url(self) -> Optional[str]:
        if self.port is None:
            return None
        return format_url(self.host, self.port)

    def listen(self, port: int) -> AppServer:
        """Start binding ``port`` on the running event loop.

        Returns immediately; ``listening`` (or ``error``) is emitted once the
        transport has finished.

        Args:
            port: TCP port to bind

        Returns:
            self

        Raises:
            ListenerStateError: the server was already started
            RuntimeError: no event loop is running
        """
        if self.state is not ListenerState.CREATED:
            raise ListenerStateError(f"listen() called on a server that is {self.state.value}")

        loop = asyncio.get_running_loop()
        self.port = port
        self._set_state(ListenerState.STARTING)
        self._start_task = loop.create_task(self._start(port), name=f"phonegap-serve:{port}")
        return self

    async def _start(self, port: int) -> None:
        runner = web.AppRunner(self.app, handle_signals=False, access_log=None)
        self._runner = runner
        try:
            await runner.setup()
            site = web.TCPSite(runner, host=self.host, port=port)
            await site.start()
        except Exception as exc:
            logger.error("Failed to start server on %s:%d: %s", self.host, port, exc)
            await self._cleanup_runner()
            self._fault(exc)
            return

        self._set_state(ListenerState.LISTENING)
        logger.info("Server started successfully on %s:%d", self.host, port)
        self.emit("listening")

    def fail(self, exc: BaseException) -> AppServer:
        """Fault a server that was never started.

        The error is emitted on the next loop iteration so that subscribers
        attached by the caller after this returns still receive it.
        """
        if self.state is not ListenerState.CREATED:
            raise ListenerStateError(f"fail() called on a server that is {self.state.value}")
        self._set_state(ListenerState.FAULTED)
        asyncio.get_running_loop().call_soon(self.emit, "error", exc)
        return self

    def _fault(self, exc: BaseException) -> None:
        self._set_state(ListenerState.FAULTED)
        self.emit("error", exc)

    def _set_state(self, state: ListenerState) -> None:
        logger.debug("Listener %s -> %s", self.state.value, state.value)
        self.state = state

    async def wait_started(self) -> ListenerState:
        """Wait until the start attempt is over and return the resulting state."""
        if self._start_task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await asyncio.shield(self._start_task)
        return self.state

    async def close(self) -> None:
        """Stop accepting connections and release the socket.

        Safe to call in any state and more than once; ``close`` is emitted
        only the first time.
        """
        if self.state is ListenerState.CLOSED:
            return

        if self._start_task is not None and not self._start_task.done():
            self._start_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._start_task

        await self._cleanup_runner()
        self._set_state(ListenerState.CLOSED)
        logger.info("Server shutdown complete")
        self.emit("close")

    async def _cleanup_runner(self) -> None:
        runner, self._runner = self._runner, None
        if runner is not None and runner.server is not None:
            await runner.cleanup()

    def __repr__(self) -> str:
        return f"<AppServer {self.host}:{self.port} {self.state.value}>"
