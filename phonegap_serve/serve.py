"""Serve an app to a device over the local network.

``listen()`` builds the request pipeline, binds it to an :class:`AppServer`
and returns the server, which doubles as the event bus for everything that
happens afterwards.

Events on the returned server:

- ``complete`` (ReadyInfo): the server is listening; fired once
- ``error`` (exc): transport or pipeline fault
- ``log`` (*args): ``(status, path)`` per request, ``("listening on",
  "address:port")`` at startup, plus whatever the pipeline logs
- ``listening``, ``request``, ``close``: native server events

Example::

    server = listen({"port": 3000, "www": "app/www"})
    server.on("complete", lambda info: print("open", info.url))
    server.on("error", lambda exc: print("error:", exc))
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any, Optional, Union

from aiohttp import web

from phonegap_serve.api.server import AppServer, ReadyInfo
from phonegap_serve.core.config_manager import (
    DEFAULT_HOST,
    ServerConfiguration,
    get_config_value,
    resolve_config,
)
from phonegap_serve.core.events import forward_events
from phonegap_serve.core.network import get_local_ip
from phonegap_serve.pipeline import create_pipeline

logger = logging.getLogger(__name__)

PipelineFactory = Callable[[Mapping[str, Any]], Any]
AddressResolver = Callable[[], str]


def listen(
    options: Union[Mapping[str, Any], ServerConfiguration, None] = None,
    *,
    pipeline_factory: Optional[PipelineFactory] = None,
    address_resolver: Optional[AddressResolver] = None,
) -> AppServer:
    """Create, wire and start the server.

    Must be called from a coroutine running on an event loop. Returns before
    the socket is bound; attach ``complete`` subscribers right away.

    Args:
        options: Server options. ``port`` defaults to 3000, ``host`` to
            0.0.0.0; all options are passed to the pipeline factory.
        pipeline_factory: Builds the pipeline from the options
            (default: :func:`phonegap_serve.pipeline.create_pipeline`)
        address_resolver: Returns the address reported in ReadyInfo
            (default: :func:`phonegap_serve.core.network.get_local_ip`)

    Returns:
        The started server. Failures, including invalid options, are
        reported through its ``error`` event rather than raised.

    Raises:
        RuntimeError: called outside a running event loop
    """
    pipeline_factory = pipeline_factory or create_pipeline
    address_resolver = address_resolver or get_local_ip
    host = get_config_value(options or {}, "host") or DEFAULT_HOST

    try:
        config = resolve_config(options)
        pipeline = pipeline_factory(config.as_options())
    except Exception as exc:
        logger.error("Cannot start server: %s", exc)
        server = AppServer(_unavailable, host=host)
        server.on("error", _absorb_error)
        return server.fail(exc)

    server = AppServer(pipeline, host=host)
    server.on("error", _absorb_error)
    _wire_request_log(server)
    _wire_ready(server, config.port, address_resolver)
    if callable(getattr(pipeline, "on", None)):
        forward_events(pipeline, server)
    else:
        logger.warning("Pipeline %r is not an event source; its events are not forwarded", pipeline)

    logger.debug("Starting server on %s:%d", host, config.port)
    return server.listen(config.port)


def _absorb_error(*_args: Any) -> None:
    """Default ``error`` subscriber; nothing else is needed for it to count."""


def _wire_request_log(server: AppServer) -> None:
    def on_request(request: web.BaseRequest, response: web.StreamResponse) -> None:
        server.emit("log", response.status, request.path_qs)

    server.on("request", on_request)


def _wire_ready(server: AppServer, port: int, address_resolver: AddressResolver) -> None:
    def on_listening() -> None:
        info = ReadyInfo(address=address_resolver(), port=port, server=server)
        server.emit("log", "listening on", f"{info.address}:{info.port}")
        server.emit("complete", info)

    server.once("listening", on_listening)


async def _unavailable(_request: web.Request) -> web.StreamResponse:
    raise web.HTTPServiceUnavailable()
