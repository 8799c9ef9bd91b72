"""Test doubles and helpers shared by the phonegap_serve tests."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional

from aiohttp import web

from phonegap_serve.core.events import EventEmitter


class FakePipeline(EventEmitter):
    """Pipeline double: answers every request with ``status`` and records requests."""

    def __init__(self, options: Optional[dict[str, Any]] = None, status: int = 200) -> None:
        super().__init__()
        self.options = options
        self.status = status
        self.seen: list[str] = []
        self.raise_exc: Optional[BaseException] = None

    async def __call__(self, request: web.Request) -> web.StreamResponse:
        self.seen.append(request.path_qs)
        if self.raise_exc is not None:
            raise self.raise_exc
        return web.Response(text="ok", status=self.status)


class EventRecorder:
    """Collects emitted events as (name, args) tuples, in order."""

    def __init__(self, emitter: EventEmitter, *names: str) -> None:
        self.events: list[tuple[str, tuple[Any, ...]]] = []
        for name in names:
            emitter.on(name, self._make(name))

    def _make(self, name: str) -> Callable[..., None]:
        def record(*args: Any) -> None:
            self.events.append((name, args))

        return record

    def args(self, name: str) -> list[tuple[Any, ...]]:
        return [args for event, args in self.events if event == name]


async def next_event(emitter: EventEmitter, name: str, timeout: float = 5.0) -> tuple[Any, ...]:
    """Wait for the next ``name`` event and return its arguments."""
    future: asyncio.Future[tuple[Any, ...]] = asyncio.get_running_loop().create_future()

    def resolve(*args: Any) -> None:
        if not future.done():
            future.set_result(args)

    emitter.once(name, resolve)
    return await asyncio.wait_for(future, timeout)
