"""Default request pipeline: serve the app's ``www`` directory to the device.

Any object can act as a pipeline as long as it is an :class:`EventEmitter`
(emitting ``log`` and ``error``) and an awaitable request handler::

    response = await pipeline(request)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

from aiohttp import web

from phonegap_serve.core.events import EventEmitter
from phonegap_serve.core.exceptions import PipelineError

logger = logging.getLogger(__name__)

DEFAULT_WWW = "www"
DEFAULT_INDEX = "index.html"

# Sent with every served file
NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


class StaticPipeline(EventEmitter):
    """Serves files below ``www``; directories resolve to ``index``.

    Options:
        www: Directory holding the app (default "www", relative to cwd)
        index: File served for directory requests (default "index.html")

    Other options are ignored.
    """

    def __init__(self, options: Optional[Mapping[str, Any]] = None) -> None:
        super().__init__()
        options = options or {}
        self.root = Path(options.get("www") or DEFAULT_WWW).expanduser().resolve()
        self.index = str(options.get("index") or DEFAULT_INDEX)
        logger.debug("Serving %s (index: %s)", self.root, self.index)

    async def __call__(self, request: web.Request) -> web.StreamResponse:
        if request.method not in ("GET", "HEAD"):
            raise web.HTTPMethodNotAllowed(request.method, ["GET", "HEAD"])

        target = self._resolve(request.path)
        if target is None:
            self.emit("log", "blocked", request.path)
            raise web.HTTPForbidden()

        try:
            if target.is_dir():
                target = target / self.index
            if not target.is_file():
                raise web.HTTPNotFound()
        except OSError as exc:
            self.emit("error", PipelineError(f"Cannot read {target}: {exc}", path=request.path))
            raise web.HTTPInternalServerError() from exc

        return web.FileResponse(target, headers=NO_CACHE_HEADERS)

    def _resolve(self, path: str) -> Optional[Path]:
        """Map a URL path onto the filesystem; None if it escapes the root."""
        candidate = (self.root / path.lstrip("/")).resolve()
        if candidate != self.root and self.root not in candidate.parents:
            return None
        return candidate


def create_pipeline(options: Mapping[str, Any]) -> StaticPipeline:
    """Pipeline factory used by ``listen()`` unless another one is injected."""
    return StaticPipeline(options)
