"""Request ID middleware.

Tags each request with an ID taken from the client (X-Request-ID or
X-Correlation-ID) or freshly generated, so log lines from one device request
can be grouped together.
"""

import uuid
from collections.abc import Awaitable, Callable
from contextvars import ContextVar

from aiohttp import web

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


@web.middleware
async def request_id_middleware(
    request: web.Request, handler: Callable[[web.Request], Awaitable[web.StreamResponse]]
) -> web.StreamResponse:
    """Extract or generate the request ID.

    The ID is stored in a context variable (see :func:`get_request_id`), on
    the request as ``request["request_id"]`` and echoed back in the
    X-Request-ID response header.
    """
    request_id = (
        request.headers.get("X-Request-ID")
        or request.headers.get("X-Correlation-ID")
        or str(uuid.uuid4())
    )

    token = request_id_var.set(request_id)
    request["request_id"] = request_id
    try:
        response = await handler(request)
    except web.HTTPException as exc:
        exc.headers["X-Request-ID"] = request_id
        raise
    finally:
        request_id_var.reset(token)

    if not response.prepared:
        response.headers["X-Request-ID"] = request_id

    return response


def get_request_id() -> str:
    """Get current request ID from context.

    Returns:
        Current request ID, or "no-request-id" outside a request
    """
    request_id = request_id_var.get()
    return request_id if request_id else "no-request-id"
