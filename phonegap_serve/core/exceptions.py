"""Exception hierarchy for phonegap_serve.

Runtime failures of a running server are reported through the ``error``
event rather than raised. The types below cover the cases where something
does get raised, and the payloads the bundled components emit.
"""

from __future__ import annotations

from typing import Any


class ServeError(Exception):
    """Base exception for all phonegap_serve errors."""


class UnhandledErrorEvent(ServeError):
    """An ``error`` event was emitted with no ``error`` subscriber attached.

    Mirrors the Node.js ``EventEmitter`` rule: an error nobody listens for is
    raised at the emit site instead of being silently dropped.

    Attributes:
        context: The payload that was passed to ``emit("error", ...)``
    """

    def __init__(self, context: Any = None) -> None:
        self.context = context
        super().__init__(f"Unhandled 'error' event ({context!r})")


class ListenerStateError(ServeError):
    """An operation was attempted in a lifecycle state that does not allow it.

    Raised when:
    - ``listen()`` is called on a server that has already been started
    """


class PipelineError(ServeError):
    """The default pipeline could not serve a request.

    Emitted (not raised) on the pipeline's ``error`` event; wraps the
    underlying ``OSError``.

    Attributes:
        path: Request path that was being served
    """

    def __init__(self, message: str, path: str | None = None) -> None:
        self.path = path
        super().__init__(message)
