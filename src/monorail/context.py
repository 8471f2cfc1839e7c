"""Request-scoped context.

Provides:
- ``Context``: the per-request object handlers receive by type. It holds
  the request, the response writer, path variables (raw and converted),
  a free-form ``vars`` bag, and the current ``next`` continuation.
- ``Next``: the continuation type. Declare a ``next: Next`` parameter
  and call it to hand the request to the next handler or route.
- ``get_context()``: the current ``Context`` via a ``ContextVar``, for
  code that isn't called through the injector.

A context is created per request, owned by that request, and dropped
when the response has been built.
"""

from __future__ import annotations

import dataclasses
import json as json_module
from collections.abc import Callable
from contextvars import ContextVar
from typing import Any

from monorail.http.request import Request
from monorail.http.response import ResponseWriter


class Next:
    """Continuation handed to handlers and middleware.

    Calling it advances the chain exactly once; further calls on the
    same continuation do nothing.

    Usage::

        def timing(next: Next) -> None:
            t0 = time.monotonic()
            next()
            logger.info("lapse: %.3f", time.monotonic() - t0)
    """

    __slots__ = ("_advance", "called")

    def __init__(self, advance: Callable[[], None]) -> None:
        self._advance = advance
        self.called = False

    def __call__(self) -> None:
        if self.called:
            return
        self.called = True
        self._advance()

    def __repr__(self) -> str:
        return f"<Next called={self.called}>"


def _noop() -> None:
    return None


class Context:
    """Everything a handler may need about the current request."""

    __slots__ = ("converted_vars", "next", "request", "request_vars", "response", "vars")

    def __init__(self, request: Request, response: ResponseWriter) -> None:
        self.request = request
        self.response = response
        self.request_vars: dict[str, str] = {}
        self.converted_vars: dict[str, Any] = {}
        self.vars: dict[str, Any] = {}
        self.next: Next = Next(_noop)

    # -- Writing helpers --

    def write_string(self, *parts: object) -> int:
        """Write the concatenation of *parts* (``None`` is skipped)."""
        text = "".join(str(part) for part in parts if part is not None)
        if "content-type" not in self.response.headers:
            self.response.headers.set("Content-Type", "text/plain; charset=utf-8")
        return self.response.write(text)

    def write_json(self, value: Any, status: int | None = None) -> int:
        """Serialize *value* as JSON and write it."""
        self.response.headers.set("Content-Type", "application/json")
        if status is not None:
            self.response.write_header(status)
        return self.response.write(json_module.dumps(value, default=_json_default))

    def read_json(self) -> Any:
        """Parse the request body as JSON."""
        return self.request.json()

    def redirect(self, url: str, status: int = 302) -> None:
        self.response.headers.set("Location", url)
        self.response.write_header(status)

    def __repr__(self) -> str:
        return f"<Context {self.request.method} {self.request.path} vars={self.request_vars!r}>"


def _json_default(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    # Plain objects serialize as their attribute dict
    if hasattr(value, "__dict__"):
        return vars(value)
    msg = f"Object of type {type(value).__name__} is not JSON serializable"
    raise TypeError(msg)


# -- Current context --

context_var: ContextVar[Context] = ContextVar("monorail_context")
"""The current context. Set by the dispatcher for the duration of a request."""


def get_context() -> Context:
    """Return the current request's context.

    Raises ``LookupError`` if called outside a request.
    """
    return context_var.get()
