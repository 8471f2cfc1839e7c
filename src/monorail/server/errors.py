"""Error handler registry and rendering.

Error handlers are registered per status code (>= 400) and called
through the injector like any route handler, so they can ask for the
``Context``, the ``Request``, the ``ResponseWriter``, the ``AppConfig``,
or the exception that caused a 500.
"""

import logging

from monorail._internal.types import ErrorHandler
from monorail.config import AppConfig
from monorail.context import Context
from monorail.errors import ConfigurationError, HTTPError, status_phrase
from monorail.injection import Injector
from monorail.routing.route import check_handler

logger = logging.getLogger("monorail.server")


def default_error(ctx: Context) -> None:
    """Plain-text ``"<code> <reason>"`` body for any error status."""
    ctx.write_string(status_phrase(ctx.response.status))


def default_http_error(ctx: Context, exc: HTTPError | None = None) -> None:
    """Like ``default_error``, but shows the detail of a raised ``HTTPError``."""
    if exc is not None and exc.detail:
        ctx.write_string(status_phrase(ctx.response.status), ": ", exc.detail)
    else:
        default_error(ctx)


def default_internal_error(
    ctx: Context,
    config: AppConfig,
    exc: Exception | None = None,
) -> None:
    """500 page. The exception text is only shown in debug mode."""
    if config.debug and exc is not None:
        ctx.write_string(status_phrase(500), "\n\n", f"{type(exc).__name__}: {exc}")
    else:
        ctx.write_string(status_phrase(500))


class ErrorHandlers:
    """Status code -> error handler, with defaults for unregistered codes."""

    __slots__ = ("_handlers",)

    def __init__(self) -> None:
        self._handlers: dict[int, ErrorHandler] = {}

    def register(self, status: int, handler: ErrorHandler) -> None:
        if status < 400:
            msg = f"Error handlers are only allowed for status codes >= 400, got {status}."
            raise ConfigurationError(msg)
        check_handler(handler)
        self._handlers[status] = handler

    def install_defaults(self) -> None:
        """Register the default 404 and 500 handlers unless overridden."""
        self._handlers.setdefault(404, default_http_error)
        self._handlers.setdefault(500, default_internal_error)

    def get(self, status: int) -> ErrorHandler:
        return self._handlers.get(status, default_http_error)

    def __contains__(self, status: object) -> bool:
        return status in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)


def render_error(
    status: int,
    ctx: Context,
    injector: Injector,
    handlers: ErrorHandlers,
    exc: Exception | None = None,
) -> None:
    """Run the error handler for *status* into ``ctx.response``.

    The status is set first unless body bytes were already written.
    A failing error handler is logged and replaced by a bare 500.
    """
    response = ctx.response
    response.write_header(status)
    scope = injector.child()
    if exc is not None:
        scope.register(exc)
    try:
        scope.must_apply(handlers.get(status))
    except Exception:
        logger.exception(
            "error handler for %d failed on %s %s",
            status,
            ctx.request.method,
            ctx.request.path,
        )
        if not response.committed:
            response.reset()
            response.write_header(500)
            response.headers.set("Content-Type", "text/plain; charset=utf-8")
            response.write(status_phrase(500))
