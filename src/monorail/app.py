"""Monorail application class.

An ``App`` is the root ``RouteCollection``: routes, middleware, and
mounted collections are declared on it during setup. It is frozen
the first time it serves a request (or when ``app.run()`` is called):
every route is compiled against one ``PatternCompiler``, child
collections are flattened into one table, and the table is handed to
a ``RequestMatcher``.
"""

import logging
import threading
from collections.abc import Callable
from typing import Any, overload

from monorail._internal.asgi import Receive, Scope, Send
from monorail._internal.types import ErrorHandler
from monorail.config import AppConfig
from monorail.errors import FrozenError
from monorail.injection import Injector
from monorail.routing.collection import RouteCollection
from monorail.routing.matcher import RequestMatcher
from monorail.routing.pattern import PatternCompiler
from monorail.server.errors import ErrorHandlers
from monorail.server.handler import handle_request

logger = logging.getLogger("monorail.server")


class App(RouteCollection):
    """The monorail application.

    Usage::

        app = App()

        @app.route("/hello/:name")
        def hello(ctx: Context) -> str:
            return f"Hello {ctx.request_vars['name']}"

        app.run()

    Services registered on ``app.injector`` are available to every
    handler, converter, and error handler by type.

    Thread safety:
        The setup phase is single-threaded (decorators at import time).
        The freeze transition uses a Lock + double-check so exactly one
        thread compiles the route table, even when several ASGI workers
        call ``__call__()`` concurrently on the first request.
    """

    __slots__ = ("_error_handlers", "_freeze_lock", "_matcher", "config", "injector")

    def __init__(self, config: AppConfig | None = None, *services: Any) -> None:
        super().__init__()
        self.config: AppConfig = config or AppConfig()
        self.injector = Injector(self.config, *services)
        self._error_handlers = ErrorHandlers()
        self._freeze_lock: threading.Lock = threading.Lock()
        self._matcher: RequestMatcher | None = None

    # -- Error handlers --

    @overload
    def error(self, code: int) -> Callable[[ErrorHandler], ErrorHandler]: ...

    @overload
    def error(self, code: int, handler: ErrorHandler) -> ErrorHandler: ...

    def error(self, code: int, handler: ErrorHandler | None = None) -> Any:
        """Register the error handler for a status code >= 400.

        Works as a plain call or as a decorator::

            app.error(404, not_found)

            @app.error(401)
            def unauthorized(ctx: Context) -> None:
                ctx.write_string("Who are you?")
        """
        if handler is not None:
            self._check_not_frozen()
            self._error_handlers.register(code, handler)
            return handler

        def decorator(func: ErrorHandler) -> ErrorHandler:
            self._check_not_frozen()
            self._error_handlers.register(code, func)
            return func

        return decorator

    @property
    def error_handlers(self) -> ErrorHandlers:
        return self._error_handlers

    # -- Compiled state --

    @property
    def matcher(self) -> RequestMatcher:
        """The request matcher over the frozen route table. Freezes the app."""
        self._ensure_frozen()
        assert self._matcher is not None
        return self._matcher

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Freeze the app and serve it with pounce.

        Requires the ``server`` extra (``pip install monorail[server]``).
        """
        self._ensure_frozen()

        from monorail.server.dev import run_dev_server

        _host = host or self.config.host
        _port = port or self.config.port
        logging.basicConfig(level=self.config.log_level.upper())
        logger.info("serving %d routes on http://%s:%d", len(self), _host, _port)
        run_dev_server(self, _host, _port, reload=self.config.reload)

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()
        assert self._matcher is not None

        await handle_request(
            scope,
            receive,
            send,
            matcher=self._matcher,
            injector=self.injector,
            error_handlers=self._error_handlers,
            max_content_length=self.config.max_content_length,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Freeze at startup so configuration errors surface before the first request."""
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    self._ensure_frozen()
                except Exception as exc:
                    logger.exception("app failed to start")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._matcher is not None:
            return
        with self._freeze_lock:
            if self._matcher is not None:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the route table. MUST only be called while holding _freeze_lock."""
        compiler = PatternCompiler(self.config.placeholder_pattern, self.config.default_pattern)
        routes = self.freeze(compiler, head_implies_get=self.config.head_implies_get)
        self._error_handlers.install_defaults()
        self._matcher = RequestMatcher(routes)
        logger.debug("app frozen with %d routes", len(routes))

    def _check_not_frozen(self) -> None:
        if self._matcher is not None or self.frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes, error handlers, and mounts before calling app.run()."
            )
            raise FrozenError(msg)
