"""Route chain — drives a request through its matched routes.

State per request::

    pending matches -> active route -> active handler -> done

``next()`` moves the chain forward:

- the response already carries an error status (>= 400) with no body:
  run that status's error handler, done;
- no matches left: run the 404 handler, done;
- otherwise take the next match, extract and convert its path
  variables into the context, and call its first handler.

Each handler receives its own ``Next``. For every handler but the last
of a route it calls the route's following handler; for the last one it
calls ``next()`` again, i.e. moves on to the next matched route. A
handler that returns without calling its continuation ends the chain.
"""

import logging
from collections import deque
from collections.abc import Iterable

from monorail._internal.types import Handler
from monorail.context import Context, Next
from monorail.injection import Injector
from monorail.routing.route import RouteMatch
from monorail.server.errors import ErrorHandlers, render_error
from monorail.server.negotiation import write_result

logger = logging.getLogger("monorail.server")


class RouteChain:
    """The matched routes of one request and the position within them."""

    __slots__ = ("_ctx", "_done", "_errors", "_injector", "_pending")

    def __init__(
        self,
        matches: Iterable[RouteMatch],
        ctx: Context,
        injector: Injector,
        errors: ErrorHandlers,
    ) -> None:
        self._pending: deque[RouteMatch] = deque(matches)
        self._ctx = ctx
        self._injector = injector
        self._errors = errors
        self._done = False

    @property
    def done(self) -> bool:
        """True once an error handler produced the response."""
        return self._done

    @property
    def remaining(self) -> int:
        return len(self._pending)

    def next(self) -> None:
        if self._done:
            return
        request = self._ctx.request
        response = self._ctx.response
        if response.status >= 400 and not response.committed:
            self.finish(response.status)
            return
        if not self._pending:
            logger.debug("404 %s %s", request.method, request.path)
            self.finish(404)
            return
        self._enter(self._pending.popleft())

    def settle(self) -> None:
        """Called once the chain stops: render an error status left without a body."""
        response = self._ctx.response
        if not self._done and response.status >= 400 and not response.committed:
            self.finish(response.status)

    def finish(self, status: int, exc: Exception | None = None) -> None:
        """Render the error handler for *status* and stop the chain."""
        self._done = True
        self._pending.clear()
        render_error(status, self._ctx, self._injector, self._errors, exc)

    def fail(self, status: int, exc: Exception) -> None:
        """Replace whatever was written so far with the error page for *exc*."""
        self._ctx.response.reset()
        self.finish(status, exc)

    # -- Internal --

    def _enter(self, match: RouteMatch) -> None:
        self._ctx.request_vars = dict(match.request_vars)
        self._ctx.converted_vars = {}
        self._convert(match)
        self._run(match, 0)

    def _convert(self, match: RouteMatch) -> None:
        """Pipe path variables through their converters, in path order.

        Each converter gets a child injector seeded with the raw string,
        so a ``str`` parameter receives the path value.
        """
        route = match.route
        converters = route.converters
        for name in route.pattern.names:
            if name not in converters or name not in match.request_vars:
                continue
            scope = self._injector.child(match, match.request_vars[name])
            results = scope.must_apply(converters[name])
            self._ctx.converted_vars[name] = results[0] if len(results) == 1 else results

    def _run(self, match: RouteMatch, index: int) -> None:
        handlers: tuple[Handler, ...] = match.route.handlers
        if index + 1 < len(handlers):
            advance = Next(lambda: self._run(match, index + 1))
        else:
            advance = Next(self.next)
        outer = self._ctx.next
        self._ctx.next = advance
        try:
            scope = self._injector.child(match, advance)
            results = scope.must_apply(handlers[index])
        finally:
            self._ctx.next = outer
        write_result(self._ctx, results)
