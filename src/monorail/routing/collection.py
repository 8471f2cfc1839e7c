"""Ordered, mountable route collections.

Routes and mounted child collections are kept in declaration order.
Freezing walks that order depth-first: each child gets the parent's
prefix in front of its own, freezes, and its routes are spliced into
the parent's flat table where the child was mounted. The result is an
immutable tuple whose order is match priority.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator

from monorail._internal.types import Handler
from monorail.errors import FrozenError
from monorail.routing.pattern import PatternCompiler
from monorail.routing.route import Route, join_paths

logger = logging.getLogger("monorail.routing")


class RouteCollection:
    """An ordered group of routes sharing a path prefix.

    Usage::

        admin = RouteCollection()
        admin.use("/", require_password)
        admin.all("/:user", show_user).assert_("user", r"\\d+")

        app.mount("/admin", admin)
    """

    __slots__ = ("_entries", "_frozen", "_prefix", "_routes", "has_parent")

    def __init__(self, prefix: str = "") -> None:
        self._prefix = prefix
        # Route or RouteCollection, in declaration order
        self._entries: list[Route | RouteCollection] = []
        self._routes: tuple[Route, ...] = ()
        self._frozen = False
        self.has_parent = False

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def routes(self) -> tuple[Route, ...]:
        """The flattened route table after freeze; this collection's own routes before."""
        if self._frozen:
            return self._routes
        return tuple(entry for entry in self._entries if isinstance(entry, Route))

    # -- Registration --

    def add_route(self, route: Route) -> Route:
        self._check_not_frozen()
        self._entries.append(route)
        return route

    def route(
        self,
        path: str,
        *,
        methods: Iterable[str] | None = None,
        name: str | None = None,
    ) -> Callable[[Handler], Handler]:
        """Register a handler via decorator.

        Methods default to ``["GET"]``. The decorator returns the function
        unchanged, so use ``get()``/``post()`` when the route itself is
        needed for ``convert`` or ``assert_``::

            @app.route("/hello/:name")
            def hello(ctx: Context) -> str:
                return f"Hello {ctx.request_vars['name']}"
        """

        def decorator(func: Handler) -> Handler:
            self.add_route(Route(path, func, methods=methods or ["GET"], name=name))
            return func

        return decorator

    def get(self, path: str, *handlers: Handler) -> Route:
        return self.add_route(Route(path, *handlers, methods=["GET"]))

    def post(self, path: str, *handlers: Handler) -> Route:
        return self.add_route(Route(path, *handlers, methods=["POST"]))

    def put(self, path: str, *handlers: Handler) -> Route:
        return self.add_route(Route(path, *handlers, methods=["PUT"]))

    def patch(self, path: str, *handlers: Handler) -> Route:
        return self.add_route(Route(path, *handlers, methods=["PATCH"]))

    def delete(self, path: str, *handlers: Handler) -> Route:
        return self.add_route(Route(path, *handlers, methods=["DELETE"]))

    def all(self, path: str, *handlers: Handler) -> Route:
        """Register a route that accepts every method."""
        return self.add_route(Route(path, *handlers, methods=["*"]))

    def use(self, path: str, *handlers: Handler) -> Route:
        """Register passthrough middleware for *path* and everything below it."""
        return self.add_route(Route(path, *handlers, methods=["*"], passthrough=True))

    def mount(self, prefix: str, child: RouteCollection) -> RouteCollection:
        """Attach *child* under *prefix*.

        A collection can only have one parent; mounting it again is a
        no-op. Prefixes are applied when the parent freezes.
        """
        self._check_not_frozen()
        if child is self:
            logger.debug("ignoring attempt to mount a collection on itself")
            return child
        if child.has_parent:
            logger.debug("collection already mounted, ignoring mount at %r", prefix)
            return child
        child._check_not_frozen()
        child._prefix = join_paths(prefix, child._prefix) if child._prefix else prefix
        child.has_parent = True
        self._entries.append(child)
        return child

    # -- Freeze --

    def freeze(
        self,
        compiler: PatternCompiler | None = None,
        prefix: str = "",
        *,
        head_implies_get: bool = True,
    ) -> tuple[Route, ...]:
        """Compile every route and flatten children. Idempotent."""
        if self._frozen:
            return self._routes
        compiler = compiler or PatternCompiler()
        full_prefix = join_paths(prefix, self._prefix) if self._prefix else prefix

        routes: list[Route] = []
        for entry in self._entries:
            if isinstance(entry, RouteCollection):
                routes.extend(
                    entry.freeze(compiler, full_prefix, head_implies_get=head_implies_get)
                )
            else:
                entry.freeze(compiler, full_prefix, head_implies_get=head_implies_get)
                routes.append(entry)

        self._routes = tuple(routes)
        self._frozen = True
        logger.debug("froze collection %r with %d routes", full_prefix or "/", len(routes))
        return self._routes

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify a route collection after the app has started serving requests. "
                "Register routes and mounts before the first request."
            )
            raise FrozenError(msg)

    def __iter__(self) -> Iterator[Route]:
        return iter(self.routes)

    def __len__(self) -> int:
        return len(self.routes)

    def __repr__(self) -> str:
        state = "frozen" if self._frozen else "open"
        return f"<RouteCollection {self._prefix or '/'!r} {state} routes={len(self)}>"
