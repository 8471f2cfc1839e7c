"""Route and RouteMatch.

A ``Route`` is mutable while the app is being declared and frozen when
the app boots. Freezing applies the mount prefix, compiles the path
template exactly once, and locks every setter.
"""

from __future__ import annotations

import inspect
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from monorail._internal.types import Converter, Handler
from monorail.errors import ConfigurationError, FrozenError, NotCallableError
from monorail.routing.methods import WILDCARD, MethodMatcher, normalize_methods
from monorail.routing.pattern import CompiledPattern, PatternCompiler, validate_assertion


def join_paths(prefix: str, path: str) -> str:
    """Join a mount prefix and a route path with exactly one slash."""
    if not prefix:
        return path or "/"
    return prefix.rstrip("/") + "/" + path.lstrip("/")


def check_handler(handler: Any) -> None:
    """Raise if *handler* can't be used as a synchronous handler."""
    if not callable(handler):
        raise NotCallableError(handler)
    if inspect.iscoroutinefunction(handler):
        msg = f"{handler!r} is a coroutine function; handlers must be synchronous"
        raise ConfigurationError(msg)


class Route:
    """A method set, a path template, and a chain of handlers.

    Setters return the route so declarations chain::

        app.get("/movies/:id", show_movie).assert_("id", r"\\d+").set_name("movie")
    """

    __slots__ = (
        "_assertions",
        "_converters",
        "_frozen",
        "_handlers",
        "_method_matcher",
        "_methods",
        "_name",
        "_path",
        "_pattern",
        "passthrough",
    )

    def __init__(
        self,
        path: str = "/",
        *handlers: Handler,
        methods: Iterable[str] | None = None,
        name: str | None = None,
        passthrough: bool = False,
    ) -> None:
        self._path = path
        self._handlers: tuple[Handler, ...] = ()
        self._methods: tuple[str, ...] = normalize_methods(methods or (WILDCARD,))
        self._name = name
        self._converters: dict[str, Converter] = {}
        self._assertions: dict[str, str] = {}
        self._pattern: CompiledPattern | None = None
        self._method_matcher: MethodMatcher | None = None
        self._frozen = False
        self.passthrough = passthrough
        if handlers:
            self.set_handlers(*handlers)

    # -- Accessors --

    @property
    def path(self) -> str:
        return self._path

    @property
    def methods(self) -> tuple[str, ...]:
        return self._methods

    @property
    def handlers(self) -> tuple[Handler, ...]:
        return self._handlers

    @property
    def converters(self) -> dict[str, Converter]:
        return dict(self._converters)

    @property
    def assertions(self) -> dict[str, str]:
        return dict(self._assertions)

    @property
    def name(self) -> str:
        """The explicit name, or one derived from methods and path."""
        if self._name:
            return self._name
        if WILDCARD in self._methods:
            verb = "any"
        else:
            verb = "_".join(m.lower() for m in self._methods)
        slug = re.sub(r"\W+", "_", self._path).strip("_") or "root"
        return f"{verb}_{slug}"

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def pattern(self) -> CompiledPattern:
        if self._pattern is None:
            msg = f"Route {self._path!r} has not been compiled yet."
            raise ConfigurationError(msg)
        return self._pattern

    # -- Setters --

    def set_path(self, path: str) -> Route:
        self._check_not_frozen()
        self._path = path
        return self

    def set_methods(self, methods: Iterable[str]) -> Route:
        self._check_not_frozen()
        self._methods = normalize_methods(methods) or (WILDCARD,)
        return self

    def set_name(self, name: str) -> Route:
        self._check_not_frozen()
        self._name = name
        return self

    def set_handlers(self, *handlers: Handler) -> Route:
        self._check_not_frozen()
        if not handlers:
            msg = f"Route {self._path!r} needs at least one handler."
            raise ConfigurationError(msg)
        for handler in handlers:
            check_handler(handler)
        self._handlers = handlers
        return self

    def convert(self, name: str, converter: Converter) -> Route:
        """Convert variable *name* with *converter* before the handlers run.

        The converter's arguments are injected; a ``str`` parameter
        receives the raw path value.
        """
        self._check_not_frozen()
        check_handler(converter)
        self._converters[name] = converter
        return self

    def assert_(self, name: str, pattern: str) -> Route:
        """Restrict variable *name* to values matching *pattern*."""
        self._check_not_frozen()
        validate_assertion(name, pattern)
        self._assertions[name] = pattern
        return self

    # -- Compilation and matching --

    def freeze(
        self,
        compiler: PatternCompiler,
        prefix: str = "",
        *,
        head_implies_get: bool = True,
    ) -> None:
        """Apply *prefix* and compile the pattern. Later calls are no-ops."""
        if self._frozen:
            return
        if not self._handlers:
            msg = f"Route {self._path!r} has no handler."
            raise ConfigurationError(msg)
        self._path = join_paths(prefix, self._path)
        self._pattern = compiler.compile(self._path, self._assertions, prefix=self.passthrough)
        self._method_matcher = MethodMatcher(*self._methods, head_implies_get=head_implies_get)
        self._frozen = True

    def matches_method(self, method: str) -> bool:
        if self._method_matcher is None:
            return MethodMatcher(*self._methods).match(method)
        return self._method_matcher.match(method)

    def match(self, path: str) -> RouteMatch | None:
        """Match *path* against the compiled pattern (method not checked)."""
        request_vars = self.pattern.match(path)
        if request_vars is None:
            return None
        return RouteMatch(route=self, request_vars=request_vars)

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                f"Cannot modify route {self.name!r} after the app has started serving requests. "
                "Declare routes before the first request."
            )
            raise FrozenError(msg)

    def __repr__(self) -> str:
        kind = "passthrough " if self.passthrough else ""
        return f"<Route {kind}{'|'.join(self._methods)} {self._path!r} name={self.name!r}>"


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """A route whose pattern and method matched, with its raw variables."""

    route: Route
    request_vars: dict[str, str] = field(default_factory=dict)
