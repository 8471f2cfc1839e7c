"""Type-keyed dependency injection.

An ``Injector`` maps types to instances and calls functions by looking
up each parameter's annotation::

    injector = Injector(UserStore())

    def show(store: UserStore, ctx: Context) -> str: ...

    injector.apply(show)  # store and ctx resolved by type

Resolution order for a requested type:

1. an instance registered under exactly that type,
2. an instance whose type is a subclass of it (ABCs and
   ``runtime_checkable`` protocols included), most recent first,
3. the same lookup in the parent injector, and so on up the chain.

The root injector lives as long as the app. Each request gets a child
injector holding the request, the response writer, and the context;
converters and handlers get further short-lived children.
"""

from __future__ import annotations

import inspect
import logging
import types
from collections.abc import Callable
from typing import Any, Union, get_args, get_origin

from monorail.errors import (
    ConfigurationError,
    HTTPError,
    InjectionError,
    NotCallableError,
    ServiceNotFound,
    type_name,
)

logger = logging.getLogger("monorail.injection")

_MISSING = object()


def callable_name(function: Any) -> str:
    """Readable name for a function, method, or callable object."""
    return getattr(function, "__qualname__", None) or repr(function)


def _implements(registered: type, instance: Any, target: Any) -> bool:
    try:
        return issubclass(registered, target)
    except TypeError:
        # Protocols with data members only support isinstance()
        try:
            return isinstance(instance, target)
        except TypeError:
            return False


def _optional_members(annotation: Any) -> tuple[Any, ...] | None:
    """Return the non-None members of ``X | None``, else ``None``."""
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = get_args(annotation)
        if type(None) in args:
            return tuple(arg for arg in args if arg is not type(None))
    return None


class Injector:
    """A dependency injection container keyed by type.

    One instance per type: registering a second instance of the same
    type replaces the first. Lookups that fail locally are delegated to
    ``parent``.
    """

    __slots__ = ("_parent", "_services")

    def __init__(self, *services: Any, parent: Injector | None = None) -> None:
        self._services: dict[Any, Any] = {}
        self._parent = parent
        for service in services:
            self.register(service)

    # -- Registration --

    def register(self, service: Any) -> None:
        """Register *service* under its concrete runtime type."""
        self._store(type(service), service)

    def register_as(self, service: Any, service_type: type) -> None:
        """Register *service* under *service_type*, e.g. an ABC it implements."""
        if not _implements(type(service), service, service_type):
            msg = f"{service!r} is not an instance of {type_name(service_type)}"
            raise ConfigurationError(msg)
        self._store(service_type, service)

    def _store(self, key: Any, service: Any) -> None:
        # Re-insert so the newest registration is tried first for subtypes
        self._services.pop(key, None)
        self._services[key] = service

    @property
    def parent(self) -> Injector | None:
        return self._parent

    @parent.setter
    def parent(self, parent: Injector | None) -> None:
        self._parent = parent

    def child(self, *services: Any) -> Injector:
        """Create a short-lived injector that delegates to this one."""
        return Injector(*services, parent=self)

    def __contains__(self, service_type: object) -> bool:
        try:
            self.resolve(service_type)
        except ServiceNotFound:
            return False
        return True

    def __repr__(self) -> str:
        names = ", ".join(type_name(t) for t in self._services)
        return f"<Injector [{names}] parent={'yes' if self._parent else 'no'}>"

    # -- Resolution --

    def resolve(self, service_type: Any) -> Any:
        """Return the service registered for *service_type*.

        Raises ``ServiceNotFound`` naming the type if neither this
        injector nor any parent can provide it.
        """
        seen: set[int] = set()
        injector: Injector | None = self
        while injector is not None and id(injector) not in seen:
            seen.add(id(injector))
            found = injector._lookup(service_type)
            if found is not _MISSING:
                return found
            injector = injector._parent
        raise ServiceNotFound(service_type)

    def _lookup(self, service_type: Any) -> Any:
        try:
            if service_type in self._services:
                return self._services[service_type]
        except TypeError:
            # Unhashable annotation
            return _MISSING
        if not isinstance(service_type, type):
            return _MISSING
        for registered, service in reversed(self._services.items()):
            if isinstance(registered, type) and _implements(registered, service, service_type):
                return service
        return _MISSING

    def _resolve_parameter(self, function: Any, param: inspect.Parameter) -> Any:
        annotation = param.annotation
        if annotation is inspect.Parameter.empty:
            if param.default is not inspect.Parameter.empty:
                return param.default
            msg = (
                f"parameter {param.name!r} of {callable_name(function)} has no type "
                "annotation, so it cannot be injected"
            )
            raise InjectionError(msg)

        members = _optional_members(annotation)
        try:
            if members is None:
                return self.resolve(annotation)
            for member in members:
                try:
                    return self.resolve(member)
                except ServiceNotFound:
                    continue
            return None if param.default is inspect.Parameter.empty else param.default
        except ServiceNotFound:
            if param.default is not inspect.Parameter.empty:
                logger.debug(
                    "no %s registered, using default for %r",
                    type_name(annotation),
                    param.name,
                )
                return param.default
            raise

    # -- Invocation --

    def apply(self, function: Callable[..., Any]) -> list[Any]:
        """Resolve every parameter of *function* by type and call it.

        Returns the results as a list: a returned tuple is spread into
        several results, anything else (``None`` included) is one result.

        Raises ``NotCallableError`` if *function* isn't callable and
        ``InjectionError`` (``ServiceNotFound`` for a missing type) if a
        parameter can't be resolved. Nothing is called in that case.
        Exceptions raised by *function* itself propagate unchanged.
        """
        if not callable(function):
            raise NotCallableError(function)
        try:
            sig = inspect.signature(function, eval_str=True)
        except (NameError, TypeError, ValueError) as exc:
            msg = f"cannot inspect the signature of {callable_name(function)}: {exc}"
            raise InjectionError(msg) from exc

        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        for param in sig.parameters.values():
            if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue
            value = self._resolve_parameter(function, param)
            if param.kind is param.KEYWORD_ONLY:
                kwargs[param.name] = value
            else:
                args.append(value)

        result = function(*args, **kwargs)
        if inspect.isawaitable(result):
            if inspect.iscoroutine(result):
                result.close()
            msg = f"{callable_name(function)} returned an awaitable; handlers must be synchronous"
            raise ConfigurationError(msg)
        if isinstance(result, tuple):
            return list(result)
        return [result]

    def must_apply(self, function: Callable[..., Any]) -> list[Any]:
        """Like ``apply``, for callers inside the request boundary.

        Every failure, whether raised while resolving or by *function*
        itself, is re-raised with a note naming *function*, ready to be
        logged and turned into a 500 by the dispatcher.
        """
        try:
            return self.apply(function)
        except HTTPError:
            # Deliberate control flow, mapped to its own status handler
            raise
        except Exception as exc:
            exc.add_note(f"while calling {callable_name(function)} through the injector")
            raise
