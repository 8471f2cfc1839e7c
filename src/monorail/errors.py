"""Monorail exception hierarchy.

Shared across routing, injection, and the request pipeline so every
module raises and catches the same types.

Configuration faults (``ConfigurationError`` and subclasses) are raised
at registration or boot time. Injection faults (``InjectionError``) are
raised while resolving handler arguments and end up in the 500 handler.
``HTTPError`` may be raised by handlers to short-circuit to the error
handler registered for its status.
"""

from dataclasses import dataclass
from http import HTTPStatus


class MonorailError(Exception):
    """Base for all monorail-specific errors."""


class ConfigurationError(MonorailError):
    """Raised when routes, handlers, or the app are misconfigured."""


class FrozenError(ConfigurationError):
    """Raised when a frozen route or route collection is mutated."""


class NotCallableError(ConfigurationError):
    """Raised when a handler, converter, or injected function is not callable."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"{value!r} is not a function or a method")


class InjectionError(MonorailError):
    """Raised when the injector cannot call a function."""


class ServiceNotFound(InjectionError):  # noqa: N818
    """No service is registered for the requested type.

    The requested type is kept on the exception and always appears in
    the message, since a missing registration is the most common
    failure when handlers declare new parameters.
    """

    def __init__(self, service_type: object, detail: str = "") -> None:
        self.service_type = service_type
        name = type_name(service_type)
        msg = f"service with type {name} cannot be injected: not found"
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)


@dataclass(frozen=True, slots=True)
class HTTPError(MonorailError):
    """An error that maps directly to an HTTP status code.

    Handlers raise these to abandon the chain. The dispatcher catches
    them and runs the error handler registered for ``status``.
    """

    status: int
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404: no route handled the request."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


def type_name(value: object) -> str:
    """Readable name for a type or annotation, used in error messages."""
    if isinstance(value, type):
        module = value.__module__
        if module == "builtins":
            return value.__qualname__
        return f"{module}.{value.__qualname__}"
    return repr(value)


def status_phrase(status: int) -> str:
    """Return ``"404 Not Found"`` style text for a status code."""
    try:
        return f"{status} {HTTPStatus(status).phrase}"
    except ValueError:
        return str(status)
