"""Immutable HTTP request.

The ASGI handler reads the whole body before dispatch, so everything on
a request is available synchronously to handlers, converters, and
middleware.
"""

from __future__ import annotations

import json as json_module
from dataclasses import dataclass, field
from typing import Any

from monorail._internal.asgi import Scope
from monorail.http.headers import Headers
from monorail.http.query import QueryParams


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request."""

    method: str
    path: str
    headers: Headers = field(default_factory=Headers)
    query: QueryParams = field(default_factory=QueryParams)
    body: bytes = b""
    http_version: str = "1.1"
    server: tuple[str, int] | None = None
    client: tuple[str, int] | None = None

    # Mutable cache for parsed bodies (the dict itself, not the field)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    @property
    def url(self) -> str:
        """Path plus query string."""
        if self.query.raw:
            return f"{self.path}?{self.query.raw}"
        return self.path

    def text(self) -> str:
        return self.body.decode("utf-8")

    def json(self) -> Any:
        """Parse the body as JSON."""
        if "_json" not in self._cache:
            self._cache["_json"] = json_module.loads(self.body) if self.body else None
        return self._cache["_json"]

    def form(self) -> QueryParams:
        """Parse an ``application/x-www-form-urlencoded`` body.

        Raises ``ValueError`` for any other content type.
        """
        if "_form" in self._cache:
            return self._cache["_form"]
        ct = self.content_type or "application/x-www-form-urlencoded"
        if not ct.startswith("application/x-www-form-urlencoded"):
            msg = f"Cannot parse {ct!r} body as a form"
            raise ValueError(msg)
        result = QueryParams(self.body)
        self._cache["_form"] = result
        return result

    @classmethod
    def from_asgi(cls, scope: Scope, body: bytes = b"") -> Request:
        """Create a Request from an ASGI scope and the already-read body."""
        server = scope.get("server")
        client = scope.get("client")
        return cls(
            method=scope["method"].upper(),
            path=scope["path"],
            headers=Headers(tuple(scope.get("headers", ()))),
            query=QueryParams(scope.get("query_string", b"")),
            body=body,
            http_version=scope.get("http_version", "1.1"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
        )
