"""Request matching against a frozen route table."""

from collections.abc import Sequence

from monorail.errors import NotFound
from monorail.routing.route import Route, RouteMatch


class RequestMatcher:
    """Filters a frozen route table by method and path.

    Routes are tried in table order; the method check runs first so the
    regex is only evaluated for routes that accept the method.

    Usage::

        matcher = RequestMatcher(app.freeze())
        matcher.match("GET", "/hello/foo").request_vars  # {"name": "foo"}
    """

    __slots__ = ("_routes",)

    def __init__(self, routes: Sequence[Route]) -> None:
        self._routes = tuple(routes)

    @property
    def routes(self) -> tuple[Route, ...]:
        return self._routes

    def match(self, method: str, path: str) -> RouteMatch:
        """Return the first matching route.

        Raises ``NotFound`` if no route matches *method* and *path*.
        """
        for route in self._routes:
            if route.matches_method(method):
                match = route.match(path)
                if match is not None:
                    return match
        raise NotFound(f"No route matches {method} {path!r}")

    def match_all(self, method: str, path: str) -> list[RouteMatch]:
        """Return every matching route, in table order."""
        matches: list[RouteMatch] = []
        for route in self._routes:
            if route.matches_method(method):
                match = route.match(path)
                if match is not None:
                    matches.append(match)
        return matches

    def __len__(self) -> int:
        return len(self._routes)
