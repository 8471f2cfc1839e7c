"""HTTP method matching."""

from collections.abc import Iterable

WILDCARD = "*"


def normalize_methods(methods: Iterable[str]) -> tuple[str, ...]:
    """Upper-case and de-duplicate *methods*, keeping their order."""
    seen: dict[str, None] = {}
    for method in methods:
        seen.setdefault(method.strip().upper(), None)
    return tuple(seen)


class MethodMatcher:
    """Matches request methods against a set of accepted methods.

    No methods, or ``*`` among them, accepts every method. ``GET`` also
    accepts ``HEAD`` unless *head_implies_get* is turned off.

    Usage::

        MethodMatcher("GET").match("head")  # True
        MethodMatcher().match("DELETE")     # True
    """

    __slots__ = ("_any", "_methods")

    def __init__(self, *methods: str, head_implies_get: bool = True) -> None:
        normalized = set(normalize_methods(methods))
        self._any = not normalized or WILDCARD in normalized
        if head_implies_get and "GET" in normalized:
            normalized.add("HEAD")
        self._methods = frozenset(normalized)

    @property
    def methods(self) -> frozenset[str]:
        return self._methods

    def match(self, method: str) -> bool:
        return self._any or method.upper() in self._methods

    def __repr__(self) -> str:
        if self._any:
            return "MethodMatcher(*)"
        return f"MethodMatcher({', '.join(sorted(self._methods))})"
