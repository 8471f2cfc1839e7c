"""Writes handler return values to the response.

Handlers usually write through the ``ResponseWriter`` or ``Context``,
but returning a value works too. isinstance-based dispatch, no magic:

1. ``None``            -> nothing written
2. ``str``             -> text/plain
3. ``bytes``           -> application/octet-stream
4. ``dict`` / ``list`` -> application/json
5. ``(value, int)``    -> write value, override status
"""

from typing import Any

from monorail.context import Context
from monorail.errors import ConfigurationError


def write_result(ctx: Context, results: list[Any]) -> None:
    """Write the results of an injected handler call to ``ctx.response``."""
    match results:
        case [value]:
            pass
        case [value, int() as status] if not isinstance(status, bool):
            ctx.response.write_header(status)
        case _:
            msg = f"Cannot write {len(results)} handler results; return one value or (value, status)"
            raise ConfigurationError(msg)

    match value:
        case None:
            return
        case str():
            ctx.write_string(value)
        case bytes():
            if "content-type" not in ctx.response.headers:
                ctx.response.headers.set("Content-Type", "application/octet-stream")
            ctx.response.write(value)
        case dict() | list():
            ctx.write_json(value)
        case _:
            msg = (
                f"Handler returned {type(value).__name__}; return str, bytes, dict, "
                "list, or None, or write to the response directly"
            )
            raise ConfigurationError(msg)
