"""ASGI response sending — translates a ResponseWriter to ASGI messages."""

import logging

from monorail._internal.asgi import Send
from monorail.http.response import ResponseWriter

logger = logging.getLogger("monorail.server")

_DEFAULT_CONTENT_TYPE = b"text/plain; charset=utf-8"


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


async def send_response(response: ResponseWriter, send: Send, *, head: bool = False) -> None:
    """Send the buffered response as one start and one body message.

    For ``HEAD`` requests the headers (content-length included) describe
    the body a ``GET`` would have produced, but no body is sent.
    """
    raw_headers = response.headers.raw()
    body = response.body if _body_allowed(response.status) else b""

    if body and "content-type" not in response.headers:
        raw_headers.append((b"content-type", _DEFAULT_CONTENT_TYPE))
    raw_headers = [(name, value) for name, value in raw_headers if name != b"content-length"]
    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": b"" if head else body,
        }
    )
