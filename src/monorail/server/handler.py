"""ASGI handler — translates ASGI scope/messages to monorail types.

The only component that touches raw ASGI directly. Reads the request
body, builds a ``Request``, runs ``dispatch`` in a worker thread (the
routing core and every handler are synchronous), and sends the buffered
``ResponseWriter`` back through ASGI send().
"""

import logging
from functools import partial

import anyio.to_thread

from monorail._internal.asgi import Receive, Scope, Send
from monorail.context import Context, context_var
from monorail.errors import HTTPError, status_phrase
from monorail.http.request import Request
from monorail.http.response import ResponseWriter
from monorail.injection import Injector
from monorail.routing.matcher import RequestMatcher
from monorail.server.chain import RouteChain
from monorail.server.errors import ErrorHandlers
from monorail.server.sender import send_response

logger = logging.getLogger("monorail.server")


def dispatch(
    request: Request,
    *,
    matcher: RequestMatcher,
    injector: Injector,
    error_handlers: ErrorHandlers,
) -> ResponseWriter:
    """Run *request* through every matching route and return the response.

    This is the recovery boundary of the request: an ``HTTPError``
    raised anywhere in the chain goes to the handler for its status,
    any other exception is logged and goes to the 500 handler. Nothing
    raised by user code escapes.
    """
    response = ResponseWriter()
    ctx = Context(request, response)
    scope = injector.child(request, response, ctx)
    scope.register(scope)
    token = context_var.set(ctx)

    chain = RouteChain(
        matcher.match_all(request.method, request.path),
        ctx,
        scope,
        error_handlers,
    )
    try:
        chain.next()
        chain.settle()
    except HTTPError as exc:
        logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)
        chain.fail(exc.status, exc)
    except Exception as exc:
        logger.exception("500 %s %s", request.method, request.path)
        chain.fail(500, exc)
    finally:
        context_var.reset(token)

    logger.debug("%d %s %s", response.status, request.method, request.path)
    return response


async def read_body(receive: Receive, *, limit: int) -> bytes | None:
    """Read the whole request body. Returns ``None`` once it exceeds *limit*."""
    chunks: list[bytes] = []
    size = 0
    while True:
        message = await receive()
        if message["type"] == "http.disconnect":
            break
        chunk = message.get("body", b"")
        if chunk:
            size += len(chunk)
            if size > limit:
                return None
            chunks.append(chunk)
        if not message.get("more_body", False):
            break
    return b"".join(chunks)


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    matcher: RequestMatcher,
    injector: Injector,
    error_handlers: ErrorHandlers,
    max_content_length: int,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    head = scope["method"].upper() == "HEAD"
    body = await read_body(receive, limit=max_content_length)
    if body is None:
        logger.warning(
            "413 %s %s: body over %d bytes", scope["method"], scope["path"], max_content_length
        )
        response = ResponseWriter()
        response.write_header(413)
        response.write(status_phrase(413))
        await send_response(response, send, head=head)
        return

    request = Request.from_asgi(scope, body)
    response = await anyio.to_thread.run_sync(
        partial(
            dispatch,
            request,
            matcher=matcher,
            injector=injector,
            error_handlers=error_handlers,
        )
    )
    await send_response(response, send, head=head)
