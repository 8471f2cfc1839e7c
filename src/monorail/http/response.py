"""Response writer handed to handlers.

Unlike the request, the response is mutable: handlers set a status,
headers, and write body bytes as they go. The dispatcher only reads
two things back from it, the status code and how many bytes were
written, to decide whether an error handler should take over.

The body is buffered and sent by the ASGI handler once dispatch ends.
"""

import logging

from monorail.http.headers import MutableHeaders

logger = logging.getLogger("monorail.server")


class ResponseWriter:
    """Buffered, status-observing response writer.

    Usage::

        def handler(rw: ResponseWriter) -> None:
            rw.write_header(201)
            rw.headers.set("Content-Type", "application/json")
            rw.write(b'{"ok": true}')
    """

    __slots__ = ("_chunks", "_status", "bytes_written", "headers")

    def __init__(self) -> None:
        self.headers = MutableHeaders()
        self._status = 200
        self._chunks: list[bytes] = []
        self.bytes_written = 0

    @property
    def status(self) -> int:
        return self._status

    @property
    def committed(self) -> bool:
        """True once body bytes were written; the status can no longer change."""
        return self.bytes_written > 0

    def write_header(self, status: int) -> None:
        """Set the status code. Ignored once the body has started."""
        if self.committed:
            logger.debug("superfluous write_header(%d), status already %d", status, self._status)
            return
        self._status = status

    def write(self, data: str | bytes) -> int:
        """Append to the body. Returns the number of bytes written."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        if data:
            self._chunks.append(data)
            self.bytes_written += len(data)
        return len(data)

    @property
    def body(self) -> bytes:
        return b"".join(self._chunks)

    def reset(self) -> None:
        """Discard status, headers, and body (used before rendering a 500)."""
        self.headers.clear()
        self._status = 200
        self._chunks.clear()
        self.bytes_written = 0

    def __repr__(self) -> str:
        return f"<ResponseWriter status={self._status} bytes={self.bytes_written}>"
