"""Tests for monorail.http.response — ResponseWriter."""

from monorail.http.response import ResponseWriter


class TestResponseWriter:
    def test_defaults(self) -> None:
        rw = ResponseWriter()
        assert rw.status == 200
        assert rw.bytes_written == 0
        assert rw.committed is False
        assert rw.body == b""

    def test_write_str_and_bytes(self) -> None:
        rw = ResponseWriter()
        assert rw.write("héllo") == 6
        assert rw.write(b"!") == 1
        assert rw.body == "héllo!".encode()
        assert rw.bytes_written == 7

    def test_empty_write_does_not_commit(self) -> None:
        rw = ResponseWriter()
        rw.write("")
        assert rw.committed is False

    def test_write_header(self) -> None:
        rw = ResponseWriter()
        rw.write_header(404)
        assert rw.status == 404

    def test_write_header_ignored_after_body(self) -> None:
        rw = ResponseWriter()
        rw.write("partial")
        rw.write_header(500)
        assert rw.status == 200

    def test_reset(self) -> None:
        rw = ResponseWriter()
        rw.headers.set("X-A", "1")
        rw.write_header(201)
        rw.write("body")
        rw.reset()
        assert rw.status == 200
        assert rw.body == b""
        assert len(rw.headers) == 0
        assert rw.committed is False
