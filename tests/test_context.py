"""Tests for monorail.context — Context helpers, Next, get_context."""

from dataclasses import dataclass

import pytest

from monorail.context import Context, Next, context_var, get_context
from monorail.http.request import Request
from monorail.http.response import ResponseWriter


def _ctx(body: bytes = b"") -> Context:
    return Context(Request(method="GET", path="/", body=body), ResponseWriter())


@dataclass
class Movie:
    title: str
    year: int


class TestWriting:
    def test_write_string_joins_parts(self) -> None:
        ctx = _ctx()
        ctx.write_string("Hello ", "foo", None, 1)
        assert ctx.response.body == b"Hello foo1"
        assert ctx.response.headers.get("content-type") == "text/plain; charset=utf-8"

    def test_write_string_keeps_content_type(self) -> None:
        ctx = _ctx()
        ctx.response.headers.set("Content-Type", "text/html")
        ctx.write_string("<p>hi</p>")
        assert ctx.response.headers.get("content-type") == "text/html"

    def test_write_json(self) -> None:
        ctx = _ctx()
        ctx.write_json({"ok": True}, status=201)
        assert ctx.response.status == 201
        assert ctx.response.body == b'{"ok": true}'
        assert ctx.response.headers.get("content-type") == "application/json"

    def test_write_json_dataclass(self) -> None:
        ctx = _ctx()
        ctx.write_json([Movie("Alien", 1979)])
        assert ctx.response.body == b'[{"title": "Alien", "year": 1979}]'

    def test_write_json_plain_object(self) -> None:
        class Point:
            def __init__(self) -> None:
                self.x = 1

        ctx = _ctx()
        ctx.write_json(Point())
        assert ctx.response.body == b'{"x": 1}'

    def test_write_json_unserializable(self) -> None:
        with pytest.raises(TypeError):
            _ctx().write_json({1, 2})

    def test_read_json(self) -> None:
        assert _ctx(b'{"a": [1, 2]}').read_json() == {"a": [1, 2]}

    def test_redirect(self) -> None:
        ctx = _ctx()
        ctx.redirect("/login")
        assert ctx.response.status == 302
        assert ctx.response.headers.get("location") == "/login"

    def test_redirect_status(self) -> None:
        ctx = _ctx()
        ctx.redirect("/new", status=301)
        assert ctx.response.status == 301


class TestNext:
    def test_calls_once(self) -> None:
        calls: list[int] = []
        advance = Next(lambda: calls.append(1))
        advance()
        advance()
        assert calls == [1]
        assert advance.called is True

    def test_default_next_is_noop(self) -> None:
        ctx = _ctx()
        ctx.next()
        assert ctx.next.called is True


class TestGetContext:
    def test_outside_request(self) -> None:
        with pytest.raises(LookupError):
            get_context()

    def test_inside_request(self) -> None:
        ctx = _ctx()
        token = context_var.set(ctx)
        try:
            assert get_context() is ctx
        finally:
            context_var.reset(token)
