"""Tests for monorail.routing.collection — ordering, mounting, freezing."""

import pytest

from monorail.errors import FrozenError
from monorail.routing.collection import RouteCollection
from monorail.routing.pattern import PatternCompiler
from monorail.routing.route import Route


def _handler() -> None:
    pass


class TestRegistration:
    def test_verb_helpers(self) -> None:
        routes = RouteCollection()
        assert routes.get("/", _handler).methods == ("GET",)
        assert routes.post("/", _handler).methods == ("POST",)
        assert routes.put("/", _handler).methods == ("PUT",)
        assert routes.patch("/", _handler).methods == ("PATCH",)
        assert routes.delete("/", _handler).methods == ("DELETE",)
        assert routes.all("/", _handler).methods == ("*",)
        assert len(routes) == 6

    def test_use_is_passthrough(self) -> None:
        routes = RouteCollection()
        route = routes.use("/", _handler)
        assert route.passthrough is True
        assert route.methods == ("*",)

    def test_route_decorator_returns_function(self) -> None:
        routes = RouteCollection()

        @routes.route("/hello/:name")
        def hello() -> str:
            return "hi"

        assert hello() == "hi"
        assert routes.routes[0].methods == ("GET",)
        assert routes.routes[0].handlers == (hello,)

    def test_route_decorator_methods_and_name(self) -> None:
        routes = RouteCollection()

        @routes.route("/users", methods=["GET", "POST"], name="users")
        def users() -> None:
            pass

        assert routes.routes[0].methods == ("GET", "POST")
        assert routes.routes[0].name == "users"

    def test_add_route(self) -> None:
        routes = RouteCollection()
        route = Route("/x", _handler)
        assert routes.add_route(route) is route
        assert list(routes) == [route]


class TestMount:
    def test_prefix_applied_on_freeze(self) -> None:
        app = RouteCollection()
        child = RouteCollection()
        child.get("/example", _handler)
        app.mount("/", child)
        (route,) = app.freeze(PatternCompiler())
        assert route.path == "/example"
        assert route.match("/example") is not None

    def test_nested_prefixes(self) -> None:
        app = RouteCollection()
        admin = RouteCollection()
        users = RouteCollection()
        users.get("/:id", _handler)
        admin.mount("/users", users)
        app.mount("/admin", admin)
        (route,) = app.freeze(PatternCompiler())
        assert route.path == "/admin/users/:id"
        assert route.match("/admin/users/7").request_vars == {"id": "7"}

    def test_child_routes_spliced_at_mount_point(self) -> None:
        app = RouteCollection()
        child = RouteCollection()
        first = app.get("/first", _handler)
        inner = child.get("/inner", _handler)
        app.mount("/child", child)
        last = app.get("/last", _handler)
        assert app.freeze(PatternCompiler()) == (first, inner, last)

    def test_second_mount_is_noop(self) -> None:
        app = RouteCollection()
        child = RouteCollection()
        child.get("/x", _handler)
        app.mount("/a", child)
        app.mount("/b", child)
        routes = app.freeze(PatternCompiler())
        assert len(routes) == 1
        assert routes[0].path == "/a/x"

    def test_mount_on_another_parent_is_noop(self) -> None:
        first = RouteCollection()
        second = RouteCollection()
        child = RouteCollection()
        child.get("/x", _handler)
        first.mount("/a", child)
        second.mount("/b", child)
        assert len(second.freeze(PatternCompiler())) == 0

    def test_mount_self_is_noop(self) -> None:
        app = RouteCollection()
        app.mount("/loop", app)
        assert app.has_parent is False
        assert app.freeze(PatternCompiler()) == ()

    def test_has_parent(self) -> None:
        app = RouteCollection()
        child = RouteCollection()
        app.mount("/c", child)
        assert child.has_parent is True

    def test_child_own_prefix_kept(self) -> None:
        app = RouteCollection()
        child = RouteCollection(prefix="/v1")
        child.get("/items", _handler)
        app.mount("/api", child)
        (route,) = app.freeze(PatternCompiler())
        assert route.path == "/api/v1/items"


class TestFreeze:
    def test_idempotent(self) -> None:
        routes = RouteCollection()
        routes.get("/", _handler)
        compiler = PatternCompiler()
        first = routes.freeze(compiler)
        second = routes.freeze(compiler)
        assert first is second
        assert len(second) == 1

    def test_frozen_flag(self) -> None:
        routes = RouteCollection()
        assert routes.frozen is False
        routes.freeze()
        assert routes.frozen is True

    def test_add_after_freeze(self) -> None:
        routes = RouteCollection()
        routes.freeze()
        with pytest.raises(FrozenError):
            routes.get("/", _handler)

    def test_mount_after_freeze(self) -> None:
        routes = RouteCollection()
        routes.freeze()
        with pytest.raises(FrozenError):
            routes.mount("/x", RouteCollection())

    def test_mount_frozen_child(self) -> None:
        child = RouteCollection()
        child.freeze()
        with pytest.raises(FrozenError):
            RouteCollection().mount("/x", child)

    def test_repr(self) -> None:
        routes = RouteCollection()
        routes.get("/", _handler)
        assert repr(routes) == "<RouteCollection '/' open routes=1>"
