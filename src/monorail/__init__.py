"""Monorail — a minimalist web routing framework.

Routes are regular-expression path templates with named variables,
handlers are plain functions whose arguments are injected by type, and
middleware is just a route that calls ``next``.

Basic usage::

    from monorail import App, Context

    app = App()

    @app.route("/hello/:name")
    def hello(ctx: Context) -> str:
        return f"Hello {ctx.request_vars['name']}"

    app.run()

Middleware and mounted collections::

    from monorail import Next, RouteCollection

    def timing(next: Next) -> None:
        t0 = time.monotonic()
        next()
        logger.info("lapse: %.3f", time.monotonic() - t0)

    app.use("/", timing)

    admin = RouteCollection()
    admin.get("/:user", show_user).assert_("user", r"\\d+")
    app.mount("/admin", admin)
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "ConfigurationError",
    "Context",
    "FrozenError",
    "HTTPError",
    "InjectionError",
    "Injector",
    "MonorailError",
    "Next",
    "NotFound",
    "Request",
    "ResponseWriter",
    "Route",
    "RouteCollection",
    "ServiceNotFound",
    "get_context",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import monorail`` fast while providing a clean top-level API.
    """
    if name == "App":
        from monorail.app import App

        return App

    if name == "AppConfig":
        from monorail.config import AppConfig

        return AppConfig

    if name in ("Context", "Next", "get_context"):
        from monorail import context as _ctx

        return getattr(_ctx, name)

    if name == "Injector":
        from monorail.injection import Injector

        return Injector

    if name == "Request":
        from monorail.http.request import Request

        return Request

    if name == "ResponseWriter":
        from monorail.http.response import ResponseWriter

        return ResponseWriter

    if name in ("Route", "RouteCollection"):
        from monorail import routing as _routing

        return getattr(_routing, name)

    if name in (
        "ConfigurationError",
        "FrozenError",
        "HTTPError",
        "InjectionError",
        "MonorailError",
        "NotFound",
        "ServiceNotFound",
    ):
        from monorail import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
