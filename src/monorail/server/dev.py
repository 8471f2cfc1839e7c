"""Development server.

Starts a pounce ASGI server with the live monorail App object.
Uses single-worker mode; reload is opt-in through ``AppConfig.reload``.
"""


def run_dev_server(
    app: object,
    host: str,
    port: int,
    *,
    reload: bool = False,
) -> None:
    """Start a pounce server with the given monorail App.

    Pounce's ``run()`` takes an import string (e.g., ``"myapp:app"``),
    but here we have a live ``App`` object, so ``pounce.Server`` is used
    directly with the ASGI callable.

    Args:
        app: ASGI callable (monorail App instance).
        host: Bind host address.
        port: Bind port number.
        reload: Enable auto-reload on file changes.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(host=host, port=port, workers=1, reload=reload)
    server = Server(config, app)
    server.run()
