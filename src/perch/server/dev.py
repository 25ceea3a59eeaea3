"""Development server.

Starts a pounce ASGI server with the live perch App object, one worker,
reloading when debug is on so template edits show up immediately.
"""


def run_dev_server(
    app: object,
    host: str,
    port: int,
    *,
    reload: bool = False,
    app_path: str | None = None,
) -> None:
    """Start a pounce server for the given perch App.

    Args:
        app: ASGI callable (perch App instance).
        host: Bind host address.
        port: Bind port number.
        reload: Enable auto-reload on file changes.
        app_path: Optional ``"module:attribute"`` import string, so pounce
            can reimport the app on each reload cycle.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(
        host=host,
        port=port,
        workers=1,
        reload=reload,
        reload_include=(".twig", ".html", ".toml"),
    )
    server = Server(config, app, app_path=app_path)
    server.run()
