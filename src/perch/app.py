"""The perch ASGI application.

Wires configuration, installed bundles, kida environments, and the
browser's routes together. Everything is built once in ``__init__``;
serving a request never mutates the app.
"""

import inspect
import logging
from collections.abc import Callable
from typing import Any
from urllib.parse import quote

from perch._internal.asgi import Receive, Scope, Send
from perch.bundles import BundleRegistry
from perch.config import AppConfig
from perch.errors import HTTPError
from perch.http.request import Request
from perch.http.response import AnyResponse, Redirect, Response
from perch.routing import Route, Router
from perch.server.errors import handle_http_error, handle_internal_error
from perch.server.sender import send_response
from perch.templating.integration import create_environment
from perch.views import BrowserViews

logger = logging.getLogger("perch.server")


class App:
    """The template browser as an ASGI 3.0 callable.

    Usage::

        config = AppConfig(
            debug=True,
            bundles_dir="bundles",
            bundles={"demo": BundleConfig("DemoBundle")},
        )
        app = App(config)
        app.run()

    A ``registry`` may be passed instead of ``config.bundles_dir`` when
    bundles do not share a parent directory.
    """

    __slots__ = ("_registry", "_router", "_views", "config")

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        registry: BundleRegistry | None = None,
    ) -> None:
        self.config: AppConfig = config or AppConfig()
        if registry is None:
            registry = _discover_bundles(self.config)
        self._registry = registry

        environments = {
            bundle.name: create_environment(self.config, bundle.path) for bundle in registry
        }
        self._views = BrowserViews(
            self.config,
            registry,
            environments,
            create_environment(self.config),
        )
        self._router = self._build_router()
        logger.debug(
            "Serving %d bundle(s) under %s/",
            len(self.config.bundles),
            self.config.url_prefix,
        )

    @property
    def registry(self) -> BundleRegistry:
        return self._registry

    @property
    def router(self) -> Router:
        return self._router

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Serve the app with pounce (single worker, reload in debug mode)."""
        from perch.server.dev import run_dev_server

        run_dev_server(
            self,
            host or self.config.host,
            port or self.config.port,
            reload=self.config.debug,
        )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return
        if scope["type"] != "http":
            return
        await self._handle_http(scope, send)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        # Nothing to open or close: environments are built in __init__
        while True:
            message = await receive()
            msg_type = message["type"]
            if msg_type == "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})
            elif msg_type == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

    async def _handle_http(self, scope: Scope, send: Send) -> None:
        request = Request.from_asgi(scope)
        debug = self.config.debug
        try:
            match = self._router.match(request.method, request.path)
            request = request.with_path_params(match.path_params)
            result = match.route.handler(
                **_build_handler_kwargs(match.route.handler, request, match.path_params)
            )
            response = _to_response(result)
        except HTTPError as exc:
            response = handle_http_error(exc, request, debug=debug)
        except Exception as exc:
            response = handle_internal_error(exc, request, debug=debug)

        logger.info("%s %s %d", request.method, request.url, response.status)
        await send_response(response, send, head=request.method == "HEAD")

    # -- Internal --

    def _build_router(self) -> Router:
        prefix = self.config.url_prefix
        views = self._views
        router = Router()
        router.add(Route(f"{prefix}/", views.root, name="root"))
        if prefix:
            router.add(Route(prefix, _redirect_to(quote(f"{prefix}/")), name="prefix"))
        router.add(Route(f"{prefix}/{{slug}}", views.bundle_root, name="bundle_root"))
        router.add(Route(f"{prefix}/{{slug}}/{{path:path}}", views.find, name="find"))
        return router


def _discover_bundles(config: AppConfig) -> BundleRegistry:
    if config.bundles_dir is None:
        return BundleRegistry()
    return BundleRegistry.from_directory(config.bundles_dir)


def _redirect_to(url: str) -> Callable[[], Redirect]:
    def redirect() -> Redirect:
        return Redirect(url)

    return redirect


def _build_handler_kwargs(
    handler: Callable[..., Any],
    request: Request,
    path_params: dict[str, str],
) -> dict[str, Any]:
    """Pass ``request`` and path parameters to handlers that ask for them."""
    kwargs: dict[str, Any] = {}
    for name, param in inspect.signature(handler).parameters.items():
        if name == "request" or param.annotation is Request:
            kwargs[name] = request
        elif name in path_params:
            kwargs[name] = path_params[name]
    return kwargs


def _to_response(result: AnyResponse) -> Response:
    if isinstance(result, Redirect):
        return result.to_response()
    return result
