"""Async test client for perch applications.

Uses the same Response type as production. No wrapper translation layer.
"""

from typing import Any
from urllib.parse import quote

from perch.app import App
from perch.http.response import Response


class TestClient:
    __test__ = False  # Tell pytest this is not a test class
    """Async test client for perch applications.

    Sends requests through the ASGI interface directly, no HTTP involved.
    Redirects are returned as-is, never followed.

    Usage::

        async with TestClient(app) as client:
            response = await client.get("/static/demo/")
            assert response.status == 200
    """

    __slots__ = ("app",)

    def __init__(self, app: App) -> None:
        self.app = app

    async def __aenter__(self) -> "TestClient":
        await self._lifespan("startup")
        return self

    async def __aexit__(self, *args: object) -> None:
        await self._lifespan("shutdown")

    async def get(self, path: str, *, headers: dict[str, str] | None = None) -> Response:
        """Send a GET request."""
        return await self.request("GET", path, headers=headers)

    async def head(self, path: str, *, headers: dict[str, str] | None = None) -> Response:
        """Send a HEAD request."""
        return await self.request("HEAD", path, headers=headers)

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
    ) -> Response:
        """Send an arbitrary request through the ASGI app."""
        # Split path and query string
        if "?" in path:
            path_part, query_string = path.split("?", 1)
        else:
            path_part = path
            query_string = ""

        raw_headers: list[tuple[bytes, bytes]] = []
        for name, value in (headers or {}).items():
            raw_headers.append((name.lower().encode("latin-1"), value.encode("latin-1")))

        scope: dict[str, Any] = {
            "type": "http",
            "asgi": {"version": "3.0"},
            "http_version": "1.1",
            "method": method.upper(),
            "path": path_part,
            "raw_path": quote(path_part).encode("ascii"),
            "query_string": query_string.encode("latin-1"),
            "root_path": "",
            "headers": raw_headers,
            "server": ("testserver", 80),
            "client": ("127.0.0.1", 0),
        }

        body_sent = False

        async def receive() -> dict[str, Any]:
            nonlocal body_sent
            if not body_sent:
                body_sent = True
                return {"type": "http.request", "body": b"", "more_body": False}
            return {"type": "http.disconnect"}

        response_status = 200
        response_headers: list[tuple[bytes, bytes]] = []
        response_body_parts: list[bytes] = []

        async def send(message: dict[str, Any]) -> None:
            nonlocal response_status, response_headers
            if message["type"] == "http.response.start":
                response_status = message["status"]
                response_headers = list(message.get("headers", []))
            elif message["type"] == "http.response.body":
                response_body_parts.append(message.get("body", b""))

        await self.app(scope, receive, send)

        content_type = "text/html; charset=utf-8"
        extra_headers: list[tuple[str, str]] = []
        for name_b, value_b in response_headers:
            name_str = name_b.decode("latin-1")
            value_str = value_b.decode("latin-1")
            if name_str == "content-type":
                content_type = value_str
            else:
                extra_headers.append((name_str, value_str))

        return Response(
            body=b"".join(response_body_parts),
            status=response_status,
            content_type=content_type,
            headers=tuple(extra_headers),
        )

    async def _lifespan(self, phase: str) -> None:
        messages = [{"type": f"lifespan.{phase}"}]
        replies: list[str] = []

        async def receive() -> dict[str, Any]:
            if messages:
                return messages.pop()
            # Only reached if the app keeps waiting after startup
            return {"type": "lifespan.shutdown"}

        async def send(message: dict[str, Any]) -> None:
            replies.append(message["type"])

        scope: dict[str, Any] = {"type": "lifespan", "asgi": {"version": "3.0"}}
        if phase == "startup":
            # The app loops until shutdown; run the full cycle and keep the reply
            messages.insert(0, {"type": "lifespan.shutdown"})
        await self.app(scope, receive, send)
        if f"lifespan.{phase}.complete" not in replies:
            msg = f"Lifespan {phase} did not complete: {replies}"
            raise RuntimeError(msg)
