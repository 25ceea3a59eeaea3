"""Immutable HTTP request.

The browser only reads GET requests, so the request carries metadata
and no body access.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any
from urllib.parse import parse_qsl


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request built from an ASGI scope."""

    method: str
    path: str
    query: Mapping[str, str]
    headers: Mapping[str, str]
    path_params: Mapping[str, str] = field(default_factory=dict)
    http_version: str = "1.1"
    client: tuple[str, int] | None = None

    @property
    def url(self) -> str:
        """Request path plus query string, as received."""
        if not self.query:
            return self.path
        return self.path + "?" + "&".join(f"{k}={v}" for k, v in self.query.items())

    def with_path_params(self, path_params: Mapping[str, str]) -> Request:
        """Return a copy carrying the route's matched parameters."""
        return Request(
            method=self.method,
            path=self.path,
            query=self.query,
            headers=self.headers,
            path_params=MappingProxyType(dict(path_params)),
            http_version=self.http_version,
            client=self.client,
        )

    @classmethod
    def from_asgi(cls, scope: Mapping[str, Any]) -> Request:
        """Create a Request from an ASGI HTTP scope."""
        raw_query: bytes = scope.get("query_string", b"")
        headers = {
            name.decode("latin-1").lower(): value.decode("latin-1")
            for name, value in scope.get("headers", ())
        }
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            query=MappingProxyType(dict(parse_qsl(raw_query.decode("latin-1")))),
            headers=MappingProxyType(headers),
            http_version=scope.get("http_version", "1.1"),
            client=tuple(client) if client else None,
        )
