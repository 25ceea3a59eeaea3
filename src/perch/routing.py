"""Routes and a small regex router.

Path patterns use ``{name}`` for one segment and ``{name:path}`` for the
raw remainder of the URL. The remainder is captured verbatim, slashes
included, so the resolver can see (and clean up) whatever was requested.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from perch.errors import ConfigurationError, MethodNotAllowed, NotFound

# (regex_pattern) for each supported converter
CONVERTERS: dict[str, str] = {
    "str": r"[^/]+",
    "path": r".*",
}

_PARAM = re.compile(r"\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?::(?P<type>[a-z]+))?\}")


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition."""

    path: str
    handler: Callable[..., Any]
    methods: frozenset[str] = frozenset({"GET", "HEAD"})
    name: str | None = None


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    path_params: dict[str, str]


def compile_path(path: str) -> re.Pattern[str]:
    """Compile a route pattern into an anchored regex.

    Raises:
        ConfigurationError: On an unknown converter or a ``path``
            parameter that is not the last part of the pattern.
    """
    pattern: list[str] = []
    position = 0
    for match in _PARAM.finditer(path):
        pattern.append(re.escape(path[position : match.start()]))
        param_type = match["type"] or "str"
        if param_type not in CONVERTERS:
            msg = f"Unknown converter {param_type!r} in route {path!r}"
            raise ConfigurationError(msg)
        if param_type == "path" and match.end() != len(path):
            msg = f"A path parameter must end the route: {path!r}"
            raise ConfigurationError(msg)
        pattern.append(f"(?P<{match['name']}>{CONVERTERS[param_type]})")
        position = match.end()
    pattern.append(re.escape(path[position:]))
    return re.compile("".join(pattern) + r"\Z", re.DOTALL)


class Router:
    """Ordered route table; the first matching pattern wins.

    Usage::

        router = Router()
        router.add(Route("/static/{slug}/{path:path}", find))
        match = router.match("GET", "/static/demo/forms/")
    """

    __slots__ = ("_routes",)

    def __init__(self) -> None:
        self._routes: list[tuple[re.Pattern[str], Route]] = []

    @property
    def routes(self) -> list[Route]:
        return [route for _, route in self._routes]

    def add(self, route: Route) -> None:
        self._routes.append((compile_path(route.path), route))

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request path and method.

        Raises:
            NotFound: If no route matches the path.
            MethodNotAllowed: If routes match the path but not the method.
        """
        allowed: set[str] = set()
        for pattern, route in self._routes:
            found = pattern.match(path)
            if found is None:
                continue
            if method in route.methods:
                return RouteMatch(route=route, path_params=found.groupdict())
            allowed.update(route.methods)

        if allowed:
            raise MethodNotAllowed(frozenset(allowed))
        raise NotFound(f"No route matches {method} {path!r}")
