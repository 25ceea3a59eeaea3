"""Perch exception hierarchy.

Shared by the resolver, the views, and the ASGI app so every module
raises and catches the same types.
"""

from dataclasses import dataclass


class PerchError(Exception):
    """Base for all perch-specific errors."""


class ConfigurationError(PerchError):
    """Raised when the bundle configuration is invalid.

    Typically raised while loading ``perch.toml`` or building the app.
    """


class UnknownBundleError(ConfigurationError):
    """A slug points at a bundle that is not installed.

    This is an operator mistake, not a request problem: the app logs it
    and answers 500 instead of pretending the page does not exist.
    """

    def __init__(self, bundle_name: str) -> None:
        self.bundle_name = bundle_name
        super().__init__(
            f"Unknown bundle {bundle_name!r}. Make sure this bundle is installed "
            "and your perch bundles config is correct."
        )


@dataclass(frozen=True, slots=True)
class HTTPError(PerchError):
    """An error that maps directly to an HTTP status code."""

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404: no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405: the browser only answers GET and HEAD."""

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        super().__init__(
            status=405,
            detail=detail or f"Method not allowed. Allowed methods: {allow_value}",
            headers=(("Allow", allow_value),),
        )
