"""Terminal error formatting for the perch server.

Template errors that escape the browser (outside debug mode) end up in
the server log. They get a compact banner instead of a raw traceback::

    -- Template Error -----------------------------------------------
    Undefined variable 'usernme' in Resources/views/static/home.html.twig:42

      Route: GET /static/demo/home.html
    -----------------------------------------------------------------

Other errors are logged with their full traceback.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from perch.http.request import Request

logger = logging.getLogger("perch.server")

# Width of the terminal error banner
_BANNER_WIDTH = 65


def is_template_error(exc: BaseException) -> bool:
    """Check if an exception originates from the kida template engine."""
    module = type(exc).__module__ or ""
    return module == "kida" or module.startswith("kida.")


def format_template_error(exc: BaseException, request: Request | None = None) -> str:
    """Format a kida template error for terminal display."""
    parts: list[str] = [f"-- Template Error {'-' * (_BANNER_WIDTH - 18)}"]

    if hasattr(exc, "format_compact"):
        parts.append(exc.format_compact())
    else:
        parts.append(f"{type(exc).__name__}: {exc}")

    if request is not None:
        parts.append("")
        parts.append(f"  Route: {request.method} {request.path}")

    parts.append("-" * _BANNER_WIDTH)
    return "\n".join(parts)


def log_error(exc: BaseException, request: Request | None = None) -> None:
    """Log an internal error, giving template errors the compact format."""
    prefix = f"500 {request.method} {request.path}" if request is not None else "Server error"

    if is_template_error(exc):
        logger.error("%s\n%s", prefix, format_template_error(exc, request))
        return

    logger.error(prefix, exc_info=exc)
