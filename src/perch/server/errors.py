"""Error handling pipeline for perch requests.

Maps HTTPError exceptions and unexpected failures to Responses. Template
errors only reach this point outside debug mode (in debug mode the views
turn them into an in-page report), so the 500 page stays terse.
"""

import logging

from perch.errors import HTTPError
from perch.http.request import Request
from perch.http.response import Response
from perch.server.terminal_errors import log_error

logger = logging.getLogger("perch.server")


def handle_http_error(exc: HTTPError, request: Request, *, debug: bool = False) -> Response:
    """Map an HTTPError to a plain-text response."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)

    detail = exc.detail or f"Error {exc.status}"
    if debug and exc.detail:
        detail = f"{exc.status}: {exc.detail}"

    response = Response(body=detail, content_type="text/plain; charset=utf-8", status=exc.status)
    for name, value in exc.headers:
        response = response.with_header(name, value)
    return response


def handle_internal_error(exc: Exception, request: Request, *, debug: bool = False) -> Response:
    """Handle unexpected exceptions as 500 errors."""
    log_error(exc, request)

    body = "Internal Server Error"
    if debug:
        body = f"Internal Server Error\n\n{type(exc).__name__}: {exc}"
    return Response(body=body, content_type="text/plain; charset=utf-8", status=500)
