"""HTTP request and response types."""

from perch.http.request import Request
from perch.http.response import AnyResponse, Redirect, Response

__all__ = ["AnyResponse", "Redirect", "Request", "Response"]
