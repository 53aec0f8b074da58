"""
=============================================================================
HTTP MESSAGES
=============================================================================

The request and response types that handlers and middleware exchange.

    ┌──────────────┐     handle(request)      ┌──────────────┐
    │ HTTPRequest  │ ───────────────────────► │ HTTPResponse │
    │ method, path │                          │ status       │
    │ headers      │                          │ headers      │
    │ body         │                          │ body         │
    └──────────────┘                          └──────────────┘

=============================================================================
"""

from .request import HTTPRequest
from .response import (
    HTTPResponse,
    ok,              # 200 OK
    not_found,       # 404 Not Found
    internal_error,  # 500 Internal Server Error
)
from .status_codes import HTTPStatus

__all__ = [
    "HTTPRequest",
    "HTTPResponse",
    "HTTPStatus",
    "ok",
    "not_found",
    "internal_error",
]
