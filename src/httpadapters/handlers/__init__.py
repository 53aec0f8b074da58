"""
=============================================================================
REQUEST HANDLERS
=============================================================================

    RequestHandler            abstract: handle(request) → response
    DelegatedRequestHandler   wraps fn(request) → response
    request_handler           decorator form of DelegatedRequestHandler
    as_handler                object-or-function → RequestHandler

=============================================================================
"""

from .base import (
    RequestHandler,
    DelegatedRequestHandler,
    HandlerFunc,
    request_handler,
    as_handler,
)

__all__ = [
    "RequestHandler",
    "DelegatedRequestHandler",
    "HandlerFunc",
    "request_handler",
    "as_handler",
]
