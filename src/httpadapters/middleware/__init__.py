"""
=============================================================================
MIDDLEWARE
=============================================================================

    Middleware             abstract: process(request, handler) → response
    DelegatedMiddleware    wraps fn(request, handler) → response
    delegated_middleware   decorator form of DelegatedMiddleware

Composing several middleware into a pipeline is left to the host
application; this package only provides the adapters.

=============================================================================
"""

from .base import (
    Middleware,
    DelegatedMiddleware,
    MiddlewareFunc,
    NextHandler,
    delegated_middleware,
)

__all__ = [
    "Middleware",
    "DelegatedMiddleware",
    "MiddlewareFunc",
    "NextHandler",
    "delegated_middleware",
]
