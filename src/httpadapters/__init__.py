"""
=============================================================================
HTTPADAPTERS - Small adapters around HTTP messages and byte streams
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         PACKAGE LAYOUT                              │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   streams/      DeferredStream, DelegatedDeferredStream, Stream     │
    │   http/         HTTPRequest, HTTPResponse, HTTPStatus               │
    │   handlers/     RequestHandler, DelegatedRequestHandler             │
    │   middleware/   Middleware, DelegatedMiddleware                     │
    │   config.py     StreamConfig, configure_logging                     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
QUICK START
=============================================================================

    from httpadapters import (
        DelegatedDeferredStream, DelegatedRequestHandler, HTTPResponse,
    )

    def produce(sink):
        return sink.write(b"Hello, World!")

    def hello(request):
        return HTTPResponse().set_body(DelegatedDeferredStream(produce))

    handler = DelegatedRequestHandler(hello)
    response = handler.handle(request)

=============================================================================
"""

__version__ = "1.0.0"

from .config import StreamConfig, DEFAULT_CONFIG, configure_logging
from .streams import (
    StreamInterface,
    StreamCopyable,
    DeferredStream,
    DelegatedDeferredStream,
    deferred_stream,
    Stream,
    StreamError,
    UnsupportedOperationError,
    StreamOpenError,
    StreamStateError,
    StreamDetachedError,
    StreamClosedError,
)
from .http import HTTPRequest, HTTPResponse, HTTPStatus
from .handlers import RequestHandler, DelegatedRequestHandler, request_handler
from .middleware import Middleware, DelegatedMiddleware, delegated_middleware

__all__ = [
    "__version__",

    # Configuration
    "StreamConfig",
    "DEFAULT_CONFIG",
    "configure_logging",

    # Streams
    "StreamInterface",
    "StreamCopyable",
    "DeferredStream",
    "DelegatedDeferredStream",
    "deferred_stream",
    "Stream",

    # Errors
    "StreamError",
    "UnsupportedOperationError",
    "StreamOpenError",
    "StreamStateError",
    "StreamDetachedError",
    "StreamClosedError",

    # HTTP
    "HTTPRequest",
    "HTTPResponse",
    "HTTPStatus",

    # Adapters
    "RequestHandler",
    "DelegatedRequestHandler",
    "request_handler",
    "Middleware",
    "DelegatedMiddleware",
    "delegated_middleware",
]
