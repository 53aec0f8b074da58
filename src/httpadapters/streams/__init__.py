"""
=============================================================================
STREAMS
=============================================================================

Byte streams used as HTTP message bodies.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   StreamInterface (ABC)                                             │
    │   ├── DeferredStream (ABC)   produce on first need, then buffer     │
    │   │   └── DelegatedDeferredStream   producer is a function          │
    │   └── Stream                 wraps a file / pipe / BytesIO          │
    │                                                                      │
    │   StreamCopyable (Protocol)  anything with copy_to(sink)            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .base import (
    StreamInterface,
    StreamCopyable,
    SupportsWrite,
    StreamError,
    UnsupportedOperationError,
    StreamOpenError,
    StreamStateError,
    StreamDetachedError,
    StreamClosedError,
)
from .deferred import DeferredStream, DelegatedDeferredStream, deferred_stream
from .resource import Stream, Capability

__all__ = [
    # Contracts
    "StreamInterface",
    "StreamCopyable",
    "SupportsWrite",

    # Implementations
    "DeferredStream",
    "DelegatedDeferredStream",
    "deferred_stream",
    "Stream",
    "Capability",

    # Errors
    "StreamError",
    "UnsupportedOperationError",
    "StreamOpenError",
    "StreamStateError",
    "StreamDetachedError",
    "StreamClosedError",
]
