"""
=============================================================================
HTTP RESPONSE
=============================================================================

The response object request handlers and middleware return.

=============================================================================
BODIES FROM STREAMS
=============================================================================

set_body() takes a str, bytes, or anything StreamCopyable. A stream body
is drained with copy_to(), so a deferred stream that has not been touched
yet writes straight into the response and never builds its own buffer:

        @deferred_stream
        def report(sink):
            return sink.write(render_report())

        response = HTTPResponse().set_body(report)
                                       │
                                       ▼
                         report.copy_to(BytesIO)  ← producer runs once,
                                                    no internal buffer

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union
import io
import json

from ..streams.base import StreamCopyable, StreamError
from .status_codes import HTTPStatus


Body = Union[str, bytes, StreamCopyable]


@dataclass
class HTTPResponse:
    """
    An HTTP response: status, headers and body bytes.

    Setters return self so calls chain:

        HTTPResponse().set_header("X-One", "1").set_body("hello")
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        self.headers[name] = value
        return self

    def set_content_type(self, content_type: str) -> "HTTPResponse":
        """Set the Content-Type header."""
        return self.set_header("Content-Type", content_type)

    def set_body(self, body: Body) -> "HTTPResponse":
        """
        Set the response body.

        Strings are encoded as UTF-8. Stream bodies are copied in full with
        copy_to().

        Raises:
            StreamError: if a stream body reports a failed copy
        """
        if isinstance(body, str):
            self.body = body.encode("utf-8")
        elif isinstance(body, (bytes, bytearray)):
            self.body = bytes(body)
        else:
            sink = io.BytesIO()
            if body.copy_to(sink) is None:
                raise StreamError("Failed to copy response body", "copy")
            self.body = sink.getvalue()
        return self


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def ok(body: Union[Body, dict, list] = "", content_type: Optional[str] = None) -> HTTPResponse:
    """
    Create a 200 OK response.

    dict/list → JSON, str → text/plain, bytes or stream → raw body.
    """
    response = HTTPResponse(status=HTTPStatus.OK)

    if isinstance(body, (dict, list)):
        response.set_body(json.dumps(body))
        response.set_content_type("application/json; charset=utf-8")
    elif isinstance(body, str):
        response.set_body(body)
        response.set_content_type(content_type or "text/plain; charset=utf-8")
    else:
        response.set_body(body)
        if content_type:
            response.set_content_type(content_type)

    return response


def _error(status: HTTPStatus, message: str) -> HTTPResponse:
    payload: Dict[str, Any] = {"error": message}
    return (HTTPResponse(status=status)
        .set_content_type("application/json; charset=utf-8")
        .set_body(json.dumps(payload)))


def not_found(message: str = "Not Found") -> HTTPResponse:
    """Create a 404 Not Found response with a JSON error body."""
    return _error(HTTPStatus.NOT_FOUND, message)


def internal_error(message: str = "Internal Server Error") -> HTTPResponse:
    """Create a 500 response. Keep message generic in production."""
    return _error(HTTPStatus.INTERNAL_SERVER_ERROR, message)
