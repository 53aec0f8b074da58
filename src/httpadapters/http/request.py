"""
=============================================================================
HTTP REQUEST
=============================================================================

The request object handed to request handlers and middleware.

This package does not parse requests off the wire: whoever hosts the
handlers builds an HTTPRequest from whatever transport it uses and passes
it in.

    HTTPRequest(
        method="POST",
        path="/api/users",
        headers={"Content-Type": "application/json"},
        body=b'{"name": "John"}',
    )

Header names are case-insensitive (RFC 7230), so they are stored
lower-cased and looked up lower-cased.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, Optional
import json

from ..streams.resource import Stream


@dataclass
class HTTPRequest:
    """
    An HTTP request as seen by handlers.

    Attributes:
        method:       GET, POST, PUT, DELETE, ...
        path:         Request path without query string
        version:      "HTTP/1.1" or "HTTP/1.0"
        headers:      Header name (lower-cased) → value
        query_params: Query parameter → list of values
        body:         Raw body bytes
    """

    method: str
    path: str
    version: str = "HTTP/1.1"
    headers: Dict[str, str] = field(default_factory=dict)
    query_params: Dict[str, list[str]] = field(default_factory=dict)
    body: bytes = b""

    def __post_init__(self):
        self.method = self.method.upper()
        self.headers = {name.lower(): value for name, value in self.headers.items()}

    @property
    def content_type(self) -> Optional[str]:
        """
        Content-Type without parameters.

        "application/json; charset=utf-8" → "application/json"
        """
        value = self.headers.get("content-type")
        if value is None:
            return None
        return value.split(";")[0].strip().lower()

    @property
    def json(self):
        """Body decoded as JSON (None for an empty body)."""
        if not self.body:
            return None
        return json.loads(self.body)

    @property
    def body_stream(self) -> Stream:
        """The body as a fresh readable, seekable stream."""
        return Stream.using(self.body)

    def get_header(self, name: str, default: str = "") -> str:
        """Case-insensitive header lookup."""
        return self.headers.get(name.lower(), default)

    def get_query(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """First value of a query parameter."""
        values = self.query_params.get(name)
        if values:
            return values[0]
        return default
