"""
pytest configuration and fixtures.
"""

import io
from typing import Callable, List, Optional

import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from httpadapters import HTTPRequest, HTTPResponse, HTTPStatus


class RecordingProducer:
    """Producer that writes fixed bytes and remembers every sink it saw."""

    def __init__(self, data: bytes = b"Hello, World!", fail: bool = False):
        self.data = data
        self.fail = fail
        self.sinks: List[object] = []

    @property
    def calls(self) -> int:
        return len(self.sinks)

    def __call__(self, sink) -> Optional[int]:
        self.sinks.append(sink)
        if self.fail:
            return None
        return sink.write(self.data)


@pytest.fixture
def hello_producer() -> RecordingProducer:
    """Producer writing b"Hello, World!"."""
    return RecordingProducer()


@pytest.fixture
def failing_producer() -> RecordingProducer:
    """Producer that writes nothing and reports failure."""
    return RecordingProducer(data=b"", fail=True)


@pytest.fixture
def empty_producer() -> RecordingProducer:
    """Producer that writes nothing and reports success."""
    return RecordingProducer(data=b"")


@pytest.fixture
def sink() -> io.BytesIO:
    """Empty in-memory sink."""
    return io.BytesIO()


@pytest.fixture
def sample_request() -> HTTPRequest:
    """Sample JSON POST request."""
    return HTTPRequest(
        method="post",
        path="/api/users",
        headers={"Content-Type": "application/json", "X-Trace": "abc"},
        query_params={"page": ["1", "2"]},
        body=b'{"name": "John"}',
    )


@pytest.fixture
def echo_handler() -> Callable[[HTTPRequest], HTTPResponse]:
    """Handler function echoing the request path in the body."""
    def echo(request: HTTPRequest) -> HTTPResponse:
        return HTTPResponse(status=HTTPStatus.OK).set_body(request.path)
    return echo
