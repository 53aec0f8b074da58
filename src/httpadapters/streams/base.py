"""
=============================================================================
STREAM CONTRACT
=============================================================================

The shared surface every stream in this package implements, the error
types they raise, and the small helpers they use to copy, size and
describe native binary file objects.

=============================================================================
THE STREAM SURFACE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        StreamInterface                              │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   POSITION        read(n)  write(data)  seek(off, whence)           │
    │                   rewind() tell()       eof()                       │
    │                                                                      │
    │   WHOLE STREAM    get_contents()  get_size()  str(stream)           │
    │                   copy_to(sink)   ◄── StreamCopyable                │
    │                                                                      │
    │   INTROSPECTION   get_metadata(key)                                 │
    │                   is_readable() is_writable() is_seekable()         │
    │                                                                      │
    │   LIFECYCLE       close()  detach()                                 │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

StreamCopyable is kept separate from the full surface: anything that can
pour its bytes into a sink (a stream, a response body, a plain object)
can satisfy it without implementing random access.

=============================================================================
ERROR TAXONOMY
=============================================================================

    StreamError
    ├── UnsupportedOperationError   capability missing (e.g. not readable)
    ├── StreamOpenError             resource could not be opened
    └── StreamStateError            wrong lifecycle state
        ├── StreamDetachedError     handle was handed to the caller
        └── StreamClosedError       stream was closed

A producer that fails to copy is NOT an exception: it returns None and
copy_to() hands that straight back to the caller.

=============================================================================
"""

import io
import os
from abc import ABC, abstractmethod
from typing import Any, BinaryIO, Dict, Optional, Protocol, Union, runtime_checkable


# =============================================================================
# ERRORS
# =============================================================================

class StreamError(Exception):
    """
    Base class for stream failures.

    Carries the name of the operation that failed so callers can report
    "read failed" without parsing the message.
    """

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message)
        self.operation = operation


class UnsupportedOperationError(StreamError):
    """Raised when a stream lacks the capability an operation needs."""


class StreamOpenError(StreamError):
    """Raised when a resource cannot be opened as a stream."""


class StreamStateError(StreamError):
    """Raised when a stream is used in a state that forbids the operation."""


class StreamDetachedError(StreamStateError):
    """Raised on any use of a stream after detach()."""


class StreamClosedError(StreamStateError):
    """Raised on any use of a stream after close()."""


# =============================================================================
# CAPABILITIES
# =============================================================================

@runtime_checkable
class SupportsWrite(Protocol):
    """Anything bytes can be written into: a sink."""

    def write(self, data: bytes) -> Optional[int]:
        ...


@runtime_checkable
class StreamCopyable(Protocol):
    """
    Strategy for copying the contents of an object to a target sink.

    copy_to() returns the number of bytes copied, or None when the copy
    failed.
    """

    def copy_to(self, target: SupportsWrite) -> Optional[int]:
        ...


class StreamInterface(ABC):
    """
    Random-access byte stream with bulk copy and ownership transfer.

    Implementations: DeferredStream (lazy, buffered) and Stream (wraps a
    native file object).
    """

    @abstractmethod
    def copy_to(self, target: SupportsWrite) -> Optional[int]:
        """Copy stream contents into target; return bytes copied or None."""

    @abstractmethod
    def close(self) -> None:
        """Release the underlying resource."""

    @abstractmethod
    def detach(self) -> Optional[BinaryIO]:
        """Hand the underlying handle to the caller and stop managing it."""

    @abstractmethod
    def eof(self) -> bool:
        """True when the cursor is at the end of the stream."""

    @abstractmethod
    def get_contents(self) -> bytes:
        """Read everything from the cursor to the end."""

    @abstractmethod
    def get_metadata(self, key: Optional[str] = None) -> Any:
        """Full metadata mapping, or one value (None if unknown)."""

    @abstractmethod
    def get_size(self) -> Optional[int]:
        """Size in bytes, or None when it cannot be determined."""

    @abstractmethod
    def is_readable(self) -> bool:
        ...

    @abstractmethod
    def is_seekable(self) -> bool:
        ...

    @abstractmethod
    def is_writable(self) -> bool:
        ...

    @abstractmethod
    def read(self, length: int = -1) -> bytes:
        """Read up to length bytes (all remaining if negative)."""

    @abstractmethod
    def rewind(self) -> None:
        """Move the cursor to offset 0."""

    @abstractmethod
    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        """Move the cursor; return the new absolute position."""

    @abstractmethod
    def tell(self) -> int:
        """Current cursor position."""

    @abstractmethod
    def write(self, data: Union[bytes, str]) -> int:
        """
        Write data; return bytes written.

        Where the bytes land is up to the implementation: a resource
        Stream writes at the cursor (or at the end in append modes), a
        DeferredStream always appends to the produced content.
        """

    # Context manager support: ``with Stream.open_memory() as s: ...``
    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


# =============================================================================
# HELPERS FOR NATIVE FILE OBJECTS
# =============================================================================

def copy_stream(source: BinaryIO, target: SupportsWrite, chunk_size: int) -> int:
    """
    Copy source into target from source's current position to its end.

    Same loop as shutil.copyfileobj, but counts what was moved.

    Returns:
        Number of bytes read from source and handed to target.
    """
    copied = 0

    while True:
        chunk = source.read(chunk_size)
        if not chunk:
            break
        target.write(chunk)
        copied += len(chunk)

    return copied


def stream_size(handle: BinaryIO) -> Optional[int]:
    """
    Size of a native file object in bytes.

    ┌──────────────────────┬─────────────────────────────────────────┐
    │ io.BytesIO           │ length of its buffer                    │
    │ real file / pipe     │ os.fstat().st_size                      │
    │ other seekable       │ seek to end, then restore the cursor    │
    │ anything else        │ None                                    │
    └──────────────────────┴─────────────────────────────────────────┘
    """
    if isinstance(handle, io.BytesIO):
        return handle.getbuffer().nbytes

    try:
        return os.fstat(handle.fileno()).st_size
    except (AttributeError, OSError, io.UnsupportedOperation):
        pass

    if _probe(handle, "seekable"):
        position = handle.tell()
        try:
            return handle.seek(0, io.SEEK_END)
        finally:
            handle.seek(position)

    return None


def stream_metadata(handle: BinaryIO, mode: Optional[str] = None) -> Dict[str, Any]:
    """
    Describe a native file object.

    ``mode`` is only used when the handle has no mode of its own
    (io.BytesIO, for one).

    Keys:
        mode          open mode ("r+b", "wb", ...)
        seekable      handle reports random access
        readable      handle reports read support
        writable      handle reports write support
        closed        handle has been closed
        stream_type   class name of the handle ("BytesIO", "BufferedReader")
        uri           file name, or None for anonymous handles
    """
    mode = getattr(handle, "mode", mode)
    name = getattr(handle, "name", None)

    return {
        "mode": mode,
        "seekable": _probe(handle, "seekable"),
        "readable": _probe(handle, "readable"),
        "writable": _probe(handle, "writable"),
        "closed": bool(getattr(handle, "closed", False)),
        "stream_type": type(handle).__name__,
        "uri": name if isinstance(name, str) else None,
    }


def lookup_metadata(data: Dict[str, Any], key: Optional[str]) -> Any:
    """Whole mapping when key is None, else the value or None."""
    if key is None:
        return data
    return data.get(key)


def _probe(handle: Any, predicate: str) -> bool:
    """Call handle.<predicate>() treating errors and absence as False."""
    method = getattr(handle, predicate, None)
    if method is None:
        return False
    try:
        return bool(method())
    except (OSError, ValueError):
        return False
