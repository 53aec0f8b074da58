"""
=============================================================================
RESOURCE STREAMS
=============================================================================

Stream wraps a native binary file object (a file on disk, a pipe, an
io.BytesIO) behind the StreamInterface surface.

=============================================================================
CAPABILITY FLAGS
=============================================================================

A Stream decides once, at construction, what it is allowed to do. The
open mode decides READABLE and WRITABLE; the handle itself decides
SEEKABLE:

    ┌────────┬──────────┬──────────┬──────────────────────────────────┐
    │  mode  │ READABLE │ WRITABLE │ notes                            │
    ├────────┼──────────┼──────────┼──────────────────────────────────┤
    │  r     │    ✓     │          │ file must exist                  │
    │  r+    │    ✓     │    ✓     │ file must exist                  │
    │  w     │          │    ✓     │ truncates                        │
    │  w+    │    ✓     │    ✓     │ truncates                        │
    │  a     │          │    ✓     │ writes go to the end             │
    │  a+    │    ✓     │    ✓     │ writes go to the end             │
    │  x     │          │    ✓     │ file must NOT exist              │
    │  x+    │    ✓     │    ✓     │ file must NOT exist              │
    └────────┴──────────┴──────────┴──────────────────────────────────┘

The "b", "t" and "e" modifiers are ignored when reading the table; the
handle is always opened in binary mode.

Using an operation the flags forbid raises UnsupportedOperationError:

    read(), get_contents(), copy_to()  need READABLE
    write()                            needs WRITABLE
    seek(), rewind()                   need SEEKABLE

=============================================================================
OPENING
=============================================================================

    Stream.open("data.bin", "r")            filesystem path
    Stream.open("file:///tmp/data.bin", "r") file:// URI
    Stream.open_memory("r+")                io.BytesIO
    Stream.using(b"Hello", "r+")            io.BytesIO, pre-filled, rewound
    Stream.from_handle(sys.stdout.buffer)   existing file object

Any failure to open (missing file, bad mode, unknown URI scheme) is
raised as StreamOpenError, with the original error chained.

=============================================================================
"""

import io
import logging
from enum import IntFlag
from typing import Any, BinaryIO, Callable, Optional, Union
from urllib.parse import unquote, urlparse

from ..config import DEFAULT_CONFIG, StreamConfig
from .base import (
    StreamClosedError,
    StreamDetachedError,
    StreamError,
    StreamInterface,
    StreamOpenError,
    SupportsWrite,
    UnsupportedOperationError,
    copy_stream,
    lookup_metadata,
    stream_metadata,
    stream_size,
)


logger = logging.getLogger(__name__)


class Capability(IntFlag):
    """Capability bits of a resource stream."""

    NONE = 0
    READABLE = 0x01
    SEEKABLE = 0x02
    WRITABLE = 0x04


_READABLE_MODES = {"r", "r+", "w+", "a+", "x+"}
_WRITABLE_MODES = {"r+", "w", "w+", "a", "a+", "x", "x+"}
_VALID_MODES = _READABLE_MODES | _WRITABLE_MODES


def _normalize_mode(mode: str) -> str:
    """Strip the b/t/e modifiers: "rb+" → "r+"."""
    return mode.replace("b", "").replace("t", "").replace("e", "")


def _binary_mode(mode: str) -> str:
    """Mode string for open(): "r+" → "r+b"."""
    return _normalize_mode(mode) + "b"


class Stream(StreamInterface):
    """
    General-purpose stream over a native binary file object.

    Construct through the factories (open, open_memory, using,
    from_handle) rather than directly.
    """

    # =========================================================================
    # FACTORIES
    # =========================================================================

    @classmethod
    def from_handle(
        cls, handle: BinaryIO, config: Optional[StreamConfig] = None
    ) -> "Stream":
        """
        Wrap an existing binary file object.

        If the handle carries a mode string (real files do), capabilities
        come from the mode table. Otherwise (io.BytesIO and friends) they
        come from the handle's own readable()/writable() answers.
        """
        mode = getattr(handle, "mode", None)
        if isinstance(mode, str):
            return cls._from_mode(handle, mode, config)

        flags = Capability.NONE
        if handle.readable():
            flags |= Capability.READABLE
        if handle.writable():
            flags |= Capability.WRITABLE
        if handle.seekable():
            flags |= Capability.SEEKABLE

        return cls(handle, flags, None, config)

    @classmethod
    def _from_mode(
        cls, handle: BinaryIO, mode: str, config: Optional[StreamConfig]
    ) -> "Stream":
        flags = Capability.NONE
        normalized = _normalize_mode(mode)

        if normalized in _READABLE_MODES:
            flags |= Capability.READABLE

        if normalized in _WRITABLE_MODES:
            flags |= Capability.WRITABLE

        if handle.seekable():
            flags |= Capability.SEEKABLE

        return cls(handle, flags, mode, config)

    @classmethod
    def open(
        cls,
        uri: str,
        mode: str,
        opener: Optional[Callable[[str, int], int]] = None,
        config: Optional[StreamConfig] = None,
    ) -> "Stream":
        """
        Open a filesystem path or file:// URI as a stream.

        Args:
            uri: Path or file:// URI of the resource
            mode: Open mode (see the table at the top of this module)
            opener: Custom opener passed through to open()
            config: Stream configuration (defaults apply if None)

        Raises:
            StreamOpenError: unknown scheme, invalid mode, or the OS
                refused to open the resource
        """
        path = cls._resolve_path(uri)

        if _normalize_mode(mode) not in _VALID_MODES:
            raise StreamOpenError(f"Invalid mode {mode!r} for {uri!r}", "open")

        try:
            handle = open(path, _binary_mode(mode), opener=opener)
        except (OSError, ValueError) as e:
            raise StreamOpenError(f"Failed to open {uri!r}: {e}", "open") from e

        logger.debug(f"Opened stream {uri!r} (mode={mode})")
        return cls._from_mode(handle, mode, config)

    @staticmethod
    def _resolve_path(uri: str) -> str:
        if "://" not in uri:
            return uri

        parsed = urlparse(uri)
        if parsed.scheme != "file":
            raise StreamOpenError(
                f"Unsupported scheme {parsed.scheme!r} in {uri!r}", "open"
            )

        return unquote(parsed.path)

    @classmethod
    def open_memory(
        cls, mode: Optional[str] = None, config: Optional[StreamConfig] = None
    ) -> "Stream":
        """
        Open an in-memory stream.

        The capability flags follow mode exactly as for a file, so
        open_memory("w") gives a stream that can be written and seeked
        but not read.
        """
        config = config or DEFAULT_CONFIG
        mode = mode or config.memory_mode

        if _normalize_mode(mode) not in _VALID_MODES:
            raise StreamOpenError(f"Invalid mode {mode!r} for memory stream", "open")

        return cls._from_mode(io.BytesIO(), mode, config)

    @classmethod
    def using(
        cls,
        data: Union[bytes, str],
        mode: Optional[str] = None,
        config: Optional[StreamConfig] = None,
    ) -> "Stream":
        """
        Open an in-memory stream populated with data and rewound.

        Raises:
            UnsupportedOperationError: if mode makes the stream non-writable
        """
        stream = cls.open_memory(mode, config)

        stream.write(data)

        stream.rewind()

        return stream

    # =========================================================================
    # INSTANCE
    # =========================================================================

    def __init__(
        self,
        handle: BinaryIO,
        flags: Capability,
        mode: Optional[str] = None,
        config: Optional[StreamConfig] = None,
    ):
        self._handle: Optional[BinaryIO] = handle
        self._flags = flags
        self._mode = mode
        self._config = config or DEFAULT_CONFIG
        self._detached = False
        self._closed = False
        self._hit_eof = False
        self._append = mode is not None and _normalize_mode(mode).startswith("a")

    @property
    def flags(self) -> Capability:
        return self._flags

    def _require(self, operation: str, capability: Capability = Capability.NONE) -> BinaryIO:
        """Return the live handle, or raise if operation is not allowed."""
        if self._detached:
            raise StreamDetachedError(
                f"Cannot {operation}: stream has been detached", operation
            )
        if self._closed:
            raise StreamClosedError(f"Cannot {operation}: stream is closed", operation)

        if capability and not self._flags & capability:
            raise UnsupportedOperationError(
                f"Stream is not {capability.name.lower()}.", operation
            )

        return self._handle

    def __str__(self) -> str:
        """
        Whole content as text, regardless of the cursor position.

        A non-readable stream gives "". A readable but non-seekable one
        raises UnsupportedOperationError.
        """
        if not self._flags & Capability.READABLE:
            return ""

        self.seek(0)

        return self.get_contents().decode(self._config.encoding)

    def close(self) -> None:
        if self._handle is not None and not self._closed:
            self._handle.close()
            logger.debug(f"Closed stream (mode={self._mode})")
        self._closed = True

    def copy_to(self, target: SupportsWrite) -> int:
        """
        Copy from the current position to the end into target.

        Raises:
            StreamError: if reading or writing failed
        """
        handle = self._require("copy", Capability.READABLE)

        try:
            copied = copy_stream(handle, target, self._config.chunk_size)
        except OSError as e:
            raise StreamError(f"Copy failed: {e}", "copy") from e

        self._hit_eof = True
        return copied

    def detach(self) -> Optional[BinaryIO]:
        handle = self._handle
        self._handle = None
        self._detached = True
        return handle

    def eof(self) -> bool:
        handle = self._require("check eof")

        if self._flags & Capability.SEEKABLE:
            size = stream_size(handle)
            if size is not None:
                return handle.tell() >= size

        return self._hit_eof

    def get_contents(self) -> bytes:
        handle = self._require("get contents", Capability.READABLE)
        data = handle.read()
        self._hit_eof = True
        return data

    def get_metadata(self, key: Optional[str] = None) -> Any:
        handle = self._require("get metadata")
        return lookup_metadata(stream_metadata(handle, self._mode), key)

    def get_size(self) -> Optional[int]:
        return stream_size(self._require("get size"))

    def is_readable(self) -> bool:
        return bool(self._flags & Capability.READABLE)

    def is_seekable(self) -> bool:
        return bool(self._flags & Capability.SEEKABLE)

    def is_writable(self) -> bool:
        return bool(self._flags & Capability.WRITABLE)

    def read(self, length: int = -1) -> bytes:
        handle = self._require("read", Capability.READABLE)
        data = handle.read(length)
        if length < 0 or len(data) < length:
            self._hit_eof = True
        return data

    def rewind(self) -> None:
        self.seek(0)

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        handle = self._require("seek", Capability.SEEKABLE)
        self._hit_eof = False
        return handle.seek(offset, whence)

    def tell(self) -> int:
        handle = self._require("tell")
        try:
            return handle.tell()
        except OSError as e:
            raise StreamError(f"Cannot tell position: {e}", "tell") from e

    def write(self, data: Union[bytes, str]) -> int:
        handle = self._require("write", Capability.WRITABLE)
        if isinstance(data, str):
            data = data.encode(self._config.encoding)
        # io.BytesIO has no append mode of its own.
        if self._append and self._flags & Capability.SEEKABLE:
            handle.seek(0, io.SEEK_END)
        return handle.write(data)
