"""
=============================================================================
DEFERRED STREAMS
=============================================================================

A deferred stream is an eventual stream of data: nothing is produced until
somebody actually needs it.

=============================================================================
HOW IT WORKS
=============================================================================

Each deferred stream knows how to PRODUCE its content into a sink
(``_copy_to_internal``). What it does with that ability depends on the
first thing the caller asks for:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                   DEFERRED STREAM LIFECYCLE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │                        ┌───────────┐                                │
    │        copy_to(sink)   │  PENDING  │   read/write/seek/tell/eof/    │
    │     ┌─────────────────►│ no buffer │   size/metadata/contents/str/  │
    │     │  producer(sink)  └─────┬─────┘   detach                       │
    │     │  no buffer made        │                                      │
    │     └────────────────────────┤                                      │
    │                              ▼                                      │
    │                      ┌───────────────┐                              │
    │                      │ MATERIALIZING │  buffer = BytesIO()          │
    │                      │               │  producer(buffer)            │
    │                      │               │  buffer.seek(0)              │
    │                      └───────┬───────┘                              │
    │                              ▼                                      │
    │                        ┌───────────┐                                │
    │                        │   READY   │  every operation acts on the  │
    │                        │  buffered │  buffer; producer never runs  │
    │                        └─────┬─────┘  again                         │
    │                   close()    │    detach()                          │
    │                 ┌────────────┴────────────┐                         │
    │                 ▼                         ▼                         │
    │           ┌──────────┐             ┌──────────┐                     │
    │           │  CLOSED  │             │ DETACHED │                     │
    │           └──────────┘             └──────────┘                     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Calling copy_to() before anything else streams straight from the
producer into the caller's sink. That is the whole point: a response body
that is only ever copied to the socket never gets held in memory.

=============================================================================
CAVEATS
=============================================================================

1. CAPABILITIES ARE ALWAYS TRUE
   is_readable(), is_seekable() and is_writable() report True even if the
   producer is a write-once source. Once materialized the buffer supports
   all three, and that is the surface this class exposes.

2. PRODUCERS SHOULD BE IDEMPOTENT
   An unbuffered copy_to() leaves no trace. Calling it twice runs the
   producer twice.

3. DETACH AND CLOSE ARE FINAL
   After detach(), or close() on a stream that holds a buffer, every
   operation raises (StreamDetachedError or StreamClosedError). The
   stream is never re-materialized. close() on a stream with no buffer
   does nothing: the stream stays pending.

4. WRITES APPEND
   write() always adds to the end of the produced content, whatever the
   cursor position. Reads still start wherever the cursor is.

5. EOF IS POSITIONAL
   eof() compares the cursor with the buffer size. A stream whose
   producer wrote nothing reports eof() as soon as it materializes,
   without a read having hit the end first.

=============================================================================
"""

import io
import logging
import threading
from abc import abstractmethod
from enum import Enum
from typing import Any, BinaryIO, Callable, Optional, Union

from ..config import DEFAULT_CONFIG, StreamConfig
from .base import (
    StreamClosedError,
    StreamDetachedError,
    StreamInterface,
    StreamStateError,
    SupportsWrite,
    copy_stream,
    lookup_metadata,
    stream_metadata,
    stream_size,
)


logger = logging.getLogger(__name__)


# Producer signature: write content into the sink, return bytes written
# or None on failure.
Producer = Callable[[SupportsWrite], Optional[int]]


class _State(Enum):
    PENDING = "pending"
    MATERIALIZING = "materializing"
    READY = "ready"
    DETACHED = "detached"
    CLOSED = "closed"


class DeferredStream(StreamInterface):
    """
    A stream that delays producing its data until absolutely necessary.

    Subclasses implement ``_copy_to_internal(target)``. Most operations
    populate an in-memory buffer by calling it once, then act on that
    buffer. Calling copy_to() before anything else copies straight to the
    target without a buffer.

    Thread safety: materialization runs under a lock, so two threads
    touching a fresh stream at once still run the producer only once. All
    other operations assume a single owner.
    """

    def __init__(self, config: Optional[StreamConfig] = None):
        self._config = config or DEFAULT_CONFIG
        self._buffer: Optional[io.BytesIO] = None
        self._state = _State.PENDING
        self._lock = threading.RLock()

    @abstractmethod
    def _copy_to_internal(self, target: SupportsWrite) -> Optional[int]:
        """
        Copy the content of this stream to target.

        Returns:
            Number of bytes copied, or None on failure.
        """

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def materialized(self) -> bool:
        """True once the internal buffer exists."""
        return self._buffer is not None

    def _check_usable(self, operation: str) -> None:
        if self._state is _State.DETACHED:
            raise StreamDetachedError(
                f"Cannot {operation}: stream has been detached", operation
            )
        if self._state is _State.CLOSED:
            raise StreamClosedError(
                f"Cannot {operation}: stream is closed", operation
            )

    def _check_not_materializing(self, operation: str) -> None:
        # Only the materializing thread can get here while holding the lock,
        # so this state means the producer called back into its own stream.
        if self._state is _State.MATERIALIZING:
            raise StreamStateError(
                f"Cannot {operation}: producer re-entered its own stream",
                operation,
            )

    def _get_buffer(self, operation: str) -> io.BytesIO:
        """Return the buffer, materializing it on first use."""
        buffer = self._buffer
        if buffer is not None:
            return buffer

        with self._lock:
            self._check_not_materializing(operation)
            self._check_usable(operation)

            if self._buffer is None:
                self._materialize()

            return self._buffer

    def _materialize(self) -> None:
        # ═══════════════════════════════════════════════════════════════════
        # ONE-TIME BUFFER POPULATION
        # ═══════════════════════════════════════════════════════════════════
        # The producer's return value is ignored: a failing producer still
        # leaves an empty (or partial) buffer behind.
        # ═══════════════════════════════════════════════════════════════════
        self._state = _State.MATERIALIZING
        buffer = io.BytesIO()

        try:
            self._copy_to_internal(buffer)
        except BaseException:
            buffer.close()
            self._state = _State.PENDING
            raise

        buffer.seek(0)
        self._buffer = buffer
        self._state = _State.READY

        logger.debug(
            f"Materialized {type(self).__name__} buffer "
            f"({buffer.getbuffer().nbytes} bytes)"
        )

    # =========================================================================
    # BULK COPY
    # =========================================================================

    def copy_to(self, target: SupportsWrite) -> Optional[int]:
        """
        Copy the whole stream into target.

        Before materialization the producer writes directly into target and
        its result (count or None) is returned as-is. After
        materialization the buffer is copied from offset 0 regardless of
        the cursor, and the cursor is left at the end.
        """
        with self._lock:
            self._check_not_materializing("copy")
            self._check_usable("copy")

            if self._buffer is None:
                logger.debug(f"Copying {type(self).__name__} without buffering")
                return self._copy_to_internal(target)

            self._buffer.seek(0)
            return copy_stream(self._buffer, target, self._config.chunk_size)

    # =========================================================================
    # STREAM SURFACE (all act on the buffer)
    # =========================================================================

    def read(self, length: int = -1) -> bytes:
        return self._get_buffer("read").read(length)

    def write(self, data: Union[bytes, str]) -> int:
        """
        Append data to the produced content.

        Writes always land at the end of the buffer, like a file opened
        "a+": the cursor ends up just past the written bytes.
        """
        if isinstance(data, str):
            data = data.encode(self._config.encoding)
        buffer = self._get_buffer("write")
        buffer.seek(0, io.SEEK_END)
        return buffer.write(data)

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        return self._get_buffer("seek").seek(offset, whence)

    def rewind(self) -> None:
        self._get_buffer("rewind").seek(0)

    def tell(self) -> int:
        return self._get_buffer("tell").tell()

    def eof(self) -> bool:
        buffer = self._get_buffer("check eof")
        return buffer.tell() >= buffer.getbuffer().nbytes

    def get_size(self) -> Optional[int]:
        return stream_size(self._get_buffer("get size"))

    def get_metadata(self, key: Optional[str] = None) -> Any:
        buffer = self._get_buffer("get metadata")
        return lookup_metadata(stream_metadata(buffer, mode="r+b"), key)

    def get_contents(self) -> bytes:
        return self._get_buffer("get contents").read()

    def is_readable(self) -> bool:
        return True

    def is_seekable(self) -> bool:
        return True

    def is_writable(self) -> bool:
        return True

    def __str__(self) -> str:
        """Whole content as text, regardless of the cursor position."""
        self.rewind()
        return self.get_contents().decode(self._config.encoding)

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def close(self) -> None:
        """
        Release the buffer if one exists; a no-op otherwise.

        Only a stream that held a buffer becomes closed. A never-touched
        stream stays pending and can still be copied or materialized.
        """
        with self._lock:
            self._check_not_materializing("close")

            if self._buffer is None:
                return

            self._buffer.close()
            self._buffer = None
            self._state = _State.CLOSED

        logger.debug(f"Closed {type(self).__name__} buffer")

    def detach(self) -> BinaryIO:
        """
        Hand the buffer to the caller without closing it.

        Materializes first if needed, so the caller always gets a populated
        handle. The stream is unusable afterwards.
        """
        with self._lock:
            buffer = self._get_buffer("detach")
            self._buffer = None
            self._state = _State.DETACHED

        logger.debug(f"Detached {type(self).__name__} buffer")
        return buffer


class DelegatedDeferredStream(DeferredStream):
    """
    Deferred stream whose content comes from a callable.

    The delegate has the form ``fn(sink) -> int | None``:

        def produce(sink):
            return sink.write(b"Hello, World!")

        body = DelegatedDeferredStream(produce)
    """

    def __init__(self, delegate: Producer, config: Optional[StreamConfig] = None):
        super().__init__(config)
        self._delegate = delegate

    def _copy_to_internal(self, target: SupportsWrite) -> Optional[int]:
        return self._delegate(target)


def deferred_stream(func: Producer) -> DelegatedDeferredStream:
    """
    Decorator to create a deferred stream from a producer function.

    Usage:
        @deferred_stream
        def report(sink):
            return sink.write(render_report().encode())

        response.set_body(report)
    """
    return DelegatedDeferredStream(func)


# =============================================================================
# MODULE SUMMARY
# =============================================================================
#
# DeferredStream:
#   - copy_to() first: producer → caller's sink, nothing buffered
#   - anything else first: producer → BytesIO once, then BytesIO forever
#   - detach() is terminal; close() is terminal once a buffer exists
#
# DelegatedDeferredStream:
#   - the producer is a plain function
# =============================================================================
