"""
Unit tests for resource-backed streams.
"""

import io
import os

import pytest

from httpadapters.config import StreamConfig
from httpadapters.streams.base import (
    StreamClosedError,
    StreamDetachedError,
    StreamOpenError,
    UnsupportedOperationError,
)
from httpadapters.streams.resource import Capability, Stream


@pytest.fixture
def existing_file(tmp_path):
    """A file on disk containing b"Hello, World!"."""
    path = tmp_path / "hello.txt"
    path.write_bytes(b"Hello, World!")
    return path


@pytest.fixture
def pipe_writer():
    """Write end of an OS pipe, wrapped as a binary file object."""
    read_fd, write_fd = os.pipe()
    reader = os.fdopen(read_fd, "rb")
    writer = os.fdopen(write_fd, "wb")
    yield writer
    writer.close()
    reader.close()


class TestCapabilities:
    """Tests for capability flags and the errors they produce."""

    def test_reading_non_readable_stream_raises(self, tmp_path):
        """Test read() on a write-only file."""
        stream = Stream.open(str(tmp_path / "out.bin"), "w")

        assert stream.is_readable() is False

        with pytest.raises(UnsupportedOperationError) as exc_info:
            stream.read(8)

        assert exc_info.value.operation == "read"
        stream.close()

    def test_seeking_non_seekable_stream_raises(self, pipe_writer):
        """Test seek() on a pipe."""
        stream = Stream.from_handle(pipe_writer)

        assert stream.is_seekable() is False
        assert stream.is_writable() is True

        with pytest.raises(UnsupportedOperationError):
            stream.seek(16)

    def test_writing_non_writable_stream_raises(self, existing_file):
        """Test write() on a read-only file."""
        stream = Stream.open(str(existing_file), "r")

        assert stream.is_writable() is False

        with pytest.raises(UnsupportedOperationError):
            stream.write("Hello, World!")
        stream.close()

    @pytest.mark.parametrize("mode,expected", [
        ("r", Capability.READABLE | Capability.SEEKABLE),
        ("rb", Capability.READABLE | Capability.SEEKABLE),
        ("r+", Capability.READABLE | Capability.WRITABLE | Capability.SEEKABLE),
        ("w", Capability.WRITABLE | Capability.SEEKABLE),
        ("w+b", Capability.READABLE | Capability.WRITABLE | Capability.SEEKABLE),
        ("a", Capability.WRITABLE | Capability.SEEKABLE),
        ("a+", Capability.READABLE | Capability.WRITABLE | Capability.SEEKABLE),
    ])
    def test_flags_follow_mode(self, mode, expected):
        """Test the mode → capability table on memory streams."""
        assert Stream.open_memory(mode).flags == expected

    def test_from_handle_without_mode_uses_predicates(self):
        """Test wrapping a BytesIO, which has no mode attribute."""
        stream = Stream.from_handle(io.BytesIO(b"abc"))

        assert stream.is_readable() is True
        assert stream.is_writable() is True
        assert stream.is_seekable() is True
        assert stream.read() == b"abc"


class TestOpening:
    """Tests for the factories."""

    def test_invalid_filename_raises(self, tmp_path):
        """Test opening a missing file for reading."""
        with pytest.raises(StreamOpenError) as exc_info:
            Stream.open(str(tmp_path / "not-a-file.txt"), "r")

        assert isinstance(exc_info.value.__cause__, FileNotFoundError)

    def test_invalid_mode_raises(self, existing_file):
        """Test opening with a mode that does not exist."""
        with pytest.raises(StreamOpenError):
            Stream.open(str(existing_file), "z")

    def test_invalid_scheme_raises(self, existing_file):
        """Test opening an unsupported URI scheme."""
        with pytest.raises(StreamOpenError):
            Stream.open("not-a-scheme://" + str(existing_file), "r")

    def test_exclusive_mode_on_existing_file_raises(self, existing_file):
        """Test that "x" refuses to overwrite."""
        with pytest.raises(StreamOpenError):
            Stream.open(str(existing_file), "x")

    def test_file_uri(self, existing_file):
        """Test opening through a file:// URI."""
        with Stream.open(existing_file.as_uri(), "r") as stream:
            assert stream.get_contents() == b"Hello, World!"

    def test_opener_is_passed_through(self, existing_file):
        """Test that a custom opener is used."""
        seen = []

        def opener(path, flags):
            seen.append(path)
            return os.open(path, flags)

        with Stream.open(str(existing_file), "r", opener=opener) as stream:
            assert stream.read(5) == b"Hello"

        assert seen == [str(existing_file)]

    def test_invalid_memory_mode_raises(self):
        """Test open_memory with a bad mode."""
        with pytest.raises(StreamOpenError):
            Stream.open_memory("q")

    def test_using_populates_and_rewinds(self):
        """Test Stream.using()."""
        stream = Stream.using("Hello, World!")

        assert stream.tell() == 0
        assert stream.get_contents() == b"Hello, World!"

    def test_using_non_writable_mode_raises(self):
        """Test Stream.using() with a read-only mode."""
        with pytest.raises(UnsupportedOperationError):
            Stream.using(b"data", "r")

    def test_memory_mode_from_config(self):
        """Test that open_memory() falls back to config.memory_mode."""
        stream = Stream.open_memory(config=StreamConfig(memory_mode="w"))

        assert stream.is_readable() is False
        assert stream.is_writable() is True


class TestOperations:
    """Tests for reading, writing and positioning."""

    def test_can_write(self):
        """Test writing to a write-only memory stream."""
        stream = Stream.open_memory("w")

        assert stream.is_writable() is True
        assert stream.tell() == 0

        length = stream.write("Hello, World!")

        assert length == 13
        assert stream.tell() == 13

    @pytest.mark.parametrize("mode", ["a", "a+", "ab+"])
    def test_append_mode_writes_at_end(self, mode):
        """Test that in-memory append modes ignore the cursor on write."""
        stream = Stream.open_memory(mode)
        stream.write(b"Hello")
        stream.seek(0)

        stream.write(b", World!")

        assert stream.tell() == 13
        assert stream.get_size() == 13

    def test_append_mode_keeps_existing_content(self):
        """Test that appending after a rewind does not overwrite."""
        stream = Stream.using(b"Hello", "a+")

        stream.write(b"!")
        stream.rewind()

        assert stream.get_contents() == b"Hello!"

    def test_can_rewind(self):
        """Test rewind()."""
        stream = Stream.open_memory("w")
        stream.write("Hello, World!")

        assert stream.tell() > 0

        stream.rewind()

        assert stream.tell() == 0

    def test_can_seek(self):
        """Test seek() returns the new position."""
        stream = Stream.open_memory("w")
        stream.write("Hello, World!")

        assert stream.seek(0) == 0
        assert stream.seek(-1, io.SEEK_END) == 12

    def test_can_read(self):
        """Test read()."""
        stream = Stream.open_memory()
        stream.write("Hello, World!")
        stream.rewind()

        assert stream.read(5) == b"Hello"

    def test_get_contents_reads_from_cursor(self):
        """Test get_contents() at different positions."""
        stream = Stream.open_memory()
        stream.write(b"Hello, World!")

        assert stream.get_contents() == b""

        stream.seek(5)
        assert stream.get_contents() == b", World!"

        stream.rewind()
        assert stream.get_contents() == b"Hello, World!"

    def test_copy_to(self, sink):
        """Test copying from the cursor to the end."""
        source = Stream.using(b"Hello, World!")

        assert source.copy_to(sink) == 13
        assert sink.getvalue() == b"Hello, World!"

        source.seek(7)
        rest = io.BytesIO()
        assert source.copy_to(rest) == 6
        assert rest.getvalue() == b"World!"

    def test_copy_to_empty_returns_zero(self, sink):
        """Test that copying nothing returns 0, not None."""
        assert Stream.open_memory().copy_to(sink) == 0

    def test_eof(self):
        """Test eof() on a seekable stream."""
        stream = Stream.using(b"abc")

        assert stream.eof() is False
        stream.read(3)
        assert stream.eof() is True
        stream.seek(1)
        assert stream.eof() is False

    def test_eof_on_non_seekable_stream(self):
        """Test eof() tracking when the handle cannot report its size."""
        read_fd, write_fd = os.pipe()
        os.write(write_fd, b"abc")
        os.close(write_fd)

        with Stream.from_handle(os.fdopen(read_fd, "rb")) as stream:
            assert stream.eof() is False
            assert stream.read(10) == b"abc"
            assert stream.eof() is True

    def test_size(self, existing_file):
        """Test get_size() on memory and disk."""
        assert Stream.using(b"12345").get_size() == 5

        with Stream.open(str(existing_file), "r") as stream:
            assert stream.get_size() == 13

    def test_metadata(self, existing_file):
        """Test get_metadata()."""
        with Stream.open(str(existing_file), "r") as stream:
            data = stream.get_metadata()

            assert data["mode"] == "rb"
            assert data["uri"] == str(existing_file)
            assert data["seekable"] is True
            assert stream.get_metadata("stream_type") == "BufferedReader"
            assert stream.get_metadata("unknown") is None

    def test_str_returns_all_contents_regardless_of_position(self):
        """Test str() rewinds first."""
        stream = Stream.open_memory("r+")
        stream.write("Hello, World!")

        assert stream.tell() > 0
        assert str(stream) == "Hello, World!"

        stream.rewind()
        assert str(stream) == "Hello, World!"

    def test_str_of_non_readable_stream_is_empty(self):
        """Test str() on a write-only stream."""
        stream = Stream.open_memory("w")
        stream.write("Hello, World!")
        stream.rewind()

        assert str(stream) == ""


class TestLifecycle:
    """Tests for close() and detach()."""

    def test_detach_returns_handle_and_disables_stream(self):
        """Test that detach hands over the handle without closing it."""
        handle = io.BytesIO(b"abc")
        stream = Stream.from_handle(handle)

        assert stream.detach() is handle
        assert handle.closed is False

        with pytest.raises(StreamDetachedError):
            stream.read()

        assert stream.detach() is None

    def test_close_closes_handle(self, existing_file):
        """Test close() and operations after it."""
        handle = open(existing_file, "rb")
        stream = Stream.from_handle(handle)

        stream.close()
        stream.close()

        assert handle.closed is True
        with pytest.raises(StreamClosedError):
            stream.read()
