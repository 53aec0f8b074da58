"""
=============================================================================
STREAM CONFIGURATION
=============================================================================

Centralized configuration for the stream adapters.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Explicit StreamConfig passed to a stream                       │
    │      └── Stream.open_memory(config=StreamConfig(chunk_size=1024))  │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── HTTPADAPTERS_CHUNK_SIZE=1024                               │
    │                                                                      │
    │   3. Default values (in this dataclass)                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Streams take an optional ``config`` argument. ``None`` means
``DEFAULT_CONFIG``, so everyday code never has to build one.

=============================================================================
"""

import logging
import os
from dataclasses import dataclass


# Modes accepted by the in-memory store. Mirrors the flag table in
# streams/resource.py.
_MEMORY_MODES = {"r", "r+", "w", "w+", "a", "a+", "x", "x+"}


@dataclass
class StreamConfig:
    """
    Configuration shared by the stream implementations.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    COPYING
    - chunk_size

    IN-MEMORY STREAMS
    - memory_mode, encoding

    LOGGING
    - log_level

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # COPYING
    # ─────────────────────────────────────────────────────────────────────

    chunk_size: int = 64 * 1024
    """
    Number of bytes moved per read/write when copying one stream into
    another. Larger = fewer calls, more memory per copy.
    """

    # ─────────────────────────────────────────────────────────────────────
    # IN-MEMORY STREAMS
    # ─────────────────────────────────────────────────────────────────────

    memory_mode: str = "r+"
    """
    Default mode for Stream.open_memory() and Stream.using().
    "r+" gives a readable, writable, seekable store.
    """

    encoding: str = "utf-8"
    """
    Text encoding used when str data is written to a stream and when a
    stream is converted with str().
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """
    Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL) for the
    "httpadapters" logger. DEBUG shows materialization and copy events.
    """

    @classmethod
    def from_env(cls) -> "StreamConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        HTTPADAPTERS_CHUNK_SIZE    Copy chunk size in bytes (default: 65536)
        HTTPADAPTERS_MEMORY_MODE   Default in-memory mode (default: r+)
        HTTPADAPTERS_ENCODING      Text encoding (default: utf-8)
        HTTPADAPTERS_LOG_LEVEL     Logging level (default: INFO)

        =====================================================================
        """
        return cls(
            chunk_size=int(os.getenv("HTTPADAPTERS_CHUNK_SIZE", "65536")),
            memory_mode=os.getenv("HTTPADAPTERS_MEMORY_MODE", "r+"),
            encoding=os.getenv("HTTPADAPTERS_ENCODING", "utf-8"),
            log_level=os.getenv("HTTPADAPTERS_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises ValueError on the first bad value so misconfiguration is
        caught when the config is built, not on the first copy.
        """
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {self.chunk_size}")

        mode = self.memory_mode.replace("b", "").replace("t", "").replace("e", "")
        if mode not in _MEMORY_MODES:
            raise ValueError(f"Invalid memory_mode: {self.memory_mode!r}")

        try:
            "".encode(self.encoding)
        except LookupError:
            raise ValueError(f"Unknown encoding: {self.encoding!r}") from None

        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Invalid log_level: {self.log_level!r}")


DEFAULT_CONFIG = StreamConfig()


def configure_logging(config: StreamConfig = DEFAULT_CONFIG) -> None:
    """Configure logging based on config."""
    level = getattr(logging, config.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logging.getLogger("httpadapters").setLevel(level)
