"""Diagnostic logging for the HTTP client.

wget prints what it is doing when asked to (``-d``): the request it
sends, the response it gets back, whether a connection was opened or
reused.  This module is the client's equivalent of that debug stream:

- **LogLevel** — severity levels ordered for filtering (DEBUG < ERROR).
- **LogEntry** — a single structured record (level, message, source).
- **Logger** — an append-only log that echoes entries at or above a
  threshold to a text stream.

Every entry is recorded; the verbosity only decides what reaches the
stream, so ``entries`` always holds the full trail.
"""

import sys
from dataclasses import dataclass
from enum import IntEnum
from typing import TextIO


class LogLevel(IntEnum):
    """Severity levels for log entries, ordered for filtering."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


def level_for_verbosity(verbosity: int) -> LogLevel:
    """Map a ``-d`` count to the lowest level worth echoing.

    0 shows warnings and errors, 1 adds request/response dumps (INFO),
    2 or more adds per-line codec traces (DEBUG).
    """
    if verbosity <= 0:
        return LogLevel.WARNING
    if verbosity == 1:
        return LogLevel.INFO
    return LogLevel.DEBUG


@dataclass(frozen=True)
class LogEntry:
    """A single structured log record.

    Attributes:
        level: The severity of this event.
        message: A human-readable description of what happened.
        source: The component that generated the event (e.g. "response").

    """

    level: LogLevel
    message: str
    source: str

    def __str__(self) -> str:
        """Format as ``[LEVEL] source: message``."""
        return f"[{self.level.name}] {self.source}: {self.message}"


class Logger:
    """Append-only log buffer with filtering and an optional echo stream."""

    def __init__(
        self,
        *,
        threshold: LogLevel = LogLevel.WARNING,
        stream: TextIO | None = None,
    ) -> None:
        """Create an empty logger.

        Args:
            threshold: Entries at or above this level are echoed.
            stream: Where echoed entries go (defaults to ``sys.stderr``
                at the time of logging, so test capture works).

        """
        self._entries: list[LogEntry] = []
        self._threshold = threshold
        self._stream = stream

    @classmethod
    def for_verbosity(cls, verbosity: int, stream: TextIO | None = None) -> "Logger":
        """Build a logger whose echo threshold follows a verbosity count."""
        return cls(threshold=level_for_verbosity(verbosity), stream=stream)

    @property
    def threshold(self) -> LogLevel:
        """Return the minimum level that is echoed."""
        return self._threshold

    @property
    def entries(self) -> list[LogEntry]:
        """Return all log entries in chronological order."""
        return list(self._entries)

    def enabled_for(self, level: LogLevel) -> bool:
        """Return True if entries at *level* would be echoed."""
        return level >= self._threshold

    def log(self, level: LogLevel, message: str, *, source: str) -> None:
        """Append a new entry to the log, echoing it if loud enough.

        Args:
            level: Severity of the event.
            message: Human-readable event description.
            source: Component that generated the event.

        """
        entry = LogEntry(level=level, message=message, source=source)
        self._entries.append(entry)
        if self.enabled_for(level):
            stream = self._stream if self._stream is not None else sys.stderr
            print(entry, file=stream)

    def debug(self, message: str, *, source: str) -> None:
        """Log at DEBUG level."""
        self.log(LogLevel.DEBUG, message, source=source)

    def info(self, message: str, *, source: str) -> None:
        """Log at INFO level."""
        self.log(LogLevel.INFO, message, source=source)

    def warning(self, message: str, *, source: str) -> None:
        """Log at WARNING level."""
        self.log(LogLevel.WARNING, message, source=source)

    def error(self, message: str, *, source: str) -> None:
        """Log at ERROR level."""
        self.log(LogLevel.ERROR, message, source=source)

    def filter(
        self,
        *,
        min_level: LogLevel | None = None,
        source: str | None = None,
    ) -> list[LogEntry]:
        """Return entries matching the given criteria.

        Args:
            min_level: If set, only return entries at or above this level.
            source: If set, only return entries from this source.

        Returns:
            A filtered list of log entries.

        """
        result = self._entries
        if min_level is not None:
            result = [e for e in result if e.level >= min_level]
        if source is not None:
            result = [e for e in result if e.source == source]
        return result if result is not self._entries else list(result)

    def clear(self) -> None:
        """Remove all log entries."""
        self._entries.clear()
