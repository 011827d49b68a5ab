"""Tests for the diagnostic log.

Every entry is recorded; the verbosity only decides which entries are
echoed to the stream.
"""

import io

import pytest

from pywget.logging import LogEntry, Logger, LogLevel, level_for_verbosity


class TestLogLevel:
    """Verify log level ordering."""

    def test_levels_are_ordered(self) -> None:
        """DEBUG < INFO < WARNING < ERROR."""
        assert LogLevel.DEBUG < LogLevel.INFO
        assert LogLevel.INFO < LogLevel.WARNING
        assert LogLevel.WARNING < LogLevel.ERROR

    @pytest.mark.parametrize(
        ("verbosity", "expected"),
        [
            (0, LogLevel.WARNING),
            (1, LogLevel.INFO),
            (2, LogLevel.DEBUG),
            (5, LogLevel.DEBUG),
        ],
    )
    def test_level_for_verbosity(self, verbosity: int, expected: LogLevel) -> None:
        """Each -d lowers the echo threshold one step, down to DEBUG."""
        assert level_for_verbosity(verbosity) is expected


class TestLogEntry:
    """Verify log entry structure."""

    def test_entry_has_fields(self) -> None:
        """A log entry should store level, message, and source."""
        entry = LogEntry(level=LogLevel.INFO, message="test message", source="test")
        assert entry.level is LogLevel.INFO
        assert entry.message == "test message"
        assert entry.source == "test"

    def test_entry_str(self) -> None:
        """String representation is ``[LEVEL] source: message``."""
        entry = LogEntry(level=LogLevel.WARNING, message="slow server", source="fetch")
        assert str(entry) == "[WARNING] fetch: slow server"


class TestLogger:
    """Verify the logger."""

    def test_log_stores_entries(self) -> None:
        """Logged entries should be retrievable."""
        logger = Logger(stream=io.StringIO())
        logger.log(LogLevel.INFO, "connected", source="connection")
        assert len(logger.entries) == 1
        assert logger.entries[0].message == "connected"

    def test_entries_are_ordered(self) -> None:
        """Entries should be in chronological order."""
        logger = Logger(stream=io.StringIO())
        logger.info("first", source="test")
        logger.info("second", source="test")
        assert [e.message for e in logger.entries] == ["first", "second"]

    def test_level_helpers(self) -> None:
        """debug/info/warning/error log at their own level."""
        logger = Logger(stream=io.StringIO())
        logger.debug("d", source="t")
        logger.info("i", source="t")
        logger.warning("w", source="t")
        logger.error("e", source="t")
        assert [e.level for e in logger.entries] == [
            LogLevel.DEBUG,
            LogLevel.INFO,
            LogLevel.WARNING,
            LogLevel.ERROR,
        ]

    def test_filter_by_level(self) -> None:
        """Filtering should return only entries at or above the level."""
        logger = Logger(stream=io.StringIO())
        logger.debug("debug msg", source="test")
        logger.info("info msg", source="test")
        logger.error("error msg", source="test")
        warnings_and_above = logger.filter(min_level=LogLevel.WARNING)
        assert len(warnings_and_above) == 1
        assert warnings_and_above[0].level is LogLevel.ERROR

    def test_filter_by_source(self) -> None:
        """Filtering by source should return matching entries."""
        logger = Logger(stream=io.StringIO())
        logger.info("cache event", source="cache")
        logger.info("fetch event", source="fetch")
        cache_logs = logger.filter(source="cache")
        assert len(cache_logs) == 1
        assert cache_logs[0].source == "cache"

    def test_filter_returns_copy(self) -> None:
        """Mutating a filter result does not touch the log."""
        logger = Logger(stream=io.StringIO())
        logger.info("kept", source="test")
        logger.filter().clear()
        assert len(logger.entries) == 1

    def test_clear(self) -> None:
        """Clearing should remove all entries."""
        logger = Logger(stream=io.StringIO())
        logger.info("test", source="test")
        logger.clear()
        assert len(logger.entries) == 0


class TestEcho:
    """Verify which entries reach the stream."""

    def test_below_threshold_recorded_not_echoed(self) -> None:
        """Quiet entries are kept but not printed."""
        stream = io.StringIO()
        logger = Logger(threshold=LogLevel.WARNING, stream=stream)
        logger.debug("chunk trace", source="response")
        assert stream.getvalue() == ""
        assert len(logger.entries) == 1

    def test_at_threshold_echoed(self) -> None:
        """Entries at or above the threshold are printed, one per line."""
        stream = io.StringIO()
        logger = Logger(threshold=LogLevel.INFO, stream=stream)
        logger.info("hello", source="cli")
        logger.error("boom", source="fetch")
        assert stream.getvalue() == "[INFO] cli: hello\n[ERROR] fetch: boom\n"

    def test_enabled_for(self) -> None:
        """enabled_for mirrors the threshold."""
        logger = Logger(threshold=LogLevel.INFO)
        assert not logger.enabled_for(LogLevel.DEBUG)
        assert logger.enabled_for(LogLevel.INFO)
        assert logger.enabled_for(LogLevel.ERROR)

    def test_for_verbosity(self) -> None:
        """A logger built from a -d count gets the matching threshold."""
        assert Logger.for_verbosity(0).threshold is LogLevel.WARNING
        assert Logger.for_verbosity(2).threshold is LogLevel.DEBUG

    def test_defaults_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        """With no stream the echo goes to standard error."""
        logger = Logger()
        logger.error("to stderr", source="test")
        assert capsys.readouterr().err == "[ERROR] test: to stderr\n"
