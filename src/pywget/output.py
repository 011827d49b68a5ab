"""Where successful bodies go.

The fetch loop hands each successful body to an ``OutputSink`` and does
not care what happens next.  Two sinks cover what wget does:

- ``PerUrlFileSink`` — one file per URL, named after the URL's last
  path segment (``index.html`` for directory-style URLs).
- ``SingleStreamSink`` — every body appended to one binary stream, for
  ``-o FILE`` or ``-o -`` (standard output).
"""

from pathlib import Path
from typing import BinaryIO, Protocol

from pywget.url import ParsedUrl


class OutputSink(Protocol):
    """Anything that can take a fetched body."""

    def write(self, url: ParsedUrl, body: bytes) -> None:
        """Persist the body fetched from *url*.

        Raises:
            OSError: If the body cannot be written.

        """
        ...


class PerUrlFileSink:
    """Write each body to ``<directory>/<url.filename>``."""

    def __init__(self, directory: Path | None = None) -> None:
        """Create a sink writing into *directory* (the cwd by default)."""
        self._directory = directory if directory is not None else Path()

    def path_for(self, url: ParsedUrl) -> Path:
        """Return the file a body fetched from *url* would be written to."""
        return self._directory / url.filename

    def write(self, url: ParsedUrl, body: bytes) -> None:
        """Create (or truncate) the file for *url* and write *body*."""
        self.path_for(url).write_bytes(body)


class SingleStreamSink:
    """Append every body, in fetch order, to one binary stream."""

    def __init__(self, stream: BinaryIO) -> None:
        """Wrap an already-open binary stream (not closed by the sink)."""
        self._stream = stream

    def write(self, url: ParsedUrl, body: bytes) -> None:  # noqa: ARG002
        """Append *body* and flush."""
        self._stream.write(body)
        self._stream.flush()
