r"""HTTP response codec — turn a byte stream into a structured response.

A response arrives as a stream we can only read forwards, so parsing is
a strict sequence of states with no backtracking:

1. **Status line** — ``HTTP/1.1 200 OK``: version, numeric code, and a
   free-text message (which may itself contain spaces).
2. **Headers** — ``Name: value`` lines until a blank line.
3. **Body** — how many bytes belong to this response is decided by the
   headers, checked in this order:

   - ``Content-Length: N`` — exactly N bytes follow.
   - ``Transfer-Encoding: chunked`` — a series of chunks, each prefixed
     by its size in hex, ending with a zero-size chunk::

         5\r\n
         hello\r\n
         0\r\n
         \r\n

   - neither — no body.

Reading exactly what the framing says (and no more) is what makes
keep-alive work: the next response on the same socket starts at the
very next byte.
"""

import string
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Protocol

from pywget.config import Configuration
from pywget.errors import (
    InvalidChunkSizeError,
    InvalidChunkTerminatorError,
    InvalidContentLengthError,
    InvalidStatusCodeError,
    MalformedHeaderError,
    MalformedStatusLineError,
    ParseError,
    TransportError,
    UnknownVersionError,
)
from pywget.http.common import HttpVersion
from pywget.http.headers import Headers
from pywget.logging import Logger

_CRLF = b"\r\n"
_HEADER_SEPARATOR = ": "
_MAX_LINE_LENGTH = 64 * 1024
_MIN_STATUS_LINE_PARTS = 2
_MAX_STATUS_CODE_TOKEN = 0xFFFF
_MIN_STATUS_CODE = 100
_MAX_STATUS_CODE = 599
_READ_CHUNK = 64 * 1024
_SOURCE = "response"


class Reader(Protocol):
    """The slice of a binary file object the parser reads from.

    ``socket.makefile("rb")`` and ``io.BytesIO`` both fit.
    """

    def readline(self, size: int = -1, /) -> bytes:
        """Read up to and including the next ``\\n``."""
        ...

    def read(self, size: int = -1, /) -> bytes:
        """Read up to *size* bytes."""
        ...


class HttpStatusFamily(IntEnum):
    """The class of a status code, named by its leading digit."""

    INFORMATIONAL = 1
    SUCCESSFUL = 2
    REDIRECTION = 3
    CLIENT_ERROR = 4
    SERVER_ERROR = 5


def status_family(status_code: int) -> HttpStatusFamily:
    """Classify a status code (``418`` -> CLIENT_ERROR).

    Raises:
        InvalidStatusCodeError: If the code is outside 100..599.

    """
    if not _MIN_STATUS_CODE <= status_code <= _MAX_STATUS_CODE:
        raise InvalidStatusCodeError(str(status_code))
    return HttpStatusFamily(status_code // 100)


@dataclass(frozen=True)
class HttpResponse:
    """An HTTP response as received from a server.

    Attributes:
        version: Version token from the status line.
        status_code: Numeric status (100..599).
        status_message: Reason phrase; may be empty or contain spaces.
        headers: Response headers in the order received.
        body: The decoded body (chunks already reassembled).

    """

    version: HttpVersion
    status_code: int
    status_message: str
    headers: Headers = field(default_factory=Headers)
    body: bytes = b""

    @property
    def family(self) -> HttpStatusFamily:
        """Return the status family of this response."""
        return status_family(self.status_code)


def format_response(response: HttpResponse) -> bytes:
    """Serialize a response back to wire format, for diagnostic display.

    Headers are written as received; no ``Content-Length`` is added.
    """
    parts: list[bytes] = [
        f"{response.version} {response.status_code} {response.status_message}".encode(
            "latin-1", errors="replace"
        ),
        _CRLF,
    ]
    for name, value in response.headers:
        parts.append(f"{name}{_HEADER_SEPARATOR}{value}".encode("latin-1", errors="replace"))
        parts.append(_CRLF)
    parts.append(_CRLF)
    parts.append(response.body)
    return b"".join(parts)


# ---------------------------------------------------------------------------
# Low-level reads — every OSError becomes a TransportError here
# ---------------------------------------------------------------------------


def _readline(reader: Reader) -> bytes:
    """Read one raw line (with its terminator), or b"" at end of stream."""
    try:
        raw = reader.readline(_MAX_LINE_LENGTH + 1)
    except OSError as e:
        msg = f"Failed to read from connection: {e}"
        raise TransportError(msg) from e
    if len(raw) > _MAX_LINE_LENGTH:
        msg = f"Line longer than {_MAX_LINE_LENGTH} bytes"
        raise ParseError(msg)
    return raw


def _trim_line(raw: bytes) -> str:
    """Drop at most one trailing LF, then at most one trailing CR."""
    line = raw.decode("latin-1")
    line = line.removesuffix("\n")
    return line.removesuffix("\r")


def read_http_line(reader: Reader) -> str:
    r"""Read one line, tolerating bare-LF as well as CRLF endings.

    Returns an empty string both for a blank line and at end of stream.
    """
    return _trim_line(_readline(reader))


def _read_required_line(reader: Reader, what: str) -> str:
    """Read one line that must exist; end of stream is a TransportError."""
    raw = _readline(reader)
    if not raw:
        msg = f"Connection closed while waiting for {what}"
        raise TransportError(msg)
    return _trim_line(raw)


def read_exact(reader: Reader, size: int) -> bytes:
    """Read exactly *size* bytes.

    Raises:
        TransportError: If the stream ends first or the read fails.

    """
    buf = bytearray()
    while len(buf) < size:
        try:
            chunk = reader.read(min(size - len(buf), _READ_CHUNK))
        except OSError as e:
            msg = f"Failed to read from connection: {e}"
            raise TransportError(msg) from e
        if not chunk:
            msg = f"Connection closed after {len(buf)} of {size} body bytes"
            raise TransportError(msg)
        buf.extend(chunk)
    return bytes(buf)


# ---------------------------------------------------------------------------
# Parsing states
# ---------------------------------------------------------------------------


def _parse_status_line(line: str) -> tuple[HttpVersion, int, str]:
    """Split ``VERSION CODE MESSAGE...`` on single spaces."""
    tokens = line.split(" ")
    if len(tokens) < _MIN_STATUS_LINE_PARTS:
        msg = f"Malformed status line: {line!r}"
        raise MalformedStatusLineError(msg)

    try:
        version = HttpVersion(tokens[0])
    except ValueError as e:
        msg = f"Unknown HTTP version {tokens[0]!r} in status line {line!r}"
        raise UnknownVersionError(msg) from e

    code_token = tokens[1]
    if not (code_token.isascii() and code_token.isdigit()):
        raise InvalidStatusCodeError(code_token)
    status_code = int(code_token)
    if status_code > _MAX_STATUS_CODE_TOKEN:
        raise InvalidStatusCodeError(code_token)
    status_family(status_code)

    return version, status_code, " ".join(tokens[2:])


def _parse_header_line(line: str) -> tuple[str, str]:
    """Split ``Name: value`` on the first ``": "``."""
    name, sep, value = line.partition(_HEADER_SEPARATOR)
    if not sep:
        msg = f"Malformed header line: {line!r}"
        raise MalformedHeaderError(msg)
    return name, value


def _read_headers(reader: Reader, logger: Logger) -> Headers:
    """Read header lines up to the blank line that ends the head."""
    headers = Headers()
    while True:
        line = read_http_line(reader)
        if not line:
            logger.debug("Finished reading headers", source=_SOURCE)
            return headers
        logger.debug(f"Read header line: {line}", source=_SOURCE)
        name, value = _parse_header_line(line)
        headers.add(name, value)


def _parse_content_length(value: str) -> int:
    """Parse a ``Content-Length`` value as an unsigned decimal integer."""
    token = value.strip()
    if not (token.isascii() and token.isdigit()):
        msg = f"Invalid content length {value!r}"
        raise InvalidContentLengthError(msg)
    return int(token)


def _parse_chunk_size(line: str) -> int:
    """Parse a chunk-size line: bare hexadecimal, no extensions."""
    if not line or any(c not in string.hexdigits for c in line):
        msg = f"Invalid chunk length {line!r}"
        raise InvalidChunkSizeError(msg)
    return int(line, 16)


def _read_chunked_body(reader: Reader, logger: Logger) -> bytes:
    """Reassemble a chunked body, in order, into one byte string."""
    body = bytearray()
    while True:
        size_line = _read_required_line(reader, "a chunk size")
        size = _parse_chunk_size(size_line)
        logger.debug(f"Receiving chunk of length 0x{size_line}", source=_SOURCE)
        if size == 0:
            break
        body.extend(read_exact(reader, size))
        ending = read_exact(reader, len(_CRLF))
        if ending != _CRLF:
            msg = f"Invalid chunk ending {ending!r}, expected b'\\r\\n'"
            raise InvalidChunkTerminatorError(msg)

    # Trailer section: skipped, not parsed, up to the blank line.
    while line := read_http_line(reader):
        logger.debug(f"Skipping trailer line: {line}", source=_SOURCE)
    logger.debug("All chunks received", source=_SOURCE)
    return bytes(body)


def _is_chunked(transfer_encoding: str | None) -> bool:
    """Return True if the header value names chunked framing."""
    return transfer_encoding is not None and transfer_encoding.strip().lower() == "chunked"


def receive_response(
    reader: Reader,
    config: Configuration,
    logger: Logger | None = None,
) -> HttpResponse:
    """Read one complete response from *reader*.

    Consumes exactly the bytes of this response, leaving the reader
    positioned at the start of the next one.

    Args:
        reader: A buffered binary stream (usually a socket file).
        config: Run configuration.
        logger: Where to trace parsing; a fresh one is used if omitted.

    Returns:
        The parsed response.

    Raises:
        ParseError: If the status line, a header, or the framing is malformed.
        TransportError: If the stream fails or ends too early.

    """
    if logger is None:
        logger = Logger.for_verbosity(config.verbosity)

    status_line = _read_required_line(reader, "a status line")
    logger.debug(f"Read status line: {status_line}", source=_SOURCE)
    version, status_code, status_message = _parse_status_line(status_line)

    headers = _read_headers(reader, logger)

    if (length_value := headers.get("Content-Length")) is not None:
        length = _parse_content_length(length_value)
        logger.debug(f"Receiving normal body of length {length}", source=_SOURCE)
        body = read_exact(reader, length)
    elif _is_chunked(headers.get("Transfer-Encoding")):
        body = _read_chunked_body(reader, logger)
    else:
        body = b""

    return HttpResponse(
        version=version,
        status_code=status_code,
        status_message=status_message,
        headers=headers,
        body=body,
    )
