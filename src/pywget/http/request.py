r"""HTTP request codec — build the bytes a client sends.

A GET request on the wire is just text::

    GET /index.html HTTP/1.1\r\n
    Host: example.com\r\n
    User-Agent: Wget/1.21.3\r\n
    Accept: */*\r\n
    Accept-Encoding: identity\r\n
    Connection: Keep-Alive\r\n
    \r\n

The blank line ends the request; GET has no body.  We ask for
``Accept-Encoding: identity`` because the response parser does not
decompress gzip/deflate bodies, and ``Connection: Keep-Alive`` so the
same socket can carry the next request to that host.
"""

from dataclasses import dataclass, field

from pywget.config import Configuration
from pywget.errors import MalformedHeaderError, ParseError
from pywget.http.common import HttpMethod, HttpVersion
from pywget.http.headers import Headers
from pywget.url import ParsedUrl

_CRLF = b"\r\n"
_HEADER_SEPARATOR = ": "
_REQUEST_LINE_PARTS = 3


@dataclass(frozen=True)
class HttpRequest:
    """An HTTP request — built fresh for each fetch, never reused.

    Attributes:
        method: The request method (always GET for this client).
        path: The resource being requested (e.g. "/index.html").
        version: The protocol version sent on the request line.
        headers: Header store, serialized in insertion order.

    """

    method: HttpMethod
    path: str
    version: HttpVersion = HttpVersion.HTTP_1_1
    headers: Headers = field(default_factory=Headers)


def build_get_request(url: ParsedUrl, config: Configuration) -> HttpRequest:
    """Build the GET request for *url* with the client's fixed headers."""
    headers = Headers()
    headers.add("Host", url.authority)
    headers.add("User-Agent", config.user_agent)
    headers.add("Accept", "*/*")
    headers.add("Accept-Encoding", "identity")
    headers.add("Connection", "Keep-Alive")
    return HttpRequest(method=HttpMethod.GET, path=url.path, headers=headers)


def format_request(request: HttpRequest) -> bytes:
    r"""Serialize an HttpRequest to wire-format bytes.

    Wire format::

        METHOD /path VERSION\r\n
        Header-Name: value\r\n
        ...\r\n
        \r\n
    """
    parts: list[bytes] = [
        f"{request.method} {request.path} {request.version}".encode("latin-1"),
        _CRLF,
    ]
    for name, value in request.headers:
        parts.append(f"{name}{_HEADER_SEPARATOR}{value}".encode("latin-1"))
        parts.append(_CRLF)
    parts.append(_CRLF)
    return b"".join(parts)


def parse_request(data: bytes) -> HttpRequest:
    """Parse a serialized request head back into an HttpRequest.

    Uses the same line rules as the response parser: one line per CRLF,
    headers split on the first ``": "``, a blank line ends the head.

    Raises:
        ParseError: If the request line or a header line is malformed.

    """
    lines = data.decode("latin-1").split("\r\n")
    parts = lines[0].split(" ")
    if len(parts) != _REQUEST_LINE_PARTS:
        msg = f"Malformed request line: {lines[0]!r}"
        raise ParseError(msg)
    try:
        method = HttpMethod(parts[0])
        version = HttpVersion(parts[2])
    except ValueError as e:
        msg = f"Malformed request line: {lines[0]!r}"
        raise ParseError(msg) from e

    headers = Headers()
    for line in lines[1:]:
        if not line:
            break
        name, sep, value = line.partition(_HEADER_SEPARATOR)
        if not sep:
            msg = f"Malformed header line: {line!r}"
            raise MalformedHeaderError(msg)
        headers.add(name, value)
    return HttpRequest(method=method, path=parts[1], version=version, headers=headers)
