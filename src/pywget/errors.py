"""Error hierarchy for the HTTP client.

Every failure the client can report derives from ``FetchError`` so the
fetch loop can catch one type, mark the URL as failed, and move on to the
next URL.  The two big families mirror where things go wrong:

- **TransportError** — the network let us down (refused, timeout, the
  peer hung up mid-body).
- **ParseError** — bytes arrived, but they are not valid HTTP (or the
  URL we were given is not a valid URL).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pywget.http.response import HttpResponse


class FetchError(Exception):
    """Raise when fetching a URL fails for any reason."""


class TransportError(FetchError):
    """Raise when the underlying TCP transport fails (I/O error)."""


class ParseError(FetchError):
    """Raise when a URL or an HTTP message is malformed."""


class InvalidPortError(ParseError):
    """Raise when a URL port is not a number in 0..65535."""


class EmptyHostError(ParseError):
    """Raise when a URL has no host."""


class MalformedStatusLineError(ParseError):
    """Raise when a status line is missing its version or code."""


class UnknownVersionError(ParseError):
    """Raise when the HTTP version token is not one we know."""


class InvalidStatusCodeError(ParseError):
    """Raise when a status code is not a number in 100..599."""

    def __init__(self, token: str) -> None:
        """Record the offending status token."""
        self.token = token
        super().__init__(f"Invalid status code: {token!r}")


class MalformedHeaderError(ParseError):
    """Raise when a header line has no ``": "`` separator."""


class InvalidContentLengthError(ParseError):
    """Raise when ``Content-Length`` is not an unsigned integer."""


class InvalidChunkSizeError(ParseError):
    """Raise when a chunk-size line is not a hexadecimal number."""


class InvalidChunkTerminatorError(ParseError):
    """Raise when chunk data is not followed by exactly ``\\r\\n``."""


class UnsupportedProtocolError(FetchError):
    """Raise when a URL names a protocol the client cannot speak."""


class RedirectError(FetchError):
    """Raise when a redirect cannot be followed."""


class HttpStatusError(FetchError):
    """Raise when the final response is not a success.

    The response is kept so the caller can show it to the user.
    """

    def __init__(self, response: HttpResponse) -> None:
        """Wrap a non-successful response."""
        self.response = response
        super().__init__(
            f"Server answered {response.status_code} {response.status_message}".rstrip()
        )
