"""URL parsing — split a URL string into the pieces a fetch needs.

wget accepts sloppy input: ``www.example.com`` is as good as
``http://www.example.com/``.  The parser therefore works left to right
and only consumes what it recognises:

    [scheme:][//]host[:port][/path]

1. A ``:`` before the first ``/`` *might* end a scheme.  If the text
   before it is not a known scheme (``example.com:8080/x``), nothing is
   consumed and HTTP is assumed.
2. A leading ``//`` is skipped.
3. The first ``/`` splits the authority from the path (default ``/``).
4. The *last* ``:`` in the authority splits host from port.
5. The default filename is the last path segment, or ``index.html``.

IPv6 literal hosts (``[::1]``) are not supported.
"""

from dataclasses import dataclass

from pywget.config import Configuration
from pywget.errors import EmptyHostError, InvalidPortError
from pywget.logging import Logger
from pywget.protocol import Protocol

DEFAULT_FILENAME = "index.html"
MAX_PORT = 65535


@dataclass(frozen=True)
class ParsedUrl:
    """A URL broken into the parts needed to fetch it.

    Attributes:
        protocol: The scheme (HTTP when none was given).
        host: Host name or IPv4 address.
        port: TCP port (the protocol default when none was given).
        path: Absolute request path, always starting with ``/``.
        filename: Where the body is saved by default.

    """

    protocol: Protocol
    host: str
    port: int
    path: str
    filename: str

    @property
    def authority(self) -> str:
        """Return ``host`` or ``host:port`` when the port is not the default."""
        if self.port == self.protocol.default_port:
            return self.host
        return f"{self.host}:{self.port}"

    def __str__(self) -> str:
        """Rebuild a normalised URL string."""
        return f"{self.protocol}://{self.authority}{self.path}"


def parse_url(
    url: str,
    config: Configuration | None = None,
    logger: Logger | None = None,
) -> ParsedUrl:
    """Parse a URL string.

    Args:
        url: The URL as typed by the user or sent in a ``Location`` header.
        config: Run configuration (only consulted for verbosity).
        logger: Where to report guesses such as an assumed scheme.

    Returns:
        The parsed URL.

    Raises:
        EmptyHostError: If there is no host.
        InvalidPortError: If the port is not a number in 0..65535.

    """
    rest = url.strip()
    protocol = _split_scheme(rest)
    if protocol is None:
        protocol = Protocol.HTTP
        if logger is not None and config is not None and config.verbosity > 0:
            logger.info(f"No protocol found in {url!r}, assuming HTTP", source="url")
    else:
        rest = rest.partition(":")[2]

    rest = rest.removeprefix("//")

    authority, slash, path = rest.partition("/")
    path = f"/{path}" if slash else "/"

    host, port = _split_authority(authority, protocol)
    return ParsedUrl(
        protocol=protocol,
        host=host,
        port=port,
        path=path,
        filename=default_filename(path),
    )


def default_filename(path: str) -> str:
    """Return the last segment of *path*, or ``index.html`` if there is none."""
    segment = path.partition("?")[0].rpartition("/")[2]
    return segment or DEFAULT_FILENAME


def resolve_location(location: str, base: ParsedUrl) -> str:
    """Turn a ``Location`` header value into an absolute URL string.

    Surrounding whitespace is dropped and absolute locations are otherwise
    returned unchanged.  A path-absolute location
    (``/new/place``) keeps the protocol, host and port of *base*.
    """
    location = location.strip()
    if location.startswith("/") and not location.startswith("//"):
        return f"{base.protocol}://{base.authority}{location}"
    return location


def _split_scheme(url: str) -> Protocol | None:
    """Return the protocol named before the first ``:``, if it is one we know."""
    colon = url.find(":")
    if colon == -1:
        return None
    slash = url.find("/")
    if slash != -1 and slash < colon:
        return None
    return Protocol.from_scheme(url[: colon + 1])


def _split_authority(authority: str, protocol: Protocol) -> tuple[str, int]:
    """Split ``host[:port]`` at its last colon."""
    host, colon, port_str = authority.rpartition(":")
    if not colon:
        host, port = authority, protocol.default_port
    else:
        if not (port_str.isascii() and port_str.isdigit()) or int(port_str) > MAX_PORT:
            msg = f"Invalid port {port_str!r} in {authority!r}"
            raise InvalidPortError(msg)
        port = int(port_str)
    if not host:
        msg = f"No host in URL authority {authority!r}"
        raise EmptyHostError(msg)
    return host, port
