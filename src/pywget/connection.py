"""A live TCP connection to one (host, port), able to carry many requests.

The socket is wrapped in a buffered reader once, when the connection is
opened, and that same reader is used for every response.  Bytes the
buffer read ahead therefore stay available for the next response on
the socket instead of being lost between requests.
"""

import socket

from pywget.config import Configuration
from pywget.errors import TransportError
from pywget.http import (
    HttpResponse,
    build_get_request,
    format_request,
    format_response,
    receive_response,
)
from pywget.logging import LogLevel, Logger
from pywget.url import ParsedUrl

_SOURCE = "connection"


class Connection:
    """One open TCP socket plus its buffered reader."""

    def __init__(
        self,
        host: str,
        port: int,
        config: Configuration,
        logger: Logger,
    ) -> None:
        """Connect to *host*:*port* with the configured timeout.

        Raises:
            TransportError: If the connection cannot be established.

        """
        logger.debug(f"Connecting to {host} port {port}", source=_SOURCE)
        try:
            sock = socket.create_connection((host, port), timeout=config.timeout)
        except OSError as e:
            msg = f"Could not connect to {host} port {port}: {e}"
            raise TransportError(msg) from e
        self._host = host
        self._port = port
        self._config = config
        self._logger = logger
        self._socket = sock
        self._reader = sock.makefile("rb")
        self._closed = False

    @property
    def host(self) -> str:
        """Return the host this connection was opened to."""
        return self._host

    @property
    def port(self) -> int:
        """Return the port this connection was opened to."""
        return self._port

    @property
    def closed(self) -> bool:
        """Return True once ``close`` has been called."""
        return self._closed

    def fileno(self) -> int:
        """Return the socket's file descriptor (-1 once closed)."""
        return self._socket.fileno()

    def send(self, url: ParsedUrl) -> None:
        """Write a GET request for *url* to the socket.

        Raises:
            TransportError: If the socket fails or was closed.

        """
        self._check_open()
        request = build_get_request(url, self._config)
        wire = format_request(request)
        if self._logger.enabled_for(LogLevel.INFO):
            self._logger.info(
                "------ request start ------\n"
                f"{wire.decode('latin-1')}"
                "------ request end ------",
                source=_SOURCE,
            )
        try:
            self._socket.sendall(wire)
        except OSError as e:
            msg = f"Failed to send request to {self._host} port {self._port}: {e}"
            raise TransportError(msg) from e

    def receive(self) -> HttpResponse:
        """Read the next complete response from the socket.

        Raises:
            TransportError: If the socket fails, times out, or was closed.
            ParseError: If the response is not valid HTTP.

        """
        self._check_open()
        response = receive_response(self._reader, self._config, self._logger)
        if self._logger.enabled_for(LogLevel.INFO):
            self._logger.info(
                "------ response start ------\n"
                f"{format_response(response).decode('utf-8', errors='replace')}\n"
                "------ response end ------",
                source=_SOURCE,
            )
        return response

    def send_request(self, url: ParsedUrl) -> HttpResponse:
        """Send a GET for *url* and read back the complete response."""
        self.send(url)
        return self.receive()

    def _check_open(self) -> None:
        if self._closed:
            msg = f"Connection to {self._host} port {self._port} is closed"
            raise TransportError(msg)

    def close(self) -> None:
        """Close the reader and the socket.  Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        self._reader.close()
        self._socket.close()

    def __repr__(self) -> str:
        """Return a debug-friendly representation."""
        state = "closed" if self._closed else "open"
        return f"Connection(host={self._host!r}, port={self._port}, {state})"
