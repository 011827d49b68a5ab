"""Keep-alive connection cache — one open connection per (host, port).

Opening a TCP connection costs a round trip (more with DNS), so a
client following a redirect to the same server, or fetching several
URLs from it, should reuse the socket it already has.  The cache maps
``(host, port)`` to a live ``Connection``:

- **Hit** — return the cached connection as is.  Its liveness is not
  probed; if the server has since hung up, the next send or read fails
  with a TransportError.
- **Miss** — open a new connection and remember it.

Keys compare host names as plain strings: ``localhost`` and
``127.0.0.1`` are different entries even though they resolve to the
same address.

The cache is single-threaded.  Adding threads would need a lock per
connection and at most one connect per key.
"""

from pywget.config import Configuration
from pywget.connection import Connection
from pywget.logging import Logger

_SOURCE = "cache"


class ConnectionCache:
    """Own every connection opened during a run."""

    def __init__(self, config: Configuration, logger: Logger | None = None) -> None:
        """Create an empty cache."""
        self._config = config
        self._logger = logger if logger is not None else Logger.for_verbosity(config.verbosity)
        self._connections: dict[tuple[str, int], Connection] = {}

    def get_connection(self, host: str, port: int) -> Connection:
        """Return the cached connection for (*host*, *port*), opening one if needed.

        Raises:
            TransportError: If a new connection cannot be opened.

        """
        key = (host, port)
        conn = self._connections.get(key)
        if conn is not None:
            self._logger.debug(
                f"Reusing old connection for {host} port {port} (fd {conn.fileno()})",
                source=_SOURCE,
            )
            return conn
        conn = Connection(host, port, self._config, self._logger)
        self._connections[key] = conn
        return conn

    def discard(self, host: str, port: int) -> bool:
        """Close and forget the connection for (*host*, *port*).

        Returns:
            True if a connection was cached for that key.

        """
        conn = self._connections.pop((host, port), None)
        if conn is None:
            return False
        self._logger.debug(f"Dropping connection to {host} port {port}", source=_SOURCE)
        conn.close()
        return True

    def close(self) -> None:
        """Close every cached connection."""
        for conn in self._connections.values():
            conn.close()
        self._connections.clear()

    def __contains__(self, key: object) -> bool:
        """Return True if a connection is cached for a ``(host, port)`` key."""
        return key in self._connections

    def __len__(self) -> int:
        """Return the number of cached connections."""
        return len(self._connections)

    def __enter__(self) -> "ConnectionCache":
        """Use the cache as a context manager that closes on exit."""
        return self

    def __exit__(self, *exc_info: object) -> None:
        """Close every cached connection."""
        self.close()
