"""URL protocol schemes the parser recognises.

Only HTTP is actually spoken by the fetch loop; HTTPS and FTP are
recognised so their default ports are right and the loop can refuse
them with a clear error instead of a confusing parse failure.
"""

from enum import StrEnum


class Protocol(StrEnum):
    """A URL scheme, stored without the trailing colon."""

    HTTP = "http"
    HTTPS = "https"
    FTP = "ftp"

    @property
    def default_port(self) -> int:
        """Return the well-known port for this protocol."""
        return _DEFAULT_PORTS[self]

    @classmethod
    def from_scheme(cls, scheme: str) -> "Protocol | None":
        """Look up a scheme such as ``"http:"`` or ``"HTTPS"``.

        Returns:
            The matching protocol, or None for an unknown scheme.

        """
        name = scheme.removesuffix(":").lower()
        try:
            return cls(name)
        except ValueError:
            return None


_DEFAULT_PORTS: dict[Protocol, int] = {
    Protocol.HTTP: 80,
    Protocol.HTTPS: 443,
    Protocol.FTP: 21,
}
