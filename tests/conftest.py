"""Shared fixtures: a scripted loopback HTTP server.

The server accepts real TCP connections on 127.0.0.1, reads each request
head, and answers with the next canned response from its script.  Tests
use it to check what actually went over the wire and how many
connections the client opened.
"""

from __future__ import annotations

import socket
import threading
from collections import deque
from collections.abc import Iterator
from typing import BinaryIO

import pytest


def _read_head(reader: BinaryIO) -> bytes | None:
    """Read one request head (through the blank line), or None at EOF."""
    lines: list[bytes] = []
    while True:
        line = reader.readline()
        if not line:
            return None
        lines.append(line)
        if line in {b"\r\n", b"\n"}:
            return b"".join(lines)


class ScriptedServer:
    """A loopback server that replays canned responses in order."""

    def __init__(self, responses: list[bytes], *, close_after_response: bool = False) -> None:
        """Start listening on an ephemeral port."""
        self._listener = socket.create_server(("127.0.0.1", 0))
        self.port: int = self._listener.getsockname()[1]
        self.requests: list[bytes] = []
        self.connections = 0
        self._responses = deque(responses)
        self._close_after_response = close_after_response
        self._lock = threading.Lock()
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    def _serve(self) -> None:
        while True:
            try:
                conn, _ = self._listener.accept()
            except OSError:
                return
            with self._lock:
                self.connections += 1
            threading.Thread(target=self._handle, args=(conn,), daemon=True).start()

    def _handle(self, conn: socket.socket) -> None:
        with conn, conn.makefile("rb") as reader:
            while True:
                head = _read_head(reader)
                if head is None:
                    return
                with self._lock:
                    self.requests.append(head)
                    response = self._responses.popleft() if self._responses else None
                if response is None:
                    return
                conn.sendall(response)
                if self._close_after_response:
                    return

    def close(self) -> None:
        """Stop accepting connections."""
        self._listener.close()


@pytest.fixture
def scripted_server() -> Iterator[type[ScriptedServer]]:
    """Yield a factory for scripted servers, closing them all afterwards."""
    servers: list[ScriptedServer] = []

    class _Factory(ScriptedServer):
        def __init__(self, *args: object, **kwargs: object) -> None:
            super().__init__(*args, **kwargs)  # type: ignore[arg-type]
            servers.append(self)

    yield _Factory
    for server in servers:
        server.close()


@pytest.fixture
def closed_port() -> int:
    """Return a loopback port with nothing listening on it."""
    sock = socket.create_server(("127.0.0.1", 0))
    port: int = sock.getsockname()[1]
    sock.close()
    return port
