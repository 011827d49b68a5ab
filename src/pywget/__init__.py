"""pywget — a small HTTP/1.x client that fetches URLs the way wget does.

The package is split the same way a real client is:

- ``pywget.url`` — split a URL string into protocol, host, port and path.
- ``pywget.http`` — the wire codec (headers, requests, responses).
- ``pywget.connection`` / ``pywget.connection_cache`` — TCP sockets and
  keep-alive reuse per (host, port).
- ``pywget.fetch`` — the redirect-following loop that ties it together.
"""

__version__ = "0.1.0"
