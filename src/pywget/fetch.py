"""The fetch loop — follow one URL through redirects to a final answer.

Fetching a URL is a small state machine::

    PARSING → CONNECTING → SENDING → AWAITING_RESPONSE
       ↑                                    │
       └──────────── REDIRECTING ←──────────┤ 3xx + Location
                                            ├→ DONE    (2xx, body saved)
                                            └→ FAILED  (anything else)

Any parse or transport error at any step ends that URL in FAILED, but a
multi-URL run keeps going: every URL is attempted, and the run reports
failure at the end if any of them failed.

The ``Fetcher`` is the run's context object.  It owns the connection
cache and the output sink; nothing is kept in module globals.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from pywget.config import Configuration
from pywget.connection_cache import ConnectionCache
from pywget.errors import (
    FetchError,
    HttpStatusError,
    RedirectError,
    UnsupportedProtocolError,
)
from pywget.http import HttpResponse, HttpStatusFamily, HttpVersion
from pywget.logging import Logger
from pywget.output import OutputSink
from pywget.protocol import Protocol
from pywget.url import ParsedUrl, parse_url, resolve_location

_SOURCE = "fetch"


class FetchState(StrEnum):
    """Where a fetch is in its lifecycle."""

    PARSING = "parsing"
    CONNECTING = "connecting"
    SENDING = "sending"
    AWAITING_RESPONSE = "awaiting_response"
    REDIRECTING = "redirecting"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class FetchResult:
    """The outcome of fetching one user-supplied URL.

    Attributes:
        url: The URL as originally requested.
        final_url: The last URL tried (differs after redirects).
        state: DONE or FAILED.
        redirects: How many redirects were followed.
        response: The last response received, if any.
        error: What went wrong, for FAILED results.
        failed_in: The state the fetch was in when it failed.

    """

    url: str
    final_url: str
    state: FetchState
    redirects: int = 0
    response: HttpResponse | None = None
    error: FetchError | None = None
    failed_in: FetchState | None = None

    @property
    def success(self) -> bool:
        """Return True if the fetch ended in DONE."""
        return self.state is FetchState.DONE


class Fetcher:
    """Drive fetches for a run, reusing connections across URLs."""

    def __init__(
        self,
        config: Configuration,
        sink: OutputSink | None = None,
        *,
        logger: Logger | None = None,
        cache: ConnectionCache | None = None,
    ) -> None:
        """Create a fetcher.

        Args:
            config: Run configuration.
            sink: Where successful bodies go (discarded if None).
            logger: Diagnostic log; built from the verbosity if omitted.
            cache: Connection cache; a fresh one is created if omitted.

        """
        self._config = config
        self._sink = sink
        self._logger = logger if logger is not None else Logger.for_verbosity(config.verbosity)
        self._cache = cache if cache is not None else ConnectionCache(config, self._logger)

    @property
    def logger(self) -> Logger:
        """Return the fetcher's diagnostic log."""
        return self._logger

    @property
    def cache(self) -> ConnectionCache:
        """Return the connection cache owned by this fetcher."""
        return self._cache

    def fetch(self, url: str) -> FetchResult:
        """Fetch *url*, following redirects, and deliver the body on success.

        Never raises for fetch problems; they come back as a FAILED result.
        """
        current = url
        redirects = 0
        state = FetchState.PARSING
        response: HttpResponse | None = None
        try:
            while True:
                state = FetchState.PARSING
                parsed = parse_url(current, self._config, self._logger)
                self._logger.info(repr(parsed), source=_SOURCE)
                if parsed.protocol is not Protocol.HTTP:
                    msg = f"Protocol {parsed.protocol} is not implemented, only HTTP"
                    raise UnsupportedProtocolError(msg)

                state = FetchState.CONNECTING
                conn = self._cache.get_connection(parsed.host, parsed.port)

                try:
                    state = FetchState.SENDING
                    conn.send(parsed)
                    state = FetchState.AWAITING_RESPONSE
                    response = conn.receive()
                except FetchError:
                    self._cache.discard(parsed.host, parsed.port)
                    raise
                if _wants_close(response):
                    self._cache.discard(parsed.host, parsed.port)

                family = response.family
                if family is HttpStatusFamily.SUCCESSFUL:
                    self._deliver(parsed, response)
                    return FetchResult(
                        url=url,
                        final_url=current,
                        state=FetchState.DONE,
                        redirects=redirects,
                        response=response,
                    )
                if family is not HttpStatusFamily.REDIRECTION:
                    raise HttpStatusError(response)

                location = response.headers.get("Location")
                if location is None:
                    msg = f"Got {response.status_code} without a Location!"
                    raise RedirectError(msg)
                state = FetchState.REDIRECTING
                redirects += 1
                limit = self._config.max_redirects
                if limit is not None and redirects > limit:
                    msg = f"Gave up after {limit} redirects (last Location {location!r})"
                    raise RedirectError(msg)
                self._logger.debug(
                    f'Got {response.status_code} with Location "{location}"',
                    source=_SOURCE,
                )
                current = resolve_location(location, parsed)
        except FetchError as e:
            self._logger.error(f"{url}: {e}", source=_SOURCE)
            return FetchResult(
                url=url,
                final_url=current,
                state=FetchState.FAILED,
                redirects=redirects,
                response=response,
                error=e,
                failed_in=state,
            )

    def fetch_all(self, urls: Iterable[str]) -> list[FetchResult]:
        """Fetch every URL in order; one failure never stops the rest."""
        return [self.fetch(url) for url in urls]

    def run(self, urls: Iterable[str]) -> bool:
        """Fetch every URL and return True only if all of them succeeded."""
        results = self.fetch_all(urls)
        return all(result.success for result in results)

    def close(self) -> None:
        """Close every connection the fetcher opened."""
        self._cache.close()

    def __enter__(self) -> "Fetcher":
        """Use the fetcher as a context manager that closes on exit."""
        return self

    def __exit__(self, *exc_info: object) -> None:
        """Close every connection the fetcher opened."""
        self.close()

    def _deliver(self, url: ParsedUrl, response: HttpResponse) -> None:
        """Hand a successful body to the sink; a write failure is only reported."""
        if self._sink is None:
            return
        try:
            self._sink.write(url, response.body)
        except OSError as e:
            self._logger.error(f"Could not write data to output file: {e}", source=_SOURCE)


def _wants_close(response: HttpResponse) -> bool:
    """Return True if the server will not keep the connection open.

    HTTP/1.1 keeps connections open unless told ``Connection: close``;
    older versions close unless told ``Connection: keep-alive``.
    """
    value = (response.headers.get("Connection") or "").strip().lower()
    if response.version in {HttpVersion.HTTP_0_9, HttpVersion.HTTP_1_0}:
        return value != "keep-alive"
    return value == "close"
