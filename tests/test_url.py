"""Tests for URL parsing.

The parser is deliberately forgiving (``www.google.com`` is a valid
URL), so most of these tests pin down exactly what gets guessed.
"""

import pytest

from pywget.config import Configuration
from pywget.errors import EmptyHostError, InvalidPortError, ParseError
from pywget.logging import Logger, LogLevel
from pywget.protocol import Protocol
from pywget.url import ParsedUrl, default_filename, parse_url, resolve_location

CUSTOM_PORT = 8080
HTTP_PORT = 80
HTTPS_PORT = 443
FTP_PORT = 21


class TestParseUrl:
    """Verify the decomposition of common URL shapes."""

    def test_common_url(self) -> None:
        """A bare scheme + host gets the default port and path."""
        assert parse_url("http://google.com") == ParsedUrl(
            protocol=Protocol.HTTP,
            host="google.com",
            port=HTTP_PORT,
            path="/",
            filename="index.html",
        )

    def test_url_without_protocol(self) -> None:
        """No scheme means HTTP on port 80."""
        assert parse_url("www.google.com") == ParsedUrl(
            protocol=Protocol.HTTP,
            host="www.google.com",
            port=HTTP_PORT,
            path="/",
            filename="index.html",
        )

    def test_url_with_port_and_path(self) -> None:
        """Port and path are both picked out."""
        assert parse_url("http://test:8080/my_site.html") == ParsedUrl(
            protocol=Protocol.HTTP,
            host="test",
            port=CUSTOM_PORT,
            path="/my_site.html",
            filename="my_site.html",
        )

    def test_url_with_port(self) -> None:
        """A port without a path still gets ``/``."""
        url = parse_url("http://test:8080")
        assert url.port == CUSTOM_PORT
        assert url.path == "/"

    def test_url_with_path(self) -> None:
        """The filename is the last path segment."""
        url = parse_url("http://test/my_site.html")
        assert url.port == HTTP_PORT
        assert url.filename == "my_site.html"

    @pytest.mark.parametrize(
        ("url", "protocol", "port"),
        [
            ("http://test", Protocol.HTTP, HTTP_PORT),
            ("https://test", Protocol.HTTPS, HTTPS_PORT),
            ("ftp://test", Protocol.FTP, FTP_PORT),
        ],
    )
    def test_protocol_sets_default_port(self, url: str, protocol: Protocol, port: int) -> None:
        """Each recognised scheme brings its own default port."""
        parsed = parse_url(url)
        assert parsed.protocol is protocol
        assert parsed.port == port
        assert parsed.host == "test"

    def test_host_and_port_without_scheme(self) -> None:
        """``host:port`` is not mistaken for a scheme."""
        url = parse_url("localhost:8080/data.json")
        assert url.protocol is Protocol.HTTP
        assert url.host == "localhost"
        assert url.port == CUSTOM_PORT
        assert url.path == "/data.json"

    def test_directory_path_defaults_filename(self) -> None:
        """A path ending in ``/`` saves as index.html."""
        url = parse_url("http://test/docs/")
        assert url.path == "/docs/"
        assert url.filename == "index.html"

    def test_nested_path_filename(self) -> None:
        """Only the final segment becomes the filename."""
        assert parse_url("http://test/a/b/c.tar.gz").filename == "c.tar.gz"

    def test_query_kept_in_path(self) -> None:
        """The query string is sent, but not used as a filename."""
        url = parse_url("http://test/search?q=1")
        assert url.path == "/search?q=1"
        assert url.filename == "search"

    def test_path_is_never_empty(self) -> None:
        """Every parsed path starts with a slash."""
        for raw in ("test", "http://test", "test:81", "//test"):
            assert parse_url(raw).path.startswith("/")

    def test_parsed_url_is_frozen(self) -> None:
        """ParsedUrl cannot be modified after parsing."""
        url = parse_url("http://test")
        with pytest.raises(AttributeError):
            url.host = "other"  # type: ignore[misc]


class TestParseUrlErrors:
    """Verify the parse errors."""

    def test_non_numeric_port(self) -> None:
        """A port must be a number."""
        with pytest.raises(InvalidPortError):
            parse_url("http://test:http/")

    def test_port_out_of_range(self) -> None:
        """A port must fit in 16 bits."""
        with pytest.raises(InvalidPortError):
            parse_url("http://test:65536/")

    def test_empty_port(self) -> None:
        """A trailing colon with no port is rejected."""
        with pytest.raises(InvalidPortError):
            parse_url("http://test:/")

    def test_empty_host(self) -> None:
        """A URL must name a host."""
        with pytest.raises(EmptyHostError):
            parse_url("http:///index.html")

    def test_port_without_host(self) -> None:
        """A port alone is not a host."""
        with pytest.raises(EmptyHostError):
            parse_url("http://:8080/")

    def test_errors_are_parse_errors(self) -> None:
        """Both URL errors belong to the ParseError family."""
        assert issubclass(InvalidPortError, ParseError)
        assert issubclass(EmptyHostError, ParseError)


class TestParseUrlLogging:
    """Verify the assumed-scheme note."""

    def test_assumed_http_is_logged_when_verbose(self) -> None:
        """At verbosity 1 the parser says it guessed HTTP."""
        logger = Logger(threshold=LogLevel.ERROR)
        parse_url("www.google.com", Configuration(verbosity=1), logger)
        assert any("assuming HTTP" in e.message for e in logger.entries)

    def test_quiet_parse_logs_nothing(self) -> None:
        """At verbosity 0 nothing is recorded."""
        logger = Logger(threshold=LogLevel.ERROR)
        parse_url("www.google.com", Configuration(), logger)
        assert logger.entries == []


class TestHelpers:
    """Verify filename derivation and Location resolution."""

    def test_default_filename(self) -> None:
        """Empty last segments fall back to index.html."""
        assert default_filename("/") == "index.html"
        assert default_filename("/a/b.html") == "b.html"

    def test_authority_omits_default_port(self) -> None:
        """The Host value only carries non-default ports."""
        assert parse_url("http://test").authority == "test"
        assert parse_url("http://test:8080").authority == "test:8080"

    def test_str_rebuilds_url(self) -> None:
        """str() gives a normalised URL back."""
        assert str(parse_url("test:8080/x")) == "http://test:8080/x"

    def test_absolute_location_unchanged(self) -> None:
        """An absolute Location is followed as is."""
        base = parse_url("http://a/")
        assert resolve_location("http://x/y", base) == "http://x/y"

    def test_relative_location_keeps_host(self) -> None:
        """A path-only Location stays on the same host and port."""
        base = parse_url("http://a:8080/old")
        assert resolve_location("/new", base) == "http://a:8080/new"

    def test_relative_location_with_surrounding_space(self) -> None:
        """Whitespace around a path-only Location does not hide it."""
        base = parse_url("http://a:8080/old")
        assert resolve_location(" /next \t", base) == "http://a:8080/next"

    def test_absolute_location_is_stripped(self) -> None:
        """Whitespace around an absolute Location is dropped."""
        assert resolve_location("  http://x/y ", parse_url("a")) == "http://x/y"
