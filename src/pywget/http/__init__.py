"""HTTP/1.x wire codec — headers, requests, and responses.

Re-exports public symbols so callers can write::

    from pywget.http import Headers, HttpResponse, receive_response
"""

from pywget.http.common import HttpMethod, HttpVersion
from pywget.http.headers import Headers
from pywget.http.request import (
    HttpRequest,
    build_get_request,
    format_request,
    parse_request,
)
from pywget.http.response import (
    HttpResponse,
    HttpStatusFamily,
    Reader,
    format_response,
    read_exact,
    read_http_line,
    receive_response,
    status_family,
)

__all__ = [
    "Headers",
    "HttpMethod",
    "HttpRequest",
    "HttpResponse",
    "HttpStatusFamily",
    "HttpVersion",
    "Reader",
    "build_get_request",
    "format_request",
    "format_response",
    "parse_request",
    "read_exact",
    "read_http_line",
    "receive_response",
    "status_family",
]
