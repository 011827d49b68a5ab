"""Enums shared by requests and responses."""

from enum import StrEnum


class HttpVersion(StrEnum):
    """Protocol versions that may appear on a request or status line."""

    HTTP_0_9 = "HTTP/0.9"
    HTTP_1_0 = "HTTP/1.0"
    HTTP_1_1 = "HTTP/1.1"
    HTTP_2 = "HTTP/2"


class HttpMethod(StrEnum):
    """HTTP request methods.

    The client only ever sends GET, but the codec can frame any of them.
    """

    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    CONNECT = "CONNECT"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    PATCH = "PATCH"
