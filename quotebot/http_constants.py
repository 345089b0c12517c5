from enum import Enum


class HTTPHeaders(str, Enum):
    """Standard HTTP header names (lowercase per HTTP/1.1 spec)."""

    ACCEPT_ENCODING = "accept-encoding"
    CONNECTION = "connection"
    CONTENT_LENGTH = "content-length"
    CONTENT_TYPE = "content-type"


class HTTPMethod(str, Enum):
    """Standard HTTP methods."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    PATCH = "PATCH"


class ContentType(str, Enum):
    """Media types the bot reads or writes."""

    TEXT = "text/plain; charset=utf-8"
    JSON = "application/json; charset=utf-8"
    FORM = "application/x-www-form-urlencoded"


class StandardRoute(str, Enum):
    """Route patterns served by the bot."""

    ROOT = "/"
    SLACK = "/slack"
    DUMP = "/dump/*"
