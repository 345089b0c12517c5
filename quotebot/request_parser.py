from urllib.parse import parse_qsl, urlsplit

from quotebot.http_constants import ContentType, HTTPHeaders, HTTPMethod
from quotebot.http_request import HTTPRequest


# Exception Hierarchy
class HTTPParseError(Exception):
    """Base exception for HTTP parsing errors"""

    pass


class EmptyRequestError(HTTPParseError):
    """Raised when request bytes are empty"""

    pass


class InvalidEncodingError(HTTPParseError):
    """Raised when request head or form body cannot be decoded as UTF-8"""

    pass


class InvalidRequestLineError(HTTPParseError):
    """Raised when request line format is invalid"""

    pass


class InvalidHTTPMethodError(HTTPParseError):
    """Raised when HTTP method is not supported"""

    pass


class InvalidHeaderError(HTTPParseError):
    """Raised when header format is malformed"""

    pass


class InvalidContentLengthError(HTTPParseError):
    """Raised when Content-Length is not a non-negative integer"""

    pass


# HTTP Protocol Constants
SUPPORTED_HTTP_METHODS = frozenset(method.value for method in HTTPMethod)
REQUEST_LINE_SEPARATOR = "\r\n"
HEADER_BODY_SEPARATOR = b"\r\n\r\n"
HEADER_KEY_VALUE_SEPARATOR = ":"
DEFAULT_ENCODING = "utf-8"


class RequestParser:
    """HTTP request parser with validation and error handling"""

    @staticmethod
    def parse(raw_bytes: bytes) -> HTTPRequest:
        """
        Parse raw HTTP request bytes into HTTPRequest object.

        Args:
            raw_bytes: Raw HTTP request (head and body) as bytes

        Returns:
            HTTPRequest object with parsed data

        Raises:
            HTTPParseError: If request is malformed or invalid
        """
        if not raw_bytes:
            raise EmptyRequestError("Received empty request")

        head_bytes, _, body = raw_bytes.partition(HEADER_BODY_SEPARATOR)

        try:
            head = head_bytes.decode(DEFAULT_ENCODING)
        except UnicodeDecodeError as e:
            raise InvalidEncodingError(f"Invalid UTF-8 encoding: {e}")

        req_line, _, header_string = head.partition(REQUEST_LINE_SEPARATOR)

        method, target = RequestParser._parse_request_line(req_line)
        RequestParser._validate_http_method(method)

        path, query = RequestParser._parse_target(target)
        headers = RequestParser._parse_headers(header_string)
        form = RequestParser._parse_form(headers, body)

        return HTTPRequest(
            method=HTTPMethod(method),
            path=path,
            query=query,
            headers=headers,
            body=body,
            form=form,
        )

    @staticmethod
    def content_length(head: bytes) -> int:
        """
        Read the Content-Length of a request from its raw head.

        Args:
            head: Request line and headers, without the body

        Returns:
            Declared body length, 0 when the header is absent

        Raises:
            HTTPParseError: If the head is not UTF-8 or the value is invalid
        """
        try:
            header_string = head.decode(DEFAULT_ENCODING).partition(
                REQUEST_LINE_SEPARATOR
            )[2]
        except UnicodeDecodeError as e:
            raise InvalidEncodingError(f"Invalid UTF-8 encoding: {e}")

        headers = RequestParser._parse_headers(header_string)
        value = headers.get(HTTPHeaders.CONTENT_LENGTH.value, "0")
        if not (value.isascii() and value.isdigit()):
            raise InvalidContentLengthError(f"Invalid Content-Length: {value!r}")
        return int(value)

    @staticmethod
    def _parse_request_line(line: str) -> tuple[str, str]:
        """
        Parse HTTP request line into method and target.

        Args:
            line: Request line string (e.g., "GET /path?x=1 HTTP/1.1")

        Returns:
            Tuple of (method, target)

        Raises:
            InvalidRequestLineError: If request line format is invalid
        """
        components = line.split(" ")
        if len(components) < 2 or not components[1].startswith("/"):
            raise InvalidRequestLineError(f"Invalid request line: {line!r}")

        return components[0], components[1]

    @staticmethod
    def _parse_target(target: str) -> tuple[str, dict[str, str]]:
        """Split a request target into path and query parameters."""
        parts = urlsplit(target)
        query = dict(parse_qsl(parts.query, keep_blank_values=True))
        return parts.path or "/", query

    @staticmethod
    def _parse_headers(header_string: str) -> dict[str, str]:
        """
        Parse header string into dictionary.

        Args:
            header_string: Raw headers string

        Returns:
            Dictionary of header key-value pairs, keys lowercased

        Raises:
            InvalidHeaderError: If a header line has no colon
        """
        headers_dict: dict[str, str] = {}
        for header in header_string.split(REQUEST_LINE_SEPARATOR):
            if not header:
                continue
            if HEADER_KEY_VALUE_SEPARATOR not in header:
                raise InvalidHeaderError(f"Malformed header line: {header!r}")
            key, value = header.split(HEADER_KEY_VALUE_SEPARATOR, 1)
            headers_dict[key.strip().lower()] = value.strip()
        return headers_dict

    @staticmethod
    def _parse_form(headers: dict[str, str], body: bytes) -> dict[str, str]:
        content_type = headers.get(HTTPHeaders.CONTENT_TYPE.value, "")
        if not content_type.startswith(ContentType.FORM.value) or not body:
            return {}
        try:
            return dict(parse_qsl(body.decode(DEFAULT_ENCODING), keep_blank_values=True))
        except UnicodeDecodeError as e:
            raise InvalidEncodingError(f"Invalid UTF-8 form body: {e}")

    @staticmethod
    def _validate_http_method(method: str) -> None:
        """
        Validate HTTP method is supported.

        Args:
            method: HTTP method to validate

        Raises:
            InvalidHTTPMethodError: If method is not supported
        """
        if method not in SUPPORTED_HTTP_METHODS:
            raise InvalidHTTPMethodError(
                f"Unsupported HTTP method: {method}. "
                f"Supported methods: {', '.join(sorted(SUPPORTED_HTTP_METHODS))}"
            )
