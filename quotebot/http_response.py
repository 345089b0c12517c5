import gzip
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any

from quotebot.exceptions import ResponseEncodingError
from quotebot.http_constants import ContentType

SUPPORTED_COMPRESSIONS = frozenset({"gzip"})


@dataclass
class HttpResponse:
    """
    Outbound response.

    Middleware may mutate it on the way out. ``body`` is either text,
    raw bytes, or a structured value that still has to be serialized
    (see ``quotebot.middleware.json_body``).
    """

    status: HTTPStatus
    headers: dict[str, str] = field(default_factory=dict)
    body: Any = ""

    @classmethod
    def text(cls, status: HTTPStatus, body: str = "") -> "HttpResponse":
        headers = {"Content-Type": ContentType.TEXT.value} if body else {}
        return cls(status, headers, body)

    @classmethod
    def json(cls, body: Any, status: HTTPStatus = HTTPStatus.OK) -> "HttpResponse":
        """Response carrying a structured body, serialized later in the pipeline."""
        return cls(status, {}, body)

    def to_bytes(self, compression: str | None = None) -> bytes:
        status_line = f"HTTP/1.1 {self.status.value} {self.status.phrase}"
        headers_lines = [f"{key}: {value}" for key, value in self.headers.items()]

        use_compression = self._negotiate_compression(compression)
        body_content = self._encode_content(self.body, use_compression, headers_lines)

        headers_lines.append(f"Content-Length: {len(body_content)}")
        response_parts_without_body = [status_line, *headers_lines, "\r\n"]
        response_without_body = "\r\n".join(response_parts_without_body).encode()
        return response_without_body + body_content

    @staticmethod
    def _encode_content(
        body: Any, compression: str | None, headers_lines: list[str]
    ) -> bytes:
        match body:
            case str():
                raw = body.encode("utf-8")
            case bytes() | bytearray():
                raw = bytes(body)
            case _:
                raise ResponseEncodingError(
                    f"Response body of type {type(body).__name__} was never serialized"
                )

        match compression:
            case "gzip":
                headers_lines.append(f"Content-Encoding: {compression}")
                return gzip.compress(raw)
            case _:
                return raw

    @staticmethod
    def _negotiate_compression(accept_encoding: str | None) -> str | None:
        """
        Negotiate compression based on Accept-Encoding header.

        Parses the Accept-Encoding header, which can contain multiple
        compression schemes separated by commas (e.g., "gzip, deflate, br").
        Returns the first supported compression scheme, or None if no
        supported schemes are requested.

        Args:
            accept_encoding: Client's Accept-Encoding header value

        Returns:
            Selected compression scheme or None
        """
        if not accept_encoding:
            return None

        requested = [c.split(";")[0].strip() for c in accept_encoding.split(",")]
        supported = [c for c in requested if c in SUPPORTED_COMPRESSIONS]
        return next(iter(supported), None)
