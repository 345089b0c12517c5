"""Tests for the request and response value types."""

import dataclasses
import gzip
from http import HTTPStatus

import pytest

from quotebot.exceptions import ResponseEncodingError
from quotebot.http_constants import HTTPMethod
from quotebot.http_request import HTTPRequest
from quotebot.http_response import HttpResponse


class TestHTTPRequest:
    """Tests for HTTPRequest."""

    def test_is_immutable(self, make_request):
        request = make_request(query={"a": "1"})
        with pytest.raises(dataclasses.FrozenInstanceError):
            request.path = "/other"
        with pytest.raises(TypeError):
            request.query["a"] = "2"

    def test_copies_caller_mappings(self):
        query = {"a": "1"}
        request = HTTPRequest(method=HTTPMethod.GET, path="/", query=query)
        query["a"] = "changed"
        assert request.query["a"] == "1"

    def test_rejects_unknown_fields(self):
        with pytest.raises(TypeError):
            HTTPRequest(method=HTTPMethod.GET, path="/", cookies={})

    def test_rejects_unknown_method(self):
        with pytest.raises(ValueError):
            HTTPRequest(method="BREW", path="/")

    def test_params_prefer_form_over_query(self, make_request):
        request = make_request(query={"token": "q", "a": "1"}, form={"token": "f"})
        assert dict(request.params) == {"token": "f", "a": "1"}

    def test_header_lookup_ignores_case(self, make_request):
        request = make_request(headers={"X-Slack-Signature": "v0=abc"})
        assert request.headers["x-slack-signature"] == "v0=abc"
        assert "X-SLACK-SIGNATURE" in request.headers


class TestHttpResponse:
    """Tests for HttpResponse.to_bytes."""

    def test_text_response_bytes(self):
        raw = HttpResponse.text(HTTPStatus.OK, "hi").to_bytes()
        assert raw.startswith(b"HTTP/1.1 200 OK\r\n")
        assert b"Content-Type: text/plain; charset=utf-8\r\n" in raw
        assert b"Content-Length: 2\r\n" in raw
        assert raw.endswith(b"\r\n\r\nhi")

    def test_content_length_counts_utf8_bytes(self):
        raw = HttpResponse.text(HTTPStatus.OK, "café").to_bytes()
        assert b"Content-Length: 5\r\n" in raw

    def test_gzip_negotiation(self):
        raw = HttpResponse.text(HTTPStatus.OK, "hello").to_bytes(compression="br, gzip;q=0.8")
        head, _, body = raw.partition(b"\r\n\r\n")
        assert b"Content-Encoding: gzip" in head
        assert gzip.decompress(body) == b"hello"

    def test_unsupported_compression_ignored(self):
        raw = HttpResponse.text(HTTPStatus.OK, "hello").to_bytes(compression="br")
        assert b"Content-Encoding" not in raw

    def test_structured_body_must_be_serialized_first(self):
        with pytest.raises(ResponseEncodingError):
            HttpResponse.json({"a": 1}).to_bytes()
