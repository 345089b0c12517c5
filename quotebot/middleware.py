"""
Handler middleware and the composer that stacks them.

A middleware takes the next handler and returns a new handler::

    def my_mw(next_handler: Handler) -> Handler:
        def handle(request: HTTPRequest) -> HttpResponse:
            ...
            return next_handler(request)
        return handle

Middleware close over configuration passed at construction only; they
keep no per-request state.
"""

import hmac
import json
import logging
import time
from collections.abc import Callable, Iterable
from functools import reduce
from http import HTTPStatus
from logging import Logger

from pydantic import BaseModel

from quotebot.exceptions import ConfigurationError
from quotebot.http_constants import ContentType
from quotebot.http_request import HTTPRequest
from quotebot.http_response import HttpResponse
from quotebot.route_handler import Handler

Middleware = Callable[[Handler], Handler]

INVALID_TOKEN_BODY = "Invalid token"


def compose(middlewares: Iterable[Middleware], terminal: Handler) -> Handler:
    """
    Fold middleware around a terminal handler.

    The first middleware is the outermost: it sees the inbound request
    first and the outbound response last.

    Args:
        middlewares: Ordered middleware, outermost first
        terminal: Innermost handler, usually a Router

    Returns:
        A single handler running the whole chain
    """
    return reduce(lambda handler, mw: mw(handler), reversed(list(middlewares)), terminal)


def token_check(secret: str, field: str = "token") -> Middleware:
    """
    Reject requests whose ``field`` parameter does not equal ``secret``.

    Rejected requests get 400 ``Invalid token`` and never reach the
    wrapped handler.
    """
    if not secret:
        raise ConfigurationError("token_check needs a non-empty secret")
    expected = secret.encode("utf-8")

    def middleware(next_handler: Handler) -> Handler:
        def handle(request: HTTPRequest) -> HttpResponse:
            supplied = request.params.get(field, "").encode("utf-8")
            if not hmac.compare_digest(supplied, expected):
                return HttpResponse.text(HTTPStatus.BAD_REQUEST, INVALID_TOKEN_BODY)
            return next_handler(request)

        return handle

    return middleware


def json_body(logger: Logger = logging.getLogger(__name__)) -> Middleware:
    """Serialize structured response bodies to UTF-8 JSON."""

    def middleware(next_handler: Handler) -> Handler:
        def handle(request: HTTPRequest) -> HttpResponse:
            response = next_handler(request)
            if isinstance(response.body, (str, bytes, bytearray)):
                return response

            body = response.body
            if isinstance(body, BaseModel):
                body = body.model_dump(mode="json")
            try:
                encoded = json.dumps(body, ensure_ascii=False, allow_nan=False).encode("utf-8")
            except (TypeError, ValueError) as e:
                logger.error(
                    f"Cannot serialize response body for {request.path}: {e}",
                    exc_info=True,
                )
                return HttpResponse.text(
                    HTTPStatus.INTERNAL_SERVER_ERROR,
                    HTTPStatus.INTERNAL_SERVER_ERROR.phrase,
                )

            response.body = encoded
            response.headers["Content-Type"] = ContentType.JSON.value
            return response

        return handle

    return middleware


def error_boundary(logger: Logger) -> Middleware:
    """Turn any exception escaping the chain into a logged 500."""

    def middleware(next_handler: Handler) -> Handler:
        def handle(request: HTTPRequest) -> HttpResponse:
            try:
                return next_handler(request)
            except Exception as e:
                logger.error(
                    f"Unhandled error for {request.method.value} {request.path}: {e}",
                    exc_info=True,
                )
                return HttpResponse.text(
                    HTTPStatus.INTERNAL_SERVER_ERROR,
                    HTTPStatus.INTERNAL_SERVER_ERROR.phrase,
                )

        return handle

    return middleware


def request_logging(logger: Logger) -> Middleware:
    def middleware(next_handler: Handler) -> Handler:
        def handle(request: HTTPRequest) -> HttpResponse:
            start = time.monotonic()
            response = next_handler(request)
            elapsed_ms = (time.monotonic() - start) * 1000
            logger.info(
                f"{request.method.value} {request.path} -> "
                f"{response.status.value} ({elapsed_ms:.1f} ms)"
            )
            return response

        return handle

    return middleware
