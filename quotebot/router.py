"""Route dispatcher using an ordered route table."""

from dataclasses import dataclass
from http import HTTPStatus

from quotebot.exceptions import RouterFrozenError
from quotebot.http_constants import HTTPMethod
from quotebot.http_request import HTTPRequest
from quotebot.http_response import HttpResponse
from quotebot.route_handler import Handler

WILDCARD_SUFFIX = "/*"


@dataclass(frozen=True)
class Route:
    """A (method, path pattern) -> handler association."""

    method: HTTPMethod
    pattern: str
    handler: Handler

    def matches(self, method: HTTPMethod, path: str) -> bool:
        """
        Check whether this route serves the given method and path.

        A pattern ending in ``/*`` matches its prefix and anything below it,
        so ``/dump/*`` matches ``/dump``, ``/dump/`` and ``/dump/a/b``.
        """
        if method != self.method:
            return False
        if self.pattern.endswith(WILDCARD_SUFFIX):
            prefix = self.pattern[: -len(WILDCARD_SUFFIX)]
            return path == prefix or path.startswith(prefix + "/")
        return path == self.pattern


def not_found(request: HTTPRequest) -> HttpResponse:
    return HttpResponse.text(HTTPStatus.NOT_FOUND, HTTPStatus.NOT_FOUND.phrase)


class Router:
    """
    Route dispatcher using an ordered route table.

    Routes are matched in registration order and the first match wins.
    Once frozen, the table cannot change.
    """

    def __init__(self, not_found_handler: Handler = not_found):
        """
        Initialize router with an empty route table.

        Args:
            not_found_handler: Handler answering requests no route matches
        """
        self._routes: list[Route] = []
        self._frozen = False
        self.not_found_handler = not_found_handler

    def register(self, method: HTTPMethod, pattern: str, handler: Handler) -> None:
        """
        Register a handler for a method and path pattern.

        Args:
            method: Exact HTTP method to match
            pattern: Path (e.g. "/slack") or wildcard prefix (e.g. "/dump/*")
            handler: Callable taking an HTTPRequest and returning an HttpResponse

        Raises:
            RouterFrozenError: If the router has already been frozen
        """
        method = HTTPMethod(method)
        if self._frozen:
            raise RouterFrozenError(
                f"Cannot register {method.value} {pattern}: router is frozen"
            )
        self._routes.append(Route(method, pattern, handler))

    def get(self, pattern: str, handler: Handler) -> None:
        self.register(HTTPMethod.GET, pattern, handler)

    def post(self, pattern: str, handler: Handler) -> None:
        self.register(HTTPMethod.POST, pattern, handler)

    def freeze(self) -> "Router":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def routes(self) -> tuple[Route, ...]:
        return tuple(self._routes)

    def match(self, request: HTTPRequest) -> Route | None:
        return next(
            (r for r in self._routes if r.matches(request.method, request.path)),
            None,
        )

    def dispatch(self, request: HTTPRequest) -> HttpResponse:
        """
        Dispatch request to the first matching route's handler.

        Args:
            request: Parsed HTTP request

        Returns:
            HTTP response from the handler, or from the not-found handler
            when no route matches
        """
        route = self.match(request)

        if route is None:
            return self.not_found_handler(request)

        return route.handler(request)

    __call__ = dispatch

    def has_route(self, method: HTTPMethod, path: str) -> bool:
        """
        Check if some route would serve this method and path.

        Args:
            method: HTTP method
            path: Request path

        Returns:
            True if a registered route matches, False otherwise
        """
        return any(r.matches(HTTPMethod(method), path) for r in self._routes)
