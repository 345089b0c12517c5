"""Tests for route matching and dispatch."""

from http import HTTPStatus
from unittest.mock import MagicMock

import pytest

from quotebot.exceptions import RouterFrozenError
from quotebot.http_constants import HTTPMethod
from quotebot.http_response import HttpResponse
from quotebot.router import Route, Router


def text_handler(body):
    return lambda request: HttpResponse.text(HTTPStatus.OK, body)


class TestRouteMatching:
    """Tests for Route.matches."""

    def test_exact_path(self):
        route = Route(HTTPMethod.GET, "/slack", text_handler("x"))
        assert route.matches(HTTPMethod.GET, "/slack")
        assert not route.matches(HTTPMethod.GET, "/slack/extra")
        assert not route.matches(HTTPMethod.GET, "/")

    def test_method_must_match_exactly(self):
        route = Route(HTTPMethod.POST, "/slack", text_handler("x"))
        assert not route.matches(HTTPMethod.GET, "/slack")

    @pytest.mark.parametrize("path", ["/dump", "/dump/", "/dump/a", "/dump/a/b/c"])
    def test_wildcard_matches_any_suffix(self, path):
        route = Route(HTTPMethod.GET, "/dump/*", text_handler("x"))
        assert route.matches(HTTPMethod.GET, path)

    @pytest.mark.parametrize("path", ["/dumpster", "/", "/other/dump/a"])
    def test_wildcard_does_not_match_siblings(self, path):
        route = Route(HTTPMethod.GET, "/dump/*", text_handler("x"))
        assert not route.matches(HTTPMethod.GET, path)


class TestRouter:
    """Tests for Router registration and dispatch."""

    def test_dispatches_to_matching_handler(self, make_request):
        router = Router()
        router.get("/", text_handler("root"))
        response = router.dispatch(make_request("GET", "/"))
        assert response.status == HTTPStatus.OK
        assert response.body == "root"

    def test_first_registered_match_wins(self, make_request):
        router = Router()
        router.get("/dump/*", text_handler("first"))
        router.get("/dump/special", text_handler("second"))
        assert router(make_request("GET", "/dump/special")).body == "first"

    @pytest.mark.parametrize(
        "method,path,body",
        [
            ("GET", "/missing", b""),
            ("POST", "/", b"{\"a\": 1}"),
            ("DELETE", "/slack", b"token=whatever"),
        ],
    )
    def test_unmatched_requests_get_not_found(self, make_request, method, path, body):
        router = Router()
        router.get("/", text_handler("root"))
        router.post("/slack", text_handler("slack"))
        response = router.dispatch(make_request(method, path, body=body))
        assert response.status == HTTPStatus.NOT_FOUND
        assert response.body == "Not Found"

    def test_custom_not_found_handler(self, make_request):
        not_found = MagicMock(return_value=HttpResponse.text(HTTPStatus.NOT_FOUND, "nope"))
        router = Router(not_found_handler=not_found)
        request = make_request("GET", "/missing")
        assert router.dispatch(request).body == "nope"
        not_found.assert_called_once_with(request)

    def test_frozen_router_rejects_registration(self):
        router = Router()
        router.get("/", text_handler("root"))
        router.freeze()
        assert router.frozen
        with pytest.raises(RouterFrozenError):
            router.post("/late", text_handler("late"))
        assert len(router.routes) == 1

    def test_routes_preserve_registration_order(self):
        router = Router()
        router.get("/b", text_handler("b"))
        router.post("/a", text_handler("a"))
        assert [(r.method, r.pattern) for r in router.routes] == [
            (HTTPMethod.GET, "/b"),
            (HTTPMethod.POST, "/a"),
        ]

    def test_has_route(self):
        router = Router()
        router.get("/dump/*", text_handler("dump"))
        assert router.has_route(HTTPMethod.GET, "/dump/x")
        assert not router.has_route(HTTPMethod.POST, "/dump/x")
