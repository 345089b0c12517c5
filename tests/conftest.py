"""
quotebot test configuration

Shared fixtures: a quiet logger, settings, a request factory and a
quotes client double.
"""

import logging
from unittest.mock import MagicMock

import pytest

from quotebot.config import Settings
from quotebot.http_constants import ContentType, HTTPMethod
from quotebot.http_request import HTTPRequest
from quotebot.quotes import Quote, QuotesClient

SECRET = "s3cret-token"


@pytest.fixture
def logger():
    return logging.getLogger("quotebot.tests")


@pytest.fixture
def settings():
    return Settings(slack_token=SECRET, quotes_api_key="api-key")


@pytest.fixture
def debug_settings():
    return Settings(slack_token=SECRET, quotes_api_key="api-key", debug=True)


@pytest.fixture
def make_request():
    def factory(method="GET", path="/", query=None, headers=None, body=b"", form=None):
        if form is not None and not headers:
            headers = {"Content-Type": ContentType.FORM.value}
        return HTTPRequest(
            method=HTTPMethod(method),
            path=path,
            query=query or {},
            headers=headers or {},
            body=body,
            form=form or {},
        )

    return factory


@pytest.fixture
def quote():
    return Quote(
        quote="Simplicity is prerequisite for reliability.",
        author="Edsger Dijkstra",
        category="inspire",
    )


@pytest.fixture
def quotes_client(quote):
    client = MagicMock(spec=QuotesClient)
    client.quote_of_the_day.return_value = quote
    return client


@pytest.fixture
def secret():
    return SECRET
