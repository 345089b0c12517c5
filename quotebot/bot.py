"""Wires routes, collaborators and middleware into one top-level handler."""

import logging
from logging import Logger

from quotebot.config import Settings
from quotebot.http_constants import StandardRoute
from quotebot.middleware import (
    compose,
    error_boundary,
    json_body,
    request_logging,
    token_check,
)
from quotebot.quotes import QuotesClient
from quotebot.rest_client import RestClient
from quotebot.route_handler import (
    DumpHandler,
    Handler,
    RootHandler,
    SlackCommandHandler,
)
from quotebot.router import Router
from quotebot.slack_webhook import SlackWebhook


def create_router(
    settings: Settings,
    quotes: QuotesClient,
    logger: Logger,
    webhook: SlackWebhook | None = None,
) -> Router:
    """
    Register the bot's routes and freeze the table.

    The /dump/* route echoes whole requests, secrets included, so it
    only exists when settings.debug is on.
    """
    router = Router()
    router.get(StandardRoute.ROOT.value, RootHandler())
    router.post(
        StandardRoute.SLACK.value,
        compose(
            [token_check(settings.slack_token)],
            SlackCommandHandler(quotes, logger, webhook),
        ),
    )
    if settings.debug:
        logger.warning(f"Debug mode: {StandardRoute.DUMP.value} echoes requests")
        router.get(StandardRoute.DUMP.value, DumpHandler())
    return router.freeze()


def create_app(
    settings: Settings,
    quotes: QuotesClient | None = None,
    webhook: SlackWebhook | None = None,
    logger: Logger | None = None,
) -> Handler:
    """
    Build the top-level handler for the server.

    Args:
        settings: Startup configuration
        quotes: Quotes client (built from settings if None)
        webhook: Webhook poster (built from settings.slack_webhook_url if None)
        logger: Logger instance (module logger if None)

    Returns:
        Handler running error boundary -> request logging -> JSON body -> router
    """
    logger = logger or logging.getLogger(__name__)

    if quotes is None:
        rest_client = RestClient(logger, timeout=settings.outbound_timeout)
        quotes = QuotesClient(
            rest_client, settings.quotes_api_key, logger, settings.quotes_api_url
        )
    if webhook is None and settings.slack_webhook_url:
        webhook = SlackWebhook(
            settings.slack_webhook_url, logger, timeout=settings.outbound_timeout
        )

    router = create_router(settings, quotes, logger, webhook)
    return compose(
        [error_boundary(logger), request_logging(logger), json_body(logger)],
        router,
    )
