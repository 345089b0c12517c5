"""Posting messages to a Slack incoming webhook."""

import http.client
from collections.abc import Sequence
from logging import Logger

from slack_sdk.models.attachments import Attachment
from slack_sdk.webhook import WebhookClient, WebhookResponse

from quotebot.exceptions import UpstreamHTTPError, UpstreamUnavailableError
from quotebot.quotes import Quote

QUOTE_COLOR = "#36a64f"


def quote_attachment(quote: Quote, link: str | None = None) -> Attachment:
    """Build the attachment used to share a quote in a channel."""
    title = f"Quote of the day ({quote.category})" if quote.category else "Quote of the day"
    return Attachment(
        text=str(quote),
        fallback=str(quote),
        pretext="Here is something to think about",
        title=title,
        title_link=link or quote.permalink,
        color=QUOTE_COLOR,
    )


class SlackWebhook:
    """Sends messages to one incoming-webhook URL."""

    def __init__(
        self,
        url: str,
        logger: Logger,
        timeout: float = 5.0,
        client: WebhookClient | None = None,
    ):
        self.url = url
        self.logger = logger
        self.client = client or WebhookClient(url, timeout=timeout, logger=logger)

    def post_text(self, text: str) -> None:
        self._send(text=text)

    def post_attachments(self, attachments: Sequence[Attachment]) -> None:
        self._send(attachments=list(attachments))

    def _send(self, **message) -> None:
        try:
            response: WebhookResponse = self.client.send(**message)
        except (OSError, http.client.HTTPException) as e:
            self.logger.warning(f"Slack webhook unreachable: {e}")
            raise UpstreamUnavailableError(f"Could not reach Slack webhook: {e}") from e

        if not 200 <= response.status_code < 300:
            self.logger.warning(
                f"Slack webhook answered {response.status_code}: {response.body}"
            )
            raise UpstreamHTTPError("slack-webhook", response.status_code, response.body)
