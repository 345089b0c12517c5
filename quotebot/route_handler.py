"""Route handlers using protocol pattern for extensibility."""

from http import HTTPStatus
from logging import Logger
from typing import Protocol

from pydantic import BaseModel, ValidationError

from quotebot.exceptions import UpstreamError, UpstreamUnavailableError
from quotebot.http_request import HTTPRequest
from quotebot.http_response import HttpResponse
from quotebot.quotes import QuotesClient
from quotebot.slack_webhook import SlackWebhook, quote_attachment

ROOT_BODY = "quotebot is running"


class Handler(Protocol):
    """Protocol for handlers (structural subtyping); plain functions qualify."""

    def __call__(self, request: HTTPRequest) -> HttpResponse:
        """
        Handle HTTP request and return response.

        Args:
            request: Parsed HTTP request

        Returns:
            HTTP response to send to client
        """
        ...


class SlashCommand(BaseModel):
    """Form fields Slack sends with a slash command. Other fields are ignored."""

    command: str
    token: str = ""
    text: str = ""
    user_name: str | None = None
    channel_name: str | None = None
    response_url: str | None = None

    @property
    def argument(self) -> str | None:
        """First word after the command, if any."""
        words = self.text.split()
        return words[0] if words else None


class RootHandler:
    """Handler for root path '/'."""

    def __call__(self, request: HTTPRequest) -> HttpResponse:
        return HttpResponse.text(HTTPStatus.OK, ROOT_BODY)


class SlackCommandHandler:
    """Handler for POST /slack - answers the bot's slash commands."""

    QUOTE = "/quote"
    QUOTE_SHARE = "/quote-share"

    def __init__(
        self,
        quotes: QuotesClient,
        logger: Logger,
        webhook: SlackWebhook | None = None,
    ):
        """
        Initialize SlackCommandHandler with its collaborators.

        Args:
            quotes: Client for the quote-of-the-day API
            logger: Logger instance for info/warning messages
            webhook: Incoming webhook for /quote-share, None to disable it
        """
        self.quotes = quotes
        self.logger = logger
        self.webhook = webhook

    def __call__(self, request: HTTPRequest) -> HttpResponse:
        """
        Route a slash command by its ``command`` field.

        Returns:
            200 with the answer, 400 on bad input, 502/503 when a
            collaborator fails
        """
        try:
            command = SlashCommand.model_validate(dict(request.params))
        except ValidationError:
            return HttpResponse.text(HTTPStatus.BAD_REQUEST, "Missing command")

        self.logger.info(f"Slash command {command.command} from {command.user_name}")
        try:
            match command.command:
                case self.QUOTE:
                    return self._quote(command)
                case self.QUOTE_SHARE:
                    return self._quote_share(command)
                case _:
                    return HttpResponse.text(
                        HTTPStatus.BAD_REQUEST, f"Unknown command: {command.command}"
                    )
        except UpstreamUnavailableError as e:
            self.logger.warning(f"{command.command} failed, collaborator unreachable: {e}")
            return HttpResponse.text(
                HTTPStatus.SERVICE_UNAVAILABLE, "Quote service unavailable"
            )
        except UpstreamError as e:
            self.logger.warning(f"{command.command} failed, collaborator error: {e}")
            return HttpResponse.text(HTTPStatus.BAD_GATEWAY, "Quote service error")

    def _quote(self, command: SlashCommand) -> HttpResponse:
        quote = self.quotes.quote_of_the_day(command.argument)
        return HttpResponse.text(HTTPStatus.OK, str(quote))

    def _quote_share(self, command: SlashCommand) -> HttpResponse:
        if self.webhook is None:
            return HttpResponse.text(
                HTTPStatus.SERVICE_UNAVAILABLE, "Sharing is not configured"
            )
        quote = self.quotes.quote_of_the_day(command.argument)
        self.webhook.post_attachments([quote_attachment(quote)])
        return HttpResponse.text(HTTPStatus.OK, "Quote shared")


class DumpHandler:
    """Handler for /dump/* - echoes the request back. Development only."""

    def __call__(self, request: HTTPRequest) -> HttpResponse:
        return HttpResponse.json(
            {
                "method": request.method.value,
                "path": request.path,
                "query": dict(request.query),
                "headers": dict(request.headers),
                "form": dict(request.form),
                "body": request.body.decode("utf-8", errors="replace"),
            }
        )
