"""Client for the quote-of-the-day API."""

from logging import Logger

from pydantic import BaseModel, ValidationError

from quotebot.exceptions import UpstreamPayloadError
from quotebot.rest_client import RestClient

API_KEY_HEADER = "X-TheySaidSo-Api-Secret"
DEFAULT_QUOTES_URL = "https://quotes.rest/qod.json"


class Quote(BaseModel):
    quote: str
    author: str | None = None
    category: str | None = None
    permalink: str | None = None

    def __str__(self) -> str:
        if self.author:
            return f"{self.quote} -- {self.author}"
        return self.quote


class _Contents(BaseModel):
    quotes: list[Quote]


class _QuotesPayload(BaseModel):
    contents: _Contents


class QuotesClient:
    """Fetches the quote of the day, optionally for a category."""

    def __init__(
        self,
        rest_client: RestClient,
        api_key: str,
        logger: Logger,
        base_url: str = DEFAULT_QUOTES_URL,
    ):
        self.rest_client = rest_client
        self.api_key = api_key
        self.logger = logger
        self.base_url = base_url

    def quote_of_the_day(self, category: str | None = None) -> Quote:
        """
        Fetch today's quote.

        Args:
            category: Optional category, e.g. "inspire" or "funny"

        Returns:
            The first quote in the payload

        Raises:
            UpstreamHTTPError: If the API answered non-2xx or with an unusable payload
            UpstreamUnavailableError: If the API could not be reached
        """
        params = {"category": category} if category else None
        payload = self.rest_client.get(
            self.base_url,
            params=params,
            headers={API_KEY_HEADER: self.api_key},
            as_json=True,
        )

        try:
            quotes = _QuotesPayload.model_validate(payload).contents.quotes
        except ValidationError as e:
            raise UpstreamPayloadError(self.base_url, str(e)) from e
        if not quotes:
            raise UpstreamPayloadError(self.base_url, "no quotes in payload")

        self.logger.debug(f"Fetched quote of the day (category={category})")
        return quotes[0]
