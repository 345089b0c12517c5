"""Outbound REST client with a two-way failure taxonomy."""

from collections.abc import Callable, Mapping
from logging import Logger
from typing import Any

import requests

from quotebot.exceptions import (
    UpstreamHTTPError,
    UpstreamPayloadError,
    UpstreamUnavailableError,
)


class RestClient:
    """
    Thin wrapper over ``requests`` for GET/POST calls.

    Failures come out as one of:
    - UpstreamHTTPError: the remote answered with a non-2xx status
    - UpstreamPayloadError: the remote answered 2xx but the JSON was unusable
    - UpstreamUnavailableError: the remote could not be reached, or the transfer broke
    """

    DEFAULT_TIMEOUT = 5.0  # seconds

    def __init__(
        self,
        logger: Logger,
        timeout: float = DEFAULT_TIMEOUT,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ):
        """
        Initialize the client.

        Args:
            logger: Logger instance for debug/warning messages
            timeout: Connect and read timeout for every call, in seconds
            session_factory: Builds the session used for a single call
        """
        self.logger = logger
        self.timeout = timeout
        self.session_factory = session_factory

    def get(
        self,
        url: str,
        params: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
        as_json: bool = False,
    ) -> Any:
        return self._request("GET", url, params=params, headers=headers, as_json=as_json)

    def post(
        self,
        url: str,
        form: Mapping[str, str] | None = None,
        json: Any = None,
        params: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
        as_json: bool = False,
    ) -> Any:
        """
        POST either a form-encoded or a JSON body.

        Raises:
            ValueError: If both ``form`` and ``json`` are given
        """
        if form is not None and json is not None:
            raise ValueError("Pass either form or json, not both")
        return self._request(
            "POST",
            url,
            params=params,
            headers=headers,
            data=form,
            json=json,
            as_json=as_json,
        )

    def _request(self, method: str, url: str, as_json: bool, **kwargs) -> Any:
        self.logger.debug(f"{method} {url}")
        # One session per call; the with block releases the connection on every exit.
        with self.session_factory() as session:
            try:
                response = session.request(method, url, timeout=self.timeout, **kwargs)
            except (requests.ConnectionError, requests.Timeout) as e:
                self.logger.warning(f"{method} {url} failed: {e}")
                raise UpstreamUnavailableError(f"Could not reach {url}: {e}") from e
            except requests.RequestException as e:
                # Reached the remote but never got a complete answer.
                self.logger.warning(f"{method} {url} failed mid-transfer: {e}")
                raise UpstreamUnavailableError(f"No usable answer from {url}: {e}") from e

            if not 200 <= response.status_code < 300:
                self.logger.warning(f"{method} {url} answered {response.status_code}")
                raise UpstreamHTTPError(url, response.status_code, response.text)

            if not as_json:
                return response.text
            try:
                return response.json()
            except ValueError as e:
                raise UpstreamPayloadError(url, f"invalid JSON: {e}", response.status_code) from e
