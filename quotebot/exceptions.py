"""Bot-specific exceptions for better error handling."""


class QuotebotError(Exception):
    """Base exception for quotebot errors."""

    pass


class ConfigurationError(QuotebotError):
    """Missing or malformed startup configuration."""

    pass


class RouterFrozenError(QuotebotError):
    """Raised when a route is registered after the router was frozen."""

    pass


class ResponseEncodingError(QuotebotError):
    """A response body could not be serialized to bytes."""

    pass


class UpstreamError(QuotebotError):
    """Base exception for failures talking to an outbound collaborator."""

    pass


class UpstreamHTTPError(UpstreamError):
    """The remote service answered, but not with a 2xx."""

    def __init__(self, url: str, status_code: int, body: str = ""):
        super().__init__(f"{url} answered with status {status_code}")
        self.url = url
        self.status_code = status_code
        self.body = body


class UpstreamPayloadError(UpstreamHTTPError):
    """The remote service answered 2xx with a body we cannot use."""

    def __init__(self, url: str, reason: str, status_code: int = 200):
        super().__init__(url, status_code)
        self.args = (f"Unusable payload from {url}: {reason}",)
        self.reason = reason


class UpstreamUnavailableError(UpstreamError):
    """The remote service could not be reached (timeout, DNS, refused)."""

    pass
