import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from requests.structures import CaseInsensitiveDict

from quotebot.http_constants import HTTPMethod


class Headers(Mapping):
    """Read-only header mapping with case-insensitive keys."""

    def __init__(self, headers: Mapping[str, str] | None = None):
        self._store = CaseInsensitiveDict(headers or {})

    def __getitem__(self, key: str) -> str:
        return self._store[key]

    def __iter__(self):
        return iter(self._store)

    def __len__(self) -> int:
        return len(self._store)

    def __repr__(self) -> str:
        return f"Headers({dict(self._store.items())!r})"


@dataclass(frozen=True)
class HTTPRequest:
    """
    Immutable inbound request.

    ``query`` and ``form`` are read-only views; ``params`` merges them
    with form values taking precedence.
    """

    method: HTTPMethod
    path: str
    query: Mapping[str, str] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""
    form: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "method", HTTPMethod(self.method))
        object.__setattr__(self, "query", MappingProxyType(dict(self.query)))
        object.__setattr__(self, "form", MappingProxyType(dict(self.form)))
        object.__setattr__(self, "headers", Headers(self.headers))

    @property
    def params(self) -> Mapping[str, str]:
        return MappingProxyType({**self.query, **self.form})

    def json(self) -> Any:
        """Decode the body as JSON. Raises ValueError when it is not valid JSON."""
        return json.loads(self.body.decode("utf-8"))
