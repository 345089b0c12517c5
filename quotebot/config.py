"""Process-wide settings, loaded once at startup."""

import logging
import math
import os
from collections.abc import Mapping
from dataclasses import dataclass

from dotenv import load_dotenv

from quotebot.exceptions import ConfigurationError
from quotebot.quotes import DEFAULT_QUOTES_URL

TRUTHY = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True)
class Settings:
    slack_token: str
    quotes_api_key: str
    slack_webhook_url: str | None = None
    quotes_api_url: str = DEFAULT_QUOTES_URL
    host: str = "localhost"
    port: int = 4221
    debug: bool = False
    log_level: str = "INFO"
    outbound_timeout: float = 5.0

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            Frozen Settings instance

        Raises:
            ConfigurationError: If a required variable is missing or a value is malformed
        """
        env = os.environ if environ is None else environ

        return cls(
            slack_token=_required(env, "SLACK_VERIFICATION_TOKEN"),
            quotes_api_key=_required(env, "QUOTES_API_KEY"),
            slack_webhook_url=env.get("SLACK_WEBHOOK_URL") or None,
            quotes_api_url=env.get("QUOTES_API_URL") or DEFAULT_QUOTES_URL,
            host=env.get("QUOTEBOT_HOST") or "localhost",
            port=_number(env, "QUOTEBOT_PORT", int, 4221),
            debug=env.get("QUOTEBOT_DEBUG", "").strip().lower() in TRUTHY,
            log_level=_log_level(env),
            outbound_timeout=_number(env, "OUTBOUND_TIMEOUT", float, 5.0),
        )


def load_settings(env_file: str | None = None) -> Settings:
    """Load a .env file (if any) into the environment, then read settings."""
    load_dotenv(env_file)
    return Settings.from_env()


def _required(env: Mapping[str, str], name: str) -> str:
    value = env.get(name, "").strip()
    if not value:
        raise ConfigurationError(f"Missing required setting {name}")
    return value


def _number(env: Mapping[str, str], name: str, kind: type, default):
    raw = env.get(name)
    if not raw:
        return default
    try:
        value = kind(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a {kind.__name__}, got {raw!r}")
    if not math.isfinite(value) or value <= 0:
        raise ConfigurationError(f"{name} must be a positive finite number, got {raw!r}")
    return value


def _log_level(env: Mapping[str, str]) -> str:
    level = (env.get("QUOTEBOT_LOG_LEVEL") or "INFO").strip().upper()
    # getLevelName maps known names to their number and anything else to a string.
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigurationError(f"QUOTEBOT_LOG_LEVEL must be a logging level name, got {level!r}")
    return level
