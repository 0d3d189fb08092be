"""Environment-driven settings for the backend."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

from .market.connection import DEFAULT_STREAM_URL
from .market.quote_client import DEFAULT_MARKET_SUFFIX
from .market.registry import DEFAULT_RECONNECT_DELAY

logger = logging.getLogger(__name__)


def _env_str(name: str, default: str) -> str:
    value = os.environ.get(name, "").strip()
    return value or default


def _env_number(name: str, default, cast):
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning("Invalid %s=%r, using default %s", name, raw, default)
        return default


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 4000
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    stream_base_url: str = DEFAULT_STREAM_URL
    reconnect_delay: float = DEFAULT_RECONNECT_DELAY
    quote_market_suffix: str = DEFAULT_MARKET_SUFFIX
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from the environment. Unset or blank vars use defaults.

        - HOST, PORT                 -> bind address
        - CORS_ORIGIN                -> comma-separated allowed origins ("*" by default)
        - BINANCE_STREAM_URL         -> combined-stream websocket endpoint
        - STREAM_RECONNECT_DELAY     -> seconds between reconnect attempts
        - QUOTE_MARKET_SUFFIX        -> appended to equity symbols for delayed quotes
        - LOG_LEVEL                  -> root log level
        """
        origins = [o.strip() for o in _env_str("CORS_ORIGIN", "*").split(",") if o.strip()]
        return cls(
            host=_env_str("HOST", cls.host),
            port=_env_number("PORT", cls.port, int),
            cors_origins=origins or ["*"],
            stream_base_url=_env_str("BINANCE_STREAM_URL", cls.stream_base_url),
            reconnect_delay=_env_number("STREAM_RECONNECT_DELAY", cls.reconnect_delay, float),
            quote_market_suffix=_env_str("QUOTE_MARKET_SUFFIX", cls.quote_market_suffix),
            log_level=_env_str("LOG_LEVEL", cls.log_level).upper(),
        )
