"""Factories for the stream registry."""

from __future__ import annotations

import logging
from typing import Any

from .connection import DEFAULT_STREAM_URL, StreamConnection
from .interface import PriceStream, StreamFactory, TerminationCallback
from .models import PriceState
from .registry import DEFAULT_RECONNECT_DELAY, InstrumentRegistry

logger = logging.getLogger(__name__)


def create_stream_factory(base_url: str = DEFAULT_STREAM_URL, connect: Any = None) -> StreamFactory:
    """Return a StreamFactory that opens Binance mark-price websockets.

    ``connect`` replaces ``websockets.connect`` (tests only).
    """

    def factory(price_state: PriceState, on_terminated: TerminationCallback) -> PriceStream:
        return StreamConnection(
            price_state,
            on_terminated,
            base_url=base_url,
            connect=connect,
        )

    return factory


def create_registry(
    base_url: str = DEFAULT_STREAM_URL,
    reconnect_delay: float = DEFAULT_RECONNECT_DELAY,
) -> InstrumentRegistry:
    """Create an empty registry streaming from ``base_url``.

    No connection is opened until a symbol is first requested.
    """
    logger.info("Market data source: %s (reconnect every %.1fs)", base_url, reconnect_delay)
    return InstrumentRegistry(
        stream_factory=create_stream_factory(base_url),
        reconnect_delay=reconnect_delay,
    )
