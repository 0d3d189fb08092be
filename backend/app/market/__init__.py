"""Market data subsystem for the portfolio tracker.

Public API:
    normalize_symbol / normalize_crypto_symbol - Canonical symbol ids
    PriceState          - Mutable latest-price record for one instrument
    Snapshot            - Immutable point-in-time read of a PriceState
    PriceStream         - Abstract per-instrument streaming connection
    StreamConnection    - Binance mark-price websocket PriceStream
    InstrumentRegistry  - Instrument map, stream ownership, reconnects
    create_registry     - Factory wiring the registry to Binance streams
    DelayedQuoteGateway - Yahoo Finance delayed equity quotes
    create_crypto_router / create_quote_router - FastAPI router factories
"""

from .connection import StreamConnection
from .factory import create_registry, create_stream_factory
from .interface import PriceStream
from .models import ConnectionState, PriceState, Snapshot
from .quote_client import DelayedQuoteGateway, QuoteFetchError, StockQuote
from .registry import InstrumentRegistry, RegistryEntry
from .router import create_crypto_router, create_quote_router
from .symbols import normalize_crypto_symbol, normalize_symbol

__all__ = [
    "ConnectionState",
    "DelayedQuoteGateway",
    "InstrumentRegistry",
    "PriceState",
    "PriceStream",
    "QuoteFetchError",
    "RegistryEntry",
    "Snapshot",
    "StockQuote",
    "StreamConnection",
    "create_crypto_router",
    "create_quote_router",
    "create_registry",
    "create_stream_factory",
    "normalize_crypto_symbol",
    "normalize_symbol",
]
