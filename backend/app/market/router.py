"""HTTP endpoints for crypto snapshots/subscriptions and delayed stock quotes."""

from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from .quote_client import DelayedQuoteGateway, QuoteFetchError
from .registry import InstrumentRegistry

logger = logging.getLogger(__name__)


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _split_symbols(value: str) -> list[str]:
    return [s.strip() for s in value.split(",") if s.strip()]


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": message})


def create_crypto_router(registry: InstrumentRegistry) -> APIRouter:
    """Create the crypto price router bound to ``registry``.

    Every endpoint may start streaming for symbols it has not seen before;
    none of them waits for a first price.
    """
    router = APIRouter(prefix="/api/crypto", tags=["crypto"])

    @router.get("/price")
    async def get_price(symbol: str | None = None):
        """Snapshot of one instrument."""
        if _is_blank(symbol):
            return _bad_request("symbol is required")
        return registry.snapshot(symbol).to_dict()

    @router.get("/subscribe")
    async def subscribe(symbols: str | None = None, symbol: str | None = None):
        """Start tracking the given instruments and return their snapshots.

        ``symbols`` (comma-separated) wins over ``symbol`` when both are sent.
        """
        requested = symbols if symbols is not None else symbol
        if _is_blank(requested):
            return _bad_request("symbols is required")
        data = [registry.subscribe(s).to_dict() for s in _split_symbols(requested)]
        logger.debug("Subscribed %d symbols", len(data))
        return {"data": data}

    @router.get("/prices")
    async def get_prices(symbols: str | None = None):
        """Snapshots for a comma-separated list of instruments."""
        if _is_blank(symbols):
            return _bad_request("symbols is required")
        return {"data": [registry.snapshot(s).to_dict() for s in _split_symbols(symbols)]}

    return router


def create_quote_router(gateway: DelayedQuoteGateway) -> APIRouter:
    """Create the delayed stock quote router."""
    router = APIRouter(prefix="/api/stock", tags=["stock"])

    @router.get("/quote")
    async def get_quote(symbol: str | None = None):
        if _is_blank(symbol):
            return _bad_request("symbol is required")
        try:
            quote = await gateway.fetch(symbol)
        except QuoteFetchError:
            return JSONResponse(status_code=500, content={"error": "Failed to fetch quote"})
        return quote.to_dict()

    return router
