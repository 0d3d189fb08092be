"""FastAPI application for the portfolio tracker backend."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings
from .market import (
    DelayedQuoteGateway,
    InstrumentRegistry,
    create_crypto_router,
    create_quote_router,
    create_registry,
)

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    registry: InstrumentRegistry | None = None,
    quote_gateway: DelayedQuoteGateway | None = None,
) -> FastAPI:
    """Build the application. Collaborators default to the real ones from settings."""
    settings = settings or Settings.from_env()
    if registry is None:
        registry = create_registry(settings.stream_base_url, settings.reconnect_delay)
    if quote_gateway is None:
        quote_gateway = DelayedQuoteGateway(market_suffix=settings.quote_market_suffix)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await registry.close()

    app = FastAPI(title="Portfolio Tracker Backend", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.registry = registry

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    app.include_router(create_crypto_router(registry))
    app.include_router(create_quote_router(quote_gateway))
    return app


def main() -> None:
    settings = Settings.from_env()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    logger.info("Portfolio backend running on http://localhost:%d", settings.port)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
