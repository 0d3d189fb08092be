"""Binance mark-price websocket connection for a single instrument."""

from __future__ import annotations

import asyncio
import json
import logging
import math
from typing import Any

import websockets

from .interface import PriceStream, TerminationCallback
from .models import ConnectionState, PriceState

logger = logging.getLogger(__name__)

DEFAULT_STREAM_URL = "wss://fstream.binance.com/stream"


def stream_url(base_url: str, symbol: str) -> str:
    """Combined-stream URL for one instrument's mark-price channel."""
    return f"{base_url}?streams={symbol.lower()}@markPrice"


class StreamConnection(PriceStream):
    """PriceStream backed by one Binance combined-stream websocket.

    State machine:
        CONNECTING --connected--> OPEN --frame--> OPEN
        OPEN --remote/local close--> CLOSED
        CONNECTING|OPEN --transport error--> ERRORED --> CLOSED

    Every path ends in ``_terminate()``, which notifies the registry exactly
    once, so an error followed by a close yields a single reconnect trigger.
    """

    def __init__(
        self,
        price_state: PriceState,
        on_terminated: TerminationCallback,
        base_url: str = DEFAULT_STREAM_URL,
        connect: Any = None,
    ) -> None:
        self._price_state = price_state
        self._on_terminated = on_terminated
        self._url = stream_url(base_url, price_state.symbol)
        self._connect = connect or websockets.connect
        self._state = ConnectionState.CONNECTING
        self._task: asyncio.Task | None = None
        self._terminated = False

    @property
    def symbol(self) -> str:
        return self._price_state.symbol

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def url(self) -> str:
        return self._url

    def start(self) -> None:
        self._task = asyncio.create_task(self._run(), name=f"stream-{self.symbol}")

    async def close(self) -> None:
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        self._terminate()

    def handle_message(self, raw: str | bytes) -> bool:
        """Apply one inbound frame. Returns True if the price was updated.

        Malformed frames are logged and dropped; they never close the stream.
        """
        try:
            message = json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning("Malformed frame for %s: %s", self.symbol, e)
            return False

        data = message.get("data") if isinstance(message, dict) else None
        if not isinstance(data, dict) or not data.get("p"):
            return False

        try:
            price = float(data["p"])
        except (TypeError, ValueError) as e:
            logger.warning("Unparseable price for %s: %r (%s)", self.symbol, data["p"], e)
            return False
        if not math.isfinite(price):
            logger.warning("Non-finite price for %s: %r", self.symbol, data["p"])
            return False
        if price == 0:
            return False

        # E = event time, T = next funding/trade time, both epoch millis
        try:
            self._price_state.apply(price, data.get("E") or data.get("T"))
        except ValueError as e:
            logger.warning("Dropping frame for %s: %s", self.symbol, e)
            return False
        logger.debug("%s mark price %s", self.symbol, price)
        return True

    # --- Internal ---

    async def _run(self) -> None:
        try:
            async with self._connect(
                self._url,
                ping_interval=20,
                ping_timeout=20,
                close_timeout=5,
            ) as ws:
                self._state = ConnectionState.OPEN
                logger.info("Stream opened: %s", self.symbol)
                async for raw in ws:
                    self.handle_message(raw)
            logger.info("Stream closed by remote: %s", self.symbol)
        except Exception as e:
            self._state = ConnectionState.ERRORED
            logger.warning("Stream error for %s: %s", self.symbol, e)
        finally:
            self._terminate()

    def _terminate(self) -> None:
        self._state = ConnectionState.CLOSED
        if self._terminated:
            return
        self._terminated = True
        self._on_terminated(self.symbol)
