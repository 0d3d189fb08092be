"""In-memory registry of tracked crypto instruments and their streams."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from .interface import PriceStream, StreamFactory
from .models import PriceState, Snapshot
from .symbols import normalize_crypto_symbol

logger = logging.getLogger(__name__)

DEFAULT_RECONNECT_DELAY = 1.5  # seconds, fixed (no backoff growth)
DEFAULT_SOURCE = "binance-ws"


@dataclass(slots=True)
class RegistryEntry:
    """A PriceState, the stream currently feeding it, and its retry timer."""

    state: PriceState
    stream: PriceStream | None = None
    reconnect_handle: asyncio.TimerHandle | None = None

    @property
    def reconnect_pending(self) -> bool:
        return self.reconnect_handle is not None


class InstrumentRegistry:
    """Authoritative map from canonical instrument id to RegistryEntry.

    Holds at most one active stream per instrument and owns every connection
    lifecycle decision. All methods must run on the event loop thread; there
    is no lock because nothing mutates the map from elsewhere.

    Writers: each instrument's own stream (through its PriceState).
    Readers: the crypto HTTP routes.
    """

    def __init__(
        self,
        stream_factory: StreamFactory,
        reconnect_delay: float = DEFAULT_RECONNECT_DELAY,
        source: str = DEFAULT_SOURCE,
    ) -> None:
        self._stream_factory = stream_factory
        self._reconnect_delay = reconnect_delay
        self._source = source
        self._entries: dict[str, RegistryEntry] = {}
        self._closed = False

    @property
    def source(self) -> str:
        return self._source

    def ensure_stream(self, raw_symbol: str) -> RegistryEntry:
        """Make sure the instrument has an active stream and return its entry.

        An entry whose stream is CONNECTING or OPEN is returned untouched.
        Otherwise a new stream is started; an existing PriceState is reused so
        the last price survives a reconnect.
        """
        symbol = normalize_crypto_symbol(raw_symbol)
        entry = self._entries.get(symbol)
        if entry is not None and entry.stream is not None and entry.stream.is_active:
            return entry

        if entry is None:
            entry = RegistryEntry(state=PriceState(symbol=symbol))
            self._entries[symbol] = entry

        entry.stream = self._stream_factory(entry.state, self.schedule_reconnect)
        entry.stream.start()
        logger.info("Streaming %s", symbol)
        return entry

    def schedule_reconnect(self, symbol: str) -> None:
        """Arm one fixed-delay reconnect timer for ``symbol``.

        No-op while a timer is already pending, for unknown symbols, and after
        close().
        """
        if self._closed:
            return
        entry = self._entries.get(symbol)
        if entry is None or entry.reconnect_pending:
            return

        loop = asyncio.get_running_loop()
        entry.reconnect_handle = loop.call_later(self._reconnect_delay, self._reconnect, symbol)
        logger.info("Reconnect for %s in %.1fs", symbol, self._reconnect_delay)

    def snapshot(self, raw_symbol: str) -> Snapshot:
        """Current state of an instrument. Starts streaming on first sight.

        Never waits for the network: a fresh instrument reports 'warming'.
        """
        symbol = normalize_crypto_symbol(raw_symbol)
        entry = self._entries.get(symbol)
        if entry is None:
            entry = self.ensure_stream(symbol)
        return Snapshot.of(entry.state, self._source)

    def subscribe(self, raw_symbol: str) -> Snapshot:
        """ensure_stream() followed by a snapshot of the same entry."""
        entry = self.ensure_stream(raw_symbol)
        return Snapshot.of(entry.state, self._source)

    def get(self, symbol: str) -> RegistryEntry | None:
        """Entry for a canonical id, or None if never requested."""
        return self._entries.get(symbol)

    def symbols(self) -> list[str]:
        """Canonical ids of every instrument seen so far."""
        return list(self._entries)

    async def close(self) -> None:
        """Stop all streams and pending timers. No reconnects afterwards."""
        self._closed = True
        for entry in list(self._entries.values()):
            if entry.reconnect_handle is not None:
                entry.reconnect_handle.cancel()
                entry.reconnect_handle = None
            if entry.stream is not None:
                await entry.stream.close()
        logger.info("Instrument registry closed (%d instruments)", len(self._entries))

    # --- Internal ---

    def _reconnect(self, symbol: str) -> None:
        entry = self._entries.get(symbol)
        if entry is None:
            return
        # Clear first so an immediate failure of the new stream can re-arm.
        entry.reconnect_handle = None
        if self._closed:
            return
        self.ensure_stream(symbol)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, symbol: str) -> bool:
        return symbol in self._entries
