"""Data models for market data."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum


def parse_event_time(millis) -> datetime:
    """Epoch milliseconds to an aware UTC datetime. Raises ValueError if unusable."""
    try:
        return datetime.fromtimestamp(float(millis) / 1000.0, tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError) as e:
        raise ValueError(f"invalid event time {millis!r}") from e


def format_timestamp(value: datetime | None) -> str | None:
    """ISO-8601 UTC with millisecond precision, e.g. ``2024-02-10T16:00:00.000Z``."""
    if value is None:
        return None
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ConnectionState(str, Enum):
    """Lifecycle of a single streaming connection."""

    CONNECTING = "connecting"
    OPEN = "open"
    ERRORED = "errored"
    CLOSED = "closed"

    @property
    def is_active(self) -> bool:
        return self in (ConnectionState.CONNECTING, ConnectionState.OPEN)


@dataclass(slots=True)
class PriceState:
    """Latest known price for one canonical instrument.

    Owned by the InstrumentRegistry; only the instrument's stream writes to it.
    """

    symbol: str
    price: float | None = None
    last_updated: datetime | None = None

    def apply(self, price: float, event_time_ms: float | None = None) -> None:
        """Record a price. Without an event time the receipt time is used.

        Raises ValueError for an unusable event time; the state is left untouched.
        """
        if event_time_ms:
            updated = parse_event_time(event_time_ms)
        else:
            updated = datetime.now(timezone.utc)
        self.price = price
        self.last_updated = updated


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Immutable point-in-time read of a PriceState."""

    symbol: str
    price: float | None
    last_updated: datetime | None
    source: str

    @classmethod
    def of(cls, state: PriceState, source: str) -> Snapshot:
        return cls(
            symbol=state.symbol,
            price=state.price,
            last_updated=state.last_updated,
            source=source,
        )

    @property
    def status(self) -> str:
        """'ready' once a price has arrived, otherwise 'warming'."""
        return "ready" if self.price is not None else "warming"

    def to_dict(self) -> dict:
        """Serialize for JSON responses."""
        return {
            "symbol": self.symbol,
            "price": self.price,
            "lastUpdated": format_timestamp(self.last_updated),
            "source": self.source,
            "status": self.status,
        }
