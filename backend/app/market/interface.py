"""Abstract interface for per-instrument price streams."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable

from .models import ConnectionState, PriceState

# Called with the canonical symbol once a stream has terminated for good.
TerminationCallback = Callable[[str], None]


class PriceStream(ABC):
    """Contract for a connection that feeds exactly one PriceState.

    A stream writes into the PriceState it was built with and nothing else.
    The registry decides when to replace it; a stream never reconnects itself.

    Lifecycle:
        stream = factory(price_state, registry.schedule_reconnect)
        stream.start()            # CONNECTING
        # ... frames arrive ...   # OPEN
        await stream.close()      # CLOSED, on_terminated fires once
    """

    @property
    @abstractmethod
    def symbol(self) -> str:
        """Canonical instrument id this stream serves."""

    @property
    @abstractmethod
    def state(self) -> ConnectionState:
        """Current connection state."""

    @property
    def is_active(self) -> bool:
        """True while CONNECTING or OPEN."""
        return self.state.is_active

    @abstractmethod
    def start(self) -> None:
        """Begin connecting in the background. Must not block.

        Must be called from within a running event loop, exactly once.
        """

    @abstractmethod
    async def close(self) -> None:
        """Close the connection locally. Safe to call multiple times."""


# Builds a stream for a PriceState, wired to the registry's termination hook.
StreamFactory = Callable[[PriceState, TerminationCallback], PriceStream]
