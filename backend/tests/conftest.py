"""Pytest configuration and fixtures."""

import pytest

from app.market.interface import PriceStream
from app.market.models import ConnectionState
from app.market.registry import InstrumentRegistry


class FakeStream(PriceStream):
    """In-memory PriceStream. Tests drive its state and termination by hand."""

    def __init__(self, price_state, on_terminated):
        self.price_state = price_state
        self.on_terminated = on_terminated
        self.started = False
        self.close_calls = 0
        self._state = ConnectionState.CONNECTING

    @property
    def symbol(self):
        return self.price_state.symbol

    @property
    def state(self):
        return self._state

    def start(self):
        self.started = True

    def open(self):
        self._state = ConnectionState.OPEN

    def terminate(self):
        """Simulate a close/error event. Repeated calls repeat the notification."""
        self._state = ConnectionState.CLOSED
        self.on_terminated(self.symbol)

    async def close(self):
        self.close_calls += 1
        self.terminate()


class RecordingStreamFactory:
    """StreamFactory that keeps every FakeStream it builds."""

    def __init__(self):
        self.streams: list[FakeStream] = []

    def __call__(self, price_state, on_terminated):
        stream = FakeStream(price_state, on_terminated)
        self.streams.append(stream)
        return stream

    def for_symbol(self, symbol):
        return [s for s in self.streams if s.symbol == symbol]


@pytest.fixture
def event_loop_policy():
    """Use the default event loop policy for all async tests."""
    import asyncio

    return asyncio.DefaultEventLoopPolicy()


@pytest.fixture
def stream_factory():
    return RecordingStreamFactory()


@pytest.fixture
def registry(stream_factory):
    """Isolated registry with fake streams and a short reconnect delay."""
    return InstrumentRegistry(stream_factory=stream_factory, reconnect_delay=0.01)
