"""Tests for the registry and stream factories."""

from app.market.connection import DEFAULT_STREAM_URL, StreamConnection
from app.market.factory import create_registry, create_stream_factory
from app.market.models import PriceState
from app.market.registry import DEFAULT_RECONNECT_DELAY, InstrumentRegistry


class TestFactory:
    """Tests for create_stream_factory and create_registry."""

    def test_stream_factory_builds_connections(self):
        """Test that the factory builds a StreamConnection for the state."""
        factory = create_stream_factory()
        state = PriceState(symbol="BTCUSDT")

        stream = factory(state, lambda symbol: None)

        assert isinstance(stream, StreamConnection)
        assert stream.symbol == "BTCUSDT"
        assert stream.url == f"{DEFAULT_STREAM_URL}?streams=btcusdt@markPrice"

    def test_stream_factory_custom_url(self):
        factory = create_stream_factory("wss://example.test/stream")
        stream = factory(PriceState(symbol="ETHUSDT"), lambda symbol: None)
        assert stream.url == "wss://example.test/stream?streams=ethusdt@markPrice"

    def test_stream_factory_passes_connect(self):
        """Test that an injected connect callable reaches the connection."""
        sentinel = object()
        factory = create_stream_factory(connect=sentinel)
        stream = factory(PriceState(symbol="ETHUSDT"), lambda symbol: None)
        assert stream._connect is sentinel

    def test_creates_empty_registry(self):
        """Test that create_registry opens nothing until first use."""
        registry = create_registry()

        assert isinstance(registry, InstrumentRegistry)
        assert len(registry) == 0
        assert registry._reconnect_delay == DEFAULT_RECONNECT_DELAY
        assert registry.source == "binance-ws"

    def test_registry_receives_delay(self):
        registry = create_registry(reconnect_delay=3.0)
        assert registry._reconnect_delay == 3.0
