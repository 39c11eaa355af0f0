"""Integration tests for QuoteService."""

import asyncio
import time

import pytest

from stockfeed.market.currency import CurrencyConverter
from stockfeed.market.models import Command, CommandKind, MessageKind
from stockfeed.market.service import QuoteService
from stockfeed.market.store import SqliteQuoteStore

from .fakes import SlowRateSource, drain


async def _next_message(queue, timeout=1.0):
    return await asyncio.wait_for(queue.get(), timeout=timeout)


@pytest.mark.asyncio
class TestQuoteService:
    """Both loops running against the in-process transport."""

    async def test_subscribe_end_to_end(self, store, generator, converter, transport):
        service = QuoteService(transport, store, generator, converter, broadcast_interval=60.0, poll_timeout=0.05)
        queue = transport.listen()
        await service.start()

        transport.submit(Command(kind=CommandKind.SUBSCRIBE, symbol="AAPL"))
        ack = await _next_message(queue)
        update = await _next_message(queue)

        assert ack.kind is MessageKind.SUBSCRIBE_ACK
        assert ack.symbol == "AAPL"
        assert update.kind is MessageKind.QUOTE_UPDATE
        assert update.quote.currency == "USD"
        assert update.quote.change_percent == (update.quote.price - 175.0) / 175.0 * 100

        await service.stop()

    async def test_broadcast_loop_pushes_updates(self, store, generator, converter, transport):
        service = QuoteService(transport, store, generator, converter, broadcast_interval=0.02, poll_timeout=0.05)
        service.registry.subscribe("MSFT")
        queue = transport.listen()
        await service.start()

        first = await _next_message(queue)
        second = await _next_message(queue)
        assert first.quote.symbol == second.quote.symbol == "MSFT"

        await service.stop()

    async def test_idle_shutdown_is_prompt(self, store, generator, converter, transport):
        service = QuoteService(transport, store, generator, converter, broadcast_interval=0.05, poll_timeout=0.05)
        await service.start()
        assert service.running

        started = time.monotonic()
        await asyncio.wait_for(service.stop(), timeout=1.0)
        assert time.monotonic() - started < 1.0
        assert not service.running

    async def test_stop_is_idempotent(self, store, generator, converter, transport):
        service = QuoteService(transport, store, generator, converter, broadcast_interval=0.05, poll_timeout=0.05)
        await service.start()
        await service.stop()
        await service.stop()

    async def test_restores_subscriptions_and_resets_currency(self, tmp_path, generator, converter, transport):
        path = str(tmp_path / "quotes.db")
        first_store = SqliteQuoteStore(path)
        first = QuoteService(transport, first_store, generator, converter, poll_timeout=0.05)
        first.registry.subscribe("AAPL")
        first.registry.set_currency("EUR")
        first_store.close()

        second_store = SqliteQuoteStore(path)
        second = QuoteService(transport, second_store, generator, converter, poll_timeout=0.05)
        assert second.registry.list() == ["AAPL"]
        assert second.registry.currency == "USD"
        second_store.close()

    async def test_dispatch_errors_do_not_stop_loop(self, store, generator, converter, transport):
        service = QuoteService(transport, store, generator, converter, broadcast_interval=60.0, poll_timeout=0.05)
        queue = transport.listen()
        await service.start()

        transport.submit(Command(kind=CommandKind.UNSUBSCRIBE, symbol="AAPL"))
        transport.submit(Command(kind=CommandKind.QUERY, symbol="AAPL"))

        error = await _next_message(queue)
        update = await _next_message(queue)
        assert error.kind is MessageKind.ERROR
        assert update.kind is MessageKind.QUOTE_UPDATE

        await service.stop()

    async def test_close_releases_resources(self, generator, converter, transport):
        store = SqliteQuoteStore(":memory:")
        service = QuoteService(transport, store, generator, converter, broadcast_interval=0.05, poll_timeout=0.05)
        await service.start()
        await service.close()
        assert not service.running

    async def test_stop_mid_tick_finishes_the_sweep(self, store, generator, transport):
        source = SlowRateSource({"EUR": 0.9}, delay=0.1)
        converter = CurrencyConverter(source)
        service = QuoteService(transport, store, generator, converter, broadcast_interval=0.01, poll_timeout=0.05)
        service.registry.subscribe("AAPL")
        service.registry.subscribe("MSFT")
        service.registry.set_currency("EUR")
        queue = transport.listen()
        await service.start()

        await asyncio.wait_for(source.first_call.wait(), timeout=1.0)
        await asyncio.wait_for(service.stop(), timeout=2.0)

        assert not service.running
        messages = drain(queue)
        assert [m.kind for m in messages] == [MessageKind.QUOTE_UPDATE, MessageKind.QUOTE_UPDATE]
        assert [m.quote.symbol for m in messages] == ["AAPL", "MSFT"]
        assert all(m.quote.currency == "EUR" for m in messages)
        assert len(store.get_price_history("MSFT")) == 1
