"""Shared generate → convert → publish → persist path."""

from __future__ import annotations

import asyncio
import logging

from .currency import CurrencyConverter
from .errors import PersistenceError, TransportError
from .generator import QuoteGenerator
from .interface import QuoteStore, Transport
from .models import OutboundMessage, Quote

logger = logging.getLogger(__name__)


class QuotePublisher:
    """Produces, publishes and records quotes for the dispatcher and broadcaster.

    Transport and persistence failures are logged where they occur and never
    propagate; the only error a caller sees from ``publish_quote`` is
    UnknownSymbolError from the generator.
    """

    def __init__(
        self,
        generator: QuoteGenerator,
        converter: CurrencyConverter,
        transport: Transport,
        store: QuoteStore,
    ) -> None:
        self._generator = generator
        self._converter = converter
        self._transport = transport
        self._store = store

    async def send(self, message: OutboundMessage) -> None:
        try:
            await self._transport.publish(message)
        except TransportError as e:
            logger.error("Failed to publish %s message: %s", message.kind.value, e)

    async def publish_quote(self, symbol: str, currency: str) -> Quote:
        """Generate a quote for ``symbol``, convert it best-effort, publish and persist it."""
        quote = self._generator.generate_quote(symbol)
        quote = await self._converter.convert_quote(quote, currency)

        await self.send(OutboundMessage.quote_update(quote))

        try:
            await asyncio.to_thread(self._store.save_price, quote)
        except PersistenceError as e:
            logger.error("Failed to store price for %s: %s", symbol, e)

        logger.info("Sent quote for %s in %s: %.2f", symbol, quote.currency, quote.price)
        return quote
