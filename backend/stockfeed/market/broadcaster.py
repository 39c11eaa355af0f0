"""Periodic quote broadcast over all subscriptions."""

from __future__ import annotations

import asyncio
import logging

from .publisher import QuotePublisher
from .registry import SubscriptionRegistry

logger = logging.getLogger(__name__)

DEFAULT_BROADCAST_INTERVAL = 8.0


class Broadcaster:
    """Sweeps every subscription on a fixed interval, independent of commands.

    Each tick snapshots the registry, then generates, converts, publishes and
    stores one quote per symbol. A failure on one symbol is logged and the
    sweep continues with the rest.
    """

    def __init__(
        self,
        registry: SubscriptionRegistry,
        publisher: QuotePublisher,
        interval: float = DEFAULT_BROADCAST_INTERVAL,
    ) -> None:
        self._registry = registry
        self._publisher = publisher
        self._interval = interval

    @property
    def interval(self) -> float:
        return self._interval

    async def tick(self) -> int:
        """Run one sweep. Returns the number of quotes published."""
        symbols, currency = await asyncio.to_thread(self._registry.snapshot)
        published = 0
        for symbol in symbols:
            try:
                await self._publisher.publish_quote(symbol, currency)
                published += 1
            except Exception:
                logger.exception("Error generating quote for %s", symbol)
        logger.debug("Broadcast tick: published %d/%d quotes", published, len(symbols))
        return published

    async def run(self, stopping: asyncio.Event) -> None:
        """Sleep, then sweep, until ``stopping`` is set.

        The sleep wakes early when the flag is set; a tick in progress always
        completes.
        """
        logger.info("Broadcaster started: %.1fs interval", self._interval)
        while not stopping.is_set():
            try:
                await asyncio.wait_for(stopping.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                await self.tick()
        logger.info("Broadcaster stopped")
