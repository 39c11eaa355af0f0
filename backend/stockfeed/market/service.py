"""Service shell: wires the components and runs the two service loops."""

from __future__ import annotations

import asyncio
import logging

from .broadcaster import DEFAULT_BROADCAST_INTERVAL, Broadcaster
from .currency import CurrencyConverter
from .dispatcher import CommandDispatcher
from .generator import QuoteGenerator
from .interface import QuoteStore, Transport
from .publisher import QuotePublisher
from .registry import SubscriptionRegistry

logger = logging.getLogger(__name__)


class QuoteService:
    """Owns the registry and runs the command loop and broadcast loop.

    Lifecycle:
        service = QuoteService(transport, store, generator, converter)
        await service.start()
        # ... service runs ...
        await service.stop()

    Shutdown is cooperative. ``stop()`` sets a shared flag; the command loop
    sees it within ``poll_timeout`` because receive is bounded, and the
    broadcast loop wakes from its sleep (never mid-tick). The command loop waits
    for the broadcast loop before returning, so no dispatch or tick is cut
    short.
    """

    def __init__(
        self,
        transport: Transport,
        store: QuoteStore,
        generator: QuoteGenerator,
        converter: CurrencyConverter,
        broadcast_interval: float = DEFAULT_BROADCAST_INTERVAL,
        poll_timeout: float = 0.5,
    ) -> None:
        self._transport = transport
        self._store = store
        self._converter = converter
        self._poll_timeout = poll_timeout

        self._registry = SubscriptionRegistry(store, generator.is_valid_symbol)
        self._publisher = QuotePublisher(generator, converter, transport, store)
        self._dispatcher = CommandDispatcher(self._registry, self._publisher, converter, store)
        self._broadcaster = Broadcaster(self._registry, self._publisher, interval=broadcast_interval)

        self._stopping = asyncio.Event()
        self._task: asyncio.Task | None = None
        logger.info("Quote service initialized with %d restored subscriptions", len(self._registry))

    @property
    def registry(self) -> SubscriptionRegistry:
        return self._registry

    @property
    def dispatcher(self) -> CommandDispatcher:
        return self._dispatcher

    @property
    def broadcaster(self) -> Broadcaster:
        return self._broadcaster

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the service loops in a background task. Must be called once."""
        self._stopping.clear()
        self._task = asyncio.create_task(self.run(), name="quote-service")
        logger.info("Quote service started")

    async def stop(self) -> None:
        """Request shutdown and wait for both loops to finish. Safe to call multiple times."""
        self._stopping.set()
        if self._task is not None:
            await self._task
            self._task = None
        logger.info("Quote service stopped")

    async def close(self) -> None:
        """Stop the loops and release the transport, rate source and store."""
        await self.stop()
        await self._transport.close()
        await self._converter.close()
        self._store.close()

    async def run(self) -> None:
        """Run the command loop until stopped, then join the broadcast loop."""
        broadcast_task = asyncio.create_task(self._broadcaster.run(self._stopping), name="quote-broadcaster")
        try:
            await self._command_loop()
        finally:
            self._stopping.set()
            await broadcast_task

    async def _command_loop(self) -> None:
        while not self._stopping.is_set():
            try:
                command = await self._transport.receive(timeout=self._poll_timeout)
            except Exception:
                logger.exception("Error receiving command")
                await asyncio.sleep(self._poll_timeout)
                continue
            if command is None:
                continue
            await self._dispatcher.dispatch(command)
