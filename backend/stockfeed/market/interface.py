"""Abstract interfaces for the quote feed's external collaborators."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .models import Command, OutboundMessage, PricePoint, Quote


class Transport(ABC):
    """Contract for the publish/subscribe channel.

    Lifecycle:
        transport = QueueTransport()
        command = await transport.receive(timeout=0.5)   # None on timeout
        await transport.publish(OutboundMessage.subscribe_ack("AAPL"))
        # ... service shutting down ...
        await transport.close()
    """

    @abstractmethod
    async def publish(self, message: OutboundMessage) -> None:
        """Broadcast a message to every listener. Fire-and-forget.

        There is no delivery guarantee. Implementations raise TransportError
        only if the channel itself is unusable.
        """

    @abstractmethod
    async def receive(self, timeout: float | None = None) -> Command | None:
        """Wait for the next inbound command.

        Returns None if ``timeout`` seconds elapse first. A timeout of None
        waits indefinitely, so callers that must observe shutdown should
        always pass one.
        """

    async def close(self) -> None:
        """Release resources. Safe to call multiple times."""


class QuoteStore(ABC):
    """Durable storage for subscriptions and price history.

    Methods are synchronous; async callers run them via asyncio.to_thread.
    All failures surface as PersistenceError.
    """

    @abstractmethod
    def get_subscriptions(self) -> set[str]:
        """Return every persisted subscription."""

    @abstractmethod
    def save_subscription(self, symbol: str) -> None:
        """Persist a subscription. No-op if already stored."""

    @abstractmethod
    def remove_subscription(self, symbol: str) -> None:
        """Delete a subscription. No-op if not stored."""

    @abstractmethod
    def save_price(self, quote: Quote) -> None:
        """Append a price point to the symbol's history."""

    @abstractmethod
    def get_price_history(self, symbol: str) -> list[PricePoint]:
        """Return the symbol's price points in insertion order (possibly empty)."""

    def close(self) -> None:
        """Release resources. Safe to call multiple times."""


class RateSource(ABC):
    """Source of exchange rates relative to the base currency."""

    @abstractmethod
    async def get_rate(self, code: str) -> float:
        """Units of ``code`` per one unit of base currency.

        Raises ConversionUnavailableError if the rate cannot be obtained.
        """

    async def close(self) -> None:
        """Release resources. Safe to call multiple times."""
