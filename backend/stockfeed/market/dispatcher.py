"""Command dispatcher: maps each inbound command to its effects and replies."""

from __future__ import annotations

import asyncio
import logging

from .currency import CurrencyConverter
from .errors import ErrorKind, InvalidCurrencyError, QuoteFeedError, UnknownSymbolError
from .interface import QuoteStore
from .models import Command, CommandKind, OutboundMessage
from .publisher import QuotePublisher
from .registry import SubscriptionRegistry

logger = logging.getLogger(__name__)

# Client-facing text for each error kind; ``{subject}`` is the symbol or code
ERROR_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.UNKNOWN_SYMBOL: "Invalid symbol: {subject}",
    ErrorKind.ALREADY_SUBSCRIBED: "Already subscribed to {subject}",
    ErrorKind.NOT_SUBSCRIBED: "Symbol {subject} is not subscribed.",
    ErrorKind.INVALID_CURRENCY: "Invalid currency code: {subject}",
}

_SYMBOL_COMMANDS = frozenset(
    {
        CommandKind.SUBSCRIBE.value,
        CommandKind.UNSUBSCRIBE.value,
        CommandKind.QUERY.value,
        CommandKind.PRICE_HISTORY_REQUEST.value,
    }
)


def error_text(error: QuoteFeedError) -> str:
    """Deterministic Error payload for a failure."""
    template = ERROR_MESSAGES.get(error.kind)
    if template is None:
        return str(error)
    return template.format(subject=error.subject)


class CommandDispatcher:
    """Stateless router from Command to registry/generator/converter calls.

    ``dispatch`` never raises: every failure becomes exactly one Error
    message, and the command loop moves on to the next command.
    """

    def __init__(
        self,
        registry: SubscriptionRegistry,
        publisher: QuotePublisher,
        converter: CurrencyConverter,
        store: QuoteStore,
    ) -> None:
        self._registry = registry
        self._publisher = publisher
        self._converter = converter
        self._store = store

    async def dispatch(self, command: Command) -> None:
        logger.info("Received %s command", command.kind)
        try:
            await self._handle(command)
        except QuoteFeedError as e:
            logger.warning("%s command failed: %s", command.kind, e)
            await self._publisher.send(OutboundMessage.make_error(error_text(e)))
        except Exception as e:
            logger.exception("Error handling %s command", command.kind)
            await self._publisher.send(OutboundMessage.make_error(str(e)))

    async def _handle(self, command: Command) -> None:
        kind = command.kind
        symbol = command.symbol or ""
        if kind in _SYMBOL_COMMANDS and not symbol:
            raise UnknownSymbolError(symbol)

        if kind == CommandKind.SUBSCRIBE:
            await self._subscribe(symbol)
        elif kind == CommandKind.UNSUBSCRIBE:
            await asyncio.to_thread(self._registry.unsubscribe, symbol)
            await self._publisher.send(OutboundMessage.unsubscribe_ack(symbol))
        elif kind == CommandKind.QUERY:
            await self._publisher.publish_quote(symbol, self._registry.currency)
        elif kind == CommandKind.PRICE_HISTORY_REQUEST:
            history = await asyncio.to_thread(self._store.get_price_history, symbol)
            await self._publisher.send(OutboundMessage.price_history(symbol, history))
            logger.info("Sent price history for %s (%d points)", symbol, len(history))
        elif kind == CommandKind.REQUEST_SUBSCRIPTIONS:
            symbols = self._registry.list()
            await self._publisher.send(OutboundMessage.subscriptions_list(symbols))
            logger.info("Sent subscription list with %d entries", len(symbols))
        elif kind == CommandKind.SET_CURRENCY:
            await self._set_currency(command.currency or "")
        else:
            logger.warning("Received unexpected command type: %r", kind)

    async def _subscribe(self, symbol: str) -> None:
        await asyncio.to_thread(self._registry.subscribe, symbol)
        await self._publisher.send(OutboundMessage.subscribe_ack(symbol))
        await self._publisher.publish_quote(symbol, self._registry.currency)

    async def _set_currency(self, code: str) -> None:
        if not self._converter.is_valid_currency_code(code):
            raise InvalidCurrencyError(code)

        self._registry.set_currency(code)
        # Re-broadcast every active quote at the new rate
        for symbol in self._registry.list():
            await self.dispatch(Command(kind=CommandKind.QUERY, symbol=symbol))
