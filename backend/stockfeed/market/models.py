"""Data models for quotes, inbound commands and outbound messages."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

BASE_CURRENCY = "USD"


@dataclass(frozen=True, slots=True)
class Quote:
    """Immutable price observation for a single symbol."""

    symbol: str
    price: float
    change_percent: float
    currency: str = BASE_CURRENCY
    timestamp: float = field(default_factory=time.time)  # Unix seconds

    def to_dict(self) -> dict:
        """Serialize for JSON / SSE transmission."""
        return {
            "symbol": self.symbol,
            "price": self.price,
            "currency": self.currency,
            "change_percent": self.change_percent,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True, slots=True)
class PricePoint:
    """One persisted (price, timestamp) pair from a symbol's history."""

    price: float
    timestamp: float

    def to_dict(self) -> dict:
        return {"price": self.price, "timestamp": self.timestamp}


class CommandKind(str, Enum):
    SUBSCRIBE = "Subscribe"
    UNSUBSCRIBE = "Unsubscribe"
    QUERY = "Query"
    PRICE_HISTORY_REQUEST = "PriceHistoryRequest"
    REQUEST_SUBSCRIPTIONS = "RequestSubscriptions"
    SET_CURRENCY = "SetCurrency"


class MessageKind(str, Enum):
    QUOTE_UPDATE = "QuoteUpdate"
    SUBSCRIBE_ACK = "SubscribeAck"
    UNSUBSCRIBE_ACK = "UnsubscribeAck"
    PRICE_HISTORY = "PriceHistory"
    SUBSCRIPTIONS_LIST = "SubscriptionsList"
    ERROR = "Error"


@dataclass(frozen=True, slots=True)
class Command:
    """Inbound client command.

    ``kind`` is kept as the raw discriminant string so that unrecognized
    kinds survive decoding and can be reported by the dispatcher.
    """

    kind: str
    symbol: str | None = None
    currency: str | None = None

    def __post_init__(self) -> None:
        # Store the plain discriminant; CommandKind members still compare equal
        if isinstance(self.kind, CommandKind):
            object.__setattr__(self, "kind", self.kind.value)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Command:
        """Decode the wire form ``{"type": ..., "symbol"?: ..., "currency"?: ...}``."""
        kind = data.get("type")
        if not isinstance(kind, str):
            raise ValueError("command requires a string 'type' field")
        symbol = data.get("symbol")
        currency = data.get("currency")
        return cls(
            kind=kind,
            symbol=str(symbol) if symbol is not None else None,
            currency=str(currency) if currency is not None else None,
        )

    def to_dict(self) -> dict:
        result: dict[str, Any] = {"type": self.kind}
        if self.symbol is not None:
            result["symbol"] = self.symbol
        if self.currency is not None:
            result["currency"] = self.currency
        return result


@dataclass(frozen=True, slots=True)
class OutboundMessage:
    """Message published to every listener on the transport."""

    kind: MessageKind
    symbol: str | None = None
    quote: Quote | None = None
    history: tuple[PricePoint, ...] = ()
    symbols: tuple[str, ...] = ()
    error: str | None = None

    @classmethod
    def quote_update(cls, quote: Quote) -> OutboundMessage:
        return cls(kind=MessageKind.QUOTE_UPDATE, symbol=quote.symbol, quote=quote)

    @classmethod
    def subscribe_ack(cls, symbol: str) -> OutboundMessage:
        return cls(kind=MessageKind.SUBSCRIBE_ACK, symbol=symbol)

    @classmethod
    def unsubscribe_ack(cls, symbol: str) -> OutboundMessage:
        return cls(kind=MessageKind.UNSUBSCRIBE_ACK, symbol=symbol)

    @classmethod
    def price_history(cls, symbol: str, history: list[PricePoint]) -> OutboundMessage:
        return cls(kind=MessageKind.PRICE_HISTORY, symbol=symbol, history=tuple(history))

    @classmethod
    def subscriptions_list(cls, symbols: list[str]) -> OutboundMessage:
        return cls(kind=MessageKind.SUBSCRIPTIONS_LIST, symbols=tuple(symbols))

    @classmethod
    def make_error(cls, text: str) -> OutboundMessage:
        return cls(kind=MessageKind.ERROR, error=text)

    def to_dict(self) -> dict:
        """Serialize for JSON / SSE transmission. Only the fields of this kind are emitted."""
        result: dict[str, Any] = {"type": self.kind.value}
        if self.kind is MessageKind.QUOTE_UPDATE and self.quote is not None:
            result["quote"] = self.quote.to_dict()
        elif self.kind in (MessageKind.SUBSCRIBE_ACK, MessageKind.UNSUBSCRIBE_ACK):
            result["symbol"] = self.symbol
        elif self.kind is MessageKind.PRICE_HISTORY:
            result["symbol"] = self.symbol
            result["history"] = [point.to_dict() for point in self.history]
        elif self.kind is MessageKind.SUBSCRIPTIONS_LIST:
            result["symbols"] = list(self.symbols)
        elif self.kind is MessageKind.ERROR:
            result["error"] = self.error
        return result
