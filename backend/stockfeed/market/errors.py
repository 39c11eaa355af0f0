"""Error taxonomy for the quote feed.

Every failure carries an explicit ErrorKind and the subject it concerns
(a symbol or a currency code). The dispatcher maps kinds to client-facing
Error text.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    UNKNOWN_SYMBOL = "unknown_symbol"
    ALREADY_SUBSCRIBED = "already_subscribed"
    NOT_SUBSCRIBED = "not_subscribed"
    INVALID_CURRENCY = "invalid_currency"
    CONVERSION_UNAVAILABLE = "conversion_unavailable"
    PERSISTENCE = "persistence"
    TRANSPORT = "transport"


class QuoteFeedError(Exception):
    """Base class for all quote feed failures."""

    kind: ErrorKind

    def __init__(self, subject: str = "", detail: str | None = None) -> None:
        self.subject = subject
        self.detail = detail
        super().__init__(detail or f"{self.kind.value}: {subject}")


class UnknownSymbolError(QuoteFeedError):
    kind = ErrorKind.UNKNOWN_SYMBOL


class AlreadySubscribedError(QuoteFeedError):
    kind = ErrorKind.ALREADY_SUBSCRIBED


class NotSubscribedError(QuoteFeedError):
    kind = ErrorKind.NOT_SUBSCRIBED


class InvalidCurrencyError(QuoteFeedError):
    kind = ErrorKind.INVALID_CURRENCY


class ConversionUnavailableError(QuoteFeedError):
    kind = ErrorKind.CONVERSION_UNAVAILABLE


class PersistenceError(QuoteFeedError):
    kind = ErrorKind.PERSISTENCE


class TransportError(QuoteFeedError):
    kind = ErrorKind.TRANSPORT
