"""Thread-safe subscription registry."""

from __future__ import annotations

import logging
from collections.abc import Callable
from threading import Lock

from .errors import AlreadySubscribedError, NotSubscribedError, UnknownSymbolError
from .interface import QuoteStore
from .models import BASE_CURRENCY

logger = logging.getLogger(__name__)


class SubscriptionRegistry:
    """Set of subscribed symbols plus the process-wide display currency.

    Writers: the command dispatcher (subscribe, unsubscribe, set_currency).
    Readers: the dispatcher and the broadcaster.

    Every mutation is persisted before the in-memory set changes, and the
    lock is held across the persistence call so check-then-act is atomic.
    A PersistenceError from the store leaves the set untouched.
    """

    def __init__(self, store: QuoteStore, is_valid_symbol: Callable[[str], bool]) -> None:
        self._store = store
        self._is_valid_symbol = is_valid_symbol
        self._symbols: set[str] = set()
        self._currency: str = BASE_CURRENCY
        self._lock = Lock()
        self.restore()

    def restore(self) -> None:
        """Load persisted subscriptions into memory. Called once at construction."""
        persisted = self._store.get_subscriptions()
        with self._lock:
            for symbol in sorted(persisted):
                if not self._is_valid_symbol(symbol):
                    logger.warning("Skipping persisted subscription for unknown symbol %s", symbol)
                    continue
                self._symbols.add(symbol)
                logger.info("Restored subscription for %s", symbol)

    def subscribe(self, symbol: str) -> None:
        if not self._is_valid_symbol(symbol):
            raise UnknownSymbolError(symbol)
        with self._lock:
            if symbol in self._symbols:
                raise AlreadySubscribedError(symbol)
            self._store.save_subscription(symbol)
            self._symbols.add(symbol)
        logger.info("Subscribed to %s", symbol)

    def unsubscribe(self, symbol: str) -> None:
        with self._lock:
            if symbol not in self._symbols:
                raise NotSubscribedError(symbol)
            self._store.remove_subscription(symbol)
            self._symbols.discard(symbol)
        logger.info("Unsubscribed from %s", symbol)

    def list(self) -> list[str]:
        """Sorted snapshot of the current subscriptions."""
        with self._lock:
            return sorted(self._symbols)

    def snapshot(self) -> tuple[list[str], str]:
        """Sorted subscriptions and the current currency, read together.

        Blocks while a subscribe or unsubscribe is persisting, so async
        callers should run it in a worker thread.
        """
        with self._lock:
            return sorted(self._symbols), self._currency

    @property
    def currency(self) -> str:
        with self._lock:
            return self._currency

    def set_currency(self, code: str) -> None:
        """Set the display currency. The caller must have validated ``code``."""
        with self._lock:
            self._currency = code
        logger.info("Currency updated to %s", code)

    def __len__(self) -> int:
        with self._lock:
            return len(self._symbols)

    def __contains__(self, symbol: str) -> bool:
        with self._lock:
            return symbol in self._symbols
