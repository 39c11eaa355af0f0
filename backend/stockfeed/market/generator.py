"""Random-walk quote generator."""

from __future__ import annotations

import logging
import time
from threading import Lock

import numpy as np

from .errors import UnknownSymbolError
from .models import BASE_CURRENCY, Quote
from .stock_configs import DEFAULT_STOCK_CONFIGS, StockConfig

logger = logging.getLogger(__name__)


class QuoteGenerator:
    """Random walk with drift, one independent walk per symbol.

    Math:
        change ~ Normal(trend, volatility)
        P(t+1) = P(t) * (1 + change)

    Where trend and volatility come from the symbol's StockConfig and P(0) is
    its base price. The walk has no floor; a sufficiently long run can reach
    non-positive prices, which is logged but not clamped.

    PriceState (the last price per symbol) is shared between the command and
    broadcast loops, so every read-modify-write happens under one lock.
    """

    def __init__(
        self,
        configs: dict[str, StockConfig] | None = None,
        rng: np.random.Generator | None = None,
        seed: int | None = None,
    ) -> None:
        self._configs: dict[str, StockConfig] = dict(configs if configs is not None else DEFAULT_STOCK_CONFIGS)
        self._rng = rng if rng is not None else np.random.default_rng(seed)
        self._last_prices: dict[str, float] = {}
        self._lock = Lock()

    # --- Public API ---

    def generate_quote(self, symbol: str) -> Quote:
        """Advance the walk for ``symbol`` by one step and return the new quote.

        Raises UnknownSymbolError if the symbol has no config.
        """
        config = self._configs.get(symbol)
        if config is None:
            raise UnknownSymbolError(symbol)

        with self._lock:
            last_price = self._last_prices.get(symbol, config.base_price)
            change = float(self._rng.normal(config.trend, config.volatility))
            new_price = last_price * (1.0 + change)
            percent_change = (new_price - last_price) / last_price * 100
            self._last_prices[symbol] = new_price

        if new_price <= 0:
            logger.warning("Random walk for %s reached non-positive price %.4f", symbol, new_price)
        logger.debug("Generated quote for %s: %.4f (%+.4f%%)", symbol, new_price, percent_change)

        return Quote(
            symbol=symbol,
            price=new_price,
            change_percent=percent_change,
            currency=BASE_CURRENCY,
            timestamp=time.time(),
        )

    def is_valid_symbol(self, symbol: str) -> bool:
        return symbol in self._configs

    def list_symbols(self) -> list[str]:
        return list(self._configs)

    def get_price(self, symbol: str) -> float | None:
        """Last generated price for a symbol, or None before its first quote."""
        with self._lock:
            return self._last_prices.get(symbol)
