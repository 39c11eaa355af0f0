"""Per-symbol random-walk parameters defining the tradable universe."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StockConfig:
    base_price: float
    volatility: float  # Std dev of the per-tick fractional change
    trend: float  # Mean of the per-tick fractional change (positive=up, negative=down)


# A symbol is valid iff it appears here (or in the file that replaces this table)
DEFAULT_STOCK_CONFIGS: dict[str, StockConfig] = {
    "AAPL": StockConfig(base_price=175.0, volatility=0.002, trend=0.0001),  # Stable, slight upward trend
    "MSFT": StockConfig(base_price=320.0, volatility=0.0015, trend=0.00012),  # Very stable
    "GOOGL": StockConfig(base_price=140.0, volatility=0.0025, trend=0.00008),
    "AMZN": StockConfig(base_price=130.0, volatility=0.003, trend=0.00015),  # High volatility
    "META": StockConfig(base_price=270.0, volatility=0.0035, trend=-0.00005),  # Slight downtrend
}


def load_stock_configs(path: str | Path) -> dict[str, StockConfig]:
    """Load a symbol table from JSON.

    Expected shape::

        {"AAPL": {"base_price": 175.0, "volatility": 0.002, "trend": 0.0001}, ...}

    Raises ValueError if an entry is malformed.
    """
    raw = json.loads(Path(path).read_text())
    if not isinstance(raw, dict):
        raise ValueError(f"{path}: expected a JSON object keyed by symbol")

    configs: dict[str, StockConfig] = {}
    for symbol, params in raw.items():
        try:
            configs[symbol] = StockConfig(
                base_price=float(params["base_price"]),
                volatility=float(params["volatility"]),
                trend=float(params["trend"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"{path}: bad config for {symbol!r}: {e}") from e
        if configs[symbol].base_price <= 0:
            raise ValueError(f"{path}: base_price for {symbol!r} must be positive")

    logger.info("Loaded %d stock configs from %s", len(configs), path)
    return configs
