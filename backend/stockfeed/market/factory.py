"""Factory for assembling the quote service from environment configuration."""

from __future__ import annotations

import logging
import math
import os

from .broadcaster import DEFAULT_BROADCAST_INTERVAL
from .currency import CurrencyConverter
from .generator import QuoteGenerator
from .interface import RateSource, Transport
from .rates import HttpRateSource, StaticRateSource
from .service import QuoteService
from .stock_configs import DEFAULT_STOCK_CONFIGS, load_stock_configs
from .store import SqliteQuoteStore
from .transport import QueueTransport

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = "stocktracker.db"


def create_rate_source() -> RateSource:
    """Select the exchange rate source based on environment variables.

    - STOCKFEED_RATES_URL set and non-empty → HttpRateSource (live rates)
    - Otherwise → StaticRateSource (built-in table)
    """
    rates_url = os.environ.get("STOCKFEED_RATES_URL", "").strip()

    if rates_url:
        logger.info("Rate source: HTTP (%s)", rates_url)
        return HttpRateSource(url=rates_url)
    else:
        logger.info("Rate source: static table")
        return StaticRateSource()


def create_quote_service(transport: Transport | None = None) -> QuoteService:
    """Create an unstarted QuoteService configured from the environment.

    Reads STOCKFEED_DB_PATH, STOCKFEED_BROADCAST_INTERVAL, STOCKFEED_RATES_URL
    and STOCKFEED_SYMBOLS_FILE. Raises PersistenceError if the store cannot
    be opened or restored; caller must await service.start().
    """
    db_path = os.environ.get("STOCKFEED_DB_PATH", "").strip() or DEFAULT_DB_PATH

    interval = DEFAULT_BROADCAST_INTERVAL
    raw_interval = os.environ.get("STOCKFEED_BROADCAST_INTERVAL", "").strip()
    if raw_interval:
        try:
            interval = float(raw_interval)
            if not math.isfinite(interval) or interval <= 0:
                raise ValueError("must be a positive finite number")
        except ValueError as e:
            logger.warning(
                "Ignoring STOCKFEED_BROADCAST_INTERVAL=%r (%s); using %.1fs", raw_interval, e, DEFAULT_BROADCAST_INTERVAL
            )
            interval = DEFAULT_BROADCAST_INTERVAL

    configs = DEFAULT_STOCK_CONFIGS
    symbols_file = os.environ.get("STOCKFEED_SYMBOLS_FILE", "").strip()
    if symbols_file:
        configs = load_stock_configs(symbols_file)

    store = SqliteQuoteStore(db_path)
    try:
        return QuoteService(
            transport=transport if transport is not None else QueueTransport(),
            store=store,
            generator=QuoteGenerator(configs),
            converter=CurrencyConverter(create_rate_source()),
            broadcast_interval=interval,
        )
    except Exception:
        store.close()
        raise
