"""Fixtures for quote feed tests.

Everything runs in-process: an in-memory SQLite store, the queue transport,
the static rate table and a seeded generator.
"""

import pytest

from stockfeed.market.currency import CurrencyConverter
from stockfeed.market.generator import QuoteGenerator
from stockfeed.market.rates import StaticRateSource
from stockfeed.market.stock_configs import StockConfig
from stockfeed.market.store import SqliteQuoteStore
from stockfeed.market.transport import QueueTransport

TEST_CONFIGS = {
    "AAPL": StockConfig(base_price=175.0, volatility=0.002, trend=0.0001),
    "MSFT": StockConfig(base_price=320.0, volatility=0.0015, trend=0.00012),
}

TEST_RATES = {"USD": 1.0, "EUR": 0.9, "GBP": 0.8}


@pytest.fixture
def store():
    store = SqliteQuoteStore(":memory:")
    yield store
    store.close()


@pytest.fixture
def generator():
    return QuoteGenerator(TEST_CONFIGS, seed=42)


@pytest.fixture
def converter():
    return CurrencyConverter(StaticRateSource(TEST_RATES))


@pytest.fixture
def transport():
    return QueueTransport()
