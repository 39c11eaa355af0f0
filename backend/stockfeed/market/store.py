"""SQLite-backed persistence for subscriptions and price history."""

from __future__ import annotations

import logging
import sqlite3
from threading import Lock

from .errors import PersistenceError
from .interface import QuoteStore
from .models import PricePoint, Quote

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS subscriptions (
    symbol TEXT PRIMARY KEY
);
CREATE TABLE IF NOT EXISTS price_history (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    symbol TEXT NOT NULL,
    price REAL NOT NULL,
    timestamp REAL NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_price_history_symbol ON price_history (symbol, id);
"""


class SqliteQuoteStore(QuoteStore):
    """QuoteStore on a single SQLite connection.

    Calls arrive from worker threads (asyncio.to_thread), so the connection
    is opened with check_same_thread=False and serialized by a lock.
    """

    def __init__(self, path: str = "stocktracker.db") -> None:
        self._path = path
        self._lock = Lock()
        self._conn: sqlite3.Connection | None = None
        try:
            self._conn = sqlite3.connect(path, check_same_thread=False)
            self._conn.executescript(_SCHEMA)
            self._conn.commit()
        except sqlite3.Error as e:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
            raise PersistenceError(path, f"Cannot open database {path}: {e}") from e
        logger.info("Opened quote store at %s", path)

    def get_subscriptions(self) -> set[str]:
        rows = self._execute("SELECT symbol FROM subscriptions")
        return {row[0] for row in rows}

    def save_subscription(self, symbol: str) -> None:
        self._execute("INSERT OR IGNORE INTO subscriptions (symbol) VALUES (?)", (symbol,), commit=True)

    def remove_subscription(self, symbol: str) -> None:
        self._execute("DELETE FROM subscriptions WHERE symbol = ?", (symbol,), commit=True)

    def save_price(self, quote: Quote) -> None:
        self._execute(
            "INSERT INTO price_history (symbol, price, timestamp) VALUES (?, ?, ?)",
            (quote.symbol, quote.price, quote.timestamp),
            commit=True,
        )

    def get_price_history(self, symbol: str) -> list[PricePoint]:
        rows = self._execute(
            "SELECT price, timestamp FROM price_history WHERE symbol = ? ORDER BY id",
            (symbol,),
        )
        return [PricePoint(price=price, timestamp=ts) for price, ts in rows]

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
                logger.info("Closed quote store at %s", self._path)

    # --- Internal ---

    def _execute(self, sql: str, params: tuple = (), commit: bool = False) -> list[tuple]:
        with self._lock:
            if self._conn is None:
                raise PersistenceError(self._path, "Quote store is closed")
            try:
                rows = self._conn.execute(sql, params).fetchall()
                if commit:
                    self._conn.commit()
                return rows
            except sqlite3.Error as e:
                raise PersistenceError(self._path, f"Database error: {e}") from e
