"""Exchange rate sources: a fixed table and an HTTP client."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .errors import ConversionUnavailableError
from .interface import RateSource
from .models import BASE_CURRENCY

logger = logging.getLogger(__name__)

# Approximate units per 1 USD; used when no live rate source is configured
DEFAULT_RATES: dict[str, float] = {
    "USD": 1.0,
    "EUR": 0.92,
    "GBP": 0.79,
    "JPY": 151.0,
    "CHF": 0.90,
    "CAD": 1.36,
    "AUD": 1.52,
    "NZD": 1.66,
    "CNY": 7.23,
    "HKD": 7.82,
    "SGD": 1.35,
    "INR": 83.3,
    "KRW": 1350.0,
    "SEK": 10.6,
    "NOK": 10.7,
    "DKK": 6.87,
    "PLN": 3.98,
    "MXN": 16.8,
    "BRL": 5.05,
    "ZAR": 18.6,
}


class StaticRateSource(RateSource):
    """RateSource backed by a fixed in-memory table."""

    def __init__(self, rates: dict[str, float] | None = None) -> None:
        self._rates = dict(rates if rates is not None else DEFAULT_RATES)

    async def get_rate(self, code: str) -> float:
        rate = self._rates.get(code)
        if rate is None:
            raise ConversionUnavailableError(code, f"No static rate for {code}")
        return rate


class HttpRateSource(RateSource):
    """RateSource backed by a JSON exchange-rate API.

    Issues ``GET {url}`` and expects a body with a ``rates`` object keyed by
    currency code, expressed relative to the base currency, e.g.
    ``{"base_code": "USD", "rates": {"EUR": 0.92, ...}}``. Rates are fetched
    on every call; there is no cache, so a stale rate is never served.
    """

    def __init__(self, url: str, timeout: float = 5.0, client: httpx.AsyncClient | None = None) -> None:
        self._url = url
        self._timeout = timeout
        self._client = client

    async def get_rate(self, code: str) -> float:
        if code == BASE_CURRENCY:
            return 1.0

        try:
            payload = await self._fetch_rates()
        except Exception as e:
            raise ConversionUnavailableError(code, f"Rate source unavailable: {e}") from e

        try:
            return float(payload["rates"][code])
        except (KeyError, TypeError, ValueError) as e:
            raise ConversionUnavailableError(code, f"No rate for {code} in response") from e

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        logger.info("HTTP rate source closed")

    # --- Internal ---

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                headers={"Accept": "application/json"},
            )
        return self._client

    async def _fetch_rates(self) -> dict[str, Any]:
        client = await self._get_client()
        response = await client.get(self._url)
        response.raise_for_status()
        return response.json()
