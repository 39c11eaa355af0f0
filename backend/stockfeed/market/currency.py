"""Currency validation and conversion of quotes out of the base currency."""

from __future__ import annotations

import dataclasses
import logging

from .errors import InvalidCurrencyError
from .interface import RateSource
from .models import BASE_CURRENCY, Quote

logger = logging.getLogger(__name__)

# ISO 4217 codes accepted by SetCurrency. Validation never touches the network;
# whether a rate is actually available is the rate source's concern.
SUPPORTED_CURRENCIES: frozenset[str] = frozenset(
    {
        "AED", "ARS", "AUD", "BGN", "BRL", "CAD", "CHF", "CLP", "CNY", "COP",
        "CZK", "DKK", "EGP", "EUR", "GBP", "HKD", "HUF", "IDR", "ILS", "INR",
        "ISK", "JPY", "KRW", "KWD", "MXN", "MYR", "NGN", "NOK", "NZD", "PEN",
        "PHP", "PKR", "PLN", "QAR", "RON", "SAR", "SEK", "SGD", "THB", "TRY",
        "TWD", "UAH", "USD", "VND", "ZAR",
    }
)


class CurrencyConverter:
    """Converts base-currency amounts using a pluggable RateSource."""

    def __init__(self, rate_source: RateSource) -> None:
        self._rates = rate_source

    @staticmethod
    def is_valid_currency_code(code: str | None) -> bool:
        return code in SUPPORTED_CURRENCIES

    async def convert(self, amount: float, code: str) -> float:
        """Convert ``amount`` from the base currency into ``code``.

        Raises InvalidCurrencyError for unrecognized codes and
        ConversionUnavailableError if the rate source cannot supply a rate.
        """
        if not self.is_valid_currency_code(code):
            raise InvalidCurrencyError(code)
        if code == BASE_CURRENCY:
            return amount
        rate = await self._rates.get_rate(code)
        return amount * rate

    async def convert_quote(self, quote: Quote, code: str) -> Quote:
        """Best-effort conversion of a base-currency quote.

        On any conversion failure the original quote is returned unchanged
        and the failure is logged; callers are never interrupted.
        """
        if code == quote.currency:
            return quote

        try:
            price = await self.convert(quote.price, code)
        except Exception:
            logger.exception(
                "Currency conversion of %s to %s failed, using %s price",
                quote.symbol,
                code,
                quote.currency,
            )
            return quote

        logger.debug(
            "Converted %s from %s %.2f to %s %.2f", quote.symbol, quote.currency, quote.price, code, price
        )
        return dataclasses.replace(quote, price=price, currency=code)

    async def close(self) -> None:
        await self._rates.close()
