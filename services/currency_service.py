"""Conversion of transaction amounts into the VND reference currency.

Rates come from a public exchange rate API and are kept in an injectable
RateCache with an explicit TTL. If the API cannot be reached and a fallback
rate is configured for the currency, the fallback is used instead.
"""
import logging
import time
from collections.abc import Callable

import httpx

from utils.constants import (
    EXCHANGE_RATE_TIMEOUT_SECONDS,
    EXCHANGE_RATE_TTL_SECONDS,
    EXCHANGE_RATE_URL,
    REFERENCE_CURRENCY,
    SUPPORTED_CURRENCIES,
)

logger = logging.getLogger(__name__)


class CurrencyConversionError(Exception):
    """Raised when an amount cannot be converted to the reference currency."""


def is_supported_currency(currency: str) -> bool:
    return currency in SUPPORTED_CURRENCIES


class RateCache:
    """Per-base-currency rate tables that expire after ttl_seconds."""

    def __init__(
        self,
        ttl_seconds: float = EXCHANGE_RATE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[float, dict[str, float]]] = {}

    def get(self, base: str) -> dict[str, float] | None:
        entry = self._entries.get(base)
        if entry is None:
            return None
        stored_at, rates = entry
        if self._clock() - stored_at >= self.ttl_seconds:
            del self._entries[base]
            return None
        return rates

    def put(self, base: str, rates: dict[str, float]):
        self._entries[base] = (self._clock(), dict(rates))

    def clear(self):
        self._entries.clear()


class ExchangeRateClient:
    """Fetches `{base_url}/{base}` and returns its `rates` mapping."""

    def __init__(
        self,
        base_url: str = EXCHANGE_RATE_URL,
        timeout: float = EXCHANGE_RATE_TIMEOUT_SECONDS,
        http_client: httpx.Client | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._http = http_client or httpx.Client(timeout=timeout)

    def fetch_rates(self, base: str) -> dict[str, float]:
        url = f"{self._base_url}/{base}"
        try:
            response = self._http.get(url)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise CurrencyConversionError(f"Failed to fetch exchange rates for {base}") from e

        rates = payload.get("rates") if isinstance(payload, dict) else None
        if not isinstance(rates, dict):
            raise CurrencyConversionError(f"Exchange rate response for {base} has no rates")
        return rates

    def close(self):
        self._http.close()


class CurrencyService:
    def __init__(
        self,
        client: ExchangeRateClient,
        cache: RateCache | None = None,
        fallback_rates: dict[str, float] | None = None,
    ):
        self._client = client
        self._cache = cache or RateCache()
        self._fallback = dict(fallback_rates or {})

    def get_rate(self, currency: str) -> float:
        """Return how many VND one unit of currency is worth."""
        if currency == REFERENCE_CURRENCY:
            return 1.0
        if not is_supported_currency(currency):
            raise CurrencyConversionError(f"Unsupported currency: {currency}")

        rates = self._cache.get(currency)
        if rates is None:
            try:
                rates = self._client.fetch_rates(currency)
            except CurrencyConversionError:
                if currency in self._fallback:
                    logger.warning(
                        "Exchange rate API unavailable; using fallback rate for %s", currency
                    )
                    return self._fallback[currency]
                raise
            self._cache.put(currency, rates)

        rate = rates.get(REFERENCE_CURRENCY)
        if rate is None:
            raise CurrencyConversionError(f"No {REFERENCE_CURRENCY} rate for {currency}")
        return float(rate)

    def convert_to_vnd(self, amount: float, currency: str) -> float:
        if currency == REFERENCE_CURRENCY:
            return amount
        return round(amount * self.get_rate(currency))

    def clear_cache(self):
        """Forget cached rates so the next conversion fetches fresh ones."""
        self._cache.clear()
        logger.info("Cleared cached exchange rates")
