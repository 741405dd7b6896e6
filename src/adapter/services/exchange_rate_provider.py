"""Exchange Rate Provider Implementations

Provides concrete rate sources for freezing conversion rates on invoices.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Optional
import httpx
from src.app.services.exchange_rate_provider import ExchangeRateProvider
from src.domain.errors import InfrastructureError

logger = logging.getLogger(__name__)


class ConfiguredExchangeRateProvider(ExchangeRateProvider):
    """
    Exchange rate provider backed by a static rate table

    Rates are keyed "FROM:TO" (e.g. "USD:INR"). The inverse of a configured
    pair is derived when only the opposite direction is present.
    """

    def __init__(self, rates: Optional[Dict[str, object]] = None):
        self.rates = {
            key.upper(): Decimal(str(value)) for key, value in (rates or {}).items()
        }

    async def get_rate(self, from_currency: str, to_currency: str) -> Decimal:
        """
        Look up a configured rate

        Raises:
            InfrastructureError: No rate configured for the pair
        """
        pair = f"{from_currency}:{to_currency}".upper()
        if pair in self.rates:
            return self.rates[pair]

        inverse = f"{to_currency}:{from_currency}".upper()
        if inverse in self.rates and self.rates[inverse] > 0:
            return Decimal("1") / self.rates[inverse]

        logger.warning(f"No exchange rate configured for {pair}")
        raise InfrastructureError(
            f"No exchange rate available for {from_currency} -> {to_currency}",
            code="EXCHANGE_RATE_UNAVAILABLE",
            from_currency=from_currency,
            to_currency=to_currency,
        )


class HttpExchangeRateProvider(ExchangeRateProvider):
    """
    Exchange rate provider that queries an HTTP rates API

    Sends GET {base_url}/latest?base=FROM&symbols=TO and expects a JSON body
    of the form {"rates": {"TO": <rate>}}.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize HTTP exchange rate provider

        Args:
            base_url: Rates API root URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport (e.g. MockTransport in tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def get_rate(self, from_currency: str, to_currency: str) -> Decimal:
        """
        Fetch the latest rate for a currency pair

        Raises:
            InfrastructureError: Request failed or the response has no usable rate
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(
                    f"{self.base_url}/latest",
                    params={"base": from_currency, "symbols": to_currency},
                    headers={"Accept": "application/json"},
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Exchange rate request {from_currency}->{to_currency} failed: {e}")
            raise InfrastructureError(
                "Exchange rate service unavailable",
                code="EXCHANGE_RATE_UNAVAILABLE",
                from_currency=from_currency,
                to_currency=to_currency,
                reason=str(e),
            ) from e

        try:
            rate = Decimal(str(response.json()["rates"][to_currency]))
        except (KeyError, TypeError, ValueError, InvalidOperation) as e:
            logger.error(
                f"Exchange rate response for {from_currency}->{to_currency} is malformed: {response.text}"
            )
            raise InfrastructureError(
                "Exchange rate service returned no rate",
                code="EXCHANGE_RATE_UNAVAILABLE",
                from_currency=from_currency,
                to_currency=to_currency,
            ) from e

        logger.info(f"Fetched exchange rate {from_currency}->{to_currency}: {rate}")
        return rate


def create_exchange_rate_provider(
    api_url: Optional[str] = None,
    rates: Optional[Dict[str, object]] = None,
    timeout: float = 10.0,
) -> ExchangeRateProvider:
    """
    Factory function to create the appropriate exchange rate provider

    Args:
        api_url: Optional rates API URL. If provided, rates are fetched over
                 HTTP. Otherwise the static table is used.
        rates: Static "FROM:TO" rate table
        timeout: HTTP timeout in seconds

    Returns:
        Configured ExchangeRateProvider
    """
    if api_url:
        return HttpExchangeRateProvider(api_url, timeout=timeout)
    return ConfiguredExchangeRateProvider(rates)
