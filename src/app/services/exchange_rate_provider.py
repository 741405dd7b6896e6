"""Exchange Rate Provider Interface

Supplies the matter -> invoice currency rate that gets frozen onto an
invoice at creation. Only consulted when the caller does not pass a rate.
"""

from abc import ABC, abstractmethod
from decimal import Decimal


class ExchangeRateProvider(ABC):

    @abstractmethod
    async def get_rate(self, from_currency: str, to_currency: str) -> Decimal:
        """
        Look up the current rate

        Args:
            from_currency: Source currency code (matter currency)
            to_currency: Target currency code (invoice currency)

        Returns:
            Rate such that amount_in_target = amount_in_source * rate

        Raises:
            InfrastructureError: The rate source is unreachable or has no rate
        """
        pass
