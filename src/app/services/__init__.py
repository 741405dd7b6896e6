from .unit_of_work import UnitOfWork
from .clock import Clock
from .exchange_rate_provider import ExchangeRateProvider

__all__ = [
    "UnitOfWork",
    "Clock",
    "ExchangeRateProvider",
]
