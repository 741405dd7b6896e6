from .unit_of_work import SqlAlchemyUnitOfWork
from .clock import SystemClock, FixedClock
from .database import create_database_engine
from .exchange_rate_provider import (
    ConfiguredExchangeRateProvider,
    HttpExchangeRateProvider,
    create_exchange_rate_provider,
)

__all__ = [
    "SqlAlchemyUnitOfWork",
    "SystemClock",
    "FixedClock",
    "create_database_engine",
    "ConfiguredExchangeRateProvider",
    "HttpExchangeRateProvider",
    "create_exchange_rate_provider",
]
