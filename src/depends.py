from decimal import Decimal
from fastapi import Depends
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.repositories import (
    SqlAlchemyInvoiceRepository,
    SqlAlchemyPartnerShareRepository,
    SqlAlchemyPaymentRepository,
)
from src.adapter.services.clock import SystemClock
from src.adapter.services.database import create_database_engine
from src.adapter.services.exchange_rate_provider import create_exchange_rate_provider
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.clock import Clock
from src.app.services.exchange_rate_provider import ExchangeRateProvider
from src.app.use_cases.invoicing.aggregate import InvoiceAggregateService
from src.domain.currency import CurrencyConverter

engine = create_database_engine(ApplicationConfig.DB_URI)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


def get_clock() -> Clock:
    return SystemClock()


def get_exchange_rate_provider() -> ExchangeRateProvider:
    return create_exchange_rate_provider(
        api_url=ApplicationConfig.EXCHANGE_RATE_API_URL,
        rates=ApplicationConfig.EXCHANGE_RATES,
        timeout=ApplicationConfig.EXCHANGE_RATE_TIMEOUT,
    )


def get_currency_converter() -> CurrencyConverter:
    return CurrencyConverter(
        supported_currencies=ApplicationConfig.SUPPORTED_CURRENCIES,
        zero_decimal_currencies=ApplicationConfig.ZERO_DECIMAL_CURRENCIES,
    )


def build_invoice_service(
    session: AsyncSession,
    clock: Clock,
    rate_provider: ExchangeRateProvider,
    converter: CurrencyConverter,
) -> InvoiceAggregateService:
    """Wire the invoice aggregate onto one session / unit of work"""
    return InvoiceAggregateService(
        uow=SqlAlchemyUnitOfWork(session),
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        payment_repo=SqlAlchemyPaymentRepository(session),
        share_repo=SqlAlchemyPartnerShareRepository(session),
        converter=converter,
        rate_provider=rate_provider,
        clock=clock,
        office_codes=ApplicationConfig.OFFICE_CODES,
        default_office_code=ApplicationConfig.DEFAULT_OFFICE_CODE,
        share_tolerance=Decimal(str(ApplicationConfig.PARTNER_SHARE_TOLERANCE)),
    )


async def get_invoice_service(
    session: AsyncSession = Depends(get_session),
    clock: Clock = Depends(get_clock),
    rate_provider: ExchangeRateProvider = Depends(get_exchange_rate_provider),
    converter: CurrencyConverter = Depends(get_currency_converter),
) -> InvoiceAggregateService:
    return build_invoice_service(session, clock, rate_provider, converter)
