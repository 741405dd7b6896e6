import pytest_asyncio
from datetime import date
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from src.adapter.services.clock import FixedClock
from src.adapter.services.database import create_database_engine
from src.adapter.services.exchange_rate_provider import ConfiguredExchangeRateProvider
from src.depends import (
    build_invoice_service,
    get_clock,
    get_exchange_rate_provider,
    get_session,
)
from src.domain.currency import CurrencyConverter

TODAY = date(2026, 1, 15)
TEST_RATES = {"USD:INR": "83.0", "EUR:INR": "90.5", "USD:JPY": "149.505"}


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """Create test database engine on a throwaway SQLite file"""
    test_db_url = f"sqlite+aiosqlite:///{tmp_path / 'billing_test.db'}"

    engine = create_database_engine(test_db_url)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    """Session factory for tests that need independent connections"""
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Create a new database session for each test"""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def clock():
    return FixedClock(TODAY)


@pytest_asyncio.fixture
async def invoice_service(db_session, clock):
    """Invoice aggregate wired onto the test session"""
    return build_invoice_service(
        db_session,
        clock,
        ConfiguredExchangeRateProvider(TEST_RATES),
        CurrencyConverter(),
    )


@pytest_asyncio.fixture
async def client(db_session, clock):
    """Create test client with database session override"""
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_exchange_rate_provider] = (
        lambda: ConfiguredExchangeRateProvider(TEST_RATES)
    )

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
