import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.adapter.services.clock import FixedClock
from src.domain.currency import CurrencyConverter
from src.domain.invoice import Invoice, InvoiceKind, InvoiceStatus


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def converter():
    return CurrencyConverter()


@pytest.fixture
def clock():
    return FixedClock(date(2026, 1, 15))


@pytest.fixture
def make_invoice():
    """Factory for persisted-looking invoices"""

    def _make(**overrides):
        values = dict(
            id=1,
            client_id=12,
            matter_id=40,
            invoice_number="07012026-M",
            kind=InvoiceKind.STANDALONE,
            status=InvoiceStatus.NEW,
            invoice_date=date(2026, 1, 7),
            due_date=date(2026, 2, 6),
            invoice_amount=Decimal("1000.00"),
            amount_paid=Decimal("0.00"),
            matter_currency="INR",
            invoice_currency="INR",
            description="Professional fees - January",
            billing_location="mumbai",
            created_by=3,
        )
        values.update(overrides)
        return Invoice(**values)

    return _make
