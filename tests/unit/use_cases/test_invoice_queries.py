"""Unit tests for the read-side invoicing use cases"""

import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.invoicing.get_invoice import GetInvoice, GetInvoiceBalance
from src.app.use_cases.invoicing.get_invoice_breakdown import GetInvoiceBreakdown
from src.app.use_cases.invoicing.list_invoice_payments import ListInvoicePayments
from src.app.use_cases.invoicing.reconcile_payments import ReconcileInvoicePayments
from src.domain.errors import InvoiceNotFoundError
from src.domain.invoice import InvoiceKind, InvoiceStatus
from src.domain.payment import Payment, PaymentMethod


@pytest.fixture
def mock_invoice_repo():
    return MagicMock()


@pytest.fixture
def mock_payment_repo():
    return MagicMock()


@pytest.mark.asyncio
class TestGetInvoiceBreakdown:

    async def test_converted_invoice(self, mock_invoice_repo, make_invoice):
        mock_invoice_repo.get_by_id = AsyncMock(
            return_value=make_invoice(
                matter_currency="USD",
                invoice_currency="INR",
                currency_conversion_rate=Decimal("83.000000"),
                invoice_amount=Decimal("83000.00"),
                invoice_amount_in_matter_currency=Decimal("1000.00"),
            )
        )
        use_case = GetInvoiceBreakdown(mock_invoice_repo)

        first = await use_case.execute(1)
        second = await use_case.execute(1)

        assert first.original_amount == Decimal("1000.00")
        assert first.converted_amount == Decimal("83000.00")
        assert first.conversion_rate == Decimal("83.000000")
        assert first.is_converted is True
        assert first == second

    async def test_single_currency_invoice(self, mock_invoice_repo, make_invoice):
        mock_invoice_repo.get_by_id = AsyncMock(return_value=make_invoice())

        result = await GetInvoiceBreakdown(mock_invoice_repo).execute(1)

        assert result.original_amount == result.converted_amount == Decimal("1000.00")
        assert result.conversion_rate is None
        assert result.is_converted is False

    async def test_not_found(self, mock_invoice_repo):
        mock_invoice_repo.get_by_id = AsyncMock(return_value=None)

        with pytest.raises(InvoiceNotFoundError):
            await GetInvoiceBreakdown(mock_invoice_repo).execute(404)


@pytest.mark.asyncio
class TestGetInvoice:

    async def test_overdue_overlay(self, mock_invoice_repo, clock, make_invoice):
        mock_invoice_repo.get_by_id = AsyncMock(return_value=make_invoice(due_date=date(2026, 1, 10)))

        result = await GetInvoice(mock_invoice_repo, clock).execute(1)

        assert result.status == "new"
        assert result.display_status == "overdue"

    async def test_split_parent_reports_children(self, mock_invoice_repo, clock, make_invoice):
        parent = make_invoice(kind=InvoiceKind.SPLIT_PARENT)
        mock_invoice_repo.get_by_id = AsyncMock(return_value=parent)
        mock_invoice_repo.get_children = AsyncMock(
            return_value=[
                make_invoice(id=10, kind=InvoiceKind.SPLIT_CHILD, status=InvoiceStatus.PAID,
                             invoice_amount=Decimal("600.00"), amount_paid=Decimal("600.00")),
                make_invoice(id=11, kind=InvoiceKind.SPLIT_CHILD,
                             invoice_amount=Decimal("400.00")),
            ]
        )

        result = await GetInvoice(mock_invoice_repo, clock).execute(1)

        assert result.is_split is True
        assert result.amount_paid == Decimal("600.00")
        assert result.remaining == Decimal("400.00")
        assert result.display_status == "partially_paid"


@pytest.mark.asyncio
class TestGetInvoiceBalance:

    async def test_split_parent_sums_children_ledgers(
        self, mock_invoice_repo, mock_payment_repo, make_invoice
    ):
        mock_invoice_repo.get_by_id = AsyncMock(return_value=make_invoice(kind=InvoiceKind.SPLIT_PARENT))
        mock_invoice_repo.get_children = AsyncMock(
            return_value=[make_invoice(id=10), make_invoice(id=11)]
        )
        mock_payment_repo.get_total_paid = AsyncMock(side_effect=[Decimal("250.00"), Decimal("100.00")])

        result = await GetInvoiceBalance(mock_invoice_repo, mock_payment_repo).execute(1)

        assert result.total_paid == Decimal("350.00")
        assert result.remaining == Decimal("650.00")


@pytest.mark.asyncio
class TestListInvoicePayments:

    async def test_split_parent_includes_flagged_child_payments(
        self, mock_invoice_repo, mock_payment_repo, make_invoice
    ):
        mock_invoice_repo.get_by_id = AsyncMock(return_value=make_invoice(kind=InvoiceKind.SPLIT_PARENT))
        mock_invoice_repo.get_children = AsyncMock(
            return_value=[make_invoice(id=10, invoice_number="07012026-M-1")]
        )
        mock_payment_repo.list_by_invoice_ids = AsyncMock(
            return_value=[
                Payment(id=5, invoice_id=10, payment_date=date(2026, 1, 20), amount=Decimal("100.00"),
                        payment_method=PaymentMethod.UPI, recorded_by=3),
            ]
        )

        result = await ListInvoicePayments(mock_invoice_repo, mock_payment_repo).execute(1)

        mock_payment_repo.list_by_invoice_ids.assert_called_once_with([1, 10])
        assert result[0].is_split_payment is True
        assert result[0].invoice_number == "07012026-M-1"


@pytest.mark.asyncio
class TestReconcileInvoicePayments:

    async def test_reports_drift_without_fixing(
        self, mock_invoice_repo, mock_payment_repo, make_invoice
    ):
        balanced = make_invoice(id=1, amount_paid=Decimal("400.00"))
        drifted = make_invoice(id=2, invoice_number="07012026-M-A", amount_paid=Decimal("500.00"))
        untouched = make_invoice(id=3, invoice_number="07012026-M-B")
        mock_invoice_repo.get_all = AsyncMock(return_value=[balanced, drifted, untouched])
        mock_payment_repo.get_totals_by_invoice = AsyncMock(
            return_value={1: Decimal("400.00"), 2: Decimal("450.00")}
        )

        result = await ReconcileInvoicePayments(mock_invoice_repo, mock_payment_repo).execute()

        assert result.total_invoices_checked == 3
        assert result.discrepancies_found == 1
        assert result.discrepancies[0].invoice_id == 2
        assert result.discrepancies[0].discrepancy == Decimal("50.00")
        assert drifted.amount_paid == Decimal("500.00")
