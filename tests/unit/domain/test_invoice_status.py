"""Unit tests for invoice status resolution"""

import pytest
from datetime import date
from decimal import Decimal

from src.domain.invoice import InvoiceKind, InvoiceStatus
from src.domain.invoice_status import (
    DisplayStatus,
    derive_parent_status,
    display_status,
    resolve_status,
)

TODAY = date(2026, 1, 15)


class TestResolveStatus:
    @pytest.mark.parametrize(
        "total_paid, expected",
        [
            (Decimal("0"), InvoiceStatus.NEW),
            (Decimal("0.01"), InvoiceStatus.PARTIALLY_PAID),
            (Decimal("999.99"), InvoiceStatus.PARTIALLY_PAID),
            (Decimal("1000.00"), InvoiceStatus.PAID),
            (Decimal("1200.00"), InvoiceStatus.PAID),
        ],
    )
    def test_status_follows_total_paid(self, total_paid, expected):
        assert resolve_status(total_paid, Decimal("1000.00")) == expected

    def test_paid_is_terminal(self):
        assert resolve_status(Decimal("0"), Decimal("1000.00"), InvoiceStatus.PAID) == InvoiceStatus.PAID


class TestDisplayStatus:
    def test_overdue_overlay_for_unpaid_invoice_past_due(self, make_invoice):
        invoice = make_invoice(due_date=date(2026, 1, 10), status=InvoiceStatus.PARTIALLY_PAID)

        assert display_status(invoice, TODAY) == DisplayStatus.OVERDUE
        # Stored status is untouched
        assert invoice.status == InvoiceStatus.PARTIALLY_PAID

    def test_due_today_is_not_overdue(self, make_invoice):
        invoice = make_invoice(due_date=TODAY)
        assert display_status(invoice, TODAY) == DisplayStatus.NEW

    def test_paid_invoice_is_never_overdue(self, make_invoice):
        invoice = make_invoice(due_date=date(2025, 12, 1), status=InvoiceStatus.PAID)
        assert display_status(invoice, TODAY) == DisplayStatus.PAID


class TestDeriveParentStatus:
    def _children(self, make_invoice, *specs):
        return [
            make_invoice(
                id=10 + index,
                kind=InvoiceKind.SPLIT_CHILD,
                status=status,
                due_date=due_date,
            )
            for index, (status, due_date) in enumerate(specs)
        ]

    def test_all_children_paid(self, make_invoice):
        children = self._children(
            make_invoice,
            (InvoiceStatus.PAID, date(2026, 2, 1)),
            (InvoiceStatus.PAID, date(2026, 1, 1)),
        )
        assert derive_parent_status(children, TODAY) == DisplayStatus.PAID

    def test_some_child_paid(self, make_invoice):
        children = self._children(
            make_invoice,
            (InvoiceStatus.PAID, date(2026, 2, 1)),
            (InvoiceStatus.NEW, date(2026, 1, 1)),
        )
        assert derive_parent_status(children, TODAY) == DisplayStatus.PARTIALLY_PAID

    def test_unpaid_child_overdue(self, make_invoice):
        children = self._children(
            make_invoice,
            (InvoiceStatus.NEW, date(2026, 2, 1)),
            (InvoiceStatus.NEW, date(2026, 1, 1)),
        )
        assert derive_parent_status(children, TODAY) == DisplayStatus.OVERDUE

    def test_no_payments_not_due(self, make_invoice):
        children = self._children(
            make_invoice,
            (InvoiceStatus.NEW, date(2026, 2, 1)),
            (InvoiceStatus.NEW, date(2026, 3, 1)),
        )
        assert derive_parent_status(children, TODAY) == DisplayStatus.NEW
