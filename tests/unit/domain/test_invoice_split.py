"""Unit tests for split invoice rules"""

import pytest
from datetime import date
from decimal import Decimal

from src.app.use_cases.invoicing.dtos import SplitAllocationDTO
from src.domain.errors import (
    InvalidSplitStateError,
    ParentInvoiceSplitError,
    SplitAmountMismatchError,
    ValidationError,
)
from src.domain.invoice import InvoiceKind, InvoiceStatus
from src.domain.invoice_split import ensure_payable, ensure_splittable, plan_split


class TestPlanSplit:
    def test_children_partition_parent_amount(self, make_invoice, converter):
        parent = make_invoice()
        allocations = [
            SplitAllocationDTO(amount=Decimal("600.00")),
            SplitAllocationDTO(amount=Decimal("400.00"), due_date=date(2026, 3, 31)),
        ]

        children = plan_split(parent, allocations, converter)

        assert [c.invoice_amount for c in children] == [Decimal("600.00"), Decimal("400.00")]
        assert sum(c.invoice_amount for c in children) == parent.invoice_amount
        assert [c.invoice_number for c in children] == ["07012026-M-1", "07012026-M-2"]
        assert [c.split_sequence for c in children] == [1, 2]
        assert all(c.kind == InvoiceKind.SPLIT_CHILD for c in children)
        assert all(c.parent_invoice_id == parent.id for c in children)
        assert all(c.status == InvoiceStatus.NEW for c in children)
        assert children[0].due_date == parent.due_date
        assert children[1].due_date == date(2026, 3, 31)
        assert children[0].description == parent.description

    def test_children_inherit_frozen_rate_and_apportion_mirror(self, make_invoice, converter):
        parent = make_invoice(
            matter_currency="USD",
            invoice_currency="INR",
            currency_conversion_rate=Decimal("83.000000"),
            invoice_amount=Decimal("83000.00"),
            invoice_amount_in_matter_currency=Decimal("1000.00"),
        )
        allocations = [
            SplitAllocationDTO(amount=Decimal("27666.67")),
            SplitAllocationDTO(amount=Decimal("27666.67")),
            SplitAllocationDTO(amount=Decimal("27666.66")),
        ]

        children = plan_split(parent, allocations, converter)

        assert all(c.currency_conversion_rate == Decimal("83.000000") for c in children)
        mirrors = [c.invoice_amount_in_matter_currency for c in children]
        assert mirrors == [Decimal("333.33"), Decimal("333.33"), Decimal("333.34")]
        assert sum(mirrors) == Decimal("1000.00")

    def test_due_date_before_invoice_date_rejected(self, make_invoice, converter):
        parent = make_invoice()
        allocations = [
            SplitAllocationDTO(amount=Decimal("600.00")),
            SplitAllocationDTO(amount=Decimal("400.00"), due_date=date(2026, 1, 6)),
        ]

        with pytest.raises(ValidationError) as exc_info:
            plan_split(parent, allocations, converter)

        assert exc_info.value.code == "INVALID_DUE_DATE"
        assert exc_info.value.context["allocation"] == 2

    def test_due_date_on_invoice_date_accepted(self, make_invoice, converter):
        parent = make_invoice()
        allocations = [
            SplitAllocationDTO(amount=Decimal("600.00"), due_date=date(2026, 1, 7)),
            SplitAllocationDTO(amount=Decimal("400.00")),
        ]

        children = plan_split(parent, allocations, converter)

        assert children[0].due_date == date(2026, 1, 7)

    def test_amount_mismatch(self, make_invoice, converter):
        parent = make_invoice()
        allocations = [
            SplitAllocationDTO(amount=Decimal("500.00")),
            SplitAllocationDTO(amount=Decimal("400.00")),
        ]

        with pytest.raises(SplitAmountMismatchError) as exc_info:
            plan_split(parent, allocations, converter)

        assert exc_info.value.context["expected"] == Decimal("1000.00")
        assert exc_info.value.context["actual"] == Decimal("900.00")

    def test_single_allocation_rejected(self, make_invoice, converter):
        with pytest.raises(ValidationError) as exc_info:
            plan_split(make_invoice(), [SplitAllocationDTO(amount=Decimal("1000.00"))], converter)
        assert exc_info.value.code == "SPLIT_TOO_FEW_PARTS"

    def test_non_positive_allocation_rejected(self, make_invoice, converter):
        allocations = [
            SplitAllocationDTO(amount=Decimal("1000.00")),
            SplitAllocationDTO(amount=Decimal("0")),
        ]
        with pytest.raises(ValidationError) as exc_info:
            plan_split(make_invoice(), allocations, converter)
        assert exc_info.value.code == "INVALID_SPLIT_AMOUNT"


class TestGuards:
    def test_split_parent_is_not_payable(self, make_invoice):
        with pytest.raises(ParentInvoiceSplitError):
            ensure_payable(make_invoice(kind=InvoiceKind.SPLIT_PARENT))

    def test_split_child_is_payable(self, make_invoice):
        ensure_payable(make_invoice(kind=InvoiceKind.SPLIT_CHILD))

    def test_cannot_split_twice(self, make_invoice):
        with pytest.raises(InvalidSplitStateError):
            ensure_splittable(make_invoice(kind=InvoiceKind.SPLIT_PARENT), Decimal("0"))

    def test_cannot_split_a_child(self, make_invoice):
        with pytest.raises(InvalidSplitStateError):
            ensure_splittable(make_invoice(kind=InvoiceKind.SPLIT_CHILD), Decimal("0"))

    def test_cannot_split_with_payments(self, make_invoice):
        invoice = make_invoice(status=InvoiceStatus.PARTIALLY_PAID, amount_paid=Decimal("10.00"))
        with pytest.raises(InvalidSplitStateError) as exc_info:
            ensure_splittable(invoice, Decimal("10.00"))
        assert exc_info.value.code == "INVALID_SPLIT_STATE"
