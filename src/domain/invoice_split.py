"""Split Invoice Rules

Partitions a standalone invoice into independently payable children and
guards the split hierarchy:

- STANDALONE invoices may be paid and may be split (while unpaid)
- SPLIT_PARENT invoices may be neither paid nor split again
- SPLIT_CHILD invoices may be paid but not split further
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional, Protocol, Sequence
from src.domain.currency import CurrencyConverter, to_decimal
from src.domain.errors import (
    InvalidSplitStateError,
    ParentInvoiceSplitError,
    SplitAmountMismatchError,
    ValidationError,
)
from src.domain.invoice import Invoice, InvoiceKind, InvoiceStatus

MIN_SPLIT_PARTS = 2


class SplitAllocation(Protocol):
    amount: Decimal
    due_date: Optional[date]
    description: Optional[str]


def ensure_payable(invoice: Invoice) -> None:
    """Raise ParentInvoiceSplitError for a split parent"""
    if invoice.kind == InvoiceKind.SPLIT_PARENT:
        raise ParentInvoiceSplitError(
            f"Cannot record payments on split invoice {invoice.invoice_number}. "
            f"Record payments on the individual split invoices instead.",
            invoice_id=invoice.id,
            invoice_number=invoice.invoice_number,
        )


def ensure_splittable(invoice: Invoice, total_paid: Decimal) -> None:
    """
    Check the parent can be split

    Raises:
        InvalidSplitStateError: already split, a split child, paid or partially paid
    """
    if invoice.kind == InvoiceKind.SPLIT_PARENT:
        raise InvalidSplitStateError(
            f"Invoice {invoice.invoice_number} has already been split",
            invoice_id=invoice.id,
            kind=invoice.kind.value,
        )
    if invoice.kind == InvoiceKind.SPLIT_CHILD:
        raise InvalidSplitStateError(
            f"Invoice {invoice.invoice_number} is itself a split invoice and cannot be split again",
            invoice_id=invoice.id,
            kind=invoice.kind.value,
        )
    if total_paid > 0 or invoice.status != InvoiceStatus.NEW:
        raise InvalidSplitStateError(
            f"Cannot split invoice {invoice.invoice_number} with recorded payments",
            invoice_id=invoice.id,
            status=invoice.status.value,
            amount_paid=total_paid,
        )


def child_invoice_number(parent_number: str, sequence: int) -> str:
    return f"{parent_number}-{sequence}"


def plan_split(
    parent: Invoice,
    allocations: Sequence[SplitAllocation],
    converter: CurrencyConverter,
) -> List[Invoice]:
    """
    Build (unsaved) child invoices for a split

    Children inherit client, matter, currencies and the frozen conversion
    rate. Matter-currency mirrors are apportioned by amount, with the
    rounding remainder on the last child, so they also add up to the
    parent's mirror exactly.

    Raises:
        ValidationError: fewer than two parts, bad amounts or a due date before the invoice date
        SplitAmountMismatchError: amounts do not add up to the parent amount
    """
    if len(allocations) < MIN_SPLIT_PARTS:
        raise ValidationError(
            f"A split needs at least {MIN_SPLIT_PARTS} allocations",
            code="SPLIT_TOO_FEW_PARTS",
            invoice_id=parent.id,
            parts=len(allocations),
        )

    amounts = []
    for index, allocation in enumerate(allocations, start=1):
        amount = to_decimal(allocation.amount)
        if not amount.is_finite() or amount <= 0:
            raise ValidationError(
                f"Split allocation {index} must be greater than 0",
                code="INVALID_SPLIT_AMOUNT",
                invoice_id=parent.id,
                allocation=index,
                amount=amount,
            )
        if not converter.is_quantized(amount, parent.invoice_currency):
            raise ValidationError(
                f"Split allocation {index} has more decimals than {parent.invoice_currency} allows",
                code="INVALID_SPLIT_AMOUNT",
                invoice_id=parent.id,
                allocation=index,
                amount=amount,
            )
        if allocation.due_date and allocation.due_date < parent.invoice_date:
            raise ValidationError(
                f"Split allocation {index} is due before invoice date {parent.invoice_date}",
                code="INVALID_DUE_DATE",
                invoice_id=parent.id,
                allocation=index,
                invoice_date=parent.invoice_date,
                due_date=allocation.due_date,
            )
        amounts.append(amount)

    total = sum(amounts, Decimal("0"))
    if total != parent.invoice_amount:
        raise SplitAmountMismatchError(
            f"Split amounts total {total} but invoice {parent.invoice_number} "
            f"is for {parent.invoice_amount}",
            invoice_id=parent.id,
            expected=parent.invoice_amount,
            actual=total,
        )

    mirrors = _apportion_mirror(parent, amounts, converter)
    now = datetime.utcnow()

    children = []
    for sequence, (allocation, amount, mirror) in enumerate(
        zip(allocations, amounts, mirrors), start=1
    ):
        children.append(
            Invoice(
                parent_invoice_id=parent.id,
                client_id=parent.client_id,
                matter_id=parent.matter_id,
                invoice_number=child_invoice_number(parent.invoice_number, sequence),
                kind=InvoiceKind.SPLIT_CHILD,
                split_sequence=sequence,
                status=InvoiceStatus.NEW,
                invoice_date=parent.invoice_date,
                due_date=allocation.due_date or parent.due_date,
                invoice_amount=amount,
                amount_paid=Decimal("0"),
                matter_currency=parent.matter_currency,
                invoice_currency=parent.invoice_currency,
                currency_conversion_rate=parent.currency_conversion_rate,
                invoice_amount_in_matter_currency=mirror,
                description=allocation.description or parent.description,
                billing_location=parent.billing_location,
                created_by=parent.created_by,
                created_at=now,
                updated_at=now,
            )
        )
    return children


def _apportion_mirror(
    parent: Invoice, amounts: List[Decimal], converter: CurrencyConverter
) -> List[Optional[Decimal]]:
    parent_mirror = parent.invoice_amount_in_matter_currency
    if parent_mirror is None:
        return [None] * len(amounts)

    mirrors = [
        converter.quantize(parent_mirror * amount / parent.invoice_amount, parent.matter_currency)
        for amount in amounts[:-1]
    ]
    mirrors.append(parent_mirror - sum(mirrors, Decimal("0")))
    return mirrors
