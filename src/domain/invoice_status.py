"""Invoice Status Resolution

Derives invoice status from the payment ledger total and overlays the
read-time "overdue" state.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional, Sequence
from src.domain.invoice import Invoice, InvoiceStatus


class DisplayStatus(str, Enum):
    """Status shown to callers: stored status plus the overdue overlay"""
    NEW = "new"
    PARTIALLY_PAID = "partially_paid"
    PAID = "paid"
    OVERDUE = "overdue"


def resolve_status(
    total_paid: Decimal,
    invoice_amount: Decimal,
    current: Optional[InvoiceStatus] = None,
) -> InvoiceStatus:
    """
    Resolve the stored status for a ledger total

    paid is terminal: once ``current`` is PAID the result stays PAID.
    """
    if current == InvoiceStatus.PAID:
        return InvoiceStatus.PAID
    if total_paid >= invoice_amount:
        return InvoiceStatus.PAID
    if total_paid > 0:
        return InvoiceStatus.PARTIALLY_PAID
    return InvoiceStatus.NEW


def is_overdue(due_date: date, status: InvoiceStatus, today: date) -> bool:
    return status != InvoiceStatus.PAID and due_date < today


def display_status(invoice: Invoice, today: date) -> DisplayStatus:
    """Stored status with overdue overlaid; never mutates the invoice"""
    if is_overdue(invoice.due_date, invoice.status, today):
        return DisplayStatus.OVERDUE
    return DisplayStatus(invoice.status.value)


def derive_parent_status(children: Sequence[Invoice], today: date) -> DisplayStatus:
    """
    Display status of a split parent, derived from its children

    - all children paid -> paid
    - any child paid or partially paid -> partially_paid
    - any unpaid child past due -> overdue
    - otherwise new
    """
    if not children:
        return DisplayStatus.NEW

    statuses = [child.status for child in children]

    if all(status == InvoiceStatus.PAID for status in statuses):
        return DisplayStatus.PAID

    if any(status in (InvoiceStatus.PAID, InvoiceStatus.PARTIALLY_PAID) for status in statuses):
        return DisplayStatus.PARTIALLY_PAID

    if any(is_overdue(child.due_date, child.status, today) for child in children):
        return DisplayStatus.OVERDUE

    return DisplayStatus.NEW
