"""Invoice Domain Entity

Tracks a client invoice, its cached payment state, its frozen currency
conversion snapshot and its place in a split hierarchy.
"""

from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, Date, ForeignKey, Numeric, String
from src.domain.base import BaseModel, id_column


class InvoiceStatus(str, Enum):
    """Stored payment status. Overdue is a read-time overlay, never stored."""
    NEW = "new"
    PARTIALLY_PAID = "partially_paid"
    PAID = "paid"


class InvoiceKind(str, Enum):
    """Position of an invoice in the split hierarchy"""
    STANDALONE = "standalone"      # Ordinary invoice, payable and splittable
    SPLIT_PARENT = "split_parent"  # Partitioned into children, not payable
    SPLIT_CHILD = "split_child"    # Payable part of a split parent


class Invoice(BaseModel, table=True):
    """
    Invoice - Amount billed to a client for a matter

    Domain Rules:
    - invoice_number must be unique
    - amount_paid is a cache of SUM(invoice_payments.amount), updated in the
      same transaction that appends a payment
    - amount_paid <= invoice_amount unless an overpayment was explicitly allowed
    - currency_conversion_rate is set iff matter_currency != invoice_currency
    - invoice_amount_in_matter_currency is computed once at creation
    - Only STANDALONE and SPLIT_CHILD invoices accept payments
    - Status transitions: new -> partially_paid -> paid (paid is terminal)
    """

    __tablename__ = "invoices"
    __table_args__ = (
        Index('ix_invoices_client_id', 'client_id'),
        Index('ix_invoices_matter_id', 'matter_id'),
        Index('ix_invoices_parent_invoice_id', 'parent_invoice_id'),
        Index('ix_invoices_invoice_date', 'invoice_date'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=id_column(),
        description="Unique invoice identifier (auto-increment)"
    )

    parent_invoice_id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigInteger, ForeignKey("invoices.id"), nullable=True),
        description="Parent invoice for split children"
    )

    client_id: int = Field(description="Client billed by this invoice")

    matter_id: Optional[int] = Field(
        default=None,
        description="Matter the invoice bills for (optional)"
    )

    invoice_number: str = Field(
        sa_column=Column(String(50), nullable=False, unique=True),
        description="Unique invoice number (e.g., 07012026-M, 07012026-M-A-1)"
    )

    kind: InvoiceKind = Field(
        default=InvoiceKind.STANDALONE,
        description="standalone, split_parent or split_child"
    )

    split_sequence: Optional[int] = Field(
        default=None,
        description="1-based position among the parent's children"
    )

    status: InvoiceStatus = Field(
        default=InvoiceStatus.NEW,
        description="Stored payment status (new, partially_paid, paid)"
    )

    invoice_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Invoice issue date"
    )

    due_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Payment due date"
    )

    invoice_amount: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Invoiced amount in invoice_currency"
    )

    amount_paid: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
        description="Cached sum of payments in invoice_currency"
    )

    matter_currency: str = Field(
        sa_column=Column(String(3), nullable=False),
        description="Currency the matter value was recorded in (ISO 4217)"
    )

    invoice_currency: str = Field(
        sa_column=Column(String(3), nullable=False),
        description="Currency the invoice is denominated and paid in (ISO 4217)"
    )

    currency_conversion_rate: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(18, 6), nullable=True),
        description="Matter -> invoice currency rate frozen at creation"
    )

    invoice_amount_in_matter_currency: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(18, 2), nullable=True),
        description="Original amount in matter_currency (converted invoices only)"
    )

    description: Optional[str] = Field(default=None)

    billing_location: Optional[str] = Field(
        default=None,
        sa_column=Column(String(50), nullable=True),
        description="Billing office (drives the invoice number office code)"
    )

    created_by: int = Field(description="User who created the invoice")

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Invoice creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last update timestamp"
    )

    @property
    def is_split(self) -> bool:
        return self.kind == InvoiceKind.SPLIT_PARENT

    @property
    def is_converted(self) -> bool:
        return self.matter_currency != self.invoice_currency

    @property
    def remaining(self) -> Decimal:
        """Outstanding balance from the cached amount_paid, floored at zero"""
        return max(self.invoice_amount - self.amount_paid, Decimal("0"))

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "parent_invoice_id": None,
                "client_id": 12,
                "matter_id": 40,
                "invoice_number": "07012026-M",
                "kind": "standalone",
                "status": "partially_paid",
                "invoice_date": "2026-01-07",
                "due_date": "2026-02-06",
                "invoice_amount": "83000.00",
                "amount_paid": "20000.00",
                "matter_currency": "USD",
                "invoice_currency": "INR",
                "currency_conversion_rate": "83.000000",
                "invoice_amount_in_matter_currency": "1000.00",
                "billing_location": "mumbai",
                "created_by": 3,
            }
        }
