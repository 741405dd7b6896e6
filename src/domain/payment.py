"""Payment Domain Entity

Append-only ledger of payments received against an invoice.
"""

from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, Date, ForeignKey, Numeric, String
from src.domain.base import BaseModel, id_column


class PaymentMethod(str, Enum):
    """Accepted payment methods"""
    BANK_TRANSFER = "bank_transfer"
    CHECK = "check"
    UPI = "upi"
    CASH = "cash"


class Payment(BaseModel, table=True):
    """
    Payment - One receipt against an invoice

    Domain Rules:
    - Payments are immutable (append-only, no update or delete)
    - amount > 0, denominated in the invoice's invoice_currency
    - SUM(amount) per invoice is the source of truth for invoices.amount_paid
    """

    __tablename__ = "invoice_payments"
    __table_args__ = (
        Index('ix_invoice_payments_invoice_id', 'invoice_id'),
        Index('ix_invoice_payments_payment_date', 'payment_date'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=id_column(),
        description="Unique payment identifier (auto-increment)"
    )

    invoice_id: int = Field(
        sa_column=Column(BigInteger, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False),
        description="Invoice the payment is recorded against"
    )

    payment_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Date the payment was received"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Amount received in invoice_currency"
    )

    payment_method: PaymentMethod = Field(
        description="bank_transfer, check, upi or cash"
    )

    transaction_ref: Optional[str] = Field(
        default=None,
        sa_column=Column(String(100), nullable=True),
        description="Bank / UPI reference"
    )

    notes: Optional[str] = Field(default=None)

    recorded_by: int = Field(description="User who recorded the payment")

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Ledger append timestamp"
    )
