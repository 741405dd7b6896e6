"""Data Transfer Objects for Invoicing Use Cases

Pydantic models for command inputs and response outputs.
Commands carry raw caller input; business validation happens in the use
cases so every rule violation surfaces as a domain error.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field

from src.domain.invoice import Invoice
from src.domain.invoice_status import DisplayStatus
from src.domain.payment import Payment, PaymentMethod


class CreateInvoiceCommandDTO(BaseModel):
    """
    Command DTO for creating an invoice

    ``amount`` is expressed in ``matter_currency``. When ``invoice_currency``
    differs, it is converted with ``conversion_rate`` (or a rate looked up
    once from the exchange rate provider) and that rate is frozen on the
    invoice.
    """

    client_id: int = Field(..., description="Client billed")
    matter_id: Optional[int] = Field(default=None, description="Matter billed (optional)")
    amount: Decimal = Field(..., description="Amount in matter currency")
    matter_currency: str = Field(..., description="Matter currency (ISO 4217)")
    invoice_currency: Optional[str] = Field(
        default=None, description="Billing currency; defaults to matter currency"
    )
    conversion_rate: Optional[Decimal] = Field(
        default=None, description="Matter -> invoice rate snapshot"
    )
    invoice_date: Optional[date] = Field(default=None, description="Defaults to today")
    due_date: date = Field(..., description="Payment due date")
    description: Optional[str] = Field(default=None)
    billing_location: str = Field(..., description="Billing office (e.g., mumbai)")
    created_by: int = Field(..., description="User creating the invoice")
    invoice_number: Optional[str] = Field(
        default=None, description="Explicit invoice number; generated when omitted"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "client_id": 12,
                "matter_id": 40,
                "amount": "1000.00",
                "matter_currency": "USD",
                "invoice_currency": "INR",
                "conversion_rate": "83.0",
                "due_date": "2026-02-06",
                "description": "Professional fees - January",
                "billing_location": "mumbai",
                "created_by": 3,
            }
        }


class RecordPaymentCommandDTO(BaseModel):
    """Command DTO for appending a payment to an invoice's ledger"""

    invoice_id: int
    amount: Decimal = Field(..., description="Amount in invoice currency")
    payment_date: date
    payment_method: PaymentMethod
    transaction_ref: Optional[str] = None
    notes: Optional[str] = None
    recorded_by: int
    allow_overpayment: bool = Field(
        default=False, description="Accept a payment larger than the remaining balance"
    )


class SplitAllocationDTO(BaseModel):
    amount: Decimal = Field(..., description="Child amount in invoice currency")
    due_date: Optional[date] = Field(default=None, description="Defaults to parent due date")
    description: Optional[str] = Field(default=None, description="Defaults to parent description")


class SplitInvoiceCommandDTO(BaseModel):
    invoice_id: int
    allocations: List[SplitAllocationDTO]


class PartnerShareInputDTO(BaseModel):
    partner_id: int
    percentage: Decimal


class AllocatePartnerSharesCommandDTO(BaseModel):
    invoice_id: int
    shares: List[PartnerShareInputDTO]


class InvoiceResponseDTO(BaseModel):
    """
    Response DTO for invoice operations

    ``status`` is the stored payment status; ``display_status`` adds the
    overdue overlay (and, for split parents, is derived from the children).
    """

    invoice_id: int
    parent_invoice_id: Optional[int] = None
    client_id: int
    matter_id: Optional[int] = None
    invoice_number: str
    kind: str
    is_split: bool
    split_sequence: Optional[int] = None
    status: str
    display_status: str
    invoice_date: date
    due_date: date
    invoice_amount: Decimal
    amount_paid: Decimal
    remaining: Decimal
    matter_currency: str
    invoice_currency: str
    currency_conversion_rate: Optional[Decimal] = None
    invoice_amount_in_matter_currency: Optional[Decimal] = None
    description: Optional[str] = None
    billing_location: Optional[str] = None
    created_by: int
    created_at: datetime

    @classmethod
    def from_entity(
        cls,
        invoice: Invoice,
        display_status: DisplayStatus,
        amount_paid: Optional[Decimal] = None,
    ) -> "InvoiceResponseDTO":
        """Build the response; ``amount_paid`` overrides the cached value"""
        paid = invoice.amount_paid if amount_paid is None else amount_paid
        return cls(
            invoice_id=invoice.id,
            parent_invoice_id=invoice.parent_invoice_id,
            client_id=invoice.client_id,
            matter_id=invoice.matter_id,
            invoice_number=invoice.invoice_number,
            kind=invoice.kind.value,
            is_split=invoice.is_split,
            split_sequence=invoice.split_sequence,
            status=invoice.status.value,
            display_status=display_status.value,
            invoice_date=invoice.invoice_date,
            due_date=invoice.due_date,
            invoice_amount=invoice.invoice_amount,
            amount_paid=paid,
            remaining=max(invoice.invoice_amount - paid, Decimal("0")),
            matter_currency=invoice.matter_currency,
            invoice_currency=invoice.invoice_currency,
            currency_conversion_rate=invoice.currency_conversion_rate,
            invoice_amount_in_matter_currency=invoice.invoice_amount_in_matter_currency,
            description=invoice.description,
            billing_location=invoice.billing_location,
            created_by=invoice.created_by,
            created_at=invoice.created_at,
        )


class PaymentResponseDTO(BaseModel):
    """
    Response DTO for a ledger entry

    ``is_split_payment`` marks payments listed on a split parent that were
    actually recorded against one of its children.
    """

    payment_id: int
    invoice_id: int
    invoice_number: Optional[str] = None
    payment_date: date
    amount: Decimal
    payment_method: str
    transaction_ref: Optional[str] = None
    notes: Optional[str] = None
    recorded_by: int
    created_at: datetime
    is_split_payment: bool = False

    @classmethod
    def from_entity(
        cls,
        payment: Payment,
        invoice_number: Optional[str] = None,
        is_split_payment: bool = False,
    ) -> "PaymentResponseDTO":
        return cls(
            payment_id=payment.id,
            invoice_id=payment.invoice_id,
            invoice_number=invoice_number,
            payment_date=payment.payment_date,
            amount=payment.amount,
            payment_method=payment.payment_method.value,
            transaction_ref=payment.transaction_ref,
            notes=payment.notes,
            recorded_by=payment.recorded_by,
            created_at=payment.created_at,
            is_split_payment=is_split_payment,
        )


class RecordPaymentResponseDTO(BaseModel):
    """Payment plus the invoice state committed with it"""

    payment: PaymentResponseDTO
    invoice_amount: Decimal
    amount_paid: Decimal
    remaining: Decimal
    status: str


class SplitInvoiceResponseDTO(BaseModel):
    parent: InvoiceResponseDTO
    children: List[InvoiceResponseDTO]


class CurrencyBreakdownDTO(BaseModel):
    """
    Currency breakdown of an invoice

    original_amount is in matter_currency, converted_amount in
    invoice_currency; conversion_rate is the rate frozen at creation
    (None when the currencies match).
    """

    invoice_id: int
    invoice_number: str
    matter_currency: str
    invoice_currency: str
    original_amount: Decimal
    converted_amount: Decimal
    conversion_rate: Optional[Decimal] = None
    is_converted: bool

    class Config:
        json_schema_extra = {
            "example": {
                "invoice_id": 1,
                "invoice_number": "07012026-M",
                "matter_currency": "USD",
                "invoice_currency": "INR",
                "original_amount": "1000.00",
                "converted_amount": "83000.00",
                "conversion_rate": "83.000000",
                "is_converted": True,
            }
        }


class PartnerShareDTO(BaseModel):
    partner_id: int
    share_percentage: Decimal
    computed_amount: Decimal


class PartnerSharesResponseDTO(BaseModel):
    """Partner shares of an invoice with amounts computed from cash collected"""

    invoice_id: int
    currency: str
    collected_amount: Decimal
    shares: List[PartnerShareDTO]


class LedgerDiscrepancyDTO(BaseModel):
    invoice_id: int
    invoice_number: str
    cached_amount_paid: Decimal
    ledger_total: Decimal
    discrepancy: Decimal


class ReconciliationResultDTO(BaseModel):
    total_invoices_checked: int
    discrepancies_found: int
    discrepancies: List[LedgerDiscrepancyDTO]
    reconciliation_time: datetime
    execution_time_ms: int


class InvoiceBalanceDTO(BaseModel):
    """Ledger-derived balance of an invoice"""

    invoice_id: int
    currency: str
    invoice_amount: Decimal
    total_paid: Decimal
    remaining: Decimal
