"""Request schemas for Invoice API

Pydantic models for validating incoming HTTP requests. Shape checks only;
business rules are enforced by the use cases.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from src.domain.payment import PaymentMethod


class CreateInvoiceRequestSchema(BaseModel):
    """
    Request schema for creating an invoice

    Used for POST /billing/invoices/ endpoint.
    """

    client_id: int = Field(..., gt=0, description="Client billed")
    matter_id: Optional[int] = Field(default=None, gt=0, description="Matter billed")
    amount: Decimal = Field(..., gt=0, description="Amount in matter currency (must be > 0)")
    matter_currency: str = Field(..., min_length=3, max_length=3)
    invoice_currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    conversion_rate: Optional[Decimal] = Field(
        default=None, gt=0, description="Matter -> invoice rate snapshot"
    )
    invoice_date: Optional[date] = None
    due_date: date
    description: Optional[str] = None
    billing_location: str = Field(..., min_length=1)
    created_by: int
    invoice_number: Optional[str] = Field(default=None, max_length=50)

    @field_validator("matter_currency", "invoice_currency")
    @classmethod
    def upper_currency(cls, v):
        return v.upper() if v else v

    class Config:
        json_schema_extra = {
            "example": {
                "client_id": 12,
                "matter_id": 40,
                "amount": "1000.00",
                "matter_currency": "USD",
                "invoice_currency": "INR",
                "conversion_rate": "83.0",
                "invoice_date": "2026-01-07",
                "due_date": "2026-02-06",
                "description": "Professional fees - January",
                "billing_location": "mumbai",
                "created_by": 3,
            }
        }


class RecordPaymentRequestSchema(BaseModel):
    """
    Request schema for recording a payment

    Used for POST /billing/invoices/{invoice_id}/payments endpoint.
    """

    amount: Decimal = Field(..., gt=0, description="Amount in invoice currency (must be > 0)")
    payment_date: date
    payment_method: PaymentMethod
    transaction_ref: Optional[str] = Field(default=None, max_length=100)
    notes: Optional[str] = None
    recorded_by: int
    allow_overpayment: bool = False

    class Config:
        json_schema_extra = {
            "example": {
                "amount": "20000.00",
                "payment_date": "2026-01-20",
                "payment_method": "bank_transfer",
                "transaction_ref": "UTR123456",
                "recorded_by": 3,
            }
        }


class SplitAllocationSchema(BaseModel):
    amount: Decimal = Field(..., gt=0)
    due_date: Optional[date] = None
    description: Optional[str] = None


class SplitInvoiceRequestSchema(BaseModel):
    """Used for POST /billing/invoices/{invoice_id}/split endpoint."""

    allocations: List[SplitAllocationSchema] = Field(..., min_length=1)

    class Config:
        json_schema_extra = {
            "example": {
                "allocations": [
                    {"amount": "600.00"},
                    {"amount": "400.00", "due_date": "2026-03-31"},
                ]
            }
        }


class PartnerShareSchema(BaseModel):
    partner_id: int
    percentage: Decimal = Field(..., ge=0, le=100)


class AllocatePartnerSharesRequestSchema(BaseModel):
    """Used for PUT /billing/invoices/{invoice_id}/partner-shares endpoint."""

    shares: List[PartnerShareSchema] = Field(..., min_length=1)

    class Config:
        json_schema_extra = {
            "example": {
                "shares": [
                    {"partner_id": 7, "percentage": "60"},
                    {"partner_id": 9, "percentage": "40"},
                ]
            }
        }
