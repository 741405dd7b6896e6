from .base import BaseModel, id_column
from .errors import (
    BillingError,
    ValidationError,
    InvoiceNotFoundError,
    OverpaymentError,
    InvalidSplitStateError,
    SplitAmountMismatchError,
    ParentInvoiceSplitError,
    ShareAllocationError,
    InvalidRateError,
    InfrastructureError,
)
from .currency import CurrencyConverter
from .invoice import Invoice, InvoiceKind, InvoiceStatus
from .invoice_status import DisplayStatus
from .payment import Payment, PaymentMethod
from .partner_share import PartnerShare

__all__ = [
    "BaseModel",
    "id_column",
    "BillingError",
    "ValidationError",
    "InvoiceNotFoundError",
    "OverpaymentError",
    "InvalidSplitStateError",
    "SplitAmountMismatchError",
    "ParentInvoiceSplitError",
    "ShareAllocationError",
    "InvalidRateError",
    "InfrastructureError",
    "CurrencyConverter",
    "Invoice",
    "InvoiceKind",
    "InvoiceStatus",
    "DisplayStatus",
    "Payment",
    "PaymentMethod",
    "PartnerShare",
]
