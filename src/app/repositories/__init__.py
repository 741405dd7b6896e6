from .invoice_repository import InvoiceRepository
from .payment_repository import PaymentRepository
from .partner_share_repository import PartnerShareRepository

__all__ = [
    "InvoiceRepository",
    "PaymentRepository",
    "PartnerShareRepository",
]
