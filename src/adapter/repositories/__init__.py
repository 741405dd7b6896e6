from .invoice_repository import SqlAlchemyInvoiceRepository
from .payment_repository import SqlAlchemyPaymentRepository
from .partner_share_repository import SqlAlchemyPartnerShareRepository

__all__ = [
    "SqlAlchemyInvoiceRepository",
    "SqlAlchemyPaymentRepository",
    "SqlAlchemyPartnerShareRepository",
]
