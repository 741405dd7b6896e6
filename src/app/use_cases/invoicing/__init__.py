"""Invoicing domain use cases"""
from .create_invoice import CreateInvoice
from .record_payment import RecordPayment
from .split_invoice import SplitInvoice
from .get_invoice import GetInvoice, GetInvoiceBalance
from .get_invoice_breakdown import GetInvoiceBreakdown
from .list_invoice_payments import ListInvoicePayments, ListSplitInvoices
from .allocate_partner_shares import AllocatePartnerShares, GetPartnerShares
from .reconcile_payments import ReconcileInvoicePayments
from .aggregate import InvoiceAggregateService
from .dtos import (
    CreateInvoiceCommandDTO,
    RecordPaymentCommandDTO,
    SplitAllocationDTO,
    SplitInvoiceCommandDTO,
    PartnerShareInputDTO,
    AllocatePartnerSharesCommandDTO,
    InvoiceResponseDTO,
    InvoiceBalanceDTO,
    PaymentResponseDTO,
    RecordPaymentResponseDTO,
    SplitInvoiceResponseDTO,
    CurrencyBreakdownDTO,
    PartnerShareDTO,
    PartnerSharesResponseDTO,
    LedgerDiscrepancyDTO,
    ReconciliationResultDTO,
)

__all__ = [
    "CreateInvoice",
    "RecordPayment",
    "SplitInvoice",
    "GetInvoice",
    "GetInvoiceBalance",
    "GetInvoiceBreakdown",
    "ListInvoicePayments",
    "ListSplitInvoices",
    "AllocatePartnerShares",
    "GetPartnerShares",
    "ReconcileInvoicePayments",
    "InvoiceAggregateService",
    "CreateInvoiceCommandDTO",
    "RecordPaymentCommandDTO",
    "SplitAllocationDTO",
    "SplitInvoiceCommandDTO",
    "PartnerShareInputDTO",
    "AllocatePartnerSharesCommandDTO",
    "InvoiceResponseDTO",
    "InvoiceBalanceDTO",
    "PaymentResponseDTO",
    "RecordPaymentResponseDTO",
    "SplitInvoiceResponseDTO",
    "CurrencyBreakdownDTO",
    "PartnerShareDTO",
    "PartnerSharesResponseDTO",
    "LedgerDiscrepancyDTO",
    "ReconciliationResultDTO",
]
