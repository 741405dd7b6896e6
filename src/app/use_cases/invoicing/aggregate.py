"""InvoiceAggregateService

Single entry point over the invoicing use cases. All operations share one
unit of work and one set of repositories, so a service instance maps to one
request / one database session.
"""

from decimal import Decimal
from typing import Dict, List, Optional
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.clock import Clock
from src.app.services.exchange_rate_provider import ExchangeRateProvider
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.payment_repository import PaymentRepository
from src.app.repositories.partner_share_repository import PartnerShareRepository
from src.domain.currency import CurrencyConverter
from src.domain.errors import ValidationError
from src.domain.invoice_number import DEFAULT_OFFICE_CODE
from src.domain.partner_share import DEFAULT_TOLERANCE
from .allocate_partner_shares import AllocatePartnerShares, GetPartnerShares
from .create_invoice import CreateInvoice
from .get_invoice import GetInvoice, GetInvoiceBalance
from .get_invoice_breakdown import GetInvoiceBreakdown
from .list_invoice_payments import ListInvoicePayments, ListSplitInvoices
from .reconcile_payments import ReconcileInvoicePayments
from .record_payment import RecordPayment
from .split_invoice import SplitInvoice
from .dtos import (
    AllocatePartnerSharesCommandDTO,
    CreateInvoiceCommandDTO,
    CurrencyBreakdownDTO,
    InvoiceResponseDTO,
    PartnerSharesResponseDTO,
    PaymentResponseDTO,
    ReconciliationResultDTO,
    RecordPaymentCommandDTO,
    RecordPaymentResponseDTO,
    SplitInvoiceCommandDTO,
    SplitInvoiceResponseDTO,
)


class InvoiceAggregateService:
    """
    Invoice Aggregate Service

    Mutations (create, record_payment, split, allocate_partner_shares) each
    run as one atomic unit of work; reads never lock.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        payment_repo: PaymentRepository,
        share_repo: PartnerShareRepository,
        converter: CurrencyConverter,
        rate_provider: ExchangeRateProvider,
        clock: Clock,
        office_codes: Optional[Dict[str, str]] = None,
        default_office_code: str = DEFAULT_OFFICE_CODE,
        share_tolerance: Decimal = DEFAULT_TOLERANCE,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.payment_repo = payment_repo
        self.share_repo = share_repo
        self.converter = converter
        self.rate_provider = rate_provider
        self.clock = clock
        self.office_codes = office_codes
        self.default_office_code = default_office_code
        self.share_tolerance = share_tolerance

    async def create(self, command: CreateInvoiceCommandDTO) -> InvoiceResponseDTO:
        return await CreateInvoice(
            self.uow,
            self.invoice_repo,
            self.converter,
            self.rate_provider,
            self.clock,
            office_codes=self.office_codes,
            default_office_code=self.default_office_code,
        ).execute(command)

    async def record_payment(self, command: RecordPaymentCommandDTO) -> RecordPaymentResponseDTO:
        return await RecordPayment(
            self.uow, self.invoice_repo, self.payment_repo, self.converter
        ).execute(command)

    async def split(self, command: SplitInvoiceCommandDTO) -> SplitInvoiceResponseDTO:
        return await SplitInvoice(
            self.uow,
            self.invoice_repo,
            self.payment_repo,
            self.share_repo,
            self.converter,
            self.clock,
        ).execute(command)

    async def allocate_partner_shares(
        self, command: AllocatePartnerSharesCommandDTO
    ) -> PartnerSharesResponseDTO:
        return await AllocatePartnerShares(
            self.uow,
            self.invoice_repo,
            self.share_repo,
            self.converter,
            tolerance=self.share_tolerance,
        ).execute(command)

    async def get_breakdown(self, invoice_id: int) -> CurrencyBreakdownDTO:
        return await GetInvoiceBreakdown(self.invoice_repo).execute(invoice_id)

    async def get_invoice(self, invoice_id: int) -> InvoiceResponseDTO:
        return await GetInvoice(self.invoice_repo, self.clock).execute(invoice_id)

    async def total_paid(self, invoice_id: int) -> Decimal:
        balance = await GetInvoiceBalance(self.invoice_repo, self.payment_repo).execute(invoice_id)
        return balance.total_paid

    async def remaining(self, invoice_id: int) -> Decimal:
        balance = await GetInvoiceBalance(self.invoice_repo, self.payment_repo).execute(invoice_id)
        return balance.remaining

    async def get_partner_shares(self, invoice_id: int) -> PartnerSharesResponseDTO:
        return await GetPartnerShares(self.invoice_repo, self.share_repo, self.converter).execute(
            invoice_id
        )

    async def computed_amount(self, invoice_id: int, partner_id: int) -> Decimal:
        """Amount currently owed to one partner from cash collected on the invoice"""
        allocation = await self.get_partner_shares(invoice_id)
        for share in allocation.shares:
            if share.partner_id == partner_id:
                return share.computed_amount
        raise ValidationError(
            f"Partner {partner_id} has no share on invoice {invoice_id}",
            code="PARTNER_SHARE_NOT_FOUND",
            invoice_id=invoice_id,
            partner_id=partner_id,
        )

    async def list_payments(self, invoice_id: int) -> List[PaymentResponseDTO]:
        return await ListInvoicePayments(self.invoice_repo, self.payment_repo).execute(invoice_id)

    async def list_splits(self, invoice_id: int) -> List[InvoiceResponseDTO]:
        return await ListSplitInvoices(self.invoice_repo, self.clock).execute(invoice_id)

    async def reconcile(self) -> ReconciliationResultDTO:
        return await ReconcileInvoicePayments(self.invoice_repo, self.payment_repo).execute()
