"""GetInvoice and GetInvoiceBalance Use Cases

Read-only views of an invoice. GetInvoice works from the cached
amount_paid; GetInvoiceBalance sums the payment ledger itself.
"""

from decimal import Decimal
from typing import List, Tuple
from sqlalchemy.exc import SQLAlchemyError
from src.app.services.clock import Clock
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.payment_repository import PaymentRepository
from src.domain.errors import InfrastructureError, InvoiceNotFoundError
from src.domain.invoice import Invoice, InvoiceKind
from src.domain.invoice_status import derive_parent_status, display_status
from .dtos import InvoiceBalanceDTO, InvoiceResponseDTO


async def load_invoice(invoice_repo: InvoiceRepository, invoice_id: int) -> Invoice:
    invoice = await invoice_repo.get_by_id(invoice_id)
    if not invoice:
        raise InvoiceNotFoundError(invoice_id)
    return invoice


async def collected_amount(
    invoice_repo: InvoiceRepository, invoice: Invoice
) -> Tuple[Decimal, List[Invoice]]:
    """
    Cash collected on an invoice

    For a split parent this is the sum of the children's amount_paid.

    Returns:
        (collected amount, children; empty unless split parent)
    """
    if invoice.kind != InvoiceKind.SPLIT_PARENT:
        return invoice.amount_paid, []
    children = await invoice_repo.get_children(invoice.id)
    return sum((child.amount_paid for child in children), Decimal("0")), children


class GetInvoice:
    """
    Use Case: Read an invoice with its display status

    Split parents report the children's collections and a status derived
    from the children; everything else gets the overdue overlay.
    """

    def __init__(self, invoice_repo: InvoiceRepository, clock: Clock):
        self.invoice_repo = invoice_repo
        self.clock = clock

    async def execute(self, invoice_id: int) -> InvoiceResponseDTO:
        try:
            invoice = await load_invoice(self.invoice_repo, invoice_id)
            today = self.clock.today()

            if invoice.kind == InvoiceKind.SPLIT_PARENT:
                collected, children = await collected_amount(self.invoice_repo, invoice)
                return InvoiceResponseDTO.from_entity(
                    invoice, derive_parent_status(children, today), amount_paid=collected
                )

            return InvoiceResponseDTO.from_entity(invoice, display_status(invoice, today))

        except SQLAlchemyError as e:
            raise InfrastructureError(
                "Failed to load invoice", invoice_id=invoice_id, reason=str(e)
            ) from e


class GetInvoiceBalance:
    """
    Use Case: Authoritative total paid and remaining balance

    total_paid is summed from the payment ledger (for a split parent, from
    the children's ledgers); remaining = invoice_amount - total_paid,
    floored at zero.
    """

    def __init__(self, invoice_repo: InvoiceRepository, payment_repo: PaymentRepository):
        self.invoice_repo = invoice_repo
        self.payment_repo = payment_repo

    async def execute(self, invoice_id: int) -> InvoiceBalanceDTO:
        try:
            invoice = await load_invoice(self.invoice_repo, invoice_id)

            if invoice.kind == InvoiceKind.SPLIT_PARENT:
                children = await self.invoice_repo.get_children(invoice.id)
                total_paid = Decimal("0")
                for child in children:
                    total_paid += await self.payment_repo.get_total_paid(child.id)
            else:
                total_paid = await self.payment_repo.get_total_paid(invoice.id)

            return InvoiceBalanceDTO(
                invoice_id=invoice.id,
                currency=invoice.invoice_currency,
                invoice_amount=invoice.invoice_amount,
                total_paid=total_paid,
                remaining=max(invoice.invoice_amount - total_paid, Decimal("0")),
            )

        except SQLAlchemyError as e:
            raise InfrastructureError(
                "Failed to load invoice balance", invoice_id=invoice_id, reason=str(e)
            ) from e
