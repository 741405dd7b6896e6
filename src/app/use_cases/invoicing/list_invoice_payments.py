"""ListInvoicePayments and ListSplitInvoices Use Cases"""

from typing import List
from sqlalchemy.exc import SQLAlchemyError
from src.app.services.clock import Clock
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.payment_repository import PaymentRepository
from src.domain.errors import InfrastructureError
from src.domain.invoice import InvoiceKind
from src.domain.invoice_status import display_status
from .dtos import InvoiceResponseDTO, PaymentResponseDTO
from .get_invoice import load_invoice


class ListInvoicePayments:
    """
    Use Case: Payment history of an invoice, newest first

    For a split parent the children's payments are included and flagged
    with is_split_payment and the child's invoice number.
    """

    def __init__(self, invoice_repo: InvoiceRepository, payment_repo: PaymentRepository):
        self.invoice_repo = invoice_repo
        self.payment_repo = payment_repo

    async def execute(self, invoice_id: int) -> List[PaymentResponseDTO]:
        try:
            invoice = await load_invoice(self.invoice_repo, invoice_id)

            numbers = {invoice.id: invoice.invoice_number}
            if invoice.kind == InvoiceKind.SPLIT_PARENT:
                for child in await self.invoice_repo.get_children(invoice.id):
                    numbers[child.id] = child.invoice_number

            payments = await self.payment_repo.list_by_invoice_ids(list(numbers))
        except SQLAlchemyError as e:
            raise InfrastructureError(
                "Failed to list invoice payments", invoice_id=invoice_id, reason=str(e)
            ) from e

        return [
            PaymentResponseDTO.from_entity(
                payment,
                invoice_number=numbers.get(payment.invoice_id),
                is_split_payment=payment.invoice_id != invoice.id,
            )
            for payment in payments
        ]


class ListSplitInvoices:
    """Use Case: Children of a split invoice ordered by split sequence"""

    def __init__(self, invoice_repo: InvoiceRepository, clock: Clock):
        self.invoice_repo = invoice_repo
        self.clock = clock

    async def execute(self, invoice_id: int) -> List[InvoiceResponseDTO]:
        try:
            invoice = await load_invoice(self.invoice_repo, invoice_id)
            children = await self.invoice_repo.get_children(invoice.id)
        except SQLAlchemyError as e:
            raise InfrastructureError(
                "Failed to list split invoices", invoice_id=invoice_id, reason=str(e)
            ) from e

        today = self.clock.today()
        return [InvoiceResponseDTO.from_entity(child, display_status(child, today)) for child in children]
