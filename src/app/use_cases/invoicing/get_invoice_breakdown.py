"""GetInvoiceBreakdown Use Case

Reports an invoice's amount in both currencies using the rate frozen at
creation. Pure read: repeated calls between mutations return equal results.
"""

from sqlalchemy.exc import SQLAlchemyError
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.errors import InfrastructureError
from .dtos import CurrencyBreakdownDTO
from .get_invoice import load_invoice


class GetInvoiceBreakdown:
    """
    Use Case: Currency breakdown of an invoice

    - original_amount: matter-currency mirror, or invoice_amount when the
      invoice was never converted
    - converted_amount: invoice_amount
    - conversion_rate: the frozen snapshot (None when not converted)
    - is_converted: matter_currency != invoice_currency
    """

    def __init__(self, invoice_repo: InvoiceRepository):
        self.invoice_repo = invoice_repo

    async def execute(self, invoice_id: int) -> CurrencyBreakdownDTO:
        try:
            invoice = await load_invoice(self.invoice_repo, invoice_id)
        except SQLAlchemyError as e:
            raise InfrastructureError(
                "Failed to load currency breakdown", invoice_id=invoice_id, reason=str(e)
            ) from e

        is_converted = invoice.is_converted and invoice.currency_conversion_rate is not None
        original_amount = invoice.invoice_amount
        if is_converted and invoice.invoice_amount_in_matter_currency is not None:
            original_amount = invoice.invoice_amount_in_matter_currency

        return CurrencyBreakdownDTO(
            invoice_id=invoice.id,
            invoice_number=invoice.invoice_number,
            matter_currency=invoice.matter_currency,
            invoice_currency=invoice.invoice_currency,
            original_amount=original_amount,
            converted_amount=invoice.invoice_amount,
            conversion_rate=invoice.currency_conversion_rate if is_converted else None,
            is_converted=is_converted,
        )
