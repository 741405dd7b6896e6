"""CreateInvoice Use Case

Creates a standalone invoice and freezes its currency conversion snapshot.
"""

import logging
from decimal import Decimal
from typing import Dict, Optional
from sqlalchemy.exc import SQLAlchemyError
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.clock import Clock
from src.app.services.exchange_rate_provider import ExchangeRateProvider
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.currency import CurrencyConverter, to_decimal
from src.domain.errors import BillingError, InfrastructureError, ValidationError
from src.domain.invoice import Invoice, InvoiceKind, InvoiceStatus
from src.domain.invoice_number import (
    DEFAULT_OFFICE_CODE,
    is_valid_invoice_number,
    next_invoice_number,
)
from src.domain.invoice_status import display_status
from .dtos import CreateInvoiceCommandDTO, InvoiceResponseDTO

logger = logging.getLogger(__name__)


class CreateInvoice:
    """
    Use Case: Create an invoice for a client/matter

    Business Rules:
    1. amount > 0 and expressed with the matter currency's precision
    2. due_date must not be before invoice_date
    3. Same currency: no conversion rate is stored
    4. Different currencies: the rate (caller snapshot, else looked up once)
       is frozen on the invoice; invoice_amount = amount x rate and the
       original amount is kept as invoice_amount_in_matter_currency
    5. Invoice number is generated (DDMMYYYY-OFFICE[-SEQ]) unless supplied;
       supplied numbers must match the format and be unique

    Flow:
    1. Validate currencies, amount and dates
    2. Resolve and freeze the conversion rate
    3. Allocate or validate the invoice number
    4. Persist invoice (status=new, amount_paid=0)
    5. Commit transaction
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        converter: CurrencyConverter,
        rate_provider: ExchangeRateProvider,
        clock: Clock,
        office_codes: Optional[Dict[str, str]] = None,
        default_office_code: str = DEFAULT_OFFICE_CODE,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.converter = converter
        self.rate_provider = rate_provider
        self.clock = clock
        self.office_codes = office_codes
        self.default_office_code = default_office_code

    async def execute(self, command: CreateInvoiceCommandDTO) -> InvoiceResponseDTO:
        """
        Execute invoice creation

        Args:
            command: CreateInvoiceCommandDTO

        Returns:
            InvoiceResponseDTO for the created invoice

        Raises:
            ValidationError: Malformed input or duplicate invoice number
            InvalidRateError: Conversion rate <= 0
            InfrastructureError: Persistence or rate lookup failure
        """
        try:
            today = self.clock.today()

            # Step 1: Validate input
            matter_currency = self.converter.ensure_supported(command.matter_currency)
            invoice_currency = self.converter.ensure_supported(
                command.invoice_currency or matter_currency
            )
            amount = self._validate_amount(command.amount, matter_currency)

            invoice_date = command.invoice_date or today
            if command.due_date < invoice_date:
                raise ValidationError(
                    "Due date must not be before invoice date",
                    code="INVALID_DUE_DATE",
                    invoice_date=invoice_date,
                    due_date=command.due_date,
                )

            # Step 2: Freeze conversion snapshot
            rate, invoice_amount, mirror_amount = await self._convert(
                amount, matter_currency, invoice_currency, command.conversion_rate
            )

            # Step 3: Invoice number
            invoice_number = await self._resolve_invoice_number(command, invoice_date)

            # Step 4: Persist
            invoice = Invoice(
                client_id=command.client_id,
                matter_id=command.matter_id,
                invoice_number=invoice_number,
                kind=InvoiceKind.STANDALONE,
                status=InvoiceStatus.NEW,
                invoice_date=invoice_date,
                due_date=command.due_date,
                invoice_amount=invoice_amount,
                amount_paid=Decimal("0"),
                matter_currency=matter_currency,
                invoice_currency=invoice_currency,
                currency_conversion_rate=rate,
                invoice_amount_in_matter_currency=mirror_amount,
                description=command.description,
                billing_location=command.billing_location,
                created_by=command.created_by,
            )
            created_invoice = await self.invoice_repo.create(invoice)

            # Step 5: Commit
            await self.uow.commit()

            logger.info(
                f"Created invoice {created_invoice.invoice_number} (id={created_invoice.id}) "
                f"for client {created_invoice.client_id}: "
                f"{created_invoice.invoice_amount} {invoice_currency}"
                + (f" at rate {rate} from {matter_currency}" if rate is not None else "")
            )

            return InvoiceResponseDTO.from_entity(
                created_invoice, display_status(created_invoice, today)
            )

        except BillingError as e:
            await self.uow.rollback()
            logger.warning(f"Invoice creation rejected: {e.code}: {e.message}")
            raise
        except SQLAlchemyError as e:
            await self.uow.rollback()
            logger.error(f"Failed to create invoice: {e}")
            raise InfrastructureError("Failed to create invoice", reason=str(e)) from e

    def _validate_amount(self, value, currency: str) -> Decimal:
        amount = to_decimal(value)
        if not amount.is_finite() or amount <= 0:
            raise ValidationError(
                "Invoice amount must be greater than 0", code="INVALID_AMOUNT", amount=value
            )
        if not self.converter.is_quantized(amount, currency):
            raise ValidationError(
                f"Invoice amount has more decimals than {currency} allows",
                code="INVALID_AMOUNT",
                amount=value,
                currency=currency,
            )
        return amount

    async def _convert(self, amount, matter_currency, invoice_currency, requested_rate):
        """Return (frozen rate, invoice amount, matter-currency mirror)"""
        if matter_currency == invoice_currency:
            if requested_rate is not None and to_decimal(requested_rate) != 1:
                raise ValidationError(
                    "A conversion rate other than 1 was given for a single-currency invoice",
                    code="UNEXPECTED_CONVERSION_RATE",
                    currency=matter_currency,
                    rate=requested_rate,
                )
            return None, amount, None

        if requested_rate is None:
            requested_rate = await self.rate_provider.get_rate(matter_currency, invoice_currency)
            logger.info(
                f"Resolved {matter_currency}->{invoice_currency} rate {requested_rate} "
                f"from exchange rate provider"
            )

        rate = self.converter.normalize_rate(requested_rate)
        invoice_amount = self.converter.convert(amount, rate, invoice_currency)
        if invoice_amount <= 0:
            raise ValidationError(
                f"Converted amount rounds to zero in {invoice_currency}",
                code="INVALID_AMOUNT",
                amount=amount,
                rate=rate,
            )
        return rate, invoice_amount, amount

    async def _resolve_invoice_number(self, command: CreateInvoiceCommandDTO, invoice_date) -> str:
        if command.invoice_number:
            if not is_valid_invoice_number(
                command.invoice_number, self.office_codes, self.default_office_code
            ):
                raise ValidationError(
                    "Invoice number must follow format DDMMYYYY-OFFICE or "
                    "DDMMYYYY-OFFICE-A (e.g., 07012026-M or 07012026-M-A)",
                    code="INVALID_INVOICE_NUMBER",
                    invoice_number=command.invoice_number,
                )
            existing = await self.invoice_repo.get_by_invoice_number(command.invoice_number)
            if existing:
                raise ValidationError(
                    f"Invoice number {command.invoice_number} already exists",
                    code="INVOICE_NUMBER_EXISTS",
                    invoice_number=command.invoice_number,
                )
            return command.invoice_number

        numbers = await self.invoice_repo.list_invoice_numbers_for_date(invoice_date)
        return next_invoice_number(
            invoice_date,
            command.billing_location,
            numbers,
            office_codes=self.office_codes,
            default_office_code=self.default_office_code,
        )
