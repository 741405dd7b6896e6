"""RecordPayment Use Case

Appends a payment to an invoice's ledger and recomputes the cached
amount_paid and status in the same transaction, under a row lock on the
invoice so concurrent payments cannot jointly overshoot the invoice amount.
"""

import logging
from sqlalchemy.exc import SQLAlchemyError
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.payment_repository import PaymentRepository
from src.domain.currency import CurrencyConverter, to_decimal
from src.domain.errors import (
    BillingError,
    InfrastructureError,
    InvoiceNotFoundError,
    OverpaymentError,
    ValidationError,
)
from src.domain.invoice_split import ensure_payable
from src.domain.invoice_status import resolve_status
from src.domain.payment import Payment
from .dtos import PaymentResponseDTO, RecordPaymentCommandDTO, RecordPaymentResponseDTO

logger = logging.getLogger(__name__)


class RecordPayment:
    """
    Use Case: Record a payment against an invoice

    Business Rules:
    1. amount > 0 with the invoice currency's precision
    2. Split parents are not payable (ParentInvoiceSplitError)
    3. total_paid + amount must not exceed invoice_amount
       (OverpaymentError) unless allow_overpayment is set
    4. Ledger append, amount_paid and status commit together
    5. Pessimistic locking: SELECT FOR UPDATE on the invoice row, and the
       ledger total is re-read after the lock is held

    Flow:
    1. Lock invoice (SELECT FOR UPDATE)
    2. Check the invoice is payable
    3. Re-read authoritative ledger total
    4. Validate amount against remaining balance
    5. Append payment
    6. Update cached amount_paid and status
    7. Commit transaction
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        payment_repo: PaymentRepository,
        converter: CurrencyConverter,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.payment_repo = payment_repo
        self.converter = converter

    async def execute(self, command: RecordPaymentCommandDTO) -> RecordPaymentResponseDTO:
        """
        Execute payment recording

        Args:
            command: RecordPaymentCommandDTO

        Returns:
            RecordPaymentResponseDTO with the payment and committed invoice state

        Raises:
            InvoiceNotFoundError, ValidationError, ParentInvoiceSplitError,
            OverpaymentError, InfrastructureError
        """
        try:
            # Step 1: Lock invoice row
            invoice = await self.invoice_repo.get_by_id(command.invoice_id, for_update=True)
            if not invoice:
                raise InvoiceNotFoundError(command.invoice_id)

            # Step 2: Split parents take no payments
            ensure_payable(invoice)

            amount = to_decimal(command.amount)
            if not amount.is_finite() or amount <= 0:
                raise ValidationError(
                    "Payment amount must be greater than 0",
                    code="INVALID_AMOUNT",
                    invoice_id=invoice.id,
                    amount=command.amount,
                )
            if not self.converter.is_quantized(amount, invoice.invoice_currency):
                raise ValidationError(
                    f"Payment amount has more decimals than {invoice.invoice_currency} allows",
                    code="INVALID_AMOUNT",
                    invoice_id=invoice.id,
                    amount=command.amount,
                )

            # Step 3: Authoritative total, read while holding the lock
            total_paid = await self.payment_repo.get_total_paid(invoice.id)
            remaining = invoice.invoice_amount - total_paid

            # Step 4: Overpayment guard
            if amount > remaining and not command.allow_overpayment:
                raise OverpaymentError(
                    f"Payment amount ({amount} {invoice.invoice_currency}) exceeds "
                    f"remaining balance ({max(remaining, 0)} {invoice.invoice_currency})",
                    invoice_id=invoice.id,
                    amount=amount,
                    remaining=max(remaining, 0),
                    invoice_amount=invoice.invoice_amount,
                    amount_paid=total_paid,
                )

            # Step 5: Append to ledger
            payment = Payment(
                invoice_id=invoice.id,
                payment_date=command.payment_date,
                amount=amount,
                payment_method=command.payment_method,
                transaction_ref=command.transaction_ref or None,
                notes=command.notes or None,
                recorded_by=command.recorded_by,
            )
            created_payment = await self.payment_repo.create(payment)

            # Step 6: Refresh cache
            new_total = total_paid + amount
            previous_status = invoice.status
            invoice.amount_paid = new_total
            invoice.status = resolve_status(new_total, invoice.invoice_amount, previous_status)
            await self.invoice_repo.update(invoice)

            # Step 7: Commit
            await self.uow.commit()

            if amount > remaining:
                logger.warning(
                    f"Overpayment accepted on invoice {invoice.invoice_number}: "
                    f"paid {new_total} of {invoice.invoice_amount}"
                )
            logger.info(
                f"Recorded payment {created_payment.id} of {amount} {invoice.invoice_currency} "
                f"on invoice {invoice.invoice_number}: {previous_status.value} -> "
                f"{invoice.status.value}, paid {new_total}/{invoice.invoice_amount}"
            )

            return RecordPaymentResponseDTO(
                payment=PaymentResponseDTO.from_entity(created_payment, invoice.invoice_number),
                invoice_amount=invoice.invoice_amount,
                amount_paid=invoice.amount_paid,
                remaining=invoice.remaining,
                status=invoice.status.value,
            )

        except BillingError as e:
            await self.uow.rollback()
            logger.warning(f"Payment on invoice {command.invoice_id} rejected: {e.code}: {e.message}")
            raise
        except SQLAlchemyError as e:
            await self.uow.rollback()
            logger.error(f"Failed to record payment on invoice {command.invoice_id}: {e}")
            raise InfrastructureError(
                "Failed to record payment", invoice_id=command.invoice_id, reason=str(e)
            ) from e
