"""ReconcileInvoicePayments Use Case

Compares each invoice's cached amount_paid with the sum of its payment
ledger to detect drift.
"""

import logging
import time
from datetime import datetime
from decimal import Decimal
from sqlalchemy.exc import SQLAlchemyError
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.payment_repository import PaymentRepository
from src.domain.errors import InfrastructureError
from .dtos import LedgerDiscrepancyDTO, ReconciliationResultDTO

logger = logging.getLogger(__name__)


class ReconcileInvoicePayments:
    """
    Use Case: Reconcile cached amount_paid against the payment ledger

    Business Rules:
    1. Every invoice is checked, including split parents (expected total 0)
    2. Discrepancies are reported and logged, never corrected
    3. Read-only: no data is modified
    """

    def __init__(self, invoice_repo: InvoiceRepository, payment_repo: PaymentRepository):
        self.invoice_repo = invoice_repo
        self.payment_repo = payment_repo

    async def execute(self) -> ReconciliationResultDTO:
        start_time = time.time()
        reconciliation_time = datetime.utcnow()

        try:
            logger.info("Starting invoice payment reconciliation")
            invoices = await self.invoice_repo.get_all()
            totals = await self.payment_repo.get_totals_by_invoice()
        except SQLAlchemyError as e:
            logger.error(f"Invoice payment reconciliation failed: {e}")
            raise InfrastructureError("Failed to reconcile invoice payments", reason=str(e)) from e

        discrepancies = []
        for invoice in invoices:
            ledger_total = totals.get(invoice.id, Decimal("0"))
            if invoice.amount_paid != ledger_total:
                discrepancy = LedgerDiscrepancyDTO(
                    invoice_id=invoice.id,
                    invoice_number=invoice.invoice_number,
                    cached_amount_paid=invoice.amount_paid,
                    ledger_total=ledger_total,
                    discrepancy=invoice.amount_paid - ledger_total,
                )
                discrepancies.append(discrepancy)
                logger.warning(
                    f"Discrepancy found for invoice {invoice.invoice_number} "
                    f"(id={invoice.id}): amount_paid={invoice.amount_paid}, "
                    f"ledger_total={ledger_total}, discrepancy={discrepancy.discrepancy}"
                )

        execution_time_ms = int((time.time() - start_time) * 1000)

        if discrepancies:
            logger.warning(
                f"Reconciliation complete. Found {len(discrepancies)} discrepancies "
                f"out of {len(invoices)} invoices in {execution_time_ms}ms"
            )
        else:
            logger.info(
                f"Reconciliation complete. All {len(invoices)} invoices balanced "
                f"in {execution_time_ms}ms"
            )

        return ReconciliationResultDTO(
            total_invoices_checked=len(invoices),
            discrepancies_found=len(discrepancies),
            discrepancies=discrepancies,
            reconciliation_time=reconciliation_time,
            execution_time_ms=execution_time_ms,
        )
