"""Checks every invoice's cached amount_paid against its payment ledger.

    python -m src.worker.payment_reconciler --once
"""

import argparse
import asyncio
import logging
from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories import SqlAlchemyInvoiceRepository, SqlAlchemyPaymentRepository
from src.app.use_cases.invoicing import ReconcileInvoicePayments, ReconciliationResultDTO
from src.domain.errors import BillingError

logger = logging.getLogger(__name__)


class PaymentReconcilerWorker:
    """Read-only: discrepancies are reported, never corrected"""

    def __init__(self, db_uri: Optional[str] = None):
        self.engine = create_async_engine(db_uri or ApplicationConfig.DB_URI, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

    async def run_once(self) -> ReconciliationResultDTO:
        if not ApplicationConfig.RECONCILIATION_ENABLED:
            logger.info("Payment reconciliation is disabled, skipping")
            return ReconciliationResultDTO(
                total_invoices_checked=0,
                discrepancies_found=0,
                discrepancies=[],
                reconciliation_time=datetime.utcnow(),
                execution_time_ms=0,
            )

        async with self.async_session_factory() as session:
            return await ReconcileInvoicePayments(
                invoice_repo=SqlAlchemyInvoiceRepository(session),
                payment_repo=SqlAlchemyPaymentRepository(session),
            ).execute()

    async def run_forever(self, interval_seconds: int):
        while True:
            try:
                result = await self.run_once()
                if result.discrepancies_found:
                    logger.error(
                        f"{result.discrepancies_found} of {result.total_invoices_checked} "
                        f"invoices disagree with their payment ledger"
                    )
            except BillingError as e:
                logger.error(f"Payment reconciliation failed: {e.code}: {e.message}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        await self.engine.dispose()


async def main(argv=None):
    logging.basicConfig(level=ApplicationConfig.LOG_LEVEL)

    parser = argparse.ArgumentParser(description="Invoice payment reconciliation")
    parser.add_argument("--once", action="store_true")
    parser.add_argument(
        "--interval", type=int, default=ApplicationConfig.RECONCILIATION_INTERVAL_SECONDS
    )
    args = parser.parse_args(argv)

    worker = PaymentReconcilerWorker()
    try:
        if not args.once:
            await worker.run_forever(args.interval)
        result = await worker.run_once()
        for d in result.discrepancies:
            print(
                f"{d.invoice_number}\tamount_paid={d.cached_amount_paid}\t"
                f"ledger={d.ledger_total}\tdiff={d.discrepancy}"
            )
        print(
            f"{result.discrepancies_found} discrepancies in "
            f"{result.total_invoices_checked} invoices ({result.execution_time_ms}ms)"
        )
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
