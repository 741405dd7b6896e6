"""SQLAlchemy implementation of PaymentRepository

Append-only persistence for the invoice payment ledger.
"""

from decimal import Decimal
from typing import Dict, List
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.payment_repository import PaymentRepository
from src.domain.payment import Payment


def _as_decimal(value) -> Decimal:
    # SQLite returns SUM() over NUMERIC as float
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value)).quantize(Decimal("0.01"))


class SqlAlchemyPaymentRepository(PaymentRepository):
    """
    SQLAlchemy implementation of PaymentRepository

    Features:
    - Immutable append-only payments
    - Ledger totals computed in the database
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, payment: Payment) -> Payment:
        """
        Append a payment to the ledger

        Args:
            payment: Payment entity to persist

        Returns:
            Created Payment with generated ID
        """
        self.session.add(payment)
        await self.session.flush()
        await self.session.refresh(payment)
        return payment

    async def get_total_paid(self, invoice_id: int) -> Decimal:
        stmt = select(func.sum(Payment.amount)).where(Payment.invoice_id == invoice_id)
        result = await self.session.execute(stmt)
        return _as_decimal(result.scalar_one_or_none())

    async def get_totals_by_invoice(self) -> Dict[int, Decimal]:
        stmt = select(Payment.invoice_id, func.sum(Payment.amount)).group_by(Payment.invoice_id)
        result = await self.session.execute(stmt)
        return {invoice_id: _as_decimal(total) for invoice_id, total in result.all()}

    async def list_by_invoice_ids(self, invoice_ids: List[int]) -> List[Payment]:
        """
        Payments for several invoices, newest payment_date first

        Args:
            invoice_ids: Invoice IDs

        Returns:
            List of payments
        """
        if not invoice_ids:
            return []

        stmt = (
            select(Payment)
            .where(Payment.invoice_id.in_(invoice_ids))
            .order_by(Payment.payment_date.desc(), Payment.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
