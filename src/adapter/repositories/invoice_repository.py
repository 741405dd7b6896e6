"""SQLAlchemy Invoice Repository Implementation

Implements invoice persistence using SQLAlchemy async session, with
pessimistic locking support for payment and split operations.
"""

from typing import Optional, List
from datetime import date, datetime
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.invoice import Invoice


class SqlAlchemyInvoiceRepository(InvoiceRepository):
    """
    SQLAlchemy implementation of InvoiceRepository

    Features:
    - Pessimistic locking via SELECT FOR UPDATE
    - Split children ordered by split_sequence
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, invoice: Invoice) -> Invoice:
        """
        Create a new invoice

        Args:
            invoice: Invoice entity to persist

        Returns:
            Created Invoice with generated ID
        """
        self.session.add(invoice)
        await self.session.flush()
        await self.session.refresh(invoice)
        return invoice

    async def create_many(self, invoices: List[Invoice]) -> List[Invoice]:
        self.session.add_all(invoices)
        await self.session.flush()
        for invoice in invoices:
            await self.session.refresh(invoice)
        return invoices

    async def get_by_id(self, invoice_id: int, for_update: bool = False) -> Optional[Invoice]:
        """
        Retrieve invoice by ID with optional row-level locking

        Args:
            invoice_id: Invoice ID
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            Invoice if found, None otherwise
        """
        stmt = select(Invoice).where(Invoice.id == invoice_id)

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_invoice_number(self, invoice_number: str) -> Optional[Invoice]:
        stmt = select(Invoice).where(Invoice.invoice_number == invoice_number)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_children(self, parent_invoice_id: int) -> List[Invoice]:
        stmt = (
            select(Invoice)
            .where(Invoice.parent_invoice_id == parent_invoice_id)
            .order_by(Invoice.split_sequence)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_invoice_numbers_for_date(self, invoice_date: date) -> List[str]:
        stmt = select(Invoice.invoice_number).where(Invoice.invoice_date == invoice_date)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_all(self) -> List[Invoice]:
        stmt = select(Invoice).order_by(Invoice.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update(self, invoice: Invoice) -> Invoice:
        """
        Update an existing invoice

        Args:
            invoice: Invoice entity with updated values

        Returns:
            Updated Invoice
        """
        invoice.updated_at = datetime.utcnow()
        self.session.add(invoice)
        await self.session.flush()
        await self.session.refresh(invoice)
        return invoice
