"""SQLAlchemy implementation of PartnerShareRepository"""

from typing import List
from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.partner_share_repository import PartnerShareRepository
from src.domain.partner_share import PartnerShare


class SqlAlchemyPartnerShareRepository(PartnerShareRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_by_invoice(self, invoice_id: int) -> List[PartnerShare]:
        stmt = (
            select(PartnerShare)
            .where(PartnerShare.invoice_id == invoice_id)
            .order_by(PartnerShare.partner_id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def replace_for_invoice(
        self, invoice_id: int, shares: List[PartnerShare]
    ) -> List[PartnerShare]:
        """
        Replace the whole allocation of an invoice

        The delete is flushed before the inserts so the
        (invoice_id, partner_id) unique constraint never sees both rows.
        """
        await self.session.execute(
            delete(PartnerShare).where(PartnerShare.invoice_id == invoice_id)
        )
        await self.session.flush()

        self.session.add_all(shares)
        await self.session.flush()
        for share in shares:
            await self.session.refresh(share)
        return shares
