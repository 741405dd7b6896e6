"""Partner Share Repository Interface"""

from abc import ABC, abstractmethod
from typing import List
from src.domain.partner_share import PartnerShare


class PartnerShareRepository(ABC):
    """Repository interface for PartnerShare persistence"""

    @abstractmethod
    async def list_by_invoice(self, invoice_id: int) -> List[PartnerShare]:
        """
        Shares allocated on an invoice, ordered by partner ID

        Args:
            invoice_id: Invoice ID

        Returns:
            List of shares (empty if never allocated)
        """
        pass

    @abstractmethod
    async def replace_for_invoice(
        self, invoice_id: int, shares: List[PartnerShare]
    ) -> List[PartnerShare]:
        """
        Replace the whole allocation of an invoice

        Deletes existing shares and inserts the new ones in the same flush.

        Args:
            invoice_id: Invoice ID
            shares: New shares (invoice_id already set)

        Returns:
            The persisted shares
        """
        pass
