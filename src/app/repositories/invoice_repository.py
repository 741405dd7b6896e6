"""Invoice Repository Interface

Defines the contract for invoice persistence operations.
"""

from abc import ABC, abstractmethod
from typing import Optional, List
from datetime import date
from src.domain.invoice import Invoice


class InvoiceRepository(ABC):
    """
    Repository interface for Invoice persistence

    Methods accepting ``for_update`` lock the selected rows
    (SELECT FOR UPDATE) until the unit of work commits or rolls back.
    """

    @abstractmethod
    async def create(self, invoice: Invoice) -> Invoice:
        """
        Create a new invoice

        Args:
            invoice: Invoice entity to persist

        Returns:
            Created Invoice with generated ID
        """
        pass

    @abstractmethod
    async def create_many(self, invoices: List[Invoice]) -> List[Invoice]:
        """Persist several invoices in one flush, preserving order"""
        pass

    @abstractmethod
    async def get_by_id(self, invoice_id: int, for_update: bool = False) -> Optional[Invoice]:
        """
        Retrieve invoice by ID

        Args:
            invoice_id: Invoice ID
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            Invoice if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_invoice_number(self, invoice_number: str) -> Optional[Invoice]:
        pass

    @abstractmethod
    async def get_children(self, parent_invoice_id: int) -> List[Invoice]:
        """
        Retrieve split children of an invoice ordered by split_sequence

        Args:
            parent_invoice_id: Parent invoice ID

        Returns:
            List of child invoices (empty if the invoice was never split)
        """
        pass

    @abstractmethod
    async def list_invoice_numbers_for_date(self, invoice_date: date) -> List[str]:
        """Invoice numbers already issued for a calendar date"""
        pass

    @abstractmethod
    async def get_all(self) -> List[Invoice]:
        pass

    @abstractmethod
    async def update(self, invoice: Invoice) -> Invoice:
        """
        Update an existing invoice

        Args:
            invoice: Invoice entity with updated values

        Returns:
            Updated Invoice
        """
        pass
