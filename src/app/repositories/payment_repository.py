"""Payment Repository Interface

Defines the contract for the append-only payment ledger.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Dict, List
from src.domain.payment import Payment


class PaymentRepository(ABC):
    """
    Repository interface for Payment persistence

    There is intentionally no update or delete: the ledger is append-only.
    """

    @abstractmethod
    async def create(self, payment: Payment) -> Payment:
        """
        Append a payment to the ledger

        Args:
            payment: Payment entity to persist

        Returns:
            Created Payment with generated ID
        """
        pass

    @abstractmethod
    async def get_total_paid(self, invoice_id: int) -> Decimal:
        """
        Authoritative sum of all payments for an invoice

        Args:
            invoice_id: Invoice ID

        Returns:
            Sum of payment amounts (Decimal("0") if none)
        """
        pass

    @abstractmethod
    async def get_totals_by_invoice(self) -> Dict[int, Decimal]:
        """Ledger sums for every invoice that has at least one payment"""
        pass

    @abstractmethod
    async def list_by_invoice_ids(self, invoice_ids: List[int]) -> List[Payment]:
        """
        Payments for several invoices, newest payment_date first

        Args:
            invoice_ids: Invoice IDs

        Returns:
            List of payments
        """
        pass
