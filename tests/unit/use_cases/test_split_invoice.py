"""Unit tests for SplitInvoice use case"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.invoicing.dtos import SplitAllocationDTO, SplitInvoiceCommandDTO
from src.app.use_cases.invoicing.split_invoice import SplitInvoice
from src.domain.errors import InvalidSplitStateError, SplitAmountMismatchError
from src.domain.invoice import InvoiceKind
from src.domain.partner_share import PartnerShare


async def _assign_ids(invoices):
    for offset, invoice in enumerate(invoices, start=10):
        invoice.id = offset
    return invoices


async def _same(entity):
    return entity


async def _replace(invoice_id, shares):
    return shares


@pytest.fixture
def mock_invoice_repo():
    repo = MagicMock()
    repo.create_many = AsyncMock(side_effect=_assign_ids)
    repo.update = AsyncMock(side_effect=_same)
    return repo


@pytest.fixture
def mock_payment_repo():
    repo = MagicMock()
    repo.get_total_paid = AsyncMock(return_value=Decimal("0"))
    return repo


@pytest.fixture
def mock_share_repo():
    repo = MagicMock()
    repo.list_by_invoice = AsyncMock(return_value=[])
    repo.replace_for_invoice = AsyncMock(side_effect=_replace)
    return repo


@pytest.fixture
def split_use_case(mock_uow, mock_invoice_repo, mock_payment_repo, mock_share_repo, converter, clock):
    return SplitInvoice(
        uow=mock_uow,
        invoice_repo=mock_invoice_repo,
        payment_repo=mock_payment_repo,
        share_repo=mock_share_repo,
        converter=converter,
        clock=clock,
    )


def _command(*amounts):
    return SplitInvoiceCommandDTO(
        invoice_id=1,
        allocations=[SplitAllocationDTO(amount=Decimal(amount)) for amount in amounts],
    )


@pytest.mark.asyncio
class TestSplitInvoice:

    async def test_split_into_two(
        self, split_use_case, mock_invoice_repo, mock_uow, make_invoice
    ):
        """
        Given: An unpaid invoice for 1000.00
        When: split into 600.00 + 400.00
        Then: parent marked split, two payable children persisted, committed once
        """
        parent = make_invoice()
        mock_invoice_repo.get_by_id = AsyncMock(return_value=parent)

        result = await split_use_case.execute(_command("600.00", "400.00"))

        assert parent.kind == InvoiceKind.SPLIT_PARENT
        assert result.parent.is_split is True
        assert [c.invoice_id for c in result.children] == [10, 11]
        assert [c.invoice_amount for c in result.children] == [Decimal("600.00"), Decimal("400.00")]
        assert all(c.parent_invoice_id == 1 for c in result.children)
        mock_invoice_repo.get_by_id.assert_called_once_with(1, for_update=True)
        mock_invoice_repo.update.assert_called_once_with(parent)
        mock_uow.commit.assert_called_once()

    async def test_parent_shares_copied_to_children(
        self, split_use_case, mock_invoice_repo, mock_share_repo, make_invoice
    ):
        mock_invoice_repo.get_by_id = AsyncMock(return_value=make_invoice())
        mock_share_repo.list_by_invoice = AsyncMock(
            return_value=[
                PartnerShare(invoice_id=1, partner_id=7, share_percentage=Decimal("60")),
                PartnerShare(invoice_id=1, partner_id=9, share_percentage=Decimal("40")),
            ]
        )

        await split_use_case.execute(_command("500.00", "500.00"))

        assert mock_share_repo.replace_for_invoice.call_count == 2
        child_id, shares = mock_share_repo.replace_for_invoice.call_args_list[0].args
        assert child_id == 10
        assert [(s.partner_id, s.share_percentage) for s in shares] == [
            (7, Decimal("60")),
            (9, Decimal("40")),
        ]

    async def test_mismatch_rolls_back(
        self, split_use_case, mock_invoice_repo, mock_uow, make_invoice
    ):
        parent = make_invoice()
        mock_invoice_repo.get_by_id = AsyncMock(return_value=parent)

        with pytest.raises(SplitAmountMismatchError):
            await split_use_case.execute(_command("600.00", "300.00"))

        assert parent.kind == InvoiceKind.STANDALONE
        mock_invoice_repo.create_many.assert_not_called()
        mock_uow.rollback.assert_called_once()

    async def test_partially_paid_invoice_rejected(
        self, split_use_case, mock_invoice_repo, mock_payment_repo, make_invoice
    ):
        mock_invoice_repo.get_by_id = AsyncMock(return_value=make_invoice())
        mock_payment_repo.get_total_paid = AsyncMock(return_value=Decimal("50.00"))

        with pytest.raises(InvalidSplitStateError):
            await split_use_case.execute(_command("600.00", "400.00"))
        mock_invoice_repo.create_many.assert_not_called()
