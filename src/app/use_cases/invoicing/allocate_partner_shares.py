"""AllocatePartnerShares and GetPartnerShares Use Cases

Partner shares are percentages of the cash actually collected on an
invoice. Amounts are never stored; they are recomputed on every read so
they always track payments, not the face value of the invoice.
"""

import logging
from decimal import Decimal
from sqlalchemy.exc import SQLAlchemyError
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.partner_share_repository import PartnerShareRepository
from src.domain.currency import CurrencyConverter
from src.domain.errors import BillingError, InfrastructureError, InvoiceNotFoundError
from src.domain.invoice import InvoiceKind
from src.domain.partner_share import DEFAULT_TOLERANCE, PartnerShare, share_amount, validate_shares
from .dtos import AllocatePartnerSharesCommandDTO, PartnerShareDTO, PartnerSharesResponseDTO
from .get_invoice import collected_amount, load_invoice

logger = logging.getLogger(__name__)


class GetPartnerShares:
    """
    Use Case: Partner shares of an invoice with computed amounts

    computed_amount = collected x percentage / 100, rounded to the invoice
    currency precision, where collected is amount_paid (or, for a split
    parent, the children's amount_paid).
    """

    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        share_repo: PartnerShareRepository,
        converter: CurrencyConverter,
    ):
        self.invoice_repo = invoice_repo
        self.share_repo = share_repo
        self.converter = converter

    async def execute(self, invoice_id: int) -> PartnerSharesResponseDTO:
        try:
            invoice = await load_invoice(self.invoice_repo, invoice_id)
            collected, _ = await collected_amount(self.invoice_repo, invoice)
            shares = await self.share_repo.list_by_invoice(invoice.id)
        except SQLAlchemyError as e:
            raise InfrastructureError(
                "Failed to load partner shares", invoice_id=invoice_id, reason=str(e)
            ) from e

        return PartnerSharesResponseDTO(
            invoice_id=invoice.id,
            currency=invoice.invoice_currency,
            collected_amount=collected,
            shares=[
                PartnerShareDTO(
                    partner_id=share.partner_id,
                    share_percentage=share.share_percentage,
                    computed_amount=self.converter.quantize(
                        share_amount(collected, share.share_percentage), invoice.invoice_currency
                    ),
                )
                for share in shares
            ],
        )


class AllocatePartnerShares:
    """
    Use Case: Allocate an invoice's collected revenue across partners

    Business Rules:
    1. At least one share, unique partners, each percentage in [0, 100]
    2. Percentages total 100 within the configured tolerance (0.01)
    3. A new allocation replaces the previous one atomically
    4. Invoice row is locked (SELECT FOR UPDATE) while replacing
    5. On a split parent the allocation is also written to every child

    Flow:
    1. Lock invoice
    2. Validate shares
    3. Replace shares (parent and split children)
    4. Commit transaction
    5. Return shares with amounts computed from cash collected
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        share_repo: PartnerShareRepository,
        converter: CurrencyConverter,
        tolerance: Decimal = DEFAULT_TOLERANCE,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.share_repo = share_repo
        self.converter = converter
        self.tolerance = tolerance

    async def execute(self, command: AllocatePartnerSharesCommandDTO) -> PartnerSharesResponseDTO:
        """
        Execute partner share allocation

        Raises:
            InvoiceNotFoundError, ValidationError, ShareAllocationError,
            InfrastructureError
        """
        try:
            # Step 1: Lock invoice
            invoice = await self.invoice_repo.get_by_id(command.invoice_id, for_update=True)
            if not invoice:
                raise InvoiceNotFoundError(command.invoice_id)

            # Step 2: Validate
            shares = validate_shares(
                [(share.partner_id, share.percentage) for share in command.shares],
                tolerance=self.tolerance,
                invoice_id=invoice.id,
            )

            # Step 3: Replace
            targets = [invoice.id]
            if invoice.kind == InvoiceKind.SPLIT_PARENT:
                targets += [child.id for child in await self.invoice_repo.get_children(invoice.id)]
            for target_id in targets:
                await self.share_repo.replace_for_invoice(
                    target_id,
                    [
                        PartnerShare(invoice_id=target_id, partner_id=partner_id, share_percentage=pct)
                        for partner_id, pct in shares
                    ],
                )

            # Step 4: Commit
            await self.uow.commit()

            logger.info(
                f"Allocated partner shares on invoice {invoice.invoice_number}: "
                f"{', '.join(f'{partner_id}={pct}%' for partner_id, pct in shares)}"
                + (f" (applied to {len(targets) - 1} split invoices)" if len(targets) > 1 else "")
            )

        except BillingError as e:
            await self.uow.rollback()
            logger.warning(
                f"Partner share allocation on invoice {command.invoice_id} rejected: "
                f"{e.code}: {e.message}"
            )
            raise
        except SQLAlchemyError as e:
            await self.uow.rollback()
            logger.error(f"Failed to allocate partner shares on invoice {command.invoice_id}: {e}")
            raise InfrastructureError(
                "Failed to allocate partner shares", invoice_id=command.invoice_id, reason=str(e)
            ) from e

        # Step 5: Respond with computed amounts
        return await GetPartnerShares(self.invoice_repo, self.share_repo, self.converter).execute(
            invoice.id
        )
